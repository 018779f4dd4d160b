"""
Expense query engine: category filter, date sort and page slicing.

Sorting is by ``date`` with the insertion sequence as tie-breaker, both
in the same direction, so ``date_asc`` is the exact reverse of
``date_desc``. Paged queries sort and slice in SQL; the unpaged
variant sorts the store's raw fetch in memory with the same key.
"""

import math
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from ..models.expense import Expense
from .expense_store import ExpenseStore


class SortOrder(str, Enum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"


@dataclass
class CategorySummary:
    category: str
    total_minor: int
    count: int


@dataclass
class ExpensePage:
    items: List[Expense]
    total: int
    page: int
    page_size: int
    total_pages: int
    page_total_minor: int = 0
    page_categories: List[CategorySummary] = field(default_factory=list)


def total_pages_for(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


def summarize(items: List[Expense]) -> List[CategorySummary]:
    """Per-category totals of *items*, largest total first."""
    totals: Dict[str, int] = defaultdict(int)
    counts: Dict[str, int] = defaultdict(int)
    for expense in items:
        totals[expense.category] += expense.amount_minor
        counts[expense.category] += 1
    summaries = [CategorySummary(c, totals[c], counts[c]) for c in totals]
    summaries.sort(key=lambda s: (-s.total_minor, s.category))
    return summaries


def _filtered(statement, category: Optional[str]):
    if category is not None:
        statement = statement.where(Expense.category == category)
    return statement


def _ordering(sort: SortOrder):
    columns = (Expense.date, Expense.seq)
    if sort == SortOrder.DATE_ASC:
        return [c.asc() for c in columns]
    return [c.desc() for c in columns]


def count_expenses(session: Session, category: Optional[str] = None) -> int:
    statement = _filtered(select(func.count()).select_from(Expense), category)
    return session.exec(statement).one()


def _build_page(items: List[Expense], total: int, page: int, page_size: int) -> ExpensePage:
    return ExpensePage(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages_for(total, page_size),
        page_total_minor=sum(e.amount_minor for e in items),
        page_categories=summarize(items),
    )


def query_expenses(
    session: Session,
    category: Optional[str] = None,
    sort: SortOrder = SortOrder.DATE_DESC,
    page: int = 1,
    page_size: int = 10,
) -> ExpensePage:
    """
    Return one page of expenses. ``page`` is 1-indexed; a page past the
    last one comes back empty with the real ``total``/``total_pages``.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")

    total = count_expenses(session, category)
    statement = (
        _filtered(select(Expense), category)
        .order_by(*_ordering(sort))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    items = list(session.exec(statement).all())
    return _build_page(items, total, page, page_size)


def query_all(
    session: Session,
    category: Optional[str] = None,
    sort: SortOrder = SortOrder.DATE_DESC,
) -> ExpensePage:
    """Same filter and order as :func:`query_expenses`, without a page boundary."""
    items = sorted(
        ExpenseStore(session).list(category=category),
        key=lambda e: (e.date, e.seq),
        reverse=sort == SortOrder.DATE_DESC,
    )
    total = len(items)
    # Whole set is one page; an empty set has no pages
    return _build_page(items, total, 1, max(total, 1))
