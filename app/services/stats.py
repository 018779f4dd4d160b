"""
Aggregation over the whole expense table, independent of any page.

Sums are kept in integer minor units; callers convert at the API edge.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import List

from sqlalchemy import func
from sqlmodel import Session, select

from ..models.expense import Expense


@dataclass
class MonthlyTotal:
    month: str  # YYYY-MM
    total_minor: int
    count: int


@dataclass
class CategoryTotal:
    category: str
    total_minor: int
    count: int


def monthly_totals(session: Session) -> List[MonthlyTotal]:
    """One entry per calendar month with at least one expense, oldest first."""
    rows = session.exec(
        select(Expense.date, Expense.amount_minor).order_by(Expense.date.asc())
    ).all()

    buckets: "OrderedDict[str, MonthlyTotal]" = OrderedDict()
    for expense_date, amount_minor in rows:
        month = expense_date.strftime("%Y-%m")
        bucket = buckets.get(month)
        if bucket is None:
            bucket = buckets[month] = MonthlyTotal(month=month, total_minor=0, count=0)
        bucket.total_minor += amount_minor
        bucket.count += 1
    return list(buckets.values())


def category_totals(session: Session) -> List[CategoryTotal]:
    """One entry per category with at least one expense; order is not meaningful."""
    rows = session.exec(
        select(Expense.category, func.sum(Expense.amount_minor), func.count())
        .group_by(Expense.category)
    ).all()
    return [
        CategoryTotal(category=category, total_minor=int(total), count=count)
        for category, total, count in rows
    ]
