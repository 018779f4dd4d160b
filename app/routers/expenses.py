import uuid
from datetime import datetime, date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlmodel import SQLModel, Field, Session

from ..config import settings
from ..core.categories import CATEGORIES, is_category
from ..core.errors import NotFoundError, ValidationError, Violation
from ..core.money import to_float
from ..core.validation import validate_expense
from ..database import get_session
from ..models.expense import Expense
from ..services.expense_store import ExpenseStore
from ..services.query import ExpensePage, SortOrder, query_all, query_expenses
from .stats import CategoryTotalRead

router = APIRouter(
    prefix="/expenses",
    tags=["expenses"],
)

# ─────────────────────────────
#   SCHEMAS (Pydantic/SQLModel)
# ─────────────────────────────

class ExpenseIn(SQLModel):
    # Untyped: validate_expense reports every bad field at once
    amount: Any = None
    category: Any = None
    description: Any = None
    date: Any = None
    idempotency_key: Optional[str] = Field(default=None, max_length=255)


class ExpenseRead(SQLModel):
    id: uuid.UUID
    amount: float
    category: str
    description: str
    date: date
    created_at: datetime
    updated_at: datetime


class PageSummaryRead(SQLModel):
    total: float
    categories: List[CategoryTotalRead]


class ExpensePageRead(SQLModel):
    data: List[ExpenseRead]
    total: int
    page: int
    limit: int
    totalPages: int
    summary: PageSummaryRead


def to_read(expense: Expense) -> ExpenseRead:
    return ExpenseRead(
        id=expense.id,
        amount=to_float(expense.amount_minor),
        category=expense.category,
        description=expense.description,
        date=expense.date,
        created_at=expense.created_at,
        updated_at=expense.updated_at,
    )


def to_page_read(result: ExpensePage) -> ExpensePageRead:
    return ExpensePageRead(
        data=[to_read(e) for e in result.items],
        total=result.total,
        page=result.page,
        limit=result.page_size,
        totalPages=result.total_pages,
        summary=PageSummaryRead(
            total=to_float(result.page_total_minor),
            categories=[
                CategoryTotalRead(category=s.category, total=to_float(s.total_minor), count=s.count)
                for s in result.page_categories
            ],
        ),
    )


def _parse_id(raw: str) -> uuid.UUID:
    # Malformed ids cannot match any row
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise NotFoundError()


# ─────────────────────────────
#   ENDPOINTS
# ─────────────────────────────

@router.post(
    "",
    response_model=ExpenseRead,
    status_code=status.HTTP_201_CREATED,
)
def create_expense(
    expense_in: ExpenseIn,
    response: Response,
    idempotency_key_header: Optional[str] = Header(default=None, alias="Idempotency-Key", max_length=255),
    session: Session = Depends(get_session),
):
    """
    Create an expense.

    - The idempotency key comes from the body, or the ``Idempotency-Key``
      header when the body has none.
    - A key already on file returns that expense with 200 instead of 201.
    """
    fields = validate_expense(expense_in.model_dump())
    key = expense_in.idempotency_key or idempotency_key_header or None

    expense, is_new = ExpenseStore(session).create(fields, idempotency_key=key)
    if not is_new:
        response.status_code = status.HTTP_200_OK
    return to_read(expense)


@router.get(
    "",
    response_model=ExpensePageRead,
)
def list_expenses(
    category: Optional[str] = None,
    sort: SortOrder = SortOrder.DATE_DESC,
    page: Optional[int] = Query(default=None, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=settings.max_page_size),
    session: Session = Depends(get_session),
):
    """
    List expenses filtered by category and sorted by date.

    Without ``page`` and ``limit`` the whole filtered set is returned in
    one page (used for CSV export).
    """
    category = category or None
    if category is not None and not is_category(category):
        raise ValidationError(
            [Violation("category", f"must be one of: {', '.join(CATEGORIES)}")]
        )

    if page is None and limit is None:
        result = query_all(session, category=category, sort=sort)
    else:
        result = query_expenses(
            session,
            category=category,
            sort=sort,
            page=page or 1,
            page_size=limit or settings.default_page_size,
        )
    return to_page_read(result)


@router.get(
    "/{expense_id}",
    response_model=ExpenseRead,
)
def get_expense(
    expense_id: str,
    session: Session = Depends(get_session),
):
    return to_read(ExpenseStore(session).get(_parse_id(expense_id)))


@router.put(
    "/{expense_id}",
    response_model=ExpenseRead,
)
def update_expense(
    expense_id: str,
    expense_in: ExpenseIn,
    session: Session = Depends(get_session),
):
    """Full update; ``idempotency_key`` in the body is ignored."""
    fields = validate_expense(expense_in.model_dump())
    return to_read(ExpenseStore(session).update(_parse_id(expense_id), fields))


@router.delete(
    "/{expense_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_expense(
    expense_id: str,
    session: Session = Depends(get_session),
):
    ExpenseStore(session).delete(_parse_id(expense_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
