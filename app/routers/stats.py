from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, SQLModel

from ..core.categories import CATEGORIES
from ..core.money import to_float
from ..database import get_session
from ..services.stats import category_totals, monthly_totals


router = APIRouter(
    tags=["stats"],
)


# ─────────────────────────────
#   SCHEMAS
# ─────────────────────────────

class MonthlyTotalRead(SQLModel):
    month: str
    total: float
    count: int


class CategoryTotalRead(SQLModel):
    category: str
    total: float
    count: int


class StatsRead(SQLModel):
    monthly: List[MonthlyTotalRead]
    categories: List[CategoryTotalRead]


# ─────────────────────────────
#   ENDPOINTS
# ─────────────────────────────

@router.get(
    "/stats",
    response_model=StatsRead,
    status_code=status.HTTP_200_OK,
)
def get_stats(session: Session = Depends(get_session)):
    """All-time totals by calendar month (oldest first) and by category."""
    return StatsRead(
        monthly=[
            MonthlyTotalRead(month=m.month, total=to_float(m.total_minor), count=m.count)
            for m in monthly_totals(session)
        ],
        categories=[
            CategoryTotalRead(category=c.category, total=to_float(c.total_minor), count=c.count)
            for c in category_totals(session)
        ],
    )


@router.get(
    "/categories",
    response_model=List[str],
    status_code=status.HTTP_200_OK,
)
def list_categories():
    return list(CATEGORIES)
