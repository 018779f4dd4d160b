import datetime as dt
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp that always comes back in UTC.

    SQLite keeps no offset, so values read from it are tagged as UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.timezone.utc)
        return value.astimezone(dt.timezone.utc)


class Expense(SQLModel, table=True):
    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount_minor > 0", name="expenses_amount_minor_positive"),
    )

    # Insertion sequence; breaks ties between rows with the same date
    seq: Optional[int] = Field(default=None, primary_key=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, unique=True, index=True)

    # Integer minor units (cents/paise); converted to decimal only at the API edge
    amount_minor: int
    category: str = Field(max_length=50, index=True)
    description: str = Field(max_length=500)
    date: dt.date = Field(index=True)

    # Unique index: at most one row per client-supplied key (NULLs are not compared)
    idempotency_key: Optional[str] = Field(default=None, max_length=255, unique=True, index=True)

    created_at: dt.datetime = Field(default_factory=utcnow, sa_type=UTCDateTime(timezone=True))
    updated_at: dt.datetime = Field(default_factory=utcnow, sa_type=UTCDateTime(timezone=True))
