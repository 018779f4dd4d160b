"""
Expense record store.

The store is the only writer of ``expenses``. Idempotent creates rely on
the unique index over ``idempotency_key``: a losing concurrent insert hits
``IntegrityError`` and resolves to the row that won.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.errors import NotFoundError
from ..core.validation import ExpenseFields
from ..models.expense import Expense, utcnow


logger = logging.getLogger(__name__)


class ExpenseStore:
    def __init__(self, session: Session):
        self.session = session

    def _find_by_key(self, idempotency_key: str) -> Optional[Expense]:
        statement = select(Expense).where(Expense.idempotency_key == idempotency_key)
        return self.session.exec(statement).first()

    def create(
        self,
        fields: ExpenseFields,
        idempotency_key: Optional[str] = None,
    ) -> Tuple[Expense, bool]:
        """
        Insert a new expense, or return the one already stored under
        *idempotency_key*.

        Returns ``(expense, is_new)``.
        """
        if idempotency_key is not None:
            existing = self._find_by_key(idempotency_key)
            if existing is not None:
                logger.info("Idempotent replay for key %r -> %s", idempotency_key, existing.id)
                return existing, False

        now = utcnow()
        expense = Expense(
            id=uuid.uuid4(),
            amount_minor=fields.amount_minor,
            category=fields.category,
            description=fields.description,
            date=fields.date,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )

        self.session.add(expense)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            if idempotency_key is None:
                raise
            # A concurrent request with the same key committed first
            existing = self._find_by_key(idempotency_key)
            if existing is None:
                raise
            logger.info("Concurrent duplicate for key %r resolved to %s", idempotency_key, existing.id)
            return existing, False

        self.session.refresh(expense)
        logger.info("Created expense %s (%s, %d minor units)", expense.id, expense.category, expense.amount_minor)
        return expense, True

    def get(self, expense_id: uuid.UUID) -> Expense:
        statement = select(Expense).where(Expense.id == expense_id)
        expense = self.session.exec(statement).first()
        if expense is None:
            raise NotFoundError()
        return expense

    def update(self, expense_id: uuid.UUID, fields: ExpenseFields) -> Expense:
        """Replace the mutable fields; id, created_at and idempotency_key are kept."""
        expense = self.get(expense_id)

        expense.amount_minor = fields.amount_minor
        expense.category = fields.category
        expense.description = fields.description
        expense.date = fields.date
        expense.updated_at = utcnow()

        self.session.add(expense)
        self.session.commit()
        self.session.refresh(expense)
        logger.info("Updated expense %s", expense.id)
        return expense

    def delete(self, expense_id: uuid.UUID) -> None:
        expense = self.get(expense_id)
        self.session.delete(expense)
        self.session.commit()
        logger.info("Deleted expense %s", expense_id)

    def list(self, category: Optional[str] = None) -> List[Expense]:
        """Unordered fetch, optionally restricted to one category."""
        statement = select(Expense)
        if category is not None:
            statement = statement.where(Expense.category == category)
        return list(self.session.exec(statement).all())
