import os

# The module-level engine is built at import time; keep it off disk
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from app.core.validation import validate_expense
from app.database import build_engine, get_session
from app.main import app
from app.models import expense as _expense_model  # noqa: F401
from app.services.expense_store import ExpenseStore


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'expenses.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session):
    return ExpenseStore(session)


@pytest.fixture
def add_expense(store):
    def _add(amount="10.00", category="Food", description="Lunch", date="2024-01-10", key=None):
        fields = validate_expense(
            {"amount": amount, "category": category, "description": description, "date": date}
        )
        expense, _ = store.create(fields, idempotency_key=key)
        return expense

    return _add


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
