import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, create_engine, Session

from .config import settings


logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 60},
            poolclass=NullPool,  # avoid multiple pooled connections holding write locks
        )

        # NullPool opens a fresh connection per session, so pragmas go on every connect
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA busy_timeout=60000;")
            cursor.close()

        return engine

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


engine = build_engine(settings.database_url, echo=settings.db_echo)


def get_session():
    with Session(engine) as session:
        yield session


def init_db(target: Engine = engine):
    from .models import expense  # noqa: F401

    SQLModel.metadata.create_all(target)
    logger.info("Database schema ready (%s)", target.url.render_as_string(hide_password=True))
