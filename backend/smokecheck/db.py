from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Iterator

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import Column, Engine, create_engine, func, select, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import MEMORY_DATABASE_URLS, settings
from .models import Base, Comment

logger = logging.getLogger("smokecheck.db")


def _build_engine(database_url: str) -> Engine:
    if database_url in MEMORY_DATABASE_URLS:
        # One shared connection, otherwise every pooled connection sees its own empty database.
        return create_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            future=True,
        )

    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
            future=True,
        )

    return create_engine(database_url, pool_pre_ping=True, future=True)


_ENGINE = _build_engine(settings.database_url)
SessionLocal = sessionmaker(
    bind=_ENGINE,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    class_=Session,
    future=True,
)


def get_engine() -> Engine:
    return _ENGINE


def reset_database_engine(database_url: str | None = None) -> None:
    global _ENGINE
    if database_url:
        object.__setattr__(settings, "database_url", database_url)

    _ENGINE.dispose()
    _ENGINE = _build_engine(settings.database_url)
    SessionLocal.configure(bind=_ENGINE)


@contextmanager
def get_db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def check_db_connection() -> None:
    with _ENGINE.connect() as connection:
        connection.execute(text("SELECT 1"))


def init_db() -> list[str]:
    """Bring the store up to the declared schema without touching existing data.

    Missing tables are created outright. Columns declared on a model but absent
    from an existing table are added as nullable columns. Nothing is ever
    dropped or altered, so running this again is a no-op.

    Returns the added columns as ``"table.column"`` strings.
    """
    Base.metadata.create_all(bind=_ENGINE)

    added: list[str] = []
    with _ENGINE.begin() as connection:
        context = MigrationContext.configure(connection)
        operations = Operations(context)
        for diff in compare_metadata(context, Base.metadata):
            # Type/nullability changes come back as nested lists; only additive column diffs apply.
            if not isinstance(diff, tuple) or diff[0] != "add_column":
                continue
            _, schema, table_name, column = diff
            operations.add_column(
                table_name,
                Column(column.name, column.type, nullable=True),
                schema=schema,
            )
            added.append(f"{table_name}.{column.name}")
            logger.info(
                "Added missing column",
                extra={"event": "schema_upgrade", "table": table_name, "column": column.name},
            )

    return added


def count_comments() -> int:
    with get_db() as session:
        return session.execute(select(func.count()).select_from(Comment)).scalar_one()
