"""Persistence - async SQLAlchemy handle scoped to one validator hotkey.

Invariants:
    - open() returns a handle only after the schema exists and a round-trip succeeded
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions inside session() mapped to DatabaseError (core/errors.py)
    - validator_hotkey is fixed for the handle's lifetime

Design Decisions:
    - Pool sizing only for server databases: SQLite pools reject pool_size/max_overflow
    - expire_on_commit=False: prevents lazy-load issues in async context
    - open() lets raw exceptions escape: the caller decides which error kind wraps them
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from validator.core.errors import DatabaseError
from validator.db.base import Base
import validator.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


def create_engine_for(
    database_url: str, pool_size: int = 5, max_overflow: int = 10,
) -> AsyncEngine:
    """Async engine with pool settings appropriate for the backend."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=False)
    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


class SimplePersistence:
    """Validator persistence handle: engine, session factory, owning hotkey."""

    def __init__(self, engine: AsyncEngine, validator_hotkey: str):
        self.engine = engine
        self.validator_hotkey = validator_hotkey
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    async def open(
        cls, database_url: str, validator_hotkey: str, **engine_kwargs,
    ) -> "SimplePersistence":
        """Create engine, ensure tables, verify connectivity."""
        engine = create_engine_for(database_url, **engine_kwargs)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
                await conn.execute(text("SELECT 1"))
        except BaseException:
            await engine.dispose()
            raise
        logger.info(
            "Persistence opened",
            extra={"hotkey": validator_hotkey},
        )
        return cls(engine, validator_hotkey)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit", e)
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute", e)
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query", e)
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown", e)
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()


async def open_persistence(
    database_url: str, validator_hotkey: str,
    *, pool_size: int = 5, max_overflow: int = 10,
) -> SimplePersistence:
    """PersistenceFactory used by the session bootstrapper."""
    return await SimplePersistence.open(
        database_url, validator_hotkey,
        pool_size=pool_size, max_overflow=max_overflow,
    )
