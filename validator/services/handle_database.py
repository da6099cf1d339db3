"""Database Handlers - init, status, cleanup for the validator database.

Invariants:
    - The database URL comes from process settings (VALIDATOR_DATABASE_URL): database
      commands take no config file
    - Admin operations span every validator hotkey in the database
    - cleanup only deletes rentals in a terminal state, stopped before the cutoff
    - The engine is disposed after every action

Design Decisions:
    - Opening the handle creates missing tables, so `init` is open + report
    - Failures opening the database surface as DatabaseError("open")
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import assert_never

from sqlalchemy import delete, func, select

from validator.config import Settings
from validator.core.commands import (
    DatabaseAction, DatabaseCleanup, DatabaseInit, DatabaseStatus,
)
from validator.core.domain_types import TERMINAL_RENTAL_STATES
from validator.core.errors import DatabaseError, ErrorContext, ValidatorError
from validator.core.reporting import Reporter
from validator.infrastructure.persistence import SimplePersistence
from validator.models.rental import Rental

logger = logging.getLogger(__name__)

ADMIN_SCOPE = ""


class DatabaseHandlers:
    """Database administration collaborator."""

    def __init__(self, settings: Settings, reporter: Reporter):
        self._settings = settings
        self._reporter = reporter

    async def handle(self, action: DatabaseAction) -> None:
        persistence = await self._open()
        try:
            match action:
                case DatabaseInit():
                    await self._init(persistence)
                case DatabaseStatus():
                    await self._status(persistence)
                case DatabaseCleanup(older_than_days=days):
                    await self._cleanup(persistence, days)
                case _:
                    assert_never(action)
        finally:
            await persistence.close()

    async def _open(self) -> SimplePersistence:
        try:
            return await SimplePersistence.open(self._settings.database_url, ADMIN_SCOPE)
        except ValidatorError:
            raise
        except Exception as e:
            raise DatabaseError(
                str(e), "open", e, ErrorContext(command="database", stage="open"),
            ) from e

    async def _init(self, persistence: SimplePersistence) -> None:
        self._reporter.success(
            f"Database initialized ({persistence.engine.url.render_as_string(hide_password=True)})"
        )

    async def _status(self, persistence: SimplePersistence) -> None:
        if not await persistence.health_check():
            raise DatabaseError(
                "health check failed", "status",
                context=ErrorContext(command="database", stage="status"),
            )
        async with persistence.session() as db:
            rows = (await db.execute(
                select(Rental.status, func.count()).group_by(Rental.status),
            )).all()
        counts = {status: count for status, count in rows}
        total = sum(counts.values())
        self._reporter.success("Database connection healthy")
        self._reporter.info(f"Rentals: {total}")
        for status in sorted(counts):
            self._reporter.info(f"  {status}: {counts[status]}")

    async def _cleanup(self, persistence: SimplePersistence, days: int) -> None:
        if days < 0:
            raise DatabaseError(
                f"older_than_days must be >= 0, got {days}", "cleanup",
                context=ErrorContext(command="database", stage="cleanup"),
            )
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        async with persistence.session() as db:
            result = await db.execute(
                delete(Rental)
                .where(Rental.status.in_([s.value for s in TERMINAL_RENTAL_STATES]))
                .where(Rental.stopped_at.is_not(None))
                .where(Rental.stopped_at < cutoff),
            )
            await db.commit()
        logger.info(f"Cleanup removed {result.rowcount} rentals older than {days} days")
        self._reporter.success(
            f"Removed {result.rowcount} finished rentals older than {days} days"
        )
