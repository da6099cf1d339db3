"""Rental Handlers - list, inspect and stop rentals owned by this validator.

Invariants:
    - Every query filters on the bootstrapped hotkey; rentals of other validators are
      invisible (a foreign id reports as not found)
    - Stopping a rental in a terminal state is a no-op reported as info
    - stopped_at is set together with the STOPPED status
"""

import logging
from datetime import datetime, timezone
from typing import assert_never

from sqlalchemy import select

from validator.core.commands import RentalAction, RentalList, RentalStatus, RentalStop
from validator.core.domain_types import TERMINAL_RENTAL_STATES, RentalState
from validator.core.errors import ErrorContext, RentalNotFoundError
from validator.core.identity import Hotkey
from validator.core.reporting import Reporter
from validator.infrastructure.persistence import SimplePersistence
from validator.models.rental import Rental

logger = logging.getLogger(__name__)


def _describe(rental: Rental) -> str:
    return (
        f"{rental.id}  {rental.status:<8}  executor={rental.executor_id}  "
        f"image={rental.container_image}  created={rental.created_at:%Y-%m-%d %H:%M}"
    )


class RentalHandlers:
    """Rental collaborator."""

    def __init__(self, reporter: Reporter):
        self._reporter = reporter

    async def handle(
        self, action: RentalAction, hotkey: Hotkey, persistence: SimplePersistence,
    ) -> None:
        match action:
            case RentalList(state=state):
                await self._list(hotkey, persistence, state)
            case RentalStatus(rental_id=rental_id):
                await self._status(hotkey, persistence, rental_id)
            case RentalStop(rental_id=rental_id):
                await self._stop(hotkey, persistence, rental_id)
            case _:
                assert_never(action)

    async def _list(
        self, hotkey: Hotkey, persistence: SimplePersistence,
        state: RentalState | None,
    ) -> None:
        query = (
            select(Rental)
            .where(Rental.validator_hotkey == str(hotkey))
            .order_by(Rental.created_at.desc())
        )
        if state is not None:
            query = query.where(Rental.status == state.value)
        async with persistence.session() as db:
            rentals = (await db.execute(query)).scalars().all()

        if not rentals:
            self._reporter.info("No rentals found")
            return
        self._reporter.info(f"{len(rentals)} rental(s) for {hotkey}")
        for rental in rentals:
            self._reporter.info(_describe(rental))

    async def _get(self, db, hotkey: Hotkey, rental_id: str) -> Rental:
        rental = (await db.execute(
            select(Rental)
            .where(Rental.id == rental_id)
            .where(Rental.validator_hotkey == str(hotkey)),
        )).scalar_one_or_none()
        if rental is None:
            raise RentalNotFoundError(
                rental_id, ErrorContext(command="rental", stage="lookup"),
            )
        return rental

    async def _status(
        self, hotkey: Hotkey, persistence: SimplePersistence, rental_id: str,
    ) -> None:
        async with persistence.session() as db:
            rental = await self._get(db, hotkey, rental_id)
        self._reporter.info(_describe(rental))
        if rental.stopped_at is not None:
            self._reporter.info(f"Stopped at {rental.stopped_at:%Y-%m-%d %H:%M}")

    async def _stop(
        self, hotkey: Hotkey, persistence: SimplePersistence, rental_id: str,
    ) -> None:
        async with persistence.session() as db:
            rental = await self._get(db, hotkey, rental_id)
            if rental.status in {s.value for s in TERMINAL_RENTAL_STATES}:
                self._reporter.info(f"Rental {rental_id} already {rental.status}")
                return
            rental.status = RentalState.STOPPED.value
            rental.stopped_at = datetime.now(timezone.utc)
            await db.commit()
        logger.info("Rental stopped", extra={"rental_id": rental_id, "hotkey": str(hotkey)})
        self._reporter.success(f"Rental {rental_id} stopped")
