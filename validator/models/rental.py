"""Rental ORM - compute rentals this validator brokered.

Invariants:
    - id is a string UUID primary key
    - validator_hotkey scopes every query; one database may serve several validators
    - status is a RentalState value
    - stopped_at set exactly when status becomes terminal

Design Decisions:
    - String UUID over dialect UUID type: same column on SQLite and PostgreSQL
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from validator.core.domain_types import RentalState
from validator.db.base import Base


class Rental(Base):
    """One leased executor."""
    __tablename__ = "rentals"
    __table_args__ = (
        Index("ix_rentals_validator_status", "validator_hotkey", "status"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    validator_hotkey: Mapped[str] = mapped_column(String(64), nullable=False)
    executor_id: Mapped[str] = mapped_column(String(128), nullable=False)
    container_image: Mapped[str] = mapped_column(String(256), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RentalState.PENDING.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    stopped_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
