"""Commands - the closed set of parsed commands the dispatcher routes.

Invariants:
    - Every variant is a frozen dataclass: immutable once the parser builds it
    - Command, DatabaseAction and RentalAction are closed unions; adding a variant
      means adding a case to every `match` over them (checked via assert_never)
    - GlobalOptions.config, when set, overrides any per-command config path

Design Decisions:
    - Union of dataclasses over an Enum + payload dict: each variant carries its own
      typed arguments
    - `name` class attribute on commands: stable label for logs and error context
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Union

from validator.core.domain_types import RentalId, RentalState


# ─── Database Actions ────────────────────────────────────────────

@dataclass(frozen=True)
class DatabaseInit:
    """Create the validator tables if missing."""


@dataclass(frozen=True)
class DatabaseStatus:
    """Check connectivity and report row counts."""


@dataclass(frozen=True)
class DatabaseCleanup:
    """Purge finished rentals older than `older_than_days`."""
    older_than_days: int = 30


DatabaseAction = Union[DatabaseInit, DatabaseStatus, DatabaseCleanup]


# ─── Rental Actions ──────────────────────────────────────────────

@dataclass(frozen=True)
class RentalList:
    state: RentalState | None = None


@dataclass(frozen=True)
class RentalStatus:
    rental_id: RentalId


@dataclass(frozen=True)
class RentalStop:
    rental_id: RentalId


RentalAction = Union[RentalList, RentalStatus, RentalStop]


# ─── Commands ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Start:
    name: ClassVar[str] = "start"
    config: Path | None = None


@dataclass(frozen=True)
class Stop:
    name: ClassVar[str] = "stop"


@dataclass(frozen=True)
class Status:
    name: ClassVar[str] = "status"


@dataclass(frozen=True)
class GenConfig:
    name: ClassVar[str] = "gen-config"
    output: Path = Path("validator.toml")


@dataclass(frozen=True)
class Connect:
    """Retired: hardware validation over SSH."""
    name: ClassVar[str] = "connect"
    args: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Verify:
    """Retired: hardware verification."""
    name: ClassVar[str] = "verify"
    args: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class VerifyLegacy:
    """Retired: legacy verification flow."""
    name: ClassVar[str] = "verify-legacy"
    args: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Database:
    name: ClassVar[str] = "database"
    action: DatabaseAction = field(default_factory=DatabaseStatus)


@dataclass(frozen=True)
class Rental:
    name: ClassVar[str] = "rental"
    action: RentalAction = field(default_factory=RentalList)


Command = Union[
    Start, Stop, Status, GenConfig,
    Connect, Verify, VerifyLegacy,
    Database, Rental,
]

RemovedCommand = Union[Connect, Verify, VerifyLegacy]


@dataclass(frozen=True)
class GlobalOptions:
    """Options supplied once per invocation, before the subcommand."""
    config: Path | None = None
    local_test: bool = False
