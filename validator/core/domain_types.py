"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId is the chain client's raw account identifier; str() renders it canonically
    - RentalId wraps the persisted rental primary key
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and SQL without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", str)
RentalId = NewType("RentalId", str)


# ─── Enums ───────────────────────────────────────────────────────

class RentalState(str, Enum):
    """Rental lifecycle states, maps to the `status` column."""
    PENDING = "pending"
    ACTIVE = "active"
    STOPPED = "stopped"
    FAILED = "failed"


# Rentals in these states are done and eligible for cleanup
TERMINAL_RENTAL_STATES = frozenset({RentalState.STOPPED, RentalState.FAILED})


class BootstrapStage(str, Enum):
    """Ordered stages of the rental session bootstrap, used as error context."""
    CONFIG_PATH = "config_path"
    CONFIG_LOAD = "config_load"
    CLIENT_INIT = "client_init"
    IDENTITY = "identity"
    PERSISTENCE = "persistence"
