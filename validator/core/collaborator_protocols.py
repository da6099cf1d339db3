"""Boundary Protocols - contracts between the dispatcher and its collaborators.

Invariants:
    - Core NEVER imports from services/ or infrastructure/: dependency arrows point inward
    - Every collaborator reached through one of these Protocols
    - Implementations injected into CommandHandler / SessionBootstrapper

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain fakes
    - Async methods: implementations do IO (files, network, database)
"""

from pathlib import Path
from typing import Protocol

from validator.core.commands import DatabaseAction, RentalAction
from validator.core.domain_types import AccountId
from validator.core.identity import Hotkey
from validator.core.validator_config import BittensorConfig


class ServiceCollaborator(Protocol):
    """Validator service lifecycle."""
    async def start(self, config_path: Path | None, local_test: bool) -> None: ...
    async def stop(self) -> None: ...
    async def status(self) -> None: ...
    async def gen_config(self, output_path: Path) -> None: ...


class DatabaseCollaborator(Protocol):
    """Database administration."""
    async def handle(self, action: DatabaseAction) -> None: ...


class PersistenceHandle(Protocol):
    """Opened persistence session shared with the rental collaborator."""
    validator_hotkey: str
    async def close(self) -> None: ...


class RentalCollaborator(Protocol):
    """Rental management, scoped to one validator hotkey."""
    async def handle(
        self, action: RentalAction, hotkey: Hotkey,
        persistence: PersistenceHandle,
    ) -> None: ...


class ChainClient(Protocol):
    """Live blockchain client session."""
    def account_id(self) -> AccountId: ...


class ChainClientFactory(Protocol):
    async def __call__(self, params: BittensorConfig) -> ChainClient: ...


class PersistenceFactory(Protocol):
    async def __call__(
        self, database_url: str, validator_hotkey: str,
        *, pool_size: int = 5, max_overflow: int = 10,
    ) -> PersistenceHandle: ...
