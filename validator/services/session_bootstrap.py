"""Session Bootstrap - resolve config, chain client, hotkey and persistence for rentals.

Invariants:
    - Steps run strictly in order; each awaits the previous one's result
    - The first failing step aborts the chain with its own error kind:
      ConfigRequiredError / ConfigNotFoundError / ConfigInvalidError -> ClientInitError
      -> InvalidIdentityError -> PersistenceInitError
    - No step runs after a failure (persistence is never opened for a bad hotkey)
    - A RentalSession is returned whole or not at all

Design Decisions:
    - Early-return sequence over nested conditionals: one step per block, one error each
    - Config is only parsed here, not validated or summarized: rental commands do not
      run the validator, so warnings would be noise
    - Factories injected: tests count calls without touching the network or a database
    - Resources opened before a later failure are left to normal cleanup (the client
      holds no connection; persistence is the last step)
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from validator.core.collaborator_protocols import (
    ChainClientFactory, PersistenceFactory, PersistenceHandle,
)
from validator.core.domain_types import BootstrapStage
from validator.core.errors import (
    ClientInitError, ConfigRequiredError, ErrorContext, InvalidIdentityError,
    PersistenceInitError, ValidatorError,
)
from validator.core.identity import Hotkey, InvalidHotkey
from validator.services.config_loader import read_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RentalSession:
    hotkey: Hotkey
    persistence: PersistenceHandle


class SessionBootstrapper:
    """Acquires everything a rental command needs, in order."""

    def __init__(
        self,
        client_factory: ChainClientFactory,
        persistence_factory: PersistenceFactory,
        command_name: str = "rental",
    ):
        self._client_factory = client_factory
        self._persistence_factory = persistence_factory
        self._command_name = command_name

    def _context(self, stage: BootstrapStage) -> ErrorContext:
        return ErrorContext(command=self._command_name, stage=stage.value)

    async def bootstrap(self, global_config_path: Path | None) -> RentalSession:
        # 1. Config path is mandatory: no implicit default for rentals
        if global_config_path is None:
            raise ConfigRequiredError(
                "Configuration required for rental commands",
                self._context(BootstrapStage.CONFIG_PATH),
            )

        # 2. Structural load only
        try:
            config = read_config(Path(global_config_path))
        except ValidatorError as e:
            raise e.with_context(
                command=self._command_name, stage=BootstrapStage.CONFIG_LOAD.value,
            )

        # 3. Chain client
        try:
            client = await self._client_factory(config.bittensor)
        except Exception as e:
            raise ClientInitError(e, self._context(BootstrapStage.CLIENT_INIT)) from e

        # 4-5. Account id -> hotkey
        address = str(client.account_id())
        try:
            hotkey = Hotkey(address)
        except InvalidHotkey as e:
            raise InvalidIdentityError(
                address, e, self._context(BootstrapStage.IDENTITY),
            ) from e

        # 6. Persistence scoped to the hotkey
        try:
            persistence = await self._persistence_factory(
                config.database.url, str(hotkey),
                pool_size=config.database.pool_size,
                max_overflow=config.database.max_overflow,
            )
        except Exception as e:
            raise PersistenceInitError(
                e, self._context(BootstrapStage.PERSISTENCE),
            ) from e

        logger.info(
            "Rental session ready",
            extra={"hotkey": str(hotkey), "command": self._command_name},
        )
        return RentalSession(hotkey=hotkey, persistence=persistence)
