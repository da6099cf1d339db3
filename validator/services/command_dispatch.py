"""Command Dispatch - routes one parsed command to exactly one collaborator.

Invariants:
    - Exactly one collaborator call per execute(); no fan-out, no retries
    - Start uses the global config path when present, else its own
    - Retired commands (connect, verify, verify-legacy) raise RemovedFeatureError
      before any collaborator, config, network or database access
    - Rental reaches its collaborator only with a fully bootstrapped session, and the
      persistence handle is released when the rental call returns or raises; a failing
      close never replaces the rental error
    - Every ValidatorError leaving execute() names the command it came from

Design Decisions:
    - `match` over the Command union with assert_never: adding a command without a
      route fails type checking
    - Collaborators injected via constructor; default wiring lives in build_handler()
      so tests never touch the real service, chain or database
"""

import logging
from pathlib import Path
from typing import assert_never

from validator.config import Settings
from validator.core.collaborator_protocols import (
    DatabaseCollaborator, RentalCollaborator, ServiceCollaborator,
)
from validator.core.commands import (
    Command, Connect, Database, GenConfig, Rental, Start, Status, Stop,
    Verify, VerifyLegacy,
)
from validator.core.errors import ValidatorError
from validator.core.reporting import Reporter
from validator.infrastructure.chain_client import connect_chain_client
from validator.infrastructure.persistence import open_persistence
from validator.services.deprecation_guard import guard_removed_command
from validator.services.handle_database import DatabaseHandlers
from validator.services.handle_rental import RentalHandlers
from validator.services.handle_service import ServiceHandlers
from validator.services.session_bootstrap import SessionBootstrapper

logger = logging.getLogger(__name__)


class CommandHandler:
    """Routes Command -> collaborator. Every route visible in execute()."""

    def __init__(
        self,
        service: ServiceCollaborator,
        database: DatabaseCollaborator,
        rental: RentalCollaborator,
        bootstrapper: SessionBootstrapper,
    ):
        self._service = service
        self._database = database
        self._rental = rental
        self._bootstrapper = bootstrapper

    async def execute(
        self,
        command: Command,
        global_config_path: Path | None = None,
        local_test: bool = False,
    ) -> None:
        logger.debug(f"Dispatching {command.name}", extra={"command": command.name})
        try:
            await self._route(command, global_config_path, local_test)
        except ValidatorError as e:
            raise e.with_context(command=command.name)

    async def _route(
        self, command: Command, global_config_path: Path | None, local_test: bool,
    ) -> None:
        match command:
            case Start(config=config):
                await self._service.start(global_config_path or config, local_test)
            case Stop():
                await self._service.stop()
            case Status():
                await self._service.status()
            case GenConfig(output=output):
                await self._service.gen_config(output)
            case Connect() | Verify() | VerifyLegacy():
                guard_removed_command(command)
            case Database(action=action):
                await self._database.handle(action)
            case Rental(action=action):
                session = await self._bootstrapper.bootstrap(global_config_path)
                try:
                    await self._rental.handle(
                        action, session.hotkey, session.persistence,
                    )
                except BaseException:
                    # The handler's error wins over a failing close
                    try:
                        await session.persistence.close()
                    except Exception:
                        logger.exception(
                            "Failed to close persistence",
                            extra={"command": command.name},
                        )
                    raise
                await session.persistence.close()
            case _:
                assert_never(command)


def build_handler(settings: Settings, reporter: Reporter) -> CommandHandler:
    """Default wiring: real service, database, rental, chain and persistence."""
    return CommandHandler(
        service=ServiceHandlers(settings, reporter, connect_chain_client),
        database=DatabaseHandlers(settings, reporter),
        rental=RentalHandlers(reporter),
        bootstrapper=SessionBootstrapper(connect_chain_client, open_persistence),
    )
