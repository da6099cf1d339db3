"""Service Handlers - start, stop, status, gen-config for the validator process.

Invariants:
    - start() loads, validates and warns before anything is written to disk
    - At most one running instance per pid file; a stale pid file is replaced
    - The pid file is removed when the service loop exits, normally or not
    - local_test skips the chain connection; everything else behaves the same
    - gen_config() never overwrites an existing file

Design Decisions:
    - Pid file over a supervisor socket: stop/status only need liveness and a signal
    - Shutdown via asyncio.Event set from SIGINT/SIGTERM handlers; tests inject a
      pre-set event so start() returns immediately
"""

import asyncio
import logging
import os
import signal
from pathlib import Path

from validator.config import Settings
from validator.core.collaborator_protocols import ChainClientFactory
from validator.core.errors import ErrorContext, ServiceError
from validator.core.reporting import Reporter
from validator.core.validator_config import CONFIG_TEMPLATE, ValidatorConfig
from validator.services.config_loader import ConfigLoader

logger = logging.getLogger(__name__)


def read_pid(pid_file: Path) -> int | None:
    try:
        return int(pid_file.read_text(encoding="utf-8").strip())
    except FileNotFoundError:
        return None
    except ValueError:
        logger.warning(f"Ignoring malformed pid file {pid_file}")
        return None


def is_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, owned by another user
        return True
    return True


class ServiceHandlers:
    """Service lifecycle collaborator."""

    def __init__(
        self,
        settings: Settings,
        reporter: Reporter,
        client_factory: ChainClientFactory,
        shutdown: asyncio.Event | None = None,
    ):
        self._settings = settings
        self._reporter = reporter
        self._loader = ConfigLoader(reporter)
        self._client_factory = client_factory
        self._shutdown = shutdown

    @property
    def pid_file(self) -> Path:
        return self._settings.pid_file

    async def start(self, config_path: Path | None, local_test: bool) -> None:
        config = self._loader.load(config_path)
        self._loader.validate_and_warn(config)

        pid = read_pid(self.pid_file)
        if pid is not None and pid != os.getpid() and is_alive(pid):
            raise ServiceError(
                f"Validator already running (pid {pid})",
                context=ErrorContext(command="start", stage="pid_check"),
            )

        if local_test:
            self._reporter.info("Local test mode: skipping chain connection")
        else:
            try:
                await self._client_factory(config.bittensor)
            except Exception as e:
                raise ServiceError(
                    f"Failed to connect to {config.bittensor.network}: {e}", e,
                    ErrorContext(command="start", stage="client_init"),
                ) from e

        await self._run(config)

    async def _run(self, config: ValidatorConfig) -> None:
        shutdown = self._shutdown or asyncio.Event()
        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, shutdown.set)
                installed.append(sig)
            except (NotImplementedError, RuntimeError):
                # Not supported on this platform / not the main thread
                pass

        self.pid_file.parent.mkdir(parents=True, exist_ok=True)
        self.pid_file.write_text(str(os.getpid()), encoding="utf-8")
        self._reporter.success(
            f"Validator started on {config.bittensor.network} "
            f"(netuid {config.bittensor.netuid}, pid {os.getpid()})"
        )
        try:
            await shutdown.wait()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            self.pid_file.unlink(missing_ok=True)
            logger.info("Validator service stopped")

    async def stop(self) -> None:
        pid = read_pid(self.pid_file)
        if pid is None:
            self._reporter.info("Validator is not running")
            return
        if not is_alive(pid):
            self.pid_file.unlink(missing_ok=True)
            self._reporter.info(f"Removed stale pid file (pid {pid})")
            return
        try:
            os.kill(pid, signal.SIGTERM)
        except OSError as e:
            raise ServiceError(
                f"Failed to signal validator (pid {pid}): {e}", e,
                ErrorContext(command="stop", stage="signal"),
            ) from e
        self._reporter.success(f"Sent stop signal to validator (pid {pid})")

    async def status(self) -> None:
        pid = read_pid(self.pid_file)
        if pid is not None and is_alive(pid):
            self._reporter.success(f"Validator is running (pid {pid})")
        else:
            self._reporter.info("Validator is not running")

    async def gen_config(self, output_path: Path) -> None:
        output_path = Path(output_path)
        if output_path.exists():
            raise ServiceError(
                f"Refusing to overwrite existing file: {output_path}",
                context=ErrorContext(command="gen-config", stage="write"),
            )
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        except OSError as e:
            raise ServiceError(
                f"Failed to write {output_path}: {e}", e,
                ErrorContext(command="gen-config", stage="write"),
            ) from e
        self._reporter.success(f"Configuration template written to {output_path}")
