"""CLI Entry Point - parse, configure logging, dispatch, map result to exit status.

Invariants:
    - One command dispatched per process, on one asyncio event loop
    - Any ValidatorError -> [ERROR] line on stderr + exit status 1
    - Any other exception -> logged with traceback, generic [ERROR] line, exit status 1
    - Warnings/info/success never change the exit status
"""

import asyncio
import logging
import sys

from validator.config import get_settings
from validator.core.errors import ValidatorError
from validator.core.reporting import ConsoleReporter, Reporter
from validator.infrastructure.observability import setup_logging
from validator.services.command_dispatch import build_handler
from validator.cli.parser import parse_args

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None, reporter: Reporter | None = None) -> int:
    command, options = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    reporter = reporter or ConsoleReporter()

    handler = build_handler(settings, reporter)
    try:
        asyncio.run(handler.execute(command, options.config, options.local_test))
    except ValidatorError as e:
        logger.error(
            f"{e.code}: {e}",
            extra={
                "command": e.context.command,
                "stage": e.context.stage,
                "error_code": e.code,
            },
        )
        reporter.error(str(e))
        return 1
    except KeyboardInterrupt:
        reporter.warning("Interrupted")
        return 130
    except Exception as e:
        logger.error(
            f"Unhandled exception: {type(e).__name__}: {e}",
            exc_info=True,
            extra={"command": command.name},
        )
        reporter.error(f"{command.name}: unexpected error ({type(e).__name__}); see logs for details")
        return 1
    return 0


def run() -> None:
    sys.exit(main())
