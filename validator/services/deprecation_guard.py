"""Deprecation Guard - fixed failures for retired commands.

Invariants:
    - Stateless: never touches configuration, network, persistence, or the reporter
    - Always raises RemovedFeatureError; the message points at the verification engine API
    - The error records which retired command was requested
"""

from validator.core.commands import Connect, RemovedCommand, Verify, VerifyLegacy
from validator.core.errors import ErrorContext, RemovedFeatureError

HARDWARE_VALIDATION_REMOVED = (
    "Hardware validation commands have been removed. "
    "Use the verification engine API instead."
)
LEGACY_VALIDATION_REMOVED = (
    "Legacy validation commands have been removed. "
    "Use the verification engine API instead."
)

_MESSAGES = {
    Connect: HARDWARE_VALIDATION_REMOVED,
    Verify: HARDWARE_VALIDATION_REMOVED,
    VerifyLegacy: LEGACY_VALIDATION_REMOVED,
}


def guard_removed_command(command: RemovedCommand) -> None:
    raise RemovedFeatureError(
        _MESSAGES[type(command)],
        removed_command=command.name,
        context=ErrorContext(command=command.name, stage="dispatch"),
    )
