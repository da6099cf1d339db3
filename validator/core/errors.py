"""Error Hierarchy - typed, categorized exceptions for every validator failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Wrapped failures keep the underlying exception on .cause (and __cause__ via raise-from)
    - ErrorContext names the command and the stage that failed
    - str(error) is directly user-visible: it carries stage context and the cause

Design Decisions:
    - Single hierarchy with ValidatorError base: the CLI catches one type and maps it
      to a non-zero exit status
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and operator output."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    IDENTITY = "identity"
    EXTERNAL_API = "external_api"
    DATABASE = "database"
    RESOURCE_NOT_FOUND = "resource_not_found"
    REMOVED = "removed"
    SERVICE = "service"


@dataclass
class ErrorContext:
    """Where the failure happened: which command, which bootstrap/dispatch stage."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    command: str | None = None
    stage: str | None = None
    debug_info: dict[str, Any] | None = None


class ValidatorError(Exception):
    """Base exception for all validator errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause

    def __str__(self) -> str:
        prefix = ""
        if self.context.command and self.context.stage:
            prefix = f"{self.context.command} ({self.context.stage}): "
        elif self.context.command:
            prefix = f"{self.context.command}: "
        return f"{prefix}{self.message}"

    def with_context(self, *, command: str | None = None, stage: str | None = None):
        """Fill in missing context fields; returns self for `raise err.with_context(...)`."""
        if command and not self.context.command:
            self.context.command = command
        if stage and not self.context.stage:
            self.context.stage = stage
        return self

    def to_dict(self) -> dict:
        """Structured form for JSON log records."""
        return {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "command": self.context.command,
            "stage": self.context.stage,
            "cause": repr(self.cause) if self.cause else None,
        }


# ─── Configuration Errors ───────────────────────────────────────

class ConfigRequiredError(ValidatorError):
    """No config path supplied where one is mandatory."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIG_REQUIRED", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, context,
        )


class ConfigNotFoundError(ValidatorError):
    """Supplied config path does not reference an existing file."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        super().__init__(
            f"Configuration file not found: {path}",
            "CONFIG_NOT_FOUND", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, context,
        )
        self.path = path


class ConfigInvalidError(ValidatorError):
    """Config document failed to parse or failed semantic validation."""
    def __init__(
        self, message: str, cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        detail = f"{message}: {cause}" if cause else message
        super().__init__(
            detail, "CONFIG_INVALID", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, context, cause,
        )


# ─── Session Bootstrap Errors ───────────────────────────────────

class ClientInitError(ValidatorError):
    """Blockchain client could not be constructed."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to initialize blockchain client: {cause}",
            "CLIENT_INIT_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, cause,
        )


class InvalidIdentityError(ValidatorError):
    """Derived address failed hotkey validation."""
    def __init__(
        self, address: str, cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        reason = f": {cause}" if cause else ""
        super().__init__(
            f"Failed to create hotkey from '{address}'{reason}",
            "INVALID_IDENTITY", ErrorCategory.IDENTITY,
            ErrorSeverity.ERROR, context, cause,
        )
        self.address = address


class PersistenceInitError(ValidatorError):
    """Persistence handle could not be opened."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to open persistence: {cause}",
            "PERSISTENCE_INIT_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, cause,
        )


# ─── Dispatch Errors ────────────────────────────────────────────

class RemovedFeatureError(ValidatorError):
    """Command variant has been retired."""
    def __init__(
        self, message: str, removed_command: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "REMOVED_FEATURE", ErrorCategory.REMOVED,
            ErrorSeverity.ERROR, context,
        )
        self.removed_command = removed_command


# ─── Collaborator Errors ────────────────────────────────────────

class DatabaseError(ValidatorError):
    """Database operation failed."""
    def __init__(
        self, message: str, operation: str,
        cause: BaseException | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, cause,
        )
        self.operation = operation


class RentalNotFoundError(ValidatorError):
    """Requested rental does not exist for this validator."""
    def __init__(self, rental_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Rental '{rental_id}' not found",
            "RENTAL_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.rental_id = rental_id


class ServiceError(ValidatorError):
    """Validator service lifecycle operation failed."""
    def __init__(
        self, message: str, cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "SERVICE_ERROR", ErrorCategory.SERVICE,
            ErrorSeverity.ERROR, context, cause,
        )
