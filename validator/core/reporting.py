"""Reporting Channel - categorized, one-line operator messages.

Invariants:
    - Four categories, each with a fixed prefix tag: [SUCCESS] [ERROR] [INFO] [WARNING]
    - Reporters never raise and return nothing
    - Errors go to stderr, everything else to stdout

Design Decisions:
    - Protocol over module-level print helpers: components receive a Reporter, tests
      pass a RecordingReporter instead of capturing real streams
    - Separate from logging: reporter output is for the operator at the terminal,
      logs are for the JSON pipeline
"""

import sys
from dataclasses import dataclass, field
from typing import Protocol, TextIO


class Reporter(Protocol):
    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def info(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class ConsoleReporter:
    """Writes tagged lines to stdout/stderr."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None):
        self._out = out
        self._err = err

    def _emit(self, stream: TextIO | None, fallback: TextIO, line: str) -> None:
        try:
            print(line, file=stream or fallback, flush=True)
        except (OSError, ValueError):
            # Closed or broken stream (e.g. piped to `head`)
            pass

    def success(self, message: str) -> None:
        self._emit(self._out, sys.stdout, f"[SUCCESS] {message}")

    def error(self, message: str) -> None:
        self._emit(self._err, sys.stderr, f"[ERROR] {message}")

    def info(self, message: str) -> None:
        self._emit(self._out, sys.stdout, f"[INFO] {message}")

    def warning(self, message: str) -> None:
        self._emit(self._out, sys.stdout, f"[WARNING] {message}")


@dataclass
class RecordingReporter:
    """Collects (category, message) pairs in order."""
    messages: list[tuple[str, str]] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def of(self, category: str) -> list[str]:
        return [m for c, m in self.messages if c == category]
