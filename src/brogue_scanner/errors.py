"""Error taxonomy for the seed scanner.

Compile and configuration errors are detected before any catalog is read and
carry every problem found so callers can report them in one batch. Catalog
format errors abort the scan of a single file.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class ScannerError(Exception):
    """Base error for the seed scanner."""


class _BatchedError(ScannerError, ValueError):
    """Error that carries one or more messages collected before failing."""

    headline = "invalid input"

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages: list[str] = list(messages)
        super().__init__(self._render())

    def _render(self) -> str:
        if len(self.messages) == 1:
            return self.messages[0]
        lines = [f"{self.headline} ({len(self.messages)} problems):"]
        lines.extend(f"  - {message}" for message in self.messages)
        return "\n".join(lines)


class ConfigurationError(_BatchedError):
    """Raised when search limits or settings are inconsistent."""

    headline = "invalid configuration"


class CompileError(_BatchedError):
    """Raised when one or more criteria tokens cannot be compiled."""

    headline = "invalid search criteria"


class CatalogFormatError(ScannerError, ValueError):
    """Raised when a seed catalog file is malformed."""

    def __init__(self, message: str, *, path: Path | None = None, line: int | None = None) -> None:
        self.path = path
        self.line = line
        self.reason = message
        super().__init__(self._render())

    def _render(self) -> str:
        location = ""
        if self.path is not None:
            location = str(self.path)
        if self.line is not None:
            location = f"{location}:{self.line}" if location else f"line {self.line}"
        return f"{location}: {self.reason}" if location else self.reason

    def with_path(self, path: Path) -> CatalogFormatError:
        return CatalogFormatError(self.reason, path=path, line=self.line)
