"""Exception types raised by minidoc."""

from __future__ import annotations

from pathlib import Path


class MinidocError(Exception):
    """Base error for the package."""


class ParseError(MinidocError, ValueError):
    """Raised when a store file exists but does not hold a valid store state."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot load store file {path}: {reason}")
        self.path = path
        self.reason = reason
