"""Error types raised by registry retrieval and version checks.

Every public operation either returns a value or raises one of these; the
subclass tells the caller which stage failed.
"""
from __future__ import annotations

from typing import Optional


class CheckLatestError(Exception):
    """Base class for all errors raised by this package."""


class TransportError(CheckLatestError):
    """The registry request could not be completed.

    Raised for connection failures, timeouts and non-2xx responses.
    """

    def __init__(self, message: str, *, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(CheckLatestError, ValueError):
    """The registry response could not be turned into a version list."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class VersionParseError(CheckLatestError, ValueError):
    """A string is not a valid semantic version."""

    def __init__(self, text: object, reason: str = ""):
        message = f"Invalid semantic version {text!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.text = text


class InputError(CheckLatestError, ValueError):
    """The caller supplied an unusable value (e.g. its own current version)."""


class VersionSetConsumedError(CheckLatestError, RuntimeError):
    """A VersionSet was queried after an owned query consumed it."""
