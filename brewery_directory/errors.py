"""Error taxonomy shared by the access layer and the HTTP surface.

Reads degrade: their failures are captured as ``ReadError`` inside a
``ReadResult`` and mapped to an empty or absent value at the public boundary.
Writes raise: ``AdminClientUnavailable`` and ``WriteError`` always reach the
caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class DirectoryError(Exception):
    """Base class for every error raised by this package."""


class ReadError(DirectoryError):
    """A store read failed (unreachable, malformed response, ...)."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class CapabilityUnavailable(DirectoryError):
    """An optional store capability (e.g. a server-side function) is missing."""


class AdminClientUnavailable(DirectoryError):
    """A privileged operation was attempted without an admin client configured."""


class WriteError(DirectoryError):
    """The store rejected a write."""


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    """Outcome of an internal read: either a value or a ``ReadError``."""

    value: Optional[T] = None
    error: Optional[ReadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` when the read failed or found nothing."""
        if self.error is not None or self.value is None:
            return default
        return self.value
