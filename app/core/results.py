# app/core/results.py
"""
Outcome of a data-access call.

Services never let a backend failure escape: they return
``ServiceResult.failure(...)`` and the caller decides whether that is fatal
(``unwrap()`` raises ``DataAccessError`` for the HTTP layer). Successful
mutations list the views that are now stale so the client refetches exactly
those and nothing else.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterable, Optional, TypeVar

from common.api_error import DataAccessError

T = TypeVar("T")


class View(str, Enum):
    APPOINTMENTS = "appointments"
    UPCOMING = "upcoming"
    REMINDERS = "reminders"


# Anything that changes an appointment row shows up in both appointment views
APPOINTMENT_VIEWS = frozenset({View.APPOINTMENTS, View.UPCOMING})
REMINDER_VIEWS = frozenset({View.REMINDERS})


class ErrorKind(str, Enum):
    DATA_ERROR = "DATA_ERROR"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    @property
    def status_code(self) -> int:
        return {
            ErrorKind.DATA_ERROR: 400,
            ErrorKind.NOT_FOUND: 404,
            ErrorKind.VALIDATION_ERROR: 422,
        }[self]


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    data: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    invalidates: frozenset[View] = field(default_factory=frozenset)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls, data: Optional[T] = None, invalidates: Iterable[View] = ()
    ) -> "ServiceResult[T]":
        return cls(data=data, invalidates=frozenset(invalidates))

    @classmethod
    def failure(
        cls, message: str, kind: ErrorKind = ErrorKind.DATA_ERROR
    ) -> "ServiceResult[T]":
        return cls(error=message, error_kind=kind)

    def unwrap(self) -> Optional[T]:
        """
        Raises:
            DataAccessError: the operation failed
        """
        if self.error is not None:
            kind = self.error_kind or ErrorKind.DATA_ERROR
            raise DataAccessError(self.error, status_code=kind.status_code, code=kind.value)
        return self.data

    def invalidation_header(self) -> str:
        """Stable, comma separated view names for the response header."""
        return ",".join(sorted(view.value for view in self.invalidates))


__all__ = [
    "View",
    "APPOINTMENT_VIEWS",
    "REMINDER_VIEWS",
    "ErrorKind",
    "ServiceResult",
]
