"""Outcome of a repository operation.

Repositories do not raise on storage problems. They log the problem and return a `Failure` whose `kind` tells the
caller what went wrong, so "wrong password", "database down" and "username taken" can be told apart.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class FailureKind(StrEnum):
    """Why a repository operation failed."""

    NOT_FOUND = "not_found"
    AUTHENTICATION_FAILED = "authentication_failed"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    CONSTRAINT_VIOLATION = "constraint_violation"


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful outcome carrying its value."""

    value: T

    def __bool__(self) -> Literal[True]:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed outcome."""

    kind: FailureKind
    detail: str = ""

    def __bool__(self) -> Literal[False]:
        return False


type Result[T] = Ok[T] | Failure


def classify_error(error: BaseException) -> FailureKind:
    """Map an exception raised while talking to the database to a failure kind."""
    if isinstance(error, IntegrityError):
        return FailureKind.CONSTRAINT_VIOLATION
    if isinstance(error, (SQLAlchemyError, OSError)):
        return FailureKind.STORAGE_UNAVAILABLE
    raise TypeError(f"Not a storage error: {error!r}")
