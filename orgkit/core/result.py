"""
Result and error primitives.

Every manager, repository and adapter operation returns a `Result`
instead of raising. Failures carry an `ErrorKind` from a closed set so
callers can branch on the kind and log the message.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Classification of a failed operation."""
    
    NOT_FOUND = "not_found"                      # Referenced entity is missing
    STORAGE_ERROR = "storage_error"              # Document store failure
    TIMED_OUT = "timed_out"                      # Bounded call exceeded its deadline
    SERVICE_ERROR = "service_error"              # Backend/provider failure
    INVALID_DATA = "invalid_data"                # Caller supplied bad data
    INVALID_CREDENTIALS = "invalid_credentials"  # Caller supplied bad credentials
    UNKNOWN_ERROR = "unknown_error"


class ResultError(Exception):
    """Raised when unwrapping the wrong side of a Result."""
    pass


@dataclass(frozen=True)
class Error:
    """A typed failure."""
    
    kind: ErrorKind
    message: str
    
    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Either a value or an Error.
    
    Usage:
        result = await repository.find_by_id(org_id)
        if result.is_err:
            return Result.fail(result.unwrap_err())
        org = result.unwrap()
    """
    
    value: T | None = None
    error: Error | None = None
    
    @classmethod
    def ok(cls, value: T) -> Result[T]:
        return cls(value=value)
    
    @classmethod
    def err(cls, kind: ErrorKind, message: str) -> Result[T]:
        return cls(error=Error(kind, message))
    
    @classmethod
    def fail(cls, error: Error) -> Result[T]:
        """Propagate an existing error verbatim."""
        return cls(error=error)
    
    @property
    def is_ok(self) -> bool:
        return self.error is None
    
    @property
    def is_err(self) -> bool:
        return self.error is not None
    
    def unwrap(self) -> T:
        if self.error is not None:
            raise ResultError(f"unwrap called on an error result ({self.error})")
        return self.value  # type: ignore[return-value]
    
    def unwrap_err(self) -> Error:
        if self.error is None:
            raise ResultError("unwrap_err called on an ok result")
        return self.error
