"""
Mapping of typed errors onto HTTP responses.
"""

from __future__ import annotations

from fastapi import HTTPException

from orgkit.core.result import Error, ErrorKind


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_CREDENTIALS: 400,
    ErrorKind.INVALID_DATA: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TIMED_OUT: 504,
    ErrorKind.STORAGE_ERROR: 500,
    ErrorKind.SERVICE_ERROR: 500,
    ErrorKind.UNKNOWN_ERROR: 500,
}


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, 500)


def http_error(
    error: Error,
    detail: str | None = None,
    overrides: dict[ErrorKind, tuple[int, str]] | None = None,
) -> HTTPException:
    """
    Build the HTTPException for a failed Result.

    Args:
        error: The failure
        detail: Response detail, defaults to the error message
        overrides: Per-route (status, detail) for specific kinds
    """
    if overrides and error.kind in overrides:
        status_code, override_detail = overrides[error.kind]
        return HTTPException(status_code=status_code, detail=override_detail)

    return HTTPException(
        status_code=status_for(error.kind),
        detail=detail if detail is not None else error.message,
    )
