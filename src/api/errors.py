"""Map form-subsystem errors onto HTTP responses for the failing request."""

from __future__ import annotations

from fastapi import HTTPException, status

from src.forms.errors import (
    ConfirmationRequiredError,
    FetchError,
    FormError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
    WriteError,
)

_STATUS: dict[type[FormError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConfirmationRequiredError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    FetchError: status.HTTP_502_BAD_GATEWAY,
    WriteError: status.HTTP_502_BAD_GATEWAY,
}


def http_error(exc: FormError) -> HTTPException:
    """HTTPException carrying the error message and its kind."""
    code = next(
        (code for kind, code in _STATUS.items() if isinstance(exc, kind)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return HTTPException(status_code=code, detail={"error": type(exc).__name__, "message": str(exc)})
