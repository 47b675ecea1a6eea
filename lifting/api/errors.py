"""HTTP status mapping for training errors.

Route handlers catch TrainingError and re-raise it through
to_http_exception so every endpoint reports failures the same way.
"""

from fastapi import HTTPException, status

from lifting.training.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    TrainingError,
    ValidationError,
)

_STATUS_BY_ERROR: tuple[tuple[type[TrainingError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def http_status_for(error: TrainingError) -> int:
    """HTTP status code for a training error (500 for unmapped errors)."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: TrainingError) -> HTTPException:
    """Wrap a training error in an HTTPException.

    The detail carries the error's code and message so clients can branch
    on the code without parsing text.
    """
    return HTTPException(
        status_code=http_status_for(error),
        detail={"code": error.code, "message": error.message},
    )
