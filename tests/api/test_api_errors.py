"""Tests for mapping training errors onto HTTP responses."""

import pytest
from fastapi import HTTPException

from lifting.api.errors import http_status_for, to_http_exception
from lifting.training.errors import (
    ConflictError,
    InvalidPerformanceError,
    InvalidProfileError,
    InvalidTransitionError,
    NotFoundError,
    TrainingError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ValidationError("Reps must be a non-negative number"), 400),
        (InvalidProfileError("min_reps (13) must be <= max_reps (12)"), 400),
        (InvalidPerformanceError("Previous performance is from week 1, expected week 3"), 400),
        (InvalidTransitionError("Workout", "completed", "start"), 400),
        (NotFoundError("Workout", "w-404"), 404),
        (ConflictError("Concurrent modification"), 409),
        (TrainingError("Unexpected"), 500),
    ],
)
def test_http_status_for(error, expected):
    assert http_status_for(error) == expected


def test_to_http_exception_carries_code_and_message():
    exc = to_http_exception(NotFoundError("WorkoutSet", "s-1"))

    assert isinstance(exc, HTTPException)
    assert exc.status_code == 404
    assert exc.detail == {"code": "NOT_FOUND", "message": "WorkoutSet with id s-1 not found"}


def test_invalid_transition_message():
    error = InvalidTransitionError("Workout", "completed", "start")

    assert error.message == "Cannot start workout in status 'completed'"
    assert error.code == "INVALID_TRANSITION"
