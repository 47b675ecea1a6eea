"""Workout lifecycle - guarded state transitions for workouts and their sets.

Workout states: pending → in_progress → {completed, skipped}; pending → skipped.
Set states: pending → completed → pending (unlog); pending|completed → skipped.

Set-level operations are only allowed while the parent workout is in progress.
Every function validates before mutating, so a rejected call leaves the
workout and its sets exactly as they were. Nothing here touches the database.
"""

from collections.abc import Iterable
from datetime import datetime, timezone

from loguru import logger

from lifting.db.models import Workout, WorkoutSet
from lifting.training.errors import InvalidTransitionError, NotFoundError, ValidationError
from lifting.training.set_book import SetBook
from lifting.training.types import WeekTargets


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def _reject(workout: Workout, action: str) -> InvalidTransitionError:
    logger.warning("Workout transition rejected", workout_id=workout.id, status=workout.status, action=action)
    return InvalidTransitionError("Workout", workout.status, action)


def start_workout(workout: Workout, now: datetime | None = None) -> Workout:
    """Move a pending workout to in_progress.

    Raises:
        InvalidTransitionError: If the workout is not pending
    """
    if workout.status != "pending":
        raise _reject(workout, "start")

    workout.status = "in_progress"
    workout.started_at = _now(now)
    logger.info("Workout started", workout_id=workout.id, week_number=workout.week_number)
    return workout


def complete_workout(workout: Workout, now: datetime | None = None) -> Workout:
    """Move an in-progress workout to completed.

    Raises:
        InvalidTransitionError: If the workout is not in progress
    """
    if workout.status != "in_progress":
        raise _reject(workout, "complete")

    workout.status = "completed"
    workout.completed_at = _now(now)
    logger.info("Workout completed", workout_id=workout.id, week_number=workout.week_number)
    return workout


def skip_workout(workout: Workout, sets: Iterable[WorkoutSet] = ()) -> list[WorkoutSet]:
    """Skip a pending or in-progress workout.

    Sets still pending are skipped along with the workout; sets already
    logged keep their actuals.

    Args:
        workout: Workout to skip
        sets: The workout's sets

    Returns:
        Sets that were moved from pending to skipped

    Raises:
        InvalidTransitionError: If the workout is completed or already skipped
    """
    if workout.status not in {"pending", "in_progress"}:
        raise _reject(workout, "skip")

    skipped_sets: list[WorkoutSet] = []
    for workout_set in sets:
        if workout_set.status == "pending":
            workout_set.status = "skipped"
            skipped_sets.append(workout_set)

    workout.status = "skipped"
    logger.info(
        "Workout skipped",
        workout_id=workout.id,
        week_number=workout.week_number,
        skipped_sets=len(skipped_sets),
    )
    return skipped_sets


def _require_in_progress(workout: Workout, action: str) -> None:
    if workout.status != "in_progress":
        logger.warning("Set operation rejected", workout_id=workout.id, status=workout.status, action=action)
        raise InvalidTransitionError(
            "Workout",
            workout.status,
            action,
            f"Cannot {action} sets for a workout in status '{workout.status}'",
        )


def _require_owned(workout: Workout, workout_set: WorkoutSet) -> None:
    if workout_set.workout_id != workout.id:
        raise ValidationError(f"WorkoutSet {workout_set.id} does not belong to workout {workout.id}")


def _validate_actuals(actual_reps: int, actual_weight: float) -> None:
    if isinstance(actual_reps, bool) or not isinstance(actual_reps, int):
        raise ValidationError("Reps must be a whole number")
    if actual_reps < 0:
        raise ValidationError("Reps must be a non-negative number")
    if isinstance(actual_weight, bool) or not isinstance(actual_weight, (int, float)):
        raise ValidationError("Weight must be a number")
    if actual_weight < 0:
        raise ValidationError("Weight must be a non-negative number")


def log_set(workout: Workout, workout_set: WorkoutSet, actual_reps: int, actual_weight: float) -> WorkoutSet:
    """Record what was actually lifted for a set.

    Logging an already-completed or skipped set overwrites it.

    Raises:
        ValidationError: If reps or weight are negative or not numbers
        InvalidTransitionError: If the workout is not in progress
    """
    _validate_actuals(actual_reps, actual_weight)
    _require_owned(workout, workout_set)
    _require_in_progress(workout, "log")

    workout_set.actual_reps = actual_reps
    workout_set.actual_weight = float(actual_weight)
    workout_set.status = "completed"
    logger.info(
        "Set logged",
        workout_set_id=workout_set.id,
        exercise_id=workout_set.exercise_id,
        set_number=workout_set.set_number,
        actual_reps=actual_reps,
        actual_weight=actual_weight,
    )
    return workout_set


def skip_set(workout: Workout, workout_set: WorkoutSet) -> WorkoutSet:
    """Skip a pending or completed set, clearing any logged values.

    Raises:
        InvalidTransitionError: If the workout is not in progress or the set is already skipped
    """
    _require_owned(workout, workout_set)
    _require_in_progress(workout, "skip")
    if workout_set.status == "skipped":
        raise InvalidTransitionError("WorkoutSet", workout_set.status, "skip")

    workout_set.actual_reps = None
    workout_set.actual_weight = None
    workout_set.status = "skipped"
    logger.info("Set skipped", workout_set_id=workout_set.id, set_number=workout_set.set_number)
    return workout_set


def unlog_set(workout: Workout, workout_set: WorkoutSet) -> WorkoutSet:
    """Revert a completed set to pending, clearing its logged values.

    Raises:
        InvalidTransitionError: If the workout is not in progress or the set is not completed
    """
    _require_owned(workout, workout_set)
    _require_in_progress(workout, "unlog")
    if workout_set.status != "completed":
        raise InvalidTransitionError("WorkoutSet", workout_set.status, "unlog")

    workout_set.actual_reps = None
    workout_set.actual_weight = None
    workout_set.status = "pending"
    logger.info("Set unlogged", workout_set_id=workout_set.id, set_number=workout_set.set_number)
    return workout_set


def add_set(workout: Workout, book: SetBook, exercise_id: str, targets: WeekTargets) -> WorkoutSet:
    """Append a pending set for an exercise, copying the week's targets.

    The new set is added to the book but not persisted.

    Args:
        workout: In-progress workout
        book: The workout's sets
        exercise_id: Exercise to add a set to
        targets: That exercise's WeekTargets for the workout's week

    Returns:
        The new pending WorkoutSet

    Raises:
        InvalidTransitionError: If the workout is not in progress
        NotFoundError: If the workout has no sets for the exercise
        ValidationError: If targets are for another exercise or week
    """
    _require_in_progress(workout, "add")
    if book.count(exercise_id) == 0:
        raise NotFoundError("Exercise", exercise_id)
    if targets.exercise_id != exercise_id or targets.week_number != workout.week_number:
        raise ValidationError(
            f"Targets for exercise {targets.exercise_id} week {targets.week_number} do not match "
            f"exercise {exercise_id} week {workout.week_number}"
        )

    new_set = WorkoutSet(
        workout_id=workout.id,
        exercise_id=exercise_id,
        set_number=book.next_set_number(exercise_id),
        target_reps=targets.target_reps,
        target_weight=targets.target_weight,
        actual_reps=None,
        actual_weight=None,
        status="pending",
    )
    book.add(new_set)
    logger.info("Set added", workout_id=workout.id, exercise_id=exercise_id, set_number=new_set.set_number)
    return new_set


def remove_set(workout: Workout, book: SetBook, exercise_id: str) -> WorkoutSet:
    """Remove the highest-numbered pending set of an exercise.

    Logged and skipped sets are never removed, and an exercise always keeps
    at least one set. The removed set is taken out of the book; deleting it
    from storage is the caller's job.

    Returns:
        The removed WorkoutSet

    Raises:
        InvalidTransitionError: If the workout is not in progress
        NotFoundError: If the workout has no sets for the exercise
        ValidationError: If only one set remains or no pending set exists
    """
    _require_in_progress(workout, "remove")
    if book.count(exercise_id) == 0:
        raise NotFoundError("Exercise", exercise_id)
    if book.count(exercise_id) == 1:
        raise ValidationError("Cannot remove the last set from an exercise")

    removable = book.last_pending(exercise_id)
    if removable is None:
        raise ValidationError("No pending sets to remove")

    book.remove(removable)
    logger.info("Set removed", workout_id=workout.id, exercise_id=exercise_id, set_number=removable.set_number)
    return removable
