"""Precondition checks for mesocycle modifications.

Each validator raises before anything is written, so a failed check never
leaves a half-applied change behind.
"""

from collections.abc import Sequence

from loguru import logger

from lifting.db.models import Mesocycle, Plan, PlanDay, Workout
from lifting.training.errors import ValidationError
from lifting.training.modify.types import PlanDayExerciseDiff


def validate_plan_has_days(plan: Plan, days: Sequence[PlanDay]) -> None:
    """A mesocycle can only be started from a plan with training days."""
    if not days:
        logger.warning("Plan has no training days", plan_id=plan.id)
        raise ValidationError(f"Plan {plan.id} has no training days")


def validate_mesocycle_active(mesocycle: Mesocycle) -> None:
    if mesocycle.status != "active":
        raise ValidationError("Mesocycle is not active")


def validate_workout_in_mesocycle(workout: Workout, mesocycle: Mesocycle) -> None:
    """Check the workout belongs to the mesocycle and lies within its weeks.

    Raises:
        ValidationError: If the workout is from another mesocycle or its week
            falls outside [1, total_weeks]
    """
    if workout.mesocycle_id != mesocycle.id:
        raise ValidationError(f"Workout {workout.id} does not belong to mesocycle {mesocycle.id}")
    if not 1 <= workout.week_number <= mesocycle.total_weeks:
        raise ValidationError(
            f"Workout week {workout.week_number} is outside mesocycle weeks 1-{mesocycle.total_weeks}"
        )


def validate_set_count(sets: int) -> None:
    if sets < 1:
        raise ValidationError(f"An exercise needs at least one set, got {sets}")


def validate_rep_range(min_reps: int, max_reps: int) -> None:
    if min_reps < 1:
        raise ValidationError(f"min_reps must be >= 1, got {min_reps}")
    if min_reps > max_reps:
        raise ValidationError(f"min_reps ({min_reps}) must be <= max_reps ({max_reps})")


def validate_diff(diff: PlanDayExerciseDiff) -> None:
    """Reject a diff whose new prescriptions would be unusable.

    Added exercises are checked in full. Modified exercises are checked on
    the fields they change.

    Raises:
        ValidationError: If a set count drops below one, a rep range is
            inverted, or a weight is negative
    """
    for added in diff.added_exercises:
        validate_set_count(added.sets)
        validate_rep_range(added.min_reps, added.max_reps)
        if added.weight < 0:
            raise ValidationError(f"Weight must be non-negative, got {added.weight}")

    for modified in diff.modified_exercises:
        changes = modified.changes
        if changes.sets is not None:
            validate_set_count(changes.sets)
        if changes.min_reps is not None and changes.max_reps is not None:
            validate_rep_range(changes.min_reps, changes.max_reps)
        if changes.weight is not None and changes.weight < 0:
            raise ValidationError(f"Weight must be non-negative, got {changes.weight}")
