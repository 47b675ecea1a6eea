"""Derive PreviousWeekPerformance from a finished week's sets.

The progression engine never looks at sets directly; the service layer
projects each exercise's week into one PreviousWeekPerformance first.
"""

from collections.abc import Iterable, Sequence

from loguru import logger

from lifting.db.models import WorkoutSet
from lifting.training.types import PreviousWeekPerformance, WeekTargets


def _best_set(completed: Sequence[WorkoutSet]) -> WorkoutSet:
    """Highest actual weight, then highest reps at that weight."""
    return max(completed, key=lambda s: (s.actual_weight or 0.0, s.actual_reps or 0))


def _set_hit(workout_set: WorkoutSet) -> bool:
    return (
        workout_set.status == "completed"
        and workout_set.actual_reps is not None
        and workout_set.actual_weight is not None
        and workout_set.actual_reps >= workout_set.target_reps
        and workout_set.actual_weight >= workout_set.target_weight
    )


def build_previous_week_performance(
    targets: WeekTargets,
    sets: Iterable[WorkoutSet],
) -> PreviousWeekPerformance:
    """Summarise one exercise's week for the progression engine.

    The week counts as a hit only if every set prescribed for the exercise
    was completed at or above its target reps and weight. Skipped sets and
    sets never logged make the week a miss. A week with no completed sets at
    all is a miss with zero actuals.

    Args:
        targets: WeekTargets the sets were prescribed from
        sets: The week's WorkoutSets; sets for other exercises are ignored

    Returns:
        PreviousWeekPerformance carrying the week's running failure counter
    """
    exercise_sets = [s for s in sets if s.exercise_id == targets.exercise_id]
    completed = [s for s in exercise_sets if s.status == "completed" and s.actual_reps is not None]

    if completed:
        best = _best_set(completed)
        actual_weight = float(best.actual_weight or 0.0)
        actual_reps = int(best.actual_reps or 0)
    else:
        actual_weight = 0.0
        actual_reps = 0

    hit_target = bool(exercise_sets) and all(_set_hit(s) for s in exercise_sets)

    logger.debug(
        "Built previous week performance",
        exercise_id=targets.exercise_id,
        week_number=targets.week_number,
        sets=len(exercise_sets),
        completed=len(completed),
        hit_target=hit_target,
    )

    return PreviousWeekPerformance(
        exercise_id=targets.exercise_id,
        week_number=targets.week_number,
        target_weight=targets.target_weight,
        target_reps=targets.target_reps,
        actual_weight=actual_weight,
        actual_reps=actual_reps,
        hit_target=hit_target,
        consecutive_failures=targets.consecutive_failures,
    )


def count_consecutive_failures(
    history: Sequence[PreviousWeekPerformance],
    current_weight: float,
    min_reps: int,
) -> int:
    """Count the trailing run of weeks below min_reps at the current weight.

    Args:
        history: Performances, newest first
        current_weight: Working weight the run must have been lifted at
        min_reps: Bottom of the rep range

    Returns:
        Number of consecutive weeks, newest first, that fell short of min_reps
    """
    failures = 0
    for performance in history:
        if performance.actual_weight != current_weight:
            break
        if performance.actual_reps >= min_reps:
            break
        failures += 1
    return failures
