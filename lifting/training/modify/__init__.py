"""MODIFY → mesocycle module.

Database-backed operations on a running training block: starting and
advancing mesocycles, workout and set transitions by id, set-count edits,
and applying plan edits to the current week.
"""

from lifting.training.modify.service import (
    add_set_to_exercise,
    advance_mesocycle_week,
    apply_diff_to_mesocycle,
    cancel_mesocycle,
    complete_mesocycle,
    complete_workout,
    diff_plan_day_exercises,
    log_workout_set,
    remove_set_from_exercise,
    skip_workout,
    skip_workout_set,
    start_mesocycle,
    start_workout,
    sync_mesocycle_to_date,
    unlog_workout_set,
)
from lifting.training.modify.types import ApplyDiffResult, ModifySetCountResult, PlanDayExerciseDiff

__all__ = [
    "ApplyDiffResult",
    "ModifySetCountResult",
    "PlanDayExerciseDiff",
    "add_set_to_exercise",
    "advance_mesocycle_week",
    "apply_diff_to_mesocycle",
    "cancel_mesocycle",
    "complete_mesocycle",
    "complete_workout",
    "diff_plan_day_exercises",
    "log_workout_set",
    "remove_set_from_exercise",
    "skip_workout",
    "skip_workout_set",
    "start_mesocycle",
    "start_workout",
    "sync_mesocycle_to_date",
    "unlog_workout_set",
]
