"""Training module - strength progression and workout/mesocycle lifecycles.

This module provides:
- The progression engine (week-over-week weight/rep/set targets)
- Performance projection from logged sets
- Guarded lifecycle transitions for workouts, sets and mesocycles

Database orchestration lives in lifting.training.modify.
"""

from lifting.training.errors import (
    ConflictError,
    InvalidPerformanceError,
    InvalidProfileError,
    InvalidTransitionError,
    NotFoundError,
    TrainingError,
    ValidationError,
)
from lifting.training.performance import build_previous_week_performance, count_consecutive_failures
from lifting.training.progression import compute_week_targets, is_deload_week, project_block, validate_profile
from lifting.training.set_book import SetBook
from lifting.training.types import (
    ExerciseProgressionProfile,
    PreviousWeekPerformance,
    ProgressionPolicy,
    WeekTargets,
)

__all__ = [
    "ConflictError",
    "ExerciseProgressionProfile",
    "InvalidPerformanceError",
    "InvalidProfileError",
    "InvalidTransitionError",
    "NotFoundError",
    "PreviousWeekPerformance",
    "ProgressionPolicy",
    "SetBook",
    "TrainingError",
    "ValidationError",
    "WeekTargets",
    "build_previous_week_performance",
    "compute_week_targets",
    "count_consecutive_failures",
    "is_deload_week",
    "project_block",
    "validate_profile",
]
