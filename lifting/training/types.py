"""Canonical types for strength-training progression.

Profiles and performances are immutable inputs to the progression engine;
WeekTargets is its output. Lifecycle statuses are plain string literals so
they round-trip through the database unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from lifting.db.models import Exercise, PlanDayExercise, WeekTargetRecord

MesocycleStatus = Literal["active", "completed", "cancelled"]
WorkoutStatus = Literal["pending", "in_progress", "completed", "skipped"]
SetStatus = Literal["pending", "completed", "skipped"]

# Why the engine produced a given WeekTargets
ProgressionReason = Literal["first_week", "hit_target", "hold", "regress", "deload"]


class ExerciseProgressionProfile(BaseModel):
    """Per-exercise baseline the progression engine works from.

    Attributes:
        exercise_id: Exercise library ID
        plan_exercise_id: PlanDayExercise ID this profile was built from
        base_weight: Week 1 weight, also the floor for every later week
        base_reps: Week 1 reps
        base_sets: Sets per week outside deload weeks
        weight_increment: Load added after a successful week
        min_reps: Bottom of the rep range
        max_reps: Top of the rep range
    """

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    plan_exercise_id: str
    base_weight: float
    base_reps: int
    base_sets: int
    weight_increment: float
    min_reps: int
    max_reps: int

    @classmethod
    def from_plan_exercise(
        cls,
        plan_exercise: PlanDayExercise,
        exercise: Exercise,
        *,
        base_sets: int | None = None,
    ) -> ExerciseProgressionProfile:
        """Build a profile from a plan day exercise and its library entry.

        Args:
            plan_exercise: Plan day prescription (sets, reps, weight, rep range)
            exercise: Exercise library entry (weight increment)
            base_sets: Optional set count overriding the plan's sets

        Returns:
            ExerciseProgressionProfile
        """
        return cls(
            exercise_id=exercise.id,
            plan_exercise_id=plan_exercise.id,
            base_weight=plan_exercise.weight,
            base_reps=plan_exercise.reps,
            base_sets=base_sets if base_sets is not None else plan_exercise.sets,
            weight_increment=exercise.weight_increment,
            min_reps=plan_exercise.min_reps,
            max_reps=plan_exercise.max_reps,
        )


class PreviousWeekPerformance(BaseModel):
    """How one exercise went in one week, derived from that week's sets.

    consecutive_failures is the running miss counter carried into that week,
    not including the week itself.
    """

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    week_number: int
    target_weight: float
    target_reps: int
    actual_weight: float
    actual_reps: int
    hit_target: bool
    consecutive_failures: int = Field(default=0, ge=0)


class WeekTargets(BaseModel):
    """Prescription for one exercise in one week.

    Attributes:
        exercise_id: Exercise library ID
        plan_exercise_id: PlanDayExercise ID
        target_weight: Prescribed weight
        target_reps: Prescribed reps, always within the profile's rep range
        target_sets: Prescribed set count
        week_number: 1-based mesocycle week
        is_deload: Whether this is a deload week
        consecutive_failures: Running miss counter carried into this week
        reason: Progression decision that produced these targets
    """

    model_config = ConfigDict(frozen=True)

    exercise_id: str
    plan_exercise_id: str
    target_weight: float
    target_reps: int
    target_sets: int
    week_number: int
    is_deload: bool = False
    consecutive_failures: int = Field(default=0, ge=0)
    reason: ProgressionReason = "first_week"

    @classmethod
    def from_record(cls, record: WeekTargetRecord) -> WeekTargets:
        """Rebuild WeekTargets from its persisted row."""
        return cls(
            exercise_id=record.exercise_id,
            plan_exercise_id=record.plan_day_exercise_id,
            target_weight=record.target_weight,
            target_reps=record.target_reps,
            target_sets=record.target_sets,
            week_number=record.week_number,
            is_deload=record.is_deload,
            consecutive_failures=record.consecutive_failures,
            reason=record.reason,
        )


class ProgressionPolicy(BaseModel):
    """Tunable constants of the progression algorithm.

    Passed explicitly into the engine so computation never reads settings.
    """

    model_config = ConfigDict(frozen=True)

    failure_threshold: int = Field(default=2, ge=1)
    deload_volume_factor: float = Field(default=0.5, gt=0, le=1)
    deload_interval_weeks: int = Field(default=0, ge=0)

    @classmethod
    def from_settings(cls) -> ProgressionPolicy:
        """Snapshot the progression knobs from application settings."""
        from lifting.config.settings import settings

        return cls(
            failure_threshold=settings.failure_threshold,
            deload_volume_factor=settings.deload_volume_factor,
            deload_interval_weeks=settings.deload_interval_weeks,
        )
