"""Request and result types for mesocycle modifications.

Plan edits are described as an explicit diff of a plan day's exercises and
applied to a running mesocycle; set-count edits report the resulting count.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ModifySetCountResult(BaseModel):
    """Outcome of adding or removing a set mid-workout.

    Attributes:
        workout_id: Workout that was modified
        exercise_id: Exercise whose set count changed
        week_number: Mesocycle week of the workout
        action: Whether a set was added or removed
        workout_set_id: ID of the set that was added or removed
        set_count: Sets the exercise has in the workout after the change
    """

    workout_id: str
    exercise_id: str
    week_number: int
    action: Literal["add", "remove"]
    workout_set_id: str
    set_count: int


class PlanExerciseParams(BaseModel):
    """Prescription of one exercise on a plan day."""

    plan_day_exercise_id: str
    exercise_id: str
    sets: int
    reps: int
    weight: float
    rest_seconds: int
    min_reps: int
    max_reps: int


class ExerciseChanges(BaseModel):
    """Fields that changed on a plan day exercise; None = unchanged."""

    sets: int | None = None
    reps: int | None = None
    weight: float | None = None
    rest_seconds: int | None = None
    min_reps: int | None = None
    max_reps: int | None = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class ModifiedExercise(BaseModel):
    plan_day_exercise_id: str
    exercise_id: str
    changes: ExerciseChanges


class PlanDayExerciseDiff(BaseModel):
    """Difference between two versions of a plan day's exercise list.

    Exercises are matched by exercise_id.
    """

    plan_day_id: str
    added_exercises: list[PlanExerciseParams] = Field(default_factory=list)
    removed_exercises: list[PlanExerciseParams] = Field(default_factory=list)
    modified_exercises: list[ModifiedExercise] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added_exercises or self.removed_exercises or self.modified_exercises)


class ApplyDiffResult(BaseModel):
    """Summary of applying a plan day diff to a mesocycle.

    Attributes:
        affected_workout_count: Pending workouts whose sets were touched
        added_sets_count: Sets created
        removed_sets_count: Sets deleted
        modified_sets_count: Pending sets whose targets were rewritten
        preserved_count: Logged sets kept although their exercise was removed
        warnings: Human-readable notes about preserved data
    """

    affected_workout_count: int = 0
    added_sets_count: int = 0
    removed_sets_count: int = 0
    modified_sets_count: int = 0
    preserved_count: int = 0
    warnings: list[str] = Field(default_factory=list)
