"""Database models for plans, mesocycles, workouts and sets.

Mesocycle, Workout and WorkoutSet carry a `version` column used as the
SQLAlchemy version counter: an UPDATE whose version no longer matches the
row raises StaleDataError, which the repository layer reports as a conflict.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""


class Exercise(Base):
    """Exercise library entry.

    Schema:
    - id: UUID primary key
    - name: Exercise name (e.g. "Bench Press")
    - weight_increment: Load added on each successful progression step (lbs)
    - is_custom: Whether the user created this exercise
    """

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    weight_increment: Mapped[float] = mapped_column(Float, nullable=False, default=5.0)
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)


class Plan(Base):
    """Training plan template.

    duration_weeks counts training weeks only; a mesocycle built from the plan
    appends one deload week at the end.
    """

    __tablename__ = "plans"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    duration_weeks: Mapped[int] = mapped_column(Integer, nullable=False, default=6)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class PlanDay(Base):
    """One training day of a plan.

    day_of_week follows date.weekday(): 0 = Monday ... 6 = Sunday.
    """

    __tablename__ = "plan_days"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    plan_id: Mapped[str] = mapped_column(String, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PlanDayExercise(Base):
    """Exercise prescription on a plan day.

    Holds the baseline the progression engine starts from: sets, reps and
    weight for week 1 plus the rep range double progression moves within.
    """

    __tablename__ = "plan_day_exercises"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    plan_day_id: Mapped[str] = mapped_column(
        String, ForeignKey("plan_days.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercises.id"), nullable=False, index=True)
    sets: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=8)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=30.0)
    rest_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_reps: Mapped[int] = mapped_column(Integer, nullable=False, default=8)
    max_reps: Mapped[int] = mapped_column(Integer, nullable=False, default=12)

    __table_args__ = (UniqueConstraint("plan_day_id", "exercise_id", name="uq_plan_day_exercise"),)


class Mesocycle(Base):
    """One training block built from a plan.

    Schema:
    - current_week: 1-based week counter, advanced by the scheduler
    - total_weeks: plan training weeks + 1 deload week
    - status: active, completed, cancelled

    Constraints:
    - At most one active mesocycle per plan (partial unique index)
    """

    __tablename__ = "mesocycles"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    plan_id: Mapped[str] = mapped_column(String, ForeignKey("plans.id"), nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    current_week: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_weeks: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index(
            "uq_mesocycles_active_plan",
            "plan_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )


class Workout(Base):
    """One scheduled training day of a mesocycle.

    Status: pending, in_progress, completed, skipped.
    """

    __tablename__ = "workouts"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    mesocycle_id: Mapped[str] = mapped_column(
        String, ForeignKey("mesocycles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    plan_day_id: Mapped[str] = mapped_column(String, ForeignKey("plan_days.id"), nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    started_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (Index("idx_workouts_mesocycle_week", "mesocycle_id", "week_number"),)


class WorkoutSet(Base):
    """One prescribed set of one exercise within a workout.

    actual_reps and actual_weight are set iff status == "completed".
    """

    __tablename__ = "workout_sets"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    workout_id: Mapped[str] = mapped_column(
        String, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercises.id"), nullable=False)
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    target_reps: Mapped[int] = mapped_column(Integer, nullable=False)
    target_weight: Mapped[float] = mapped_column(Float, nullable=False)
    actual_reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    actual_weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (UniqueConstraint("workout_id", "exercise_id", "set_number", name="uq_workout_set_number"),)


class WeekTargetRecord(Base):
    """Persisted WeekTargets for one plan exercise in one mesocycle week.

    adjusted_sets records a set count changed mid-workout (add/remove set);
    later weeks start from the most recent adjustment instead of the plan's
    base sets.
    """

    __tablename__ = "week_targets"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    mesocycle_id: Mapped[str] = mapped_column(
        String, ForeignKey("mesocycles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    plan_day_exercise_id: Mapped[str] = mapped_column(
        String, ForeignKey("plan_day_exercises.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercises.id"), nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    target_weight: Mapped[float] = mapped_column(Float, nullable=False)
    target_reps: Mapped[int] = mapped_column(Integer, nullable=False)
    target_sets: Mapped[int] = mapped_column(Integer, nullable=False)
    is_deload: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    consecutive_failures: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reason: Mapped[str] = mapped_column(String, nullable=False)
    adjusted_sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        UniqueConstraint("mesocycle_id", "plan_day_exercise_id", "week_number", name="uq_week_targets_week"),
    )
