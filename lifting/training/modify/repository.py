"""Repository functions for mesocycle, workout and set persistence.

Every function takes an explicit Session; committing is the caller's job
(see lifting.db.session.get_session). Lookups by id raise NotFoundError,
and write failures caused by concurrent writers surface as ConflictError.
"""

from typing import TypeVar

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from lifting.db.models import (
    Base,
    Exercise,
    Mesocycle,
    Plan,
    PlanDay,
    PlanDayExercise,
    WeekTargetRecord,
    Workout,
    WorkoutSet,
)
from lifting.training.errors import ConflictError, NotFoundError

EntityT = TypeVar("EntityT", bound=Base)


def _get_or_raise(session: Session, model: type[EntityT], entity_id: str) -> EntityT:
    entity = session.get(model, entity_id)
    if entity is None:
        raise NotFoundError(model.__name__, entity_id)
    return entity


def get_plan(session: Session, plan_id: str) -> Plan:
    return _get_or_raise(session, Plan, plan_id)


def get_mesocycle(session: Session, mesocycle_id: str) -> Mesocycle:
    return _get_or_raise(session, Mesocycle, mesocycle_id)


def get_workout(session: Session, workout_id: str) -> Workout:
    return _get_or_raise(session, Workout, workout_id)


def get_workout_set(session: Session, workout_set_id: str) -> WorkoutSet:
    return _get_or_raise(session, WorkoutSet, workout_set_id)


def get_exercise(session: Session, exercise_id: str) -> Exercise:
    return _get_or_raise(session, Exercise, exercise_id)


def get_plan_day_exercise(session: Session, plan_day_exercise_id: str) -> PlanDayExercise:
    return _get_or_raise(session, PlanDayExercise, plan_day_exercise_id)


def find_plan_day_exercise(session: Session, plan_day_id: str, exercise_id: str) -> PlanDayExercise:
    """Get an exercise's prescription on a plan day.

    Raises:
        NotFoundError: If the exercise is not on the plan day
    """
    plan_exercise = session.execute(
        select(PlanDayExercise).where(
            PlanDayExercise.plan_day_id == plan_day_id,
            PlanDayExercise.exercise_id == exercise_id,
        )
    ).scalar_one_or_none()
    if plan_exercise is None:
        raise NotFoundError("Exercise", exercise_id)
    return plan_exercise


def list_plan_days(session: Session, plan_id: str) -> list[PlanDay]:
    query = select(PlanDay).where(PlanDay.plan_id == plan_id).order_by(PlanDay.sort_order, PlanDay.day_of_week)
    return list(session.execute(query).scalars().all())


def list_plan_day_exercises(session: Session, plan_day_id: str) -> list[PlanDayExercise]:
    query = (
        select(PlanDayExercise)
        .where(PlanDayExercise.plan_day_id == plan_day_id)
        .order_by(PlanDayExercise.sort_order)
    )
    return list(session.execute(query).scalars().all())


def find_active_mesocycle(session: Session, plan_id: str) -> Mesocycle | None:
    query = select(Mesocycle).where(Mesocycle.plan_id == plan_id, Mesocycle.status == "active")
    return session.execute(query).scalar_one_or_none()


def list_active_mesocycles(session: Session) -> list[Mesocycle]:
    query = select(Mesocycle).where(Mesocycle.status == "active").order_by(Mesocycle.start_date)
    return list(session.execute(query).scalars().all())


def list_workouts(
    session: Session,
    mesocycle_id: str,
    *,
    week_number: int | None = None,
    plan_day_id: str | None = None,
) -> list[Workout]:
    """List a mesocycle's workouts ordered by week and date.

    Args:
        session: Database session
        mesocycle_id: Mesocycle ID
        week_number: Optional week filter
        plan_day_id: Optional plan day filter

    Returns:
        Matching workouts
    """
    query = select(Workout).where(Workout.mesocycle_id == mesocycle_id)
    if week_number is not None:
        query = query.where(Workout.week_number == week_number)
    if plan_day_id is not None:
        query = query.where(Workout.plan_day_id == plan_day_id)
    query = query.order_by(Workout.week_number, Workout.scheduled_date)
    return list(session.execute(query).scalars().all())


def find_workout(session: Session, mesocycle_id: str, plan_day_id: str, week_number: int) -> Workout | None:
    workouts = list_workouts(session, mesocycle_id, week_number=week_number, plan_day_id=plan_day_id)
    return workouts[0] if workouts else None


def list_workout_sets(session: Session, workout_id: str) -> list[WorkoutSet]:
    query = (
        select(WorkoutSet)
        .where(WorkoutSet.workout_id == workout_id)
        .order_by(WorkoutSet.exercise_id, WorkoutSet.set_number)
    )
    return list(session.execute(query).scalars().all())


def get_week_target_record(
    session: Session,
    mesocycle_id: str,
    plan_day_exercise_id: str,
    week_number: int,
) -> WeekTargetRecord | None:
    query = select(WeekTargetRecord).where(
        WeekTargetRecord.mesocycle_id == mesocycle_id,
        WeekTargetRecord.plan_day_exercise_id == plan_day_exercise_id,
        WeekTargetRecord.week_number == week_number,
    )
    return session.execute(query).scalar_one_or_none()


def list_week_target_records(session: Session, mesocycle_id: str, week_number: int) -> list[WeekTargetRecord]:
    query = select(WeekTargetRecord).where(
        WeekTargetRecord.mesocycle_id == mesocycle_id,
        WeekTargetRecord.week_number == week_number,
    )
    return list(session.execute(query).scalars().all())


def latest_adjusted_sets(
    session: Session,
    mesocycle_id: str,
    plan_day_exercise_id: str,
    before_week: int,
) -> int | None:
    """Most recent mid-workout set count for a plan exercise before a week.

    Returns:
        The adjusted set count, or None if sets were never added or removed
    """
    query = (
        select(WeekTargetRecord.adjusted_sets)
        .where(
            WeekTargetRecord.mesocycle_id == mesocycle_id,
            WeekTargetRecord.plan_day_exercise_id == plan_day_exercise_id,
            WeekTargetRecord.week_number < before_week,
            WeekTargetRecord.adjusted_sets.is_not(None),
        )
        .order_by(WeekTargetRecord.week_number.desc())
        .limit(1)
    )
    return session.execute(query).scalar_one_or_none()


def delete_workout_set(session: Session, workout_set: WorkoutSet) -> None:
    session.delete(workout_set)


def flush_changes(session: Session, action: str) -> None:
    """Flush pending writes, reporting concurrent-write failures as conflicts.

    Args:
        session: Database session
        action: Short description of the operation, used in logs and errors

    Raises:
        ConflictError: If a versioned row changed underneath this session or a
            uniqueness constraint (e.g. one active mesocycle per plan) was violated
    """
    try:
        session.flush()
    except StaleDataError as e:
        logger.warning("Concurrent modification detected", action=action, error=str(e))
        raise ConflictError(f"Concurrent modification while trying to {action}; reload and retry") from e
    except IntegrityError as e:
        logger.warning("Integrity conflict", action=action, error=str(e.orig))
        raise ConflictError(f"Conflicting write while trying to {action}") from e


def save_entity(session: Session, entity: EntityT, action: str) -> EntityT:
    """Add an entity and flush it so generated ids are available."""
    session.add(entity)
    flush_changes(session, action)
    return entity
