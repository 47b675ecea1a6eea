"""Mesocycle orchestration: start, advance, and modify a running block.

The functions here load entities through the repository, run the pure
lifecycle and progression code on them, and flush the result. They never
commit; wrap calls in lifting.db.session.get_session() to get one
transaction per operation.

Set rows exist only for weeks that have started. Starting a mesocycle
creates every workout of the block plus week 1's targets and sets; each
week advance derives the finished week's performance, runs the progression
engine, and creates the new week's targets and sets.
"""

from collections.abc import Sequence
from datetime import date

from loguru import logger
from sqlalchemy.orm import Session

from lifting.config.settings import settings
from lifting.db.models import Mesocycle, PlanDayExercise, WeekTargetRecord, Workout, WorkoutSet
from lifting.training import mesocycle_lifecycle, workout_lifecycle
from lifting.training.errors import ConflictError, InvalidTransitionError, NotFoundError
from lifting.training.modify import repository
from lifting.training.modify.types import (
    ApplyDiffResult,
    ExerciseChanges,
    ModifiedExercise,
    ModifySetCountResult,
    PlanDayExerciseDiff,
    PlanExerciseParams,
)
from lifting.training.modify.validators import (
    validate_diff,
    validate_mesocycle_active,
    validate_plan_has_days,
    validate_workout_in_mesocycle,
)
from lifting.training.performance import build_previous_week_performance, count_consecutive_failures
from lifting.training.progression import compute_week_targets, is_deload_week
from lifting.training.set_book import SetBook
from lifting.training.types import (
    ExerciseProgressionProfile,
    PreviousWeekPerformance,
    ProgressionPolicy,
    WeekTargets,
)

_DIFF_FIELDS = ("sets", "reps", "weight", "rest_seconds", "min_reps", "max_reps")


def _record_from_targets(mesocycle_id: str, targets: WeekTargets) -> WeekTargetRecord:
    return WeekTargetRecord(
        mesocycle_id=mesocycle_id,
        plan_day_exercise_id=targets.plan_exercise_id,
        exercise_id=targets.exercise_id,
        week_number=targets.week_number,
        target_weight=targets.target_weight,
        target_reps=targets.target_reps,
        target_sets=targets.target_sets,
        is_deload=targets.is_deload,
        consecutive_failures=targets.consecutive_failures,
        reason=targets.reason,
    )


def _create_sets(session: Session, workout: Workout, targets: WeekTargets) -> list[WorkoutSet]:
    sets = [
        WorkoutSet(
            workout_id=workout.id,
            exercise_id=targets.exercise_id,
            set_number=set_number,
            target_reps=targets.target_reps,
            target_weight=targets.target_weight,
            actual_reps=None,
            actual_weight=None,
            status="pending",
        )
        for set_number in range(1, targets.target_sets + 1)
    ]
    session.add_all(sets)
    return sets


def _profile_for(
    session: Session,
    mesocycle: Mesocycle,
    plan_exercise: PlanDayExercise,
    week_number: int,
) -> ExerciseProgressionProfile:
    exercise = repository.get_exercise(session, plan_exercise.exercise_id)
    base_sets = repository.latest_adjusted_sets(session, mesocycle.id, plan_exercise.id, week_number)
    return ExerciseProgressionProfile.from_plan_exercise(plan_exercise, exercise, base_sets=base_sets)


def start_mesocycle(
    session: Session,
    plan_id: str,
    start_date: date,
    *,
    policy: ProgressionPolicy | None = None,
) -> Mesocycle:
    """Start a training block from a plan.

    Creates the mesocycle, one workout per plan day per week, and week 1's
    targets and sets.

    Args:
        session: Database session
        plan_id: Plan to build the block from
        start_date: First day of week 1
        policy: Progression constants (defaults to application settings)

    Returns:
        The new active Mesocycle

    Raises:
        NotFoundError: If the plan does not exist
        ValidationError: If the plan has no training days
        ConflictError: If the plan already has an active mesocycle
    """
    policy = policy or ProgressionPolicy.from_settings()
    plan = repository.get_plan(session, plan_id)
    days = repository.list_plan_days(session, plan.id)
    validate_plan_has_days(plan, days)

    existing = repository.find_active_mesocycle(session, plan.id)
    if existing is not None:
        logger.warning("Plan already has an active mesocycle", plan_id=plan.id, mesocycle_id=existing.id)
        raise ConflictError(f"Plan {plan.id} already has an active mesocycle ({existing.id})")

    training_weeks = plan.duration_weeks or settings.default_training_weeks
    mesocycle = mesocycle_lifecycle.new_mesocycle(plan, start_date, training_weeks + 1)
    repository.save_entity(session, mesocycle, "start mesocycle")

    workouts_by_week: dict[tuple[int, str], Workout] = {}
    for week_number in range(1, mesocycle.total_weeks + 1):
        for day in days:
            workout = Workout(
                mesocycle_id=mesocycle.id,
                plan_day_id=day.id,
                week_number=week_number,
                scheduled_date=mesocycle_lifecycle.scheduled_date_for(start_date, week_number, day.day_of_week),
                status="pending",
            )
            session.add(workout)
            workouts_by_week[(week_number, day.id)] = workout
    repository.flush_changes(session, "create workouts")

    deload = is_deload_week(1, mesocycle.total_weeks, policy.deload_interval_weeks)
    set_count = 0
    for day in days:
        workout = workouts_by_week[(1, day.id)]
        for plan_exercise in repository.list_plan_day_exercises(session, day.id):
            profile = _profile_for(session, mesocycle, plan_exercise, 1)
            targets = compute_week_targets(profile, 1, None, deload, policy=policy)
            session.add(_record_from_targets(mesocycle.id, targets))
            set_count += len(_create_sets(session, workout, targets))
    repository.flush_changes(session, "create week 1 sets")

    logger.info(
        "Mesocycle started",
        mesocycle_id=mesocycle.id,
        plan_id=plan.id,
        total_weeks=mesocycle.total_weeks,
        workouts=len(workouts_by_week),
        week_1_sets=set_count,
    )
    return mesocycle


def _performance_history(
    session: Session,
    mesocycle: Mesocycle,
    plan_day_id: str,
    plan_exercise_id: str,
    latest: PreviousWeekPerformance,
) -> list[PreviousWeekPerformance]:
    """Weekly performances of one plan exercise, newest first, ending at latest."""
    history = [latest]
    for week_number in range(latest.week_number - 1, 0, -1):
        record = repository.get_week_target_record(session, mesocycle.id, plan_exercise_id, week_number)
        if record is None:
            break
        workout = repository.find_workout(session, mesocycle.id, plan_day_id, week_number)
        sets = repository.list_workout_sets(session, workout.id) if workout else []
        history.append(build_previous_week_performance(WeekTargets.from_record(record), sets))
    return history


def _warn_if_stalled(
    session: Session,
    mesocycle: Mesocycle,
    plan_day_id: str,
    profile: ExerciseProgressionProfile,
    previous: PreviousWeekPerformance,
    targets: WeekTargets,
    policy: ProgressionPolicy,
) -> None:
    history = _performance_history(session, mesocycle, plan_day_id, profile.plan_exercise_id, previous)
    stalled_weeks = count_consecutive_failures(history, previous.target_weight, profile.min_reps)
    if stalled_weeks >= policy.failure_threshold and targets.reason != "regress":
        logger.warning(
            "Lift stuck below the rep range without a regression",
            mesocycle_id=mesocycle.id,
            exercise_id=profile.exercise_id,
            week_number=targets.week_number,
            stalled_weeks=stalled_weeks,
            reason=targets.reason,
        )


def advance_mesocycle_week(
    session: Session,
    mesocycle_id: str,
    *,
    policy: ProgressionPolicy | None = None,
) -> list[WeekTargets]:
    """Close the current week and prescribe the next one.

    Each plan exercise's finished week is summarised into a
    PreviousWeekPerformance and fed to the progression engine. Exercises with
    no targets in the finished week (added mid-block) start from their base
    values. Sets are created only for workouts of the new week still pending.

    Args:
        session: Database session
        mesocycle_id: Mesocycle to advance
        policy: Progression constants (defaults to application settings)

    Returns:
        The new week's WeekTargets, one per plan exercise

    Raises:
        NotFoundError: If the mesocycle does not exist
        InvalidTransitionError: If the mesocycle is not active or already in its final week
        ConflictError: If the mesocycle changed concurrently
    """
    policy = policy or ProgressionPolicy.from_settings()
    mesocycle = repository.get_mesocycle(session, mesocycle_id)
    finished_week = mesocycle.current_week
    new_week = mesocycle_lifecycle.advance_week(mesocycle)
    deload = is_deload_week(new_week, mesocycle.total_weeks, policy.deload_interval_weeks)

    new_targets: list[WeekTargets] = []
    for day in repository.list_plan_days(session, mesocycle.plan_id):
        finished_workout = repository.find_workout(session, mesocycle.id, day.id, finished_week)
        finished_sets = repository.list_workout_sets(session, finished_workout.id) if finished_workout else []
        workout = repository.find_workout(session, mesocycle.id, day.id, new_week)

        for plan_exercise in repository.list_plan_day_exercises(session, day.id):
            profile = _profile_for(session, mesocycle, plan_exercise, new_week)
            record = repository.get_week_target_record(session, mesocycle.id, plan_exercise.id, finished_week)
            previous = (
                build_previous_week_performance(WeekTargets.from_record(record), finished_sets)
                if record is not None
                else None
            )
            targets = compute_week_targets(profile, new_week, previous, deload, policy=policy)
            if previous is not None:
                _warn_if_stalled(session, mesocycle, day.id, profile, previous, targets, policy)
            session.add(_record_from_targets(mesocycle.id, targets))
            if workout is not None and workout.status == "pending":
                _create_sets(session, workout, targets)
            new_targets.append(targets)

    repository.flush_changes(session, "advance mesocycle week")
    logger.info(
        "Mesocycle week advanced",
        mesocycle_id=mesocycle.id,
        week_number=new_week,
        is_deload=deload,
        exercises=len(new_targets),
    )
    return new_targets


def sync_mesocycle_to_date(
    session: Session,
    mesocycle_id: str,
    on_date: date,
    *,
    policy: ProgressionPolicy | None = None,
) -> list[int]:
    """Advance a mesocycle to the week its calendar implies for a date.

    Returns:
        Weeks that were started, in order (empty if already up to date)

    Raises:
        ValidationError: If the mesocycle is not active
    """
    mesocycle = repository.get_mesocycle(session, mesocycle_id)
    validate_mesocycle_active(mesocycle)
    target_week = mesocycle_lifecycle.week_for_date(mesocycle.start_date, on_date, mesocycle.total_weeks)

    started: list[int] = []
    while mesocycle.current_week < target_week:
        advance_mesocycle_week(session, mesocycle.id, policy=policy)
        started.append(mesocycle.current_week)

    if started:
        logger.info("Mesocycle synced", mesocycle_id=mesocycle.id, on_date=on_date.isoformat(), weeks=started)
    return started


def complete_mesocycle(session: Session, mesocycle_id: str) -> Mesocycle:
    mesocycle = repository.get_mesocycle(session, mesocycle_id)
    mesocycle_lifecycle.complete_mesocycle(mesocycle)
    repository.flush_changes(session, "complete mesocycle")
    return mesocycle


def cancel_mesocycle(session: Session, mesocycle_id: str) -> Mesocycle:
    mesocycle = repository.get_mesocycle(session, mesocycle_id)
    mesocycle_lifecycle.cancel_mesocycle(mesocycle)
    repository.flush_changes(session, "cancel mesocycle")
    return mesocycle


def start_workout(session: Session, workout_id: str) -> Workout:
    """Start a workout of the current or an earlier week.

    Raises:
        NotFoundError: If the workout does not exist
        InvalidTransitionError: If the workout is not pending or its week has
            not started yet (its sets do not exist until the week advance)
    """
    workout = repository.get_workout(session, workout_id)
    mesocycle = repository.get_mesocycle(session, workout.mesocycle_id)
    if workout.week_number > mesocycle.current_week:
        raise InvalidTransitionError(
            "Workout",
            workout.status,
            "start",
            f"Cannot start a week {workout.week_number} workout while the mesocycle is in week "
            f"{mesocycle.current_week}",
        )
    workout_lifecycle.start_workout(workout)
    repository.flush_changes(session, "start workout")
    return workout


def complete_workout(session: Session, workout_id: str) -> Workout:
    workout = repository.get_workout(session, workout_id)
    workout_lifecycle.complete_workout(workout)
    repository.flush_changes(session, "complete workout")
    return workout


def skip_workout(session: Session, workout_id: str) -> Workout:
    workout = repository.get_workout(session, workout_id)
    workout_lifecycle.skip_workout(workout, repository.list_workout_sets(session, workout.id))
    repository.flush_changes(session, "skip workout")
    return workout


def log_workout_set(session: Session, workout_set_id: str, actual_reps: int, actual_weight: float) -> WorkoutSet:
    workout_set = repository.get_workout_set(session, workout_set_id)
    workout = repository.get_workout(session, workout_set.workout_id)
    workout_lifecycle.log_set(workout, workout_set, actual_reps, actual_weight)
    repository.flush_changes(session, "log set")
    return workout_set


def skip_workout_set(session: Session, workout_set_id: str) -> WorkoutSet:
    workout_set = repository.get_workout_set(session, workout_set_id)
    workout = repository.get_workout(session, workout_set.workout_id)
    workout_lifecycle.skip_set(workout, workout_set)
    repository.flush_changes(session, "skip set")
    return workout_set


def unlog_workout_set(session: Session, workout_set_id: str) -> WorkoutSet:
    workout_set = repository.get_workout_set(session, workout_set_id)
    workout = repository.get_workout(session, workout_set.workout_id)
    workout_lifecycle.unlog_set(workout, workout_set)
    repository.flush_changes(session, "unlog set")
    return workout_set


def _week_record_for(session: Session, workout: Workout, exercise_id: str) -> WeekTargetRecord:
    mesocycle = repository.get_mesocycle(session, workout.mesocycle_id)
    validate_workout_in_mesocycle(workout, mesocycle)
    plan_exercise = repository.find_plan_day_exercise(session, workout.plan_day_id, exercise_id)
    record = repository.get_week_target_record(session, mesocycle.id, plan_exercise.id, workout.week_number)
    if record is None:
        raise NotFoundError("WeekTargets", f"{plan_exercise.id}/week-{workout.week_number}")
    return record


def _carry_set_count(record: WeekTargetRecord, set_count: int) -> None:
    """Remember a changed set count so later weeks prescribe it.

    Deload weeks run at reduced volume, so their counts are not carried.
    """
    if record.is_deload:
        logger.debug(
            "Set count change on a deload week not carried forward",
            plan_day_exercise_id=record.plan_day_exercise_id,
            week_number=record.week_number,
            set_count=set_count,
        )
        return
    record.adjusted_sets = set_count


def add_set_to_exercise(session: Session, workout_id: str, exercise_id: str) -> ModifySetCountResult:
    """Add one pending set to an exercise in an in-progress workout.

    The new set copies the week's targets. The exercise's new set count is
    recorded so the following weeks prescribe it too, unless the week is a
    deload week.

    Raises:
        NotFoundError: If the workout, exercise or week targets do not exist
        InvalidTransitionError: If the workout is not in progress
    """
    workout = repository.get_workout(session, workout_id)
    record = _week_record_for(session, workout, exercise_id)
    book = SetBook(repository.list_workout_sets(session, workout.id))

    new_set = workout_lifecycle.add_set(workout, book, exercise_id, WeekTargets.from_record(record))
    session.add(new_set)
    _carry_set_count(record, book.count(exercise_id))
    repository.flush_changes(session, "add set")

    return ModifySetCountResult(
        workout_id=workout.id,
        exercise_id=exercise_id,
        week_number=workout.week_number,
        action="add",
        workout_set_id=new_set.id,
        set_count=book.count(exercise_id),
    )


def remove_set_from_exercise(session: Session, workout_id: str, exercise_id: str) -> ModifySetCountResult:
    """Remove the last pending set of an exercise in an in-progress workout.

    Raises:
        NotFoundError: If the workout, exercise or week targets do not exist
        InvalidTransitionError: If the workout is not in progress
        ValidationError: If no pending set exists or only one set remains
    """
    workout = repository.get_workout(session, workout_id)
    record = _week_record_for(session, workout, exercise_id)
    book = SetBook(repository.list_workout_sets(session, workout.id))

    removed = workout_lifecycle.remove_set(workout, book, exercise_id)
    repository.delete_workout_set(session, removed)
    _carry_set_count(record, book.count(exercise_id))
    repository.flush_changes(session, "remove set")

    return ModifySetCountResult(
        workout_id=workout.id,
        exercise_id=exercise_id,
        week_number=workout.week_number,
        action="remove",
        workout_set_id=removed.id,
        set_count=book.count(exercise_id),
    )


def _params(plan_exercise: PlanDayExercise | PlanExerciseParams) -> PlanExerciseParams:
    if isinstance(plan_exercise, PlanExerciseParams):
        return plan_exercise
    return PlanExerciseParams(
        plan_day_exercise_id=plan_exercise.id,
        exercise_id=plan_exercise.exercise_id,
        sets=plan_exercise.sets,
        reps=plan_exercise.reps,
        weight=plan_exercise.weight,
        rest_seconds=plan_exercise.rest_seconds,
        min_reps=plan_exercise.min_reps,
        max_reps=plan_exercise.max_reps,
    )


def diff_plan_day_exercises(
    plan_day_id: str,
    old_exercises: Sequence[PlanDayExercise | PlanExerciseParams],
    new_exercises: Sequence[PlanDayExercise | PlanExerciseParams],
) -> PlanDayExerciseDiff:
    """Compare two versions of a plan day's exercise list.

    Exercises are matched by exercise_id. A matched exercise is reported as
    modified with only the fields whose values differ.

    Args:
        plan_day_id: Plan day both lists belong to
        old_exercises: Exercises before the edit
        new_exercises: Exercises after the edit

    Returns:
        PlanDayExerciseDiff
    """
    old_by_exercise = {p.exercise_id: p for p in map(_params, old_exercises)}
    new_by_exercise = {p.exercise_id: p for p in map(_params, new_exercises)}

    diff = PlanDayExerciseDiff(plan_day_id=plan_day_id)
    for exercise_id, new in new_by_exercise.items():
        old = old_by_exercise.get(exercise_id)
        if old is None:
            diff.added_exercises.append(new)
            continue
        changed = {field: getattr(new, field) for field in _DIFF_FIELDS if getattr(new, field) != getattr(old, field)}
        if changed:
            diff.modified_exercises.append(
                ModifiedExercise(
                    plan_day_exercise_id=new.plan_day_exercise_id,
                    exercise_id=exercise_id,
                    changes=ExerciseChanges(**changed),
                )
            )

    diff.removed_exercises.extend(old for exercise_id, old in old_by_exercise.items() if exercise_id not in new_by_exercise)

    logger.debug(
        "Plan day diff",
        plan_day_id=plan_day_id,
        added=len(diff.added_exercises),
        removed=len(diff.removed_exercises),
        modified=len(diff.modified_exercises),
    )
    return diff


def _remove_exercise(
    session: Session,
    workout: Workout,
    book: SetBook,
    removed: PlanExerciseParams,
    result: ApplyDiffResult,
) -> bool:
    touched = False
    for workout_set in book.for_exercise(removed.exercise_id):
        if workout_set.status == "completed":
            result.preserved_count += 1
            result.warnings.append(
                f"Kept logged set {workout_set.set_number} of exercise {removed.exercise_id} "
                f"in workout {workout.id} (week {workout.week_number})"
            )
            continue
        book.remove(workout_set)
        repository.delete_workout_set(session, workout_set)
        result.removed_sets_count += 1
        touched = True
    return touched


def _add_exercise(
    session: Session,
    mesocycle: Mesocycle,
    workout: Workout,
    book: SetBook,
    added: PlanExerciseParams,
    policy: ProgressionPolicy,
    result: ApplyDiffResult,
) -> bool:
    if book.count(added.exercise_id) > 0:
        return False

    exercise = repository.get_exercise(session, added.exercise_id)
    profile = ExerciseProgressionProfile(
        exercise_id=added.exercise_id,
        plan_exercise_id=added.plan_day_exercise_id,
        base_weight=added.weight,
        base_reps=added.reps,
        base_sets=added.sets,
        weight_increment=exercise.weight_increment,
        min_reps=added.min_reps,
        max_reps=added.max_reps,
    )
    deload = is_deload_week(workout.week_number, mesocycle.total_weeks, policy.deload_interval_weeks)
    targets = compute_week_targets(profile, workout.week_number, None, deload, policy=policy)

    record = repository.get_week_target_record(session, mesocycle.id, added.plan_day_exercise_id, workout.week_number)
    if record is None:
        session.add(_record_from_targets(mesocycle.id, targets))

    for new_set in _create_sets(session, workout, targets):
        book.add(new_set)
        result.added_sets_count += 1
    return True


def _modify_exercise(
    session: Session,
    mesocycle: Mesocycle,
    workout: Workout,
    book: SetBook,
    modified: ModifiedExercise,
    result: ApplyDiffResult,
) -> bool:
    changes = modified.changes
    pending = [s for s in book.for_exercise(modified.exercise_id) if s.status == "pending"]
    if not pending:
        return False

    record = repository.get_week_target_record(
        session, mesocycle.id, modified.plan_day_exercise_id, workout.week_number
    )
    if record is not None:
        if changes.weight is not None:
            record.target_weight = changes.weight
        if changes.reps is not None:
            record.target_reps = changes.reps

    touched = False
    if changes.weight is not None or changes.reps is not None:
        for workout_set in pending:
            if changes.weight is not None:
                workout_set.target_weight = changes.weight
            if changes.reps is not None:
                workout_set.target_reps = changes.reps
            result.modified_sets_count += 1
        touched = True

    if changes.sets is not None:
        template = pending[-1]
        while book.count(modified.exercise_id) < changes.sets:
            new_set = WorkoutSet(
                workout_id=workout.id,
                exercise_id=modified.exercise_id,
                set_number=book.next_set_number(modified.exercise_id),
                target_reps=template.target_reps,
                target_weight=template.target_weight,
                actual_reps=None,
                actual_weight=None,
                status="pending",
            )
            book.add(new_set)
            session.add(new_set)
            result.added_sets_count += 1
            touched = True
        while book.count(modified.exercise_id) > changes.sets:
            removable = book.last_pending(modified.exercise_id)
            if removable is None:
                result.warnings.append(
                    f"Could not reduce exercise {modified.exercise_id} to {changes.sets} sets "
                    f"in workout {workout.id}: remaining sets are already logged"
                )
                break
            book.remove(removable)
            repository.delete_workout_set(session, removable)
            result.removed_sets_count += 1
            touched = True
        if record is not None:
            record.target_sets = changes.sets
            _carry_set_count(record, book.count(modified.exercise_id))

    return touched


def apply_diff_to_mesocycle(
    session: Session,
    mesocycle_id: str,
    diff: PlanDayExerciseDiff,
    *,
    policy: ProgressionPolicy | None = None,
) -> ApplyDiffResult:
    """Apply a plan day edit to a running mesocycle.

    Only the current week's pending workouts for the plan day are rewritten;
    later weeks pick the edit up from the plan when they start, and past or
    in-progress workouts are left alone. The plan's own PlanDayExercise rows
    must already reflect the edit. Logged sets of a removed exercise are
    kept and reported in warnings.

    Args:
        session: Database session
        mesocycle_id: Active mesocycle to update
        diff: Output of diff_plan_day_exercises
        policy: Progression constants (defaults to application settings)

    Returns:
        ApplyDiffResult summarising what changed

    Raises:
        NotFoundError: If the mesocycle or an added exercise does not exist
        ValidationError: If the mesocycle is not active or the diff is invalid
        ConflictError: If a touched row changed concurrently
    """
    policy = policy or ProgressionPolicy.from_settings()
    mesocycle = repository.get_mesocycle(session, mesocycle_id)
    validate_mesocycle_active(mesocycle)
    validate_diff(diff)

    result = ApplyDiffResult()
    if not diff.has_changes:
        return result

    workouts = [
        w
        for w in repository.list_workouts(
            session, mesocycle.id, week_number=mesocycle.current_week, plan_day_id=diff.plan_day_id
        )
        if w.status == "pending"
    ]
    for workout in workouts:
        book = SetBook(repository.list_workout_sets(session, workout.id))
        touched = False
        for removed in diff.removed_exercises:
            touched = _remove_exercise(session, workout, book, removed, result) or touched
        for added in diff.added_exercises:
            touched = _add_exercise(session, mesocycle, workout, book, added, policy, result) or touched
        for modified in diff.modified_exercises:
            touched = _modify_exercise(session, mesocycle, workout, book, modified, result) or touched
        if touched:
            result.affected_workout_count += 1

    repository.flush_changes(session, "apply plan changes")
    logger.info(
        "Applied plan day diff",
        mesocycle_id=mesocycle.id,
        plan_day_id=diff.plan_day_id,
        affected_workouts=result.affected_workout_count,
        added_sets=result.added_sets_count,
        removed_sets=result.removed_sets_count,
        modified_sets=result.modified_sets_count,
        preserved_sets=result.preserved_count,
    )
    return result
