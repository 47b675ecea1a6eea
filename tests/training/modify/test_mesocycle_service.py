"""Tests for mesocycle orchestration against the database.

Tests that the service:
- Creates a block's workouts, week 1 targets and week 1 sets
- Advances weeks through the progression engine
- Carries mid-workout set-count changes into later weeks, except from deload weeks
- Refuses to start workouts of weeks that have not begun
- Translates missing rows and concurrent writes into typed errors
"""

from datetime import date

import pytest
from sqlalchemy import select, update

from lifting.db.models import Mesocycle, Plan, WeekTargetRecord, Workout, WorkoutSet
from lifting.training.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from lifting.training.modify import repository, service
from lifting.training.modify.service import (
    add_set_to_exercise,
    advance_mesocycle_week,
    cancel_mesocycle,
    complete_mesocycle,
    complete_workout,
    log_workout_set,
    remove_set_from_exercise,
    skip_workout,
    skip_workout_set,
    start_mesocycle,
    start_workout,
    sync_mesocycle_to_date,
    unlog_workout_set,
)
from lifting.training.performance import count_consecutive_failures
from lifting.training.types import ProgressionPolicy

START = date(2024, 3, 4)
POLICY = ProgressionPolicy()


@pytest.fixture
def mesocycle(db_session, seeded_plan) -> Mesocycle:
    return start_mesocycle(db_session, seeded_plan.plan.id, START, policy=POLICY)


def _workout(db_session, mesocycle, seeded_plan, week_number: int) -> Workout:
    workout = repository.find_workout(db_session, mesocycle.id, seeded_plan.day.id, week_number)
    assert workout is not None
    return workout


def _sets(db_session, workout, exercise_id: str) -> list[WorkoutSet]:
    return [s for s in repository.list_workout_sets(db_session, workout.id) if s.exercise_id == exercise_id]


def _log_all(db_session, workout, exercise_id: str, reps: int, weight: float) -> None:
    for workout_set in _sets(db_session, workout, exercise_id):
        log_workout_set(db_session, workout_set.id, reps, weight)


def test_start_mesocycle_creates_block(db_session, seeded_plan, mesocycle):
    assert mesocycle.status == "active"
    assert mesocycle.current_week == 1
    assert mesocycle.total_weeks == 3
    assert mesocycle.version == 1

    workouts = repository.list_workouts(db_session, mesocycle.id)
    assert [w.week_number for w in workouts] == [1, 2, 3]
    assert [w.scheduled_date for w in workouts] == [date(2024, 3, 4), date(2024, 3, 11), date(2024, 3, 18)]
    assert all(w.status == "pending" for w in workouts)

    week_1 = workouts[0]
    bench_sets = _sets(db_session, week_1, seeded_plan.bench.id)
    row_sets = _sets(db_session, week_1, seeded_plan.row.id)
    assert [(s.set_number, s.target_reps, s.target_weight) for s in bench_sets] == [
        (1, 8, 100.0),
        (2, 8, 100.0),
        (3, 8, 100.0),
    ]
    assert len(row_sets) == 2
    assert repository.list_workout_sets(db_session, workouts[1].id) == []

    records = repository.list_week_target_records(db_session, mesocycle.id, 1)
    assert {r.exercise_id: r.reason for r in records} == {
        seeded_plan.bench.id: "first_week",
        seeded_plan.row.id: "first_week",
    }


def test_start_mesocycle_unknown_plan(db_session):
    with pytest.raises(NotFoundError):
        start_mesocycle(db_session, "missing-plan", START, policy=POLICY)


def test_start_mesocycle_plan_without_days(db_session):
    plan = Plan(name="Empty", duration_weeks=4)
    db_session.add(plan)
    db_session.flush()

    with pytest.raises(ValidationError):
        start_mesocycle(db_session, plan.id, START, policy=POLICY)


def test_second_active_mesocycle_for_plan_rejected(db_session, seeded_plan, mesocycle):
    with pytest.raises(ConflictError):
        start_mesocycle(db_session, seeded_plan.plan.id, START, policy=POLICY)


def test_active_mesocycle_unique_index_reports_conflict(db_session, seeded_plan, mesocycle):
    db_session.add(
        Mesocycle(
            plan_id=seeded_plan.plan.id,
            start_date=START,
            current_week=1,
            total_weeks=3,
            status="active",
        )
    )

    with pytest.raises(ConflictError):
        repository.flush_changes(db_session, "insert duplicate mesocycle")


def test_new_mesocycle_allowed_after_cancel(db_session, seeded_plan, mesocycle):
    cancel_mesocycle(db_session, mesocycle.id)

    second = start_mesocycle(db_session, seeded_plan.plan.id, date(2024, 4, 1), policy=POLICY)

    assert second.status == "active"
    assert second.id != mesocycle.id


def test_complete_cancelled_mesocycle_rejected(db_session, mesocycle):
    cancel_mesocycle(db_session, mesocycle.id)

    with pytest.raises(ValidationError, match="Mesocycle is not active"):
        complete_mesocycle(db_session, mesocycle.id)

    assert mesocycle.status == "cancelled"


def test_complete_mesocycle(db_session, mesocycle):
    complete_mesocycle(db_session, mesocycle.id)

    assert mesocycle.status == "completed"
    assert repository.find_active_mesocycle(db_session, mesocycle.plan_id) is None


def test_advance_week_runs_progression(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)
    _log_all(db_session, week_1, seeded_plan.bench.id, 8, 100.0)
    _log_all(db_session, week_1, seeded_plan.row.id, 8, 60.0)
    complete_workout(db_session, week_1.id)

    targets = advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    by_exercise = {t.exercise_id: t for t in targets}
    bench = by_exercise[seeded_plan.bench.id]
    row = by_exercise[seeded_plan.row.id]
    assert (bench.target_weight, bench.target_reps, bench.target_sets, bench.reason) == (105.0, 8, 3, "hit_target")
    assert (row.target_weight, row.target_reps, row.target_sets, row.reason) == (60.0, 10, 2, "hold")
    assert row.consecutive_failures == 1
    assert mesocycle.current_week == 2

    week_2 = _workout(db_session, mesocycle, seeded_plan, 2)
    bench_sets = _sets(db_session, week_2, seeded_plan.bench.id)
    assert [(s.target_weight, s.target_reps, s.status) for s in bench_sets] == [(105.0, 8, "pending")] * 3
    assert len(_sets(db_session, week_2, seeded_plan.row.id)) == 2


def test_advance_into_deload_week(db_session, seeded_plan, mesocycle):
    advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    targets = advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    by_exercise = {t.exercise_id: t for t in targets}
    bench = by_exercise[seeded_plan.bench.id]
    row = by_exercise[seeded_plan.row.id]
    assert bench.is_deload is True
    assert (bench.target_weight, bench.target_sets, bench.reason) == (100.0, 2, "deload")
    assert (row.target_weight, row.target_sets) == (60.0, 1)
    assert row.consecutive_failures == 2


def test_unlogged_week_counts_as_miss(db_session, seeded_plan, mesocycle):
    targets = advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    assert {t.reason for t in targets} == {"hold"}
    assert {t.consecutive_failures for t in targets} == {1}


def test_advance_past_final_week_rejected(db_session, mesocycle):
    advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)
    advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    with pytest.raises(InvalidTransitionError):
        advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    assert mesocycle.current_week == 3


def test_sync_advances_to_calendar_week(db_session, mesocycle):
    started = sync_mesocycle_to_date(db_session, mesocycle.id, date(2024, 3, 18), policy=POLICY)

    assert started == [2, 3]
    assert mesocycle.current_week == 3
    assert sync_mesocycle_to_date(db_session, mesocycle.id, date(2024, 3, 20), policy=POLICY) == []


def test_sync_inactive_mesocycle_rejected(db_session, mesocycle):
    complete_mesocycle(db_session, mesocycle.id)

    with pytest.raises(ValidationError):
        sync_mesocycle_to_date(db_session, mesocycle.id, date(2024, 3, 18), policy=POLICY)


def test_add_set_carries_into_following_weeks(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)

    result = add_set_to_exercise(db_session, week_1.id, seeded_plan.bench.id)

    assert result.action == "add"
    assert result.set_count == 4
    assert result.week_number == 1
    added = db_session.get(WorkoutSet, result.workout_set_id)
    assert (added.set_number, added.target_weight, added.target_reps, added.status) == (4, 100.0, 8, "pending")

    record = repository.get_week_target_record(db_session, mesocycle.id, seeded_plan.bench_pde.id, 1)
    assert record.adjusted_sets == 4

    targets = advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    bench = next(t for t in targets if t.exercise_id == seeded_plan.bench.id)
    assert bench.target_sets == 4
    week_2 = _workout(db_session, mesocycle, seeded_plan, 2)
    assert len(_sets(db_session, week_2, seeded_plan.bench.id)) == 4


def test_remove_set_carries_into_following_weeks(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)

    result = remove_set_from_exercise(db_session, week_1.id, seeded_plan.bench.id)

    assert result.action == "remove"
    assert result.set_count == 2
    assert [s.set_number for s in _sets(db_session, week_1, seeded_plan.bench.id)] == [1, 2]

    targets = advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    bench = next(t for t in targets if t.exercise_id == seeded_plan.bench.id)
    assert bench.target_sets == 2


def test_remove_set_keeps_logged_sets(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)
    _log_all(db_session, week_1, seeded_plan.row.id, 10, 60.0)

    with pytest.raises(ValidationError):
        remove_set_from_exercise(db_session, week_1.id, seeded_plan.row.id)

    assert len(_sets(db_session, week_1, seeded_plan.row.id)) == 2


def test_add_set_requires_started_workout(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)

    with pytest.raises(InvalidTransitionError):
        add_set_to_exercise(db_session, week_1.id, seeded_plan.bench.id)

    assert len(_sets(db_session, week_1, seeded_plan.bench.id)) == 3


def test_add_set_for_exercise_not_in_workout(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)

    with pytest.raises(NotFoundError):
        add_set_to_exercise(db_session, week_1.id, "missing-exercise")


def test_add_set_unknown_workout(db_session, seeded_plan, mesocycle):
    with pytest.raises(NotFoundError):
        add_set_to_exercise(db_session, "missing-workout", seeded_plan.bench.id)


def test_set_operations_by_id(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)
    first, second, third = _sets(db_session, week_1, seeded_plan.bench.id)

    log_workout_set(db_session, first.id, 8, 100.0)
    log_workout_set(db_session, second.id, 7, 100.0)
    unlog_workout_set(db_session, second.id)
    skip_workout_set(db_session, third.id)

    assert (first.status, first.actual_reps, first.actual_weight) == ("completed", 8, 100.0)
    assert (second.status, second.actual_reps) == ("pending", None)
    assert (third.status, third.actual_reps) == ("skipped", None)


def test_log_unknown_set(db_session):
    with pytest.raises(NotFoundError):
        log_workout_set(db_session, "missing-set", 8, 100.0)


def test_log_set_on_pending_workout_rejected(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    first = _sets(db_session, week_1, seeded_plan.bench.id)[0]

    with pytest.raises(InvalidTransitionError):
        log_workout_set(db_session, first.id, 8, 100.0)

    assert first.status == "pending"


def test_skip_workout_skips_open_sets(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)
    first = _sets(db_session, week_1, seeded_plan.bench.id)[0]
    log_workout_set(db_session, first.id, 8, 100.0)

    skip_workout(db_session, week_1.id)

    statuses = [s.status for s in repository.list_workout_sets(db_session, week_1.id)]
    assert week_1.status == "skipped"
    assert statuses.count("completed") == 1
    assert statuses.count("skipped") == 4

    with pytest.raises(InvalidTransitionError):
        skip_workout(db_session, week_1.id)


def test_stale_workout_write_is_a_conflict(db_session, seeded_plan, mesocycle):
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    db_session.execute(
        update(Workout)
        .where(Workout.id == week_1.id)
        .values(version=Workout.version + 1)
        .execution_options(synchronize_session=False)
    )

    with pytest.raises(ConflictError):
        start_workout(db_session, week_1.id)


def test_week_targets_persisted_per_week(db_session, seeded_plan, mesocycle):
    advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    weeks = db_session.execute(
        select(WeekTargetRecord.week_number)
        .where(WeekTargetRecord.plan_day_exercise_id == seeded_plan.bench_pde.id)
        .order_by(WeekTargetRecord.week_number)
    ).scalars().all()
    assert weeks == [1, 2]


def test_future_week_workout_cannot_start(db_session, seeded_plan, mesocycle):
    week_2 = _workout(db_session, mesocycle, seeded_plan, 2)

    with pytest.raises(InvalidTransitionError, match="week 2"):
        start_workout(db_session, week_2.id)

    assert week_2.status == "pending"

    advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    assert len(repository.list_workout_sets(db_session, week_2.id)) == 5
    start_workout(db_session, week_2.id)
    assert week_2.status == "in_progress"


def test_set_count_change_on_deload_week_not_carried(db_session, seeded_plan):
    seeded_plan.plan.duration_weeks = 4
    db_session.flush()
    policy = ProgressionPolicy(deload_interval_weeks=2)
    mesocycle = start_mesocycle(db_session, seeded_plan.plan.id, START, policy=policy)
    advance_mesocycle_week(db_session, mesocycle.id, policy=policy)

    week_2 = _workout(db_session, mesocycle, seeded_plan, 2)
    assert len(_sets(db_session, week_2, seeded_plan.bench.id)) == 2
    start_workout(db_session, week_2.id)

    result = remove_set_from_exercise(db_session, week_2.id, seeded_plan.bench.id)

    assert result.set_count == 1
    record = repository.get_week_target_record(db_session, mesocycle.id, seeded_plan.bench_pde.id, 2)
    assert record.is_deload is True
    assert record.adjusted_sets is None

    targets = advance_mesocycle_week(db_session, mesocycle.id, policy=policy)

    bench = next(t for t in targets if t.exercise_id == seeded_plan.bench.id)
    assert bench.is_deload is False
    assert bench.target_sets == 3
    week_3 = _workout(db_session, mesocycle, seeded_plan, 3)
    assert len(_sets(db_session, week_3, seeded_plan.bench.id)) == 3


def test_advance_checks_failure_history(db_session, seeded_plan, mesocycle, monkeypatch):
    calls = []

    def recording_count(history, current_weight, min_reps):
        result = count_consecutive_failures(history, current_weight, min_reps)
        calls.append(([p.week_number for p in history], current_weight, min_reps, result))
        return result

    monkeypatch.setattr(service, "count_consecutive_failures", recording_count)
    week_1 = _workout(db_session, mesocycle, seeded_plan, 1)
    start_workout(db_session, week_1.id)
    _log_all(db_session, week_1, seeded_plan.bench.id, 6, 100.0)
    _log_all(db_session, week_1, seeded_plan.row.id, 10, 60.0)
    complete_workout(db_session, week_1.id)

    advance_mesocycle_week(db_session, mesocycle.id, policy=POLICY)

    assert ([1], 100.0, 8, 1) in calls
    assert ([1], 60.0, 8, 0) in calls
