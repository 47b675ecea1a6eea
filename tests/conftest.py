"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from contextlib import contextmanager
from dataclasses import dataclass

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from lifting.db.models import Base, Exercise, Plan, PlanDay, PlanDayExercise
from lifting.training.types import ExerciseProgressionProfile


def _set_sqlite_pragma(dbapi_connection, _connection_record):
    """Enable foreign key constraints in SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(scope="function")
def db_session(monkeypatch):
    """
    Provides a transactional in-memory SQLite DB session for tests.

    This fixture:
    - Creates an isolated in-memory SQLite database per test
    - Patches the engine getter and get_session() to use it
    - Rolls the outer transaction back on teardown

    Usage:
        def test_something(db_session):
            db_session.add(Plan(name="Upper/Lower"))
            db_session.flush()
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragma)

    def mock_get_engine():
        return engine

    monkeypatch.setattr("lifting.db.session._get_engine", mock_get_engine)
    monkeypatch.setattr("lifting.db.session.get_engine", mock_get_engine)

    Base.metadata.create_all(engine)

    connection = engine.connect()
    transaction = connection.begin()

    test_session_local = sessionmaker(bind=connection, autocommit=False, autoflush=False)
    session = test_session_local()

    @contextmanager
    def mock_get_session():
        yield session

    monkeypatch.setattr("lifting.db.session.get_session", mock_get_session)

    try:
        yield session
    finally:
        session.rollback()
        if transaction.is_active:
            transaction.rollback()
        session.close()
        connection.close()
        engine.dispose()


@dataclass
class SeededPlan:
    """A two-week plan with one Monday training day and two exercises."""

    plan: Plan
    day: PlanDay
    bench: Exercise
    bench_pde: PlanDayExercise
    row: Exercise
    row_pde: PlanDayExercise


def seed_plan(session: Session, *, duration_weeks: int = 2) -> SeededPlan:
    """Insert a plan (bench 3x8 @ 100, row 2x10 @ 60) and flush it."""
    plan = Plan(name="Upper", duration_weeks=duration_weeks)
    bench = Exercise(name="Bench Press", weight_increment=5.0)
    row = Exercise(name="Barbell Row", weight_increment=2.5)
    session.add_all([plan, bench, row])
    session.flush()

    day = PlanDay(plan_id=plan.id, day_of_week=0, name="Monday", sort_order=0)
    session.add(day)
    session.flush()

    bench_pde = PlanDayExercise(
        plan_day_id=day.id,
        exercise_id=bench.id,
        sets=3,
        reps=8,
        weight=100.0,
        rest_seconds=90,
        sort_order=0,
        min_reps=8,
        max_reps=12,
    )
    row_pde = PlanDayExercise(
        plan_day_id=day.id,
        exercise_id=row.id,
        sets=2,
        reps=10,
        weight=60.0,
        rest_seconds=60,
        sort_order=1,
        min_reps=8,
        max_reps=12,
    )
    session.add_all([bench_pde, row_pde])
    session.flush()

    return SeededPlan(plan=plan, day=day, bench=bench, bench_pde=bench_pde, row=row, row_pde=row_pde)


@pytest.fixture
def seeded_plan(db_session) -> SeededPlan:
    return seed_plan(db_session)


@pytest.fixture
def bench_profile() -> ExerciseProgressionProfile:
    """Profile matching the bench press prescription used across tests."""
    return ExerciseProgressionProfile(
        exercise_id="bench",
        plan_exercise_id="bench-pde",
        base_weight=135.0,
        base_reps=10,
        base_sets=3,
        weight_increment=5.0,
        min_reps=8,
        max_reps=12,
    )
