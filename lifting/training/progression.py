"""Progression engine - week-over-week weight/rep prescription.

Pure computation: given an exercise profile and last week's performance,
produce next week's WeekTargets. No I/O, no clock, no settings reads.

Algorithm (double progression with failure-driven regression):
- No previous performance → base weight/reps/sets
- Deload week → one increment lighter, fewer sets, same reps; the previous
  week still moves the failure counter but never causes a regression
- Hit target → add one increment, drop reps to the bottom of the range
- Missed target, below the failure threshold → hold weight, repeat reps
- Missed target, threshold reached → one increment lighter, reps to the top
  of the range, failure counter reset

Weight never drops below the profile's base weight and reps always stay
within [min_reps, max_reps].
"""

import math
from collections.abc import Sequence

from loguru import logger

from lifting.training.errors import InvalidPerformanceError, InvalidProfileError, ValidationError
from lifting.training.types import (
    ExerciseProgressionProfile,
    PreviousWeekPerformance,
    ProgressionPolicy,
    ProgressionReason,
    WeekTargets,
)

DEFAULT_POLICY = ProgressionPolicy()


def validate_profile(profile: ExerciseProgressionProfile) -> None:
    """Validate that a progression profile has usable bounds.

    Args:
        profile: Exercise progression profile

    Raises:
        InvalidProfileError: If the rep range is inverted or empty, the weight
            increment is not positive, the base weight is negative, or the
            base set count is below one
    """
    if profile.min_reps < 1:
        raise InvalidProfileError(f"min_reps must be >= 1, got {profile.min_reps}")
    if profile.min_reps > profile.max_reps:
        raise InvalidProfileError(f"min_reps ({profile.min_reps}) must be <= max_reps ({profile.max_reps})")
    if profile.weight_increment <= 0:
        raise InvalidProfileError(f"weight_increment must be positive, got {profile.weight_increment}")
    if profile.base_weight < 0:
        raise InvalidProfileError(f"base_weight must be non-negative, got {profile.base_weight}")
    if profile.base_sets < 1:
        raise InvalidProfileError(f"base_sets must be >= 1, got {profile.base_sets}")


def is_deload_week(week_number: int, total_weeks: int, interval_weeks: int = 0) -> bool:
    """Decide whether a mesocycle week is a deload week.

    The final week of the block is always a deload week. With a positive
    interval, every Nth week deloads as well.

    Args:
        week_number: 1-based week number
        total_weeks: Total weeks in the block, deload week included
        interval_weeks: Deload cadence (0 = final week only)

    Returns:
        True if the week is a deload week
    """
    if week_number == total_weeks:
        return True
    return interval_weeks > 0 and week_number % interval_weeks == 0


def deload_set_count(base_sets: int, volume_factor: float) -> int:
    """Sets prescribed on a deload week: base sets scaled down, rounded up, min 1."""
    return max(1, math.ceil(base_sets * volume_factor))


def clamp_reps(reps: int, profile: ExerciseProgressionProfile) -> int:
    return max(profile.min_reps, min(profile.max_reps, reps))


def floor_weight(weight: float, profile: ExerciseProgressionProfile) -> float:
    return max(profile.base_weight, weight)


def _targets(
    profile: ExerciseProgressionProfile,
    week_number: int,
    *,
    weight: float,
    reps: int,
    sets: int,
    is_deload: bool,
    consecutive_failures: int,
    reason: ProgressionReason,
) -> WeekTargets:
    return WeekTargets(
        exercise_id=profile.exercise_id,
        plan_exercise_id=profile.plan_exercise_id,
        target_weight=floor_weight(weight, profile),
        target_reps=clamp_reps(reps, profile),
        target_sets=sets,
        week_number=week_number,
        is_deload=is_deload,
        consecutive_failures=consecutive_failures,
        reason=reason,
    )


def compute_week_targets(
    profile: ExerciseProgressionProfile,
    week_number: int,
    previous: PreviousWeekPerformance | None,
    is_deload_week: bool,
    *,
    policy: ProgressionPolicy | None = None,
) -> WeekTargets:
    """Compute one exercise's targets for a week.

    Args:
        profile: Exercise progression profile
        week_number: 1-based week the targets are for
        previous: Performance from week_number - 1, or None for the first week
        is_deload_week: Whether week_number is a deload week
        policy: Algorithm constants (defaults to failure threshold 2, half volume deload)

    Returns:
        WeekTargets for the week

    Raises:
        InvalidProfileError: If the profile bounds are invalid
        InvalidPerformanceError: If previous is not from the preceding week
            or belongs to another exercise
        ValidationError: If week_number is below 1
    """
    policy = policy or DEFAULT_POLICY
    validate_profile(profile)
    if week_number < 1:
        raise ValidationError(f"week_number must be >= 1, got {week_number}")

    if previous is None:
        return _targets(
            profile,
            week_number,
            weight=profile.base_weight,
            reps=profile.base_reps,
            sets=profile.base_sets,
            is_deload=is_deload_week,
            consecutive_failures=0,
            reason="first_week",
        )

    if previous.week_number != week_number - 1:
        raise InvalidPerformanceError(
            f"Previous performance is from week {previous.week_number}, expected week {week_number - 1}"
        )
    if previous.exercise_id != profile.exercise_id:
        raise InvalidPerformanceError(
            f"Previous performance is for exercise {previous.exercise_id}, expected {profile.exercise_id}"
        )

    if is_deload_week:
        # The previous week still counts; a deload never regresses
        targets = _targets(
            profile,
            week_number,
            weight=previous.target_weight - profile.weight_increment,
            reps=previous.target_reps,
            sets=deload_set_count(profile.base_sets, policy.deload_volume_factor),
            is_deload=True,
            consecutive_failures=0 if previous.hit_target else previous.consecutive_failures + 1,
            reason="deload",
        )
    elif previous.hit_target:
        targets = _targets(
            profile,
            week_number,
            weight=previous.target_weight + profile.weight_increment,
            reps=profile.min_reps,
            sets=profile.base_sets,
            is_deload=False,
            consecutive_failures=0,
            reason="hit_target",
        )
    else:
        failures = previous.consecutive_failures + 1
        if failures < policy.failure_threshold:
            reps = previous.target_reps if previous.actual_reps >= profile.min_reps else profile.min_reps
            targets = _targets(
                profile,
                week_number,
                weight=previous.target_weight,
                reps=reps,
                sets=profile.base_sets,
                is_deload=False,
                consecutive_failures=failures,
                reason="hold",
            )
        else:
            targets = _targets(
                profile,
                week_number,
                weight=previous.target_weight - profile.weight_increment,
                reps=profile.max_reps,
                sets=profile.base_sets,
                is_deload=False,
                consecutive_failures=0,
                reason="regress",
            )

    logger.debug(
        "Computed week targets",
        exercise_id=profile.exercise_id,
        week_number=week_number,
        reason=targets.reason,
        target_weight=targets.target_weight,
        target_reps=targets.target_reps,
        target_sets=targets.target_sets,
    )
    return targets


def project_block(
    profile: ExerciseProgressionProfile,
    total_weeks: int,
    hits: Sequence[bool] | None = None,
    *,
    policy: ProgressionPolicy | None = None,
) -> list[WeekTargets]:
    """Project targets across a whole block from an assumed hit/miss pattern.

    Each week's performance is synthesised from its own targets: a hit lifts
    exactly the prescription, a miss falls one rep short at the prescribed
    weight.

    Args:
        profile: Exercise progression profile
        total_weeks: Weeks in the block, deload week included
        hits: Per-week outcome, index 0 = week 1 (defaults to every week hit)
        policy: Algorithm constants

    Returns:
        WeekTargets for weeks 1..total_weeks
    """
    policy = policy or DEFAULT_POLICY
    if hits is not None and len(hits) < total_weeks:
        raise ValidationError(f"Expected {total_weeks} week outcomes, got {len(hits)}")

    projection: list[WeekTargets] = []
    previous: PreviousWeekPerformance | None = None
    for week_number in range(1, total_weeks + 1):
        targets = compute_week_targets(
            profile,
            week_number,
            previous,
            is_deload_week(week_number, total_weeks, policy.deload_interval_weeks),
            policy=policy,
        )
        projection.append(targets)

        hit = True if hits is None else hits[week_number - 1]
        previous = PreviousWeekPerformance(
            exercise_id=profile.exercise_id,
            week_number=week_number,
            target_weight=targets.target_weight,
            target_reps=targets.target_reps,
            actual_weight=targets.target_weight,
            actual_reps=targets.target_reps if hit else max(0, targets.target_reps - 1),
            hit_target=hit,
            consecutive_failures=targets.consecutive_failures,
        )
    return projection
