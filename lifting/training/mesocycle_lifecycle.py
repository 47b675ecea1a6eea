"""Mesocycle lifecycle and calendar helpers.

States: active → {completed, cancelled}. Both terminal states are final.
"""

from datetime import date, timedelta

from loguru import logger

from lifting.db.models import Mesocycle, Plan
from lifting.training.errors import InvalidTransitionError, ValidationError


def new_mesocycle(plan: Plan, start_date: date, total_weeks: int | None = None) -> Mesocycle:
    """Build an active mesocycle for a plan, starting at week 1.

    Args:
        plan: Plan the block is built from
        start_date: Date of week 1
        total_weeks: Weeks in the block including the deload week
            (defaults to plan.duration_weeks + 1)

    Returns:
        Unsaved Mesocycle
    """
    if total_weeks is None:
        total_weeks = plan.duration_weeks + 1
    if total_weeks < 1:
        raise ValidationError(f"total_weeks must be >= 1, got {total_weeks}")

    return Mesocycle(
        plan_id=plan.id,
        start_date=start_date,
        current_week=1,
        total_weeks=total_weeks,
        status="active",
    )


def _require_active(mesocycle: Mesocycle, action: str) -> None:
    if mesocycle.status != "active":
        logger.warning(
            "Mesocycle transition rejected",
            mesocycle_id=mesocycle.id,
            status=mesocycle.status,
            action=action,
        )
        raise ValidationError("Mesocycle is not active")


def complete_mesocycle(mesocycle: Mesocycle) -> Mesocycle:
    """Mark an active mesocycle completed.

    Raises:
        ValidationError: If the mesocycle is not active
    """
    _require_active(mesocycle, "complete")
    mesocycle.status = "completed"
    logger.info("Mesocycle completed", mesocycle_id=mesocycle.id, current_week=mesocycle.current_week)
    return mesocycle


def cancel_mesocycle(mesocycle: Mesocycle) -> Mesocycle:
    """Mark an active mesocycle cancelled.

    Raises:
        ValidationError: If the mesocycle is not active
    """
    _require_active(mesocycle, "cancel")
    mesocycle.status = "cancelled"
    logger.info("Mesocycle cancelled", mesocycle_id=mesocycle.id, current_week=mesocycle.current_week)
    return mesocycle


def advance_week(mesocycle: Mesocycle) -> int:
    """Move an active mesocycle to its next week.

    Returns:
        The new current week

    Raises:
        InvalidTransitionError: If the mesocycle is not active or already in its final week
    """
    if mesocycle.status != "active":
        raise InvalidTransitionError("Mesocycle", mesocycle.status, "advance")
    if mesocycle.current_week >= mesocycle.total_weeks:
        raise InvalidTransitionError(
            "Mesocycle",
            mesocycle.status,
            "advance",
            f"Mesocycle is already in its final week ({mesocycle.total_weeks})",
        )

    mesocycle.current_week += 1
    logger.info("Mesocycle advanced", mesocycle_id=mesocycle.id, current_week=mesocycle.current_week)
    return mesocycle.current_week


def week_for_date(start_date: date, on_date: date, total_weeks: int) -> int:
    """Block week a calendar date falls in, clamped to [1, total_weeks]."""
    elapsed_days = (on_date - start_date).days
    if elapsed_days < 0:
        return 1
    return min(total_weeks, elapsed_days // 7 + 1)


def scheduled_date_for(start_date: date, week_number: int, day_of_week: int) -> date:
    """Date of a plan day in a given block week.

    Week 1 covers the seven days starting at start_date; the plan day lands
    on the first date in that window whose weekday matches day_of_week
    (0 = Monday).
    """
    if week_number < 1:
        raise ValidationError(f"week_number must be >= 1, got {week_number}")
    if not 0 <= day_of_week <= 6:
        raise ValidationError(f"day_of_week must be between 0 and 6, got {day_of_week}")

    week_start = start_date + timedelta(weeks=week_number - 1)
    return week_start + timedelta(days=(day_of_week - start_date.weekday()) % 7)
