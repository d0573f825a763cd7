"""Classification rules for buffer health, overspending and goal progress"""

import math
from datetime import datetime, timezone
from typing import Optional

from savings_gateway.domain.models import (
    BufferAssessment,
    BufferStatus,
    Goal,
    GoalProgress,
    GoalStatus,
    OverspendingRecovery,
    Profile,
)
from savings_gateway.utils.date_utils import ONE_DAY, start_of_day, to_naive_utc

# Buffer bands in days of average spending
LOW_BUFFER_DAYS = 7
HEALTHY_BUFFER_DAYS = 30

# Progress gap (fraction of target) before a goal counts as ahead/behind
PROGRESS_TOLERANCE = 0.1

# Floor for the savings target when converting an overspend into delay days
MIN_SAVINGS_TARGET = 1.0


def calculate_buffer_status(profile: Profile, total_saving_required: float) -> BufferAssessment:
    """
    Classify how many days of spending the balance covers once goals are funded.

    Bands:
    - < 0 days:   CRITICAL (balance does not even cover the goals)
    - 0-6 days:   LOW
    - 7-29 days:  MODERATE
    - 30+ days:   HEALTHY
    """
    buffer = profile.total_balance - total_saving_required
    buffer_days = math.floor(buffer / profile.effective_average_daily_expenses)

    if buffer_days < 0:
        status = BufferStatus.CRITICAL
        message = f"Deficit: ${abs(buffer):.2f}. Increase income or extend deadlines."
    elif buffer_days < LOW_BUFFER_DAYS:
        status = BufferStatus.LOW
        message = f"{buffer_days} days of safety. Execute with caution."
    elif buffer_days < HEALTHY_BUFFER_DAYS:
        status = BufferStatus.MODERATE
        message = f"{buffer_days} days of safety. Maintain discipline."
    else:
        status = BufferStatus.HEALTHY
        message = f"{buffer_days} days of safety. Surplus detected."

    return BufferAssessment(buffer=buffer, buffer_days=buffer_days, status=status, message=message)


def detect_overspending(
    today_expenses: float,
    expense_amount: float,
    daily_spending_buffer: float,
    daily_savings_target: float,
) -> Optional[OverspendingRecovery]:
    """
    Check a new expense against the allowance the user was last given.

    The buffer and target passed in must be the stored values from before this
    expense, not freshly recalculated ones.

    Returns:
        Recovery advisory when today's spending exceeds the allowance, else None
    """
    today_total = today_expenses + expense_amount
    if today_total <= daily_spending_buffer:
        return None

    overspent = today_total - daily_spending_buffer
    days_added = math.ceil(overspent / max(daily_savings_target, MIN_SAVINGS_TARGET))
    tomorrow_target = daily_savings_target + overspent

    return OverspendingRecovery(
        overspent=overspent,
        tomorrow_target=tomorrow_target,
        days_added=days_added,
        message=(
            f"Overspent by ${overspent:.2f}. Tomorrow's target: ${tomorrow_target:.2f}. "
            f"All missions delayed by {days_added} days."
        ),
    )


def update_goal_status(goal: Goal, now: datetime | None = None) -> GoalProgress:
    """
    Compare saved fraction with elapsed fraction of the goal's lifetime.

    A goal is AHEAD/BEHIND once the gap reaches 10% of the target; days_offset
    converts the gap into days of the goal's total duration. Goals created on
    their due date are treated as lasting one day.
    """
    now = to_naive_utc(now or datetime.now(timezone.utc))
    created_at = to_naive_utc(goal.created_at)

    total_duration = max(start_of_day(goal.target_date) - created_at, ONE_DAY)
    elapsed = now - created_at

    expected_progress = elapsed / total_duration
    actual_progress = goal.saved_amount / goal.target_amount if goal.target_amount > 0 else 1.0
    progress_diff = actual_progress - expected_progress

    # Round off float noise so identical progress lands on exactly zero days
    days_offset = math.floor(round(progress_diff * (total_duration / ONE_DAY), 9))

    if progress_diff >= PROGRESS_TOLERANCE:
        status = GoalStatus.AHEAD
    elif progress_diff <= -PROGRESS_TOLERANCE:
        status = GoalStatus.BEHIND
    else:
        status = GoalStatus.ON_TRACK

    if days_offset > 0:
        message = f"{days_offset} days ahead of schedule"
    elif days_offset < 0:
        message = f"{abs(days_offset)} days behind schedule"
    else:
        message = "On track with schedule"

    return GoalProgress(status=status, days_offset=days_offset, message=message)
