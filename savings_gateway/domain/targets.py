"""Daily savings target and daily spending buffer calculators"""

import math
from datetime import date
from typing import Iterable, List

from savings_gateway.domain.models import Goal, GoalSchedule, Profile
from savings_gateway.utils.date_utils import days_remaining


def schedule_goals(goals: Iterable[Goal], today: date | None = None) -> List[GoalSchedule]:
    """Attach days-until-deadline to each goal, preserving order"""
    today = today or date.today()
    return [GoalSchedule(goal=goal, days_remaining=days_remaining(goal.target_date, today)) for goal in goals]


def total_saving_required(goals: Iterable[Goal]) -> float:
    """Sum of what is still missing across goals; over-funded goals contribute nothing"""
    return sum(goal.remaining for goal in goals if goal.remaining > 0)


def calculate_daily_savings_target(goals: List[Goal], today: date | None = None) -> int:
    """
    Amount the user should put aside today across all goals.

    Each unfinished goal needs remaining / days_remaining per day; that share is
    scaled by the goal's category weight. Finished or over-funded goals are skipped.

    Returns:
        Ceiling of the weighted sum, 0 when there are no goals
    """
    if not goals:
        return 0

    total_daily_target = 0.0
    for schedule in schedule_goals(goals, today):
        remaining = schedule.goal.remaining
        if remaining > 0:
            total_daily_target += (remaining / schedule.days_remaining) * schedule.goal.weight

    return math.ceil(total_daily_target)


def calculate_daily_spending_buffer(
    profile: Profile,
    daily_savings_target: float,
    goals: List[Goal],
    today: date | None = None,
) -> int:
    """
    Daily spending allowance, taking the more conservative of two estimates.

    Methods:
    - Immediate: today's income minus today's savings target
    - Long-term: balance left after funding every goal, spread over the
      longest remaining goal horizon (0 when nothing remains to be saved)

    The lower estimate wins and the result is floored at zero, so the user is
    never told they can spend more than either check allows.
    """
    immediate_budget = profile.today_income - daily_savings_target

    saving_required = 0.0
    longest_mission_duration = 0
    for schedule in schedule_goals(goals, today):
        remaining = schedule.goal.remaining
        if remaining > 0:
            saving_required += remaining
            longest_mission_duration = max(longest_mission_duration, schedule.days_remaining)

    if longest_mission_duration > 0:
        long_term_budget = (profile.total_balance - saving_required) / longest_mission_duration
    else:
        long_term_budget = 0.0

    safe_budget = min(immediate_budget, long_term_budget)

    return math.floor(max(0.0, safe_budget))
