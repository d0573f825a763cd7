"""Surplus detection and priority-goal selection"""

import math
from typing import List, Optional

from savings_gateway.domain.models import GoalSchedule, SurplusAllocation


def select_priority_goal(schedules: List[GoalSchedule]) -> Optional[GoalSchedule]:
    """Goal in the highest-weighted category; the earliest goal wins ties"""
    priority = None
    for schedule in schedules:
        if priority is None or schedule.goal.weight > priority.goal.weight:
            priority = schedule
    return priority


def handle_surplus(
    income: float,
    savings_target: float,
    expenses: float,
    schedules: List[GoalSchedule],
) -> Optional[SurplusAllocation]:
    """
    Detect income left over after today's target and expenses.

    Each schedule must already carry the goal's days_remaining; it is not
    recomputed here. Acceleration is how many of the priority goal's daily
    quotas (target_amount / days_remaining) the surplus covers.

    Returns:
        Surplus advisory for the priority goal, or None when there is no surplus
    """
    surplus = income - (savings_target + expenses)
    if surplus <= 0:
        return None

    priority = select_priority_goal(schedules)
    if priority is None:
        return None

    goal = priority.goal
    if goal.target_amount > 0:
        daily_quota = goal.target_amount / priority.days_remaining
        days_accelerated = math.floor(surplus / daily_quota)
    else:
        days_accelerated = 0

    return SurplusAllocation(
        amount=surplus,
        goal_id=goal.id,
        allocated_to=goal.name,
        days_accelerated=days_accelerated,
        message=f"Surplus: ${surplus:.2f}. {goal.name} accelerated by {days_accelerated} days.",
    )
