"""Recalculation workflows - derive a user's new financial state from one transaction"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import List

from savings_gateway.domain.models import Goal, Profile, Recalculation
from savings_gateway.domain.classifiers import calculate_buffer_status, detect_overspending, update_goal_status
from savings_gateway.domain.surplus import handle_surplus
from savings_gateway.domain.targets import (
    calculate_daily_savings_target,
    calculate_daily_spending_buffer,
    schedule_goals,
    total_saving_required,
)
from savings_gateway.utils.date_utils import to_naive_utc

INCOME_WORKFLOW = "income_allocation"
EXPENSE_WORKFLOW = "expense_handling"


def refresh_goal_statuses(goals: List[Goal], now: datetime) -> List[Goal]:
    """Return copies of goals with status, days_offset and message recomputed"""
    refreshed = []
    for goal in goals:
        progress = update_goal_status(goal, now)
        refreshed.append(
            replace(
                goal,
                status=progress.status,
                days_offset=progress.days_offset,
                status_message=progress.message,
            )
        )
    return refreshed


def allocate_income(
    profile: Profile,
    goals: List[Goal],
    income_amount: float,
    now: datetime | None = None,
) -> Recalculation:
    """
    Apply a positive transaction: credit the balance and distribute it to goals.

    Flow:
    1. Credit total balance and today's income
    2. Savings target and surplus from the goals as loaded (pre-allocation)
    3. Each goal gets income * category weight; the priority goal also gets the
       surplus, capped at the income not already handed out by weights
    4. Buffer status, spending buffer and goal statuses from the allocated goals
    """
    now = to_naive_utc(now or datetime.now(timezone.utc))
    today = now.date()

    credited = replace(
        profile,
        total_balance=profile.total_balance + income_amount,
        today_income=profile.today_income + income_amount,
    )

    savings_target = calculate_daily_savings_target(goals, today)
    surplus = handle_surplus(income_amount, savings_target, profile.today_expenses, schedule_goals(goals, today))

    bonus = 0.0
    if surplus:
        unweighted_income = income_amount - sum(income_amount * goal.weight for goal in goals)
        bonus = min(surplus.amount, max(0.0, unweighted_income))
        surplus = replace(surplus, allocated_amount=bonus)

    allocated_goals = []
    for goal in goals:
        allocation = income_amount * goal.weight
        if surplus and goal.id == surplus.goal_id:
            allocation += bonus
        allocated_goals.append(replace(goal, saved_amount=goal.saved_amount + allocation))

    buffer = calculate_buffer_status(credited, total_saving_required(allocated_goals))
    spending_buffer = calculate_daily_spending_buffer(credited, savings_target, allocated_goals, today)

    new_profile = replace(
        credited,
        daily_savings_target=savings_target,
        daily_spending_buffer=spending_buffer,
        buffer_status=buffer.status,
        buffer_days=buffer.buffer_days,
        surplus_allocation=surplus.to_dict() if surplus else None,
    )

    return Recalculation(
        workflow=INCOME_WORKFLOW,
        profile=new_profile,
        goals=refresh_goal_statuses(allocated_goals, now),
        buffer=buffer,
        surplus=surplus,
    )


def handle_expense(
    profile: Profile,
    goals: List[Goal],
    expense_amount: float,
    now: datetime | None = None,
) -> Recalculation:
    """
    Apply an expense (positive magnitude): debit the balance and re-derive targets.

    Overspending is judged against the buffer and target stored before this
    expense, since that is the allowance the user was shown. Goals are not
    funded or drawn down, only their statuses are refreshed.
    """
    now = to_naive_utc(now or datetime.now(timezone.utc))
    today = now.date()

    debited = replace(
        profile,
        total_balance=profile.total_balance - expense_amount,
        today_expenses=profile.today_expenses + expense_amount,
    )

    savings_target = calculate_daily_savings_target(goals, today)
    spending_buffer = calculate_daily_spending_buffer(debited, savings_target, goals, today)

    overspending = detect_overspending(
        profile.today_expenses,
        expense_amount,
        profile.daily_spending_buffer,
        profile.daily_savings_target,
    )

    buffer = calculate_buffer_status(debited, total_saving_required(goals))

    new_profile = replace(
        debited,
        daily_savings_target=savings_target,
        daily_spending_buffer=spending_buffer,
        buffer_status=buffer.status,
        buffer_days=buffer.buffer_days,
        overspending_recovery=overspending.to_dict() if overspending else None,
    )

    return Recalculation(
        workflow=EXPENSE_WORKFLOW,
        profile=new_profile,
        goals=refresh_goal_statuses(goals, now),
        buffer=buffer,
        overspending=overspending,
    )
