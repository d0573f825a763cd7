"""GET /v1/dashboard - Profile, goals and recent transactions for the signed-in user"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from savings_gateway.api.v1.schemas import DashboardResponse, ProfileSchema, GoalSchema, TransactionSchema
from savings_gateway.api.dependencies import get_current_user_id
from savings_gateway.config import settings
from savings_gateway.infrastructure.database.session import get_db
from savings_gateway.infrastructure.database.repositories import (
    GoalRepository,
    ProfileRepository,
    TransactionRepository,
    goal_to_domain,
    profile_to_domain,
    transaction_to_domain,
)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Retrieve the user's current financial snapshot.

    Returns:
        Profile figures, all goals with status, most recent transactions first
    """
    profile_row = ProfileRepository(db).get_profile(user_id)
    if not profile_row:
        raise HTTPException(status_code=404, detail="Profile not found")

    goal_rows = GoalRepository(db).list_with_categories(user_id)
    transaction_rows = TransactionRepository(db).list_recent(user_id, limit=settings.dashboard_transaction_limit)

    return DashboardResponse(
        profile=ProfileSchema.from_domain(profile_to_domain(profile_row)),
        goals=[GoalSchema.from_domain(goal_to_domain(row)) for row in goal_rows],
        transactions=[TransactionSchema.from_domain(transaction_to_domain(row)) for row in transaction_rows],
    )
