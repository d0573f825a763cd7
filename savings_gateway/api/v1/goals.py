"""Goal and category endpoints"""

from datetime import datetime, timedelta, timezone
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from savings_gateway.api.v1.schemas import GoalCreateRequest, GoalSchema, CategorySchema
from savings_gateway.api.dependencies import get_current_user_id
from savings_gateway.domain.exceptions import InvalidCategoryError
from savings_gateway.infrastructure.database.session import get_db
from savings_gateway.infrastructure.database.repositories import CategoryRepository, GoalRepository, goal_to_domain

router = APIRouter()


@router.post("/goals", response_model=GoalSchema, status_code=201)
def create_goal(
    request_body: GoalCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Create an unfunded goal due `duration` days from today.

    New goals start ON_TRACK with nothing saved; they are funded by later income.
    """
    try:
        category = CategoryRepository(db).get_by_name(request_body.category)
    except InvalidCategoryError as e:
        raise HTTPException(status_code=400, detail=str(e))

    goal_row = GoalRepository(db).create_goal(
        user_id=user_id,
        name=request_body.name,
        description=request_body.description,
        target_amount=request_body.target_amount,
        target_date=datetime.now(timezone.utc).date() + timedelta(days=request_body.duration),
        category=category,
    )
    db.commit()

    return GoalSchema.from_domain(goal_to_domain(goal_row))


@router.get("/goals", response_model=List[GoalSchema])
def list_goals(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the user's goals with category name and weight"""
    goal_rows = GoalRepository(db).list_with_categories(user_id)
    return [GoalSchema.from_domain(goal_to_domain(row)) for row in goal_rows]


@router.get("/categories", response_model=List[CategorySchema])
def list_categories(db: Session = Depends(get_db)):
    """Public list of goal categories and their income weights"""
    return [
        CategorySchema(id=category.id, name=category.name, weight=category.weight)
        for category in CategoryRepository(db).list_categories()
    ]
