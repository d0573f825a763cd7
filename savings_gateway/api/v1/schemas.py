"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, field_validator
from datetime import date
from typing import List, Optional

from savings_gateway.domain.models import Goal, Profile, Transaction


class TransactionRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    amount: float = Field(
        ..., allow_inf_nan=False, description="Signed amount: positive for income, negative for expense"
    )
    note: Optional[str] = Field(None, max_length=500, description="Free-text note")

    @field_validator("amount")
    @classmethod
    def amount_must_be_non_zero(cls, value: float) -> float:
        if value == 0:
            raise ValueError("amount must be non-zero")
        return value


class TransactionSchema(BaseModel):
    """Recorded transaction"""

    id: str
    amount: float
    note: Optional[str] = None
    created_at: str

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionSchema":
        return cls(
            id=str(transaction.id),
            amount=transaction.amount,
            note=transaction.note,
            created_at=transaction.created_at.isoformat(),
        )


class ProfileSchema(BaseModel):
    """User's current balances, daily figures and advisories"""

    total_balance: float
    today_income: float
    today_expenses: float
    daily_savings_target: float
    daily_spending_buffer: float
    buffer_status: Optional[str] = None
    buffer_days: int
    surplus_allocation: Optional[dict] = None
    overspending_recovery: Optional[dict] = None

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileSchema":
        return cls(
            total_balance=profile.total_balance,
            today_income=profile.today_income,
            today_expenses=profile.today_expenses,
            daily_savings_target=profile.daily_savings_target,
            daily_spending_buffer=profile.daily_spending_buffer,
            buffer_status=profile.buffer_status.value if profile.buffer_status else None,
            buffer_days=profile.buffer_days,
            surplus_allocation=profile.surplus_allocation,
            overspending_recovery=profile.overspending_recovery,
        )


class GoalSchema(BaseModel):
    """Savings goal with progress status"""

    id: str
    name: str
    description: Optional[str] = None
    target_amount: float
    saved_amount: float
    target_date: date
    status: str
    days_offset: int
    status_message: str
    category: Optional[str] = None
    category_weight: float = 0.0

    @classmethod
    def from_domain(cls, goal: Goal) -> "GoalSchema":
        return cls(
            id=str(goal.id),
            name=goal.name,
            description=goal.description,
            target_amount=goal.target_amount,
            saved_amount=goal.saved_amount,
            target_date=goal.target_date,
            status=goal.status.value,
            days_offset=goal.days_offset,
            status_message=goal.status_message,
            category=goal.category.name if goal.category else None,
            category_weight=goal.weight,
        )


class TransactionResponse(BaseModel):
    """Response for POST /v1/transactions"""

    transaction: TransactionSchema
    profile: ProfileSchema
    goals: List[GoalSchema]


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    profile: ProfileSchema
    goals: List[GoalSchema]
    transactions: List[TransactionSchema]


class GoalCreateRequest(BaseModel):
    """Request body for POST /v1/goals"""

    name: str = Field(..., min_length=1, description="Goal name")
    description: Optional[str] = None
    target_amount: float = Field(..., gt=0, description="Amount to save")
    duration: int = Field(..., ge=1, description="Days until the goal is due")
    category: str = Field(..., min_length=1, description="Category name")


class CategorySchema(BaseModel):
    """Goal category with its income weight"""

    id: int
    name: str
    weight: float
