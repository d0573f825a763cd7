"""Data access layer for profiles, goals, categories and transactions"""

from datetime import date, datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from savings_gateway.infrastructure.database.models import UserProfile, GoalCategory, SavingsGoal, MoneyTransaction
from savings_gateway.domain.models import BufferStatus, Category, Goal, GoalStatus, Profile, Transaction
from savings_gateway.domain.exceptions import InvalidCategoryError


def profile_to_domain(record: UserProfile) -> Profile:
    """Map a profile row to the domain snapshot, defaulting unset figures to zero"""
    return Profile(
        user_id=record.id,
        total_balance=record.total_balance or 0.0,
        today_income=record.today_income or 0.0,
        today_expenses=record.today_expenses or 0.0,
        daily_savings_target=record.daily_savings_target or 0.0,
        daily_spending_buffer=record.daily_spending_buffer or 0.0,
        buffer_status=BufferStatus(record.buffer_status) if record.buffer_status else None,
        buffer_days=record.buffer_days or 0,
        average_daily_expenses=record.average_daily_expenses,
        surplus_allocation=record.surplus_allocation,
        overspending_recovery=record.overspending_recovery,
    )


def category_to_domain(record: GoalCategory) -> Category:
    return Category(id=record.id, name=record.name, weight=record.weight or 0.0)


def goal_to_domain(record: SavingsGoal) -> Goal:
    return Goal(
        id=record.id,
        name=record.name,
        description=record.description,
        target_amount=record.target_amount,
        saved_amount=record.saved_amount or 0.0,
        target_date=record.target_date,
        created_at=record.created_at,
        category=category_to_domain(record.category) if record.category else None,
        status=GoalStatus(record.status),
        days_offset=record.days_offset or 0,
        status_message=record.status_message or "",
    )


def transaction_to_domain(record: MoneyTransaction) -> Transaction:
    return Transaction(
        id=record.id,
        user_id=record.user_id,
        amount=record.amount,
        note=record.note,
        created_at=record.created_at,
    )


class ProfileRepository:
    """Repository for user profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Fetch the profile row for a user"""
        return self.db.query(UserProfile).filter(UserProfile.id == user_id).first()

    def update_profile(self, record: UserProfile, profile: Profile) -> UserProfile:
        """Write a recalculated snapshot onto the loaded row (flushed with the unit of work)"""
        record.total_balance = profile.total_balance
        record.today_income = profile.today_income
        record.today_expenses = profile.today_expenses
        record.daily_savings_target = profile.daily_savings_target
        record.daily_spending_buffer = profile.daily_spending_buffer
        record.buffer_status = profile.buffer_status.value if profile.buffer_status else None
        record.buffer_days = profile.buffer_days
        record.surplus_allocation = profile.surplus_allocation
        record.overspending_recovery = profile.overspending_recovery
        record.updated_at = datetime.now(timezone.utc)
        return record


class CategoryRepository:
    """Repository for goal categories"""

    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> List[GoalCategory]:
        return self.db.query(GoalCategory).order_by(GoalCategory.id).all()

    def get_by_name(self, name: str) -> GoalCategory:
        category = self.db.query(GoalCategory).filter(GoalCategory.name == name).first()
        if category is None:
            raise InvalidCategoryError(f"Invalid category: {name}")
        return category


class GoalRepository:
    """Repository for savings goals"""

    def __init__(self, db: Session):
        self.db = db

    def list_with_categories(self, user_id: str) -> List[SavingsGoal]:
        """Fetch a user's goals with their category, oldest first (stable priority order)"""
        return (
            self.db.query(SavingsGoal)
            .filter(SavingsGoal.user_id == user_id)
            .order_by(SavingsGoal.created_at, SavingsGoal.id)
            .all()
        )

    def create_goal(
        self,
        user_id: str,
        name: str,
        target_amount: float,
        target_date: date,
        category: GoalCategory,
        description: str | None = None,
    ) -> SavingsGoal:
        """Persist a new, unfunded goal"""
        db_goal = SavingsGoal(
            user_id=user_id,
            category_id=category.id,
            name=name,
            description=description,
            target_amount=target_amount,
            saved_amount=0.0,
            target_date=target_date,
            status=GoalStatus.ON_TRACK.value,
            days_offset=0,
            status_message="Goal created. Start saving!",
        )
        self.db.add(db_goal)
        self.db.flush()
        self.db.refresh(db_goal)
        return db_goal

    def update_goal(self, record: SavingsGoal, goal: Goal) -> SavingsGoal:
        """Write saved amount and progress status onto the loaded row"""
        record.saved_amount = goal.saved_amount
        record.status = goal.status.value
        record.days_offset = goal.days_offset
        record.status_message = goal.status_message
        return record


class TransactionRepository:
    """Repository for income/expense records"""

    def __init__(self, db: Session):
        self.db = db

    def create_transaction(self, user_id: str, amount: float, note: str | None) -> MoneyTransaction:
        """Record a transaction inside the current unit of work"""
        db_transaction = MoneyTransaction(user_id=user_id, amount=amount, note=note)
        self.db.add(db_transaction)
        self.db.flush()  # Get ID and server timestamp without committing
        self.db.refresh(db_transaction)
        return db_transaction

    def list_recent(self, user_id: str, limit: int = 20) -> List[MoneyTransaction]:
        """Fetch the most recent transactions for a user"""
        return (
            self.db.query(MoneyTransaction)
            .filter(MoneyTransaction.user_id == user_id)
            .order_by(MoneyTransaction.created_at.desc())
            .limit(limit)
            .all()
        )
