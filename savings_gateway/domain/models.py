"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

# Used when a profile has no recorded average spend (prevents division by zero)
DEFAULT_AVERAGE_DAILY_EXPENSES = 1000.0


class BufferStatus(str, Enum):
    """Safety-buffer band, from most to least urgent"""

    CRITICAL = "CRITICAL"
    LOW = "LOW"
    MODERATE = "MODERATE"
    HEALTHY = "HEALTHY"


class GoalStatus(str, Enum):
    """Goal progress relative to a linear schedule"""

    AHEAD = "AHEAD"
    ON_TRACK = "ON_TRACK"
    BEHIND = "BEHIND"


@dataclass
class Category:
    """Goal category; weight is the fraction of income directed to its goals"""

    id: int
    name: str
    weight: float


@dataclass
class Goal:
    """Savings goal ("mission") owned by one user"""

    id: uuid.UUID
    name: str
    target_amount: float
    saved_amount: float
    target_date: date
    created_at: datetime
    category: Optional[Category] = None
    description: Optional[str] = None
    status: GoalStatus = GoalStatus.ON_TRACK
    days_offset: int = 0
    status_message: str = ""

    @property
    def weight(self) -> float:
        """Category weight, 0 when uncategorized"""
        return self.category.weight if self.category else 0.0

    @property
    def remaining(self) -> float:
        return self.target_amount - self.saved_amount


@dataclass
class GoalSchedule:
    """Goal paired with its precomputed days until the deadline"""

    goal: Goal
    days_remaining: int


@dataclass
class SurplusAllocation:
    """Advisory: income left after today's target and expenses, sent to the priority goal"""

    amount: float
    goal_id: uuid.UUID
    allocated_to: str
    days_accelerated: int
    message: str
    allocated_amount: float = 0.0  # Portion of the surplus actually added to the goal

    def to_dict(self) -> dict:
        data = asdict(self)
        data["goal_id"] = str(self.goal_id)
        return data


@dataclass
class OverspendingRecovery:
    """Advisory: today's spending exceeded the allowance the user was given"""

    overspent: float
    tomorrow_target: float
    days_added: int
    message: str
    recovery_required: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BufferAssessment:
    """Output of buffer status classification"""

    buffer: float
    buffer_days: int
    status: BufferStatus
    message: str


@dataclass
class GoalProgress:
    """Output of goal progress classification"""

    status: GoalStatus
    days_offset: int
    message: str


@dataclass
class Profile:
    """Per-user financial snapshot, rewritten after every transaction"""

    user_id: str
    total_balance: float = 0.0
    today_income: float = 0.0
    today_expenses: float = 0.0
    daily_savings_target: float = 0.0
    daily_spending_buffer: float = 0.0
    buffer_status: Optional[BufferStatus] = None
    buffer_days: int = 0
    average_daily_expenses: Optional[float] = None
    surplus_allocation: Optional[dict] = None
    overspending_recovery: Optional[dict] = None

    @property
    def effective_average_daily_expenses(self) -> float:
        return self.average_daily_expenses or DEFAULT_AVERAGE_DAILY_EXPENSES


@dataclass
class Transaction:
    """Recorded income (positive) or expense (negative) event"""

    id: uuid.UUID
    user_id: str
    amount: float
    note: Optional[str]
    created_at: datetime


@dataclass
class Recalculation:
    """New aggregate state produced by one workflow run"""

    workflow: str
    profile: Profile
    goals: List[Goal]
    buffer: BufferAssessment
    surplus: Optional[SurplusAllocation] = None
    overspending: Optional[OverspendingRecovery] = None


@dataclass
class TransactionOutcome:
    """Result of applying one transaction event"""

    transaction: Transaction
    profile: Profile
    goals: List[Goal] = field(default_factory=list)
