"""SQLAlchemy ORM models for profiles, goals, categories and transactions"""

import uuid
from sqlalchemy import Column, Text, Float, DateTime, Date, Integer, ForeignKey, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class UserProfile(Base):
    """Per-user balance and derived daily figures, keyed by the auth user id"""

    __tablename__ = "profiles"

    id = Column(Text, primary_key=True)
    total_balance = Column(Float, nullable=False, default=0.0)
    today_income = Column(Float, nullable=False, default=0.0)
    today_expenses = Column(Float, nullable=False, default=0.0)
    daily_savings_target = Column(Float, nullable=False, default=0.0)
    daily_spending_buffer = Column(Float, nullable=False, default=0.0)
    buffer_status = Column(Text, nullable=True)
    buffer_days = Column(Integer, nullable=False, default=0)
    average_daily_expenses = Column(Float, nullable=True)
    surplus_allocation = Column(JSON(none_as_null=True), nullable=True)
    overspending_recovery = Column(JSON(none_as_null=True), nullable=True)
    version = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Concurrent writers bump the version; a stale UPDATE raises StaleDataError
    __mapper_args__ = {"version_id_col": version}


class GoalCategory(Base):
    """Goal category with its share of incoming money"""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    weight = Column(Float, nullable=False, default=0.0)

    goals = relationship("SavingsGoal", back_populates="category")


class SavingsGoal(Base):
    """Savings goal with progress status fields refreshed on every transaction"""

    __tablename__ = "goals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    target_amount = Column(Float, nullable=False)
    saved_amount = Column(Float, nullable=False, default=0.0)
    target_date = Column(Date, nullable=False)
    status = Column(Text, nullable=False, default="ON_TRACK")
    days_offset = Column(Integer, nullable=False, default=0)
    status_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    category = relationship("GoalCategory", back_populates="goals", lazy="joined")


class MoneyTransaction(Base):
    """Immutable income (positive) or expense (negative) record"""

    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
