"""Pytest fixtures for testing"""

import uuid
import pytest
from datetime import date, datetime, timedelta
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from savings_gateway.api.main import create_app
from savings_gateway.api.dependencies import get_current_user_id
from savings_gateway.infrastructure.database.models import Base, UserProfile, GoalCategory, SavingsGoal
from savings_gateway.infrastructure.database.session import get_db
from savings_gateway.domain.models import Category, Goal, Profile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

TEST_USER_ID = "user_test"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db: Session) -> sessionmaker:
    """Factory for extra sessions on the test database, e.g. a competing writer"""
    return TestingSessionLocal


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and an authenticated user"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID
    return TestClient(app)


@pytest.fixture
def categories(db: Session) -> dict[str, GoalCategory]:
    """Seed categories whose weights sum to 1.0"""
    rows = [
        GoalCategory(name="Emergency", weight=0.5),
        GoalCategory(name="Travel", weight=0.3),
        GoalCategory(name="Gadgets", weight=0.2),
    ]
    db.add_all(rows)
    db.commit()
    return {row.name: row for row in rows}


@pytest.fixture
def profile_row(db: Session) -> UserProfile:
    """Profile for the test user with a known balance and stored allowance"""
    row = UserProfile(
        id=TEST_USER_ID,
        total_balance=10000.0,
        today_income=0.0,
        today_expenses=0.0,
        daily_savings_target=30.0,
        daily_spending_buffer=150.0,
        buffer_days=0,
        average_daily_expenses=1000.0,
    )
    db.add(row)
    db.commit()
    return row


@pytest.fixture
def add_goal(db: Session) -> Callable[..., SavingsGoal]:
    """Factory persisting a goal for the test user"""

    def _add_goal(
        name: str,
        target_amount: float,
        days_until_due: int,
        category: GoalCategory | None = None,
        saved_amount: float = 0.0,
        created_days_ago: int = 0,
    ) -> SavingsGoal:
        row = SavingsGoal(
            user_id=TEST_USER_ID,
            category_id=category.id if category else None,
            name=name,
            target_amount=target_amount,
            saved_amount=saved_amount,
            target_date=datetime.utcnow().date() + timedelta(days=days_until_due),
            created_at=datetime.utcnow() - timedelta(days=created_days_ago),
            status="ON_TRACK",
            days_offset=0,
            status_message="Goal created. Start saving!",
        )
        db.add(row)
        db.commit()
        return row

    return _add_goal


@pytest.fixture
def make_goal() -> Callable[..., Goal]:
    """Factory for in-memory domain goals"""

    def _make_goal(
        name: str = "Goal",
        target_amount: float = 1000.0,
        saved_amount: float = 0.0,
        target_date: date = date(2026, 1, 11),
        created_at: datetime = datetime(2026, 1, 1),
        weight: float | None = 1.0,
    ) -> Goal:
        category = Category(id=1, name=f"{name} category", weight=weight) if weight is not None else None
        return Goal(
            id=uuid.uuid4(),
            name=name,
            target_amount=target_amount,
            saved_amount=saved_amount,
            target_date=target_date,
            created_at=created_at,
            category=category,
        )

    return _make_goal


@pytest.fixture
def profile() -> Profile:
    """In-memory profile snapshot"""
    return Profile(
        user_id=TEST_USER_ID,
        total_balance=10000.0,
        daily_savings_target=30.0,
        daily_spending_buffer=150.0,
        average_daily_expenses=1000.0,
    )
