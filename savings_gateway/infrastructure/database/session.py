"""Engine and session factory for the profile/goal store"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from savings_gateway.config import settings

# One connection per in-flight recalculation; sized by DB_POOL_SIZE + DB_MAX_OVERFLOW
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_recycle=settings.db_pool_recycle_seconds,
)

# Rows stay readable after the workflow's single commit
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db() -> Session:
    """Request-scoped session; the service owns commit and rollback"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
