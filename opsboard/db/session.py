"""Database engine setup.

For test runs (ENV=test) we use a shared in-memory SQLite database so logic
tests do not need a PostgreSQL driver.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from opsboard.core.config import settings

raw_url = settings.DATABASE_URL or "sqlite:///:memory:"

if raw_url.startswith("sqlite:///:memory:"):
    # One connection shared across threads so every session sees the same tables
    engine = create_engine(
        raw_url,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
elif raw_url.startswith("postgresql"):
    engine = create_engine(
        raw_url,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Verify connection health before use
    )
else:
    engine = create_engine(raw_url, future=True)

SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

