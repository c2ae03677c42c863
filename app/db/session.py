"""Database engine setup.

SQLite URLs get ``check_same_thread=False`` because FastAPI runs sync
endpoints on a thread pool; in-memory SQLite additionally uses a StaticPool
so every session sees the same database.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

raw_url = settings.DATABASE_URL or "sqlite:///:memory:"

if raw_url.startswith("sqlite"):
    engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in raw_url:
        engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(raw_url, future=True, **engine_kwargs)
else:
    # Pool size: base connections kept open
    # Max overflow: additional connections that can be created on demand
    # Pool recycle: recycle connections after 1 hour to prevent stale connections
    # Pool pre-ping: verify connection health before using
    engine = create_engine(
        raw_url,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        pool_pre_ping=True,
    )
SessionLocal = sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
