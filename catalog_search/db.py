# catalog_search/db.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from .config import Settings


def make_engine(url: str, **kwargs):
    return create_engine(
        url,
        pool_pre_ping=True,
        # SQLite connections are shared with FastAPI's worker threads
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
        **kwargs
    )


engine = make_engine(Settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


class Base(DeclarativeBase):
    pass


def init_db(bind=None) -> None:
    """Create missing catalog tables (local dev and SQLite deployments)."""
    from . import models  # noqa: F401  registers the mappers on Base
    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
