# dashboard_api/database.py
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

DATABASE_URL = settings.get_database_url()


def build_engine(url: str):
    """Creates an engine for the given connection string."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    # FastAPI serves sync endpoints from a thread pool, so SQLite
    # connections must be shareable across threads.
    connect_args = {"check_same_thread": False}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # An in-memory database only lives as long as its one connection
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(url, connect_args=connect_args)


# The engine is created once per process and shared by every request.
engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    """Creates the transactions table if missing and checks the store answers."""
    # models must be imported so the table is registered on Base.metadata
    from . import models  # noqa: F401

    bind = bind if bind is not None else engine
    Base.metadata.create_all(bind=bind)
    with bind.connect() as connection:
        connection.execute(text("SELECT 1"))
