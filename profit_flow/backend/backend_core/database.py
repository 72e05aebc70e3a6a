"""
Database configuration and session management.

The app owns one Database handle: built in the FastAPI lifespan, handed to
the stores that need it, disposed at shutdown.
"""

import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Base class for models
Base = declarative_base()


class Database:
    """Engine plus session factory for one database URL."""

    def __init__(self, url: str, echo: bool = False):
        url_lower = url.lower()
        kwargs = {"echo": echo, "pool_pre_ping": True}

        if "sqlite" in url_lower:
            kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory SQLite is per-connection; share a single one
            if ":memory:" in url_lower or url_lower in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
        elif url_lower.startswith("postgres"):
            # psycopg2 connect timeout is in seconds.
            kwargs["connect_args"] = {"connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5"))}

        self.url = url
        self.engine = create_engine(url, **kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        # Register the mapped tables on Base.metadata
        from profit_flow.backend.backend_core import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Session scope.

        Usage:
            with database.session() as db:
                db.add(row)
                db.commit()
        """
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    def dispose(self) -> None:
        self.engine.dispose()
