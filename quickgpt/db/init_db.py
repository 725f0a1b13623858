from __future__ import annotations

from sqlalchemy.engine import Engine

from quickgpt.db.base import Base


def init_db(engine: Engine) -> None:
    """Create ORM tables (dev-friendly; prefer Alembic in production)."""

    Base.metadata.create_all(bind=engine)
