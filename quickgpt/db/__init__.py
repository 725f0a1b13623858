from quickgpt.db.base import Base
from quickgpt.db.engine import get_engine
from quickgpt.db.init_db import init_db
from quickgpt.db.session import get_db_session, get_sessionmaker

# Ensure ORM models are registered on Base.metadata when importing quickgpt.db.
from quickgpt.db import models as _models  # noqa: F401

__all__ = [
    "Base",
    "get_engine",
    "get_sessionmaker",
    "get_db_session",
    "init_db",
]
