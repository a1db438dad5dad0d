# File: chatprompt/database/engine.py

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from chatprompt.core.config import get_database_url

_engine: Optional[Engine] = None


def init_engine(url: Optional[str] = None, **kwargs) -> Engine:
    """
    (Re)create the process-wide engine.

    Tests call this with an in-memory SQLite URL before touching the database.
    """
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url or get_database_url(), echo=False, future=True, **kwargs)
    return _engine


# Function to get the SQLAlchemy engine instance
def get_engine() -> Engine:
    """Return the SQLAlchemy engine instance, creating it on first use."""
    if _engine is None:
        return init_engine()
    return _engine
