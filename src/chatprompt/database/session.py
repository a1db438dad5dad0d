# chatprompt/src/chatprompt/database/session.py

import contextlib

from sqlalchemy.orm import sessionmaker

from chatprompt.database.engine import get_engine

SessionLocal = sessionmaker(autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@contextlib.contextmanager
def get_session():
    """
    Use as:
        with get_session() as session:
            ...
    """
    db = SessionLocal(bind=get_engine())
    try:
        yield db
    finally:
        db.close()
