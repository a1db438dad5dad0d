"""
Shared fixtures: an in-memory SQLite database per test and record factories.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.pool import StaticPool

from chatprompt.database.engine import init_engine
from chatprompt.database.init_db import create_schema, drop_schema
from chatprompt.database.models import Conversation, Message, Prompt, PromptCategory
from chatprompt.database.session import get_session

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def database():
    """Fresh schema on a single shared in-memory connection."""
    engine = init_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema()
    yield engine
    drop_schema()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    return uuid.uuid4()


def at(minutes: int) -> datetime:
    """A fixed timestamp, `minutes` after the test epoch."""
    return BASE_TIME + timedelta(minutes=minutes)


@pytest.fixture
def make_conversation():
    def _make(user_id, title, description=None, tags=None, status="active", minutes=0, messages=None):
        with get_session() as session:
            conversation = Conversation(
                user_id=user_id,
                title=title,
                description=description,
                tags=tags or [],
                status=status,
                created_at=at(minutes),
                updated_at=at(minutes),
            )
            session.add(conversation)
            session.flush()
            for offset, (role, content) in enumerate(messages or []):
                session.add(Message(
                    conversation_id=conversation.id,
                    role=role,
                    content=content,
                    created_at=at(minutes + offset),
                ))
            session.commit()
            return conversation.id
    return _make


@pytest.fixture
def make_category():
    def _make(name, color="#3b82f6"):
        with get_session() as session:
            category = PromptCategory(name=name, color=color)
            session.add(category)
            session.commit()
            return category.id
    return _make


@pytest.fixture
def make_prompt():
    def _make(user_id, title, content="Body", description=None, tags=None,
              is_public=False, usage_count=0, category_id=None, minutes=0):
        with get_session() as session:
            prompt = Prompt(
                user_id=user_id,
                title=title,
                content=content,
                description=description,
                tags=tags or [],
                is_public=is_public,
                usage_count=usage_count,
                category_id=category_id,
                created_at=at(minutes),
                updated_at=at(minutes),
            )
            session.add(prompt)
            session.commit()
            return prompt.id
    return _make
