# src/chatprompt/database/models.py

import uuid

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, JSON, String, Text, Uuid
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, relationship

from chatprompt.core.settings import DEFAULT_CATEGORY_COLOR
from chatprompt.core.utils import utcnow

# Create the base class for SQLAlchemy models
Base = declarative_base()

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Conversation(Base):
    """Represents a conversation transcript owned by a user."""
    __tablename__ = "conversations"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'archived', 'deleted')", name="ck_conversations_status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="active")  # 'deleted' is a soft delete
    is_pinned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    messages = relationship(
        "Message", back_populates="conversation", order_by="Message.created_at", cascade="all, delete-orphan"
    )
    tag_rows = relationship(
        "ConversationTag",
        order_by="ConversationTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self):
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values):
        self.tag_rows = [ConversationTag(tag=tag, position=i) for i, tag in enumerate(values or [])]


class ConversationTag(Base):
    """One free-text tag of a conversation; position keeps display order."""
    __tablename__ = "conversation_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(
        Uuid, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)


class Message(Base):
    """Represents a single message in a conversation."""
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'assistant', 'system')", name="ck_messages_role"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        Uuid, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    meta_info = Column("metadata", JSONType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    conversation = relationship("Conversation", back_populates="messages")


class PromptCategory(Base):
    """A named bucket for prompt templates."""
    __tablename__ = "prompt_categories"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    color = Column(String, nullable=False, default=DEFAULT_CATEGORY_COLOR)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    prompts = relationship("Prompt", back_populates="category")


class Prompt(Base):
    """A reusable prompt template. Templates without an owner are system templates."""
    __tablename__ = "prompts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=True, index=True)
    category_id = Column(Uuid, ForeignKey("prompt_categories.id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)  # may contain {variable} placeholders, stored verbatim
    description = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    usage_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    category = relationship("PromptCategory", back_populates="prompts", lazy="joined")
    tag_rows = relationship(
        "PromptTag",
        order_by="PromptTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    usages = relationship("PromptUsage", back_populates="prompt", cascade="all, delete-orphan")

    @property
    def tags(self):
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values):
        self.tag_rows = [PromptTag(tag=tag, position=i) for i, tag in enumerate(values or [])]


class PromptTag(Base):
    """One free-text tag of a prompt; position keeps display order."""
    __tablename__ = "prompt_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    prompt_id = Column(Uuid, ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False, index=True)
    tag = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)


class PromptUsage(Base):
    """One recorded use of a prompt."""
    __tablename__ = "prompt_usage"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    prompt_id = Column(Uuid, ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, nullable=False, index=True)
    conversation_id = Column(Uuid, ForeignKey("conversations.id", ondelete="SET NULL"), nullable=True)
    used_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    prompt = relationship("Prompt", back_populates="usages")
