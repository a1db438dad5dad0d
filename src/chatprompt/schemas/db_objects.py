"""
Pydantic schemas for database objects.

Tags are stored as ordered rows on their own tables; the ORM models expose
them as a plain `tags` list, which is what these read models pick up.
Message metadata lives in the `meta_info` attribute and is published under
its column name, `metadata`.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# Base model for all database objects
class DBObject(BaseModel):
    """Base schema for all database objects."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime


class CategoryRead(DBObject):
    """Schema for reading prompt categories."""
    name: str
    description: Optional[str] = None
    color: str


class ConversationRead(DBObject):
    """Schema for reading conversations."""
    user_id: UUID
    title: str
    description: Optional[str] = None
    status: str
    is_pinned: bool = False
    tags: List[str] = Field(default_factory=list)
    updated_at: datetime


class MessageRead(DBObject):
    """Schema for reading messages."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    conversation_id: UUID
    role: str
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta_info")


class PromptRead(DBObject):
    """Schema for reading prompts with their category."""
    user_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    title: str
    content: str
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False
    usage_count: int = 0
    updated_at: datetime
    category: Optional[CategoryRead] = None


class DashboardStats(BaseModel):
    """Per-user counters for the dashboard."""
    total_conversations: int = 0
    active_conversations: int = 0
    total_prompts: int = 0
    total_messages: int = 0
    prompts_used_today: int = 0
    conversations_created_this_week: int = 0
