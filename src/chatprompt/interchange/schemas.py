"""
Schemas for the interchange document exchanged with IDE workspaces.

Export models describe the full versioned envelope. Import models accept the
smaller subset an external tool may produce; unknown keys (ids, counters,
timestamps of the source system) are ignored.
"""

from datetime import datetime
from typing import Any, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatprompt.core.settings import INTERCHANGE_VERSION


class ExportedMessage(BaseModel):
    role: str
    content: str
    timestamp: datetime


class ExportedConversation(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    messages: List[ExportedMessage] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    created_at: datetime


class ExportedPrompt(BaseModel):
    """A prompt with its category denormalized to a name."""
    id: UUID
    title: str
    content: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    usage_count: int = 0
    created_at: datetime


class ExportDocument(BaseModel):
    version: Literal["1.0"] = INTERCHANGE_VERSION
    exported_at: datetime
    conversations: List[ExportedConversation] = Field(default_factory=list)
    prompts: List[ExportedPrompt] = Field(default_factory=list)


class ImportedMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str
    content: str
    timestamp: Optional[datetime] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def blank_timestamp_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ImportedConversation(BaseModel):
    """Messages stay raw here; they are validated when they are inserted."""
    model_config = ConfigDict(extra="ignore")

    title: str
    description: Optional[str] = None
    messages: List[Any] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("messages", "tags", mode="before")
    @classmethod
    def null_is_empty(cls, value):
        return [] if value is None else value


class ImportedPrompt(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str
    content: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def null_is_empty(cls, value):
        return [] if value is None else value


class ImportResult(BaseModel):
    """Outcome of an import: per-kind counts plus every error, in input order."""
    conversations: int = 0
    prompts: int = 0
    errors: List[str] = Field(default_factory=list)
