"""
Schemas for the unified search system.

This module defines the filter value object, the per-kind result metadata and
the response envelope shared by the API, the CLI and the search manager.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from chatprompt.schemas.db_objects import CategoryRead


class SearchType(str, Enum):
    """Entity kinds that can be requested."""
    ALL = "all"
    CONVERSATIONS = "conversations"
    PROMPTS = "prompts"
    MESSAGES = "messages"


class ResultKind(str, Enum):
    """Kind tag carried by every search result."""
    CONVERSATION = "conversation"
    PROMPT = "prompt"
    MESSAGE = "message"


class SortBy(str, Enum):
    RELEVANCE = "relevance"  # score, highest first
    DATE = "date"            # updated_at, newest first
    USAGE = "usage"          # prompt usage_count, absent counts as 0


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Visibility(str, Enum):
    ALL = "all"
    PUBLIC = "public"
    PRIVATE = "private"


class DateRange(BaseModel):
    """Inclusive creation-date window."""
    model_config = ConfigDict(populate_by_name=True)

    start: Optional[datetime] = Field(None, alias="from")
    end: Optional[datetime] = Field(None, alias="to")


class SearchFilters(BaseModel):
    """
    Search request filters.

    Every field is optional and applied independently: filter kinds combine
    with AND, values inside a list (tags, categories, status) combine with OR.
    camelCase aliases match the JSON shape used by web clients.
    """
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = Field(None, description="Text to search for")
    type: SearchType = Field(SearchType.ALL, description="Entity kinds to search")
    date_range: Optional[DateRange] = Field(None, alias="dateRange")
    tags: Optional[List[str]] = Field(None, description="Match records sharing at least one tag")
    categories: Optional[List[str]] = Field(None, description="Prompt category ids")
    status: Optional[List[str]] = Field(None, description="Conversation statuses")
    visibility: Visibility = Field(Visibility.ALL, description="Prompt visibility")
    sort_by: SortBy = Field(SortBy.RELEVANCE, alias="sortBy")
    sort_order: SortOrder = Field(SortOrder.DESC, alias="sortOrder")


class ConversationMeta(BaseModel):
    kind: Literal["conversation"] = "conversation"
    status: str
    tags: List[str] = Field(default_factory=list)
    is_pinned: bool = False


class PromptMeta(BaseModel):
    kind: Literal["prompt"] = "prompt"
    category: Optional[CategoryRead] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False
    usage_count: int = 0


class MessageMeta(BaseModel):
    kind: Literal["message"] = "message"
    role: str
    conversation_id: UUID
    conversation_title: Optional[str] = None


ResultMeta = Annotated[Union[ConversationMeta, PromptMeta, MessageMeta], Field(discriminator="kind")]


class SearchResult(BaseModel):
    """Individual search result item. Built per call, never stored."""
    id: UUID
    type: ResultKind
    title: str
    content: str
    excerpt: str
    metadata: ResultMeta
    score: float
    created_at: datetime
    updated_at: datetime


class TypeFacet(BaseModel):
    type: str
    count: int = 0


class TagFacet(BaseModel):
    tag: str
    count: int = 0


class CategoryFacet(BaseModel):
    category: str
    count: int = 0


class DateRangeFacet(BaseModel):
    range: str
    count: int = 0


class SearchFacets(BaseModel):
    types: List[TypeFacet] = Field(default_factory=list)
    tags: List[TagFacet] = Field(default_factory=list)
    categories: List[CategoryFacet] = Field(default_factory=list)
    date_ranges: List[DateRangeFacet] = Field(default_factory=list, alias="dateRanges")

    model_config = ConfigDict(populate_by_name=True)


class SearchResponse(BaseModel):
    """Container for search results."""
    results: List[SearchResult]
    total: int
    facets: SearchFacets
