"""
Translate SearchFilters into SQLAlchemy predicates.

Each helper handles one filter kind and leaves the query untouched when the
filter is absent, so callers can chain them freely.
"""

from typing import List
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Query

from chatprompt.core.utils import as_uuid_list
from chatprompt.database.models import Conversation, ConversationTag, Prompt, PromptTag
from chatprompt.search.unified.schemas import DateRange, SearchFilters, Visibility


def ilike_any(columns: List, text: str):
    """OR of case-insensitive literal substring matches over several columns."""
    return or_(*[column.icontains(text, autoescape=True) for column in columns])


def apply_text_filter(query: Query, columns: List, text: str) -> Query:
    if not text:
        return query
    return query.filter(ilike_any(columns, text))


def apply_date_range(query: Query, column, date_range: DateRange) -> Query:
    """Inclusive bounds on a creation timestamp."""
    if date_range is None:
        return query
    if date_range.start is not None:
        query = query.filter(column >= date_range.start)
    if date_range.end is not None:
        query = query.filter(column <= date_range.end)
    return query


def conversation_visibility(query: Query, user_id: UUID) -> Query:
    """Owned by the user and not soft-deleted."""
    return query.filter(Conversation.user_id == user_id, Conversation.status != "deleted")


def prompt_visibility(query: Query, user_id: UUID) -> Query:
    """Owned by the user or public."""
    return query.filter(or_(Prompt.user_id == user_id, Prompt.is_public.is_(True)))


def apply_conversation_filters(query: Query, filters: SearchFilters) -> Query:
    query = apply_text_filter(query, [Conversation.title, Conversation.description], filters.query)

    if filters.tags:
        query = query.filter(Conversation.tag_rows.any(ConversationTag.tag.in_(filters.tags)))

    if filters.status:
        query = query.filter(Conversation.status.in_(filters.status))

    return apply_date_range(query, Conversation.created_at, filters.date_range)


def apply_prompt_filters(query: Query, filters: SearchFilters, user_id: UUID) -> Query:
    query = apply_text_filter(
        query, [Prompt.title, Prompt.description, Prompt.content], filters.query
    )

    if filters.tags:
        query = query.filter(Prompt.tag_rows.any(PromptTag.tag.in_(filters.tags)))

    if filters.categories:
        query = query.filter(Prompt.category_id.in_(as_uuid_list(filters.categories)))

    if filters.visibility == Visibility.PUBLIC:
        query = query.filter(Prompt.is_public.is_(True))
    elif filters.visibility == Visibility.PRIVATE:
        query = query.filter(Prompt.is_public.is_(False), Prompt.user_id == user_id)

    return apply_date_range(query, Prompt.created_at, filters.date_range)
