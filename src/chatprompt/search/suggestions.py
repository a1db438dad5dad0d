"""
Autocomplete suggestions drawn from conversation and prompt titles and tags.
"""

import logging
from typing import Dict, List, Union
from uuid import UUID

from sqlalchemy import desc

from chatprompt.core.settings import (
    SUGGESTION_LIMIT,
    SUGGESTION_MIN_QUERY_LENGTH,
    SUGGESTION_SOURCE_ROWS,
)
from chatprompt.core.utils import as_uuid
from chatprompt.database.models import Conversation, Prompt
from chatprompt.database.session import get_session
from chatprompt.search.unified import query_builder

logger = logging.getLogger(__name__)


def _collect(candidates: Dict[str, None], rows, needle: str) -> None:
    for row in rows:
        if needle in row.title.lower():
            candidates.setdefault(row.title, None)
        for tag in row.tags:
            if needle in tag.lower():
                candidates.setdefault(tag, None)


def get_search_suggestions(user_id: Union[str, UUID], query: str) -> List[str]:
    """
    Suggest completions for a partial query.

    Looks at up to SUGGESTION_SOURCE_ROWS conversations and prompts whose
    title contains the query and offers their titles and matching tags.
    Each string appears once, in first-seen order, capped at SUGGESTION_LIMIT.
    """
    if not query or len(query) < SUGGESTION_MIN_QUERY_LENGTH:
        return []

    user_id = as_uuid(user_id)
    needle = query.lower()
    # dict keeps insertion order and gives set semantics
    candidates: Dict[str, None] = {}

    with get_session() as session:
        conversations = (
            query_builder.conversation_visibility(session.query(Conversation), user_id)
            .filter(Conversation.title.icontains(query, autoescape=True))
            .order_by(desc(Conversation.updated_at))
            .limit(SUGGESTION_SOURCE_ROWS)
            .all()
        )
        _collect(candidates, conversations, needle)

        prompts = (
            query_builder.prompt_visibility(session.query(Prompt), user_id)
            .filter(Prompt.title.icontains(query, autoescape=True))
            .order_by(desc(Prompt.usage_count), desc(Prompt.updated_at))
            .limit(SUGGESTION_SOURCE_ROWS)
            .all()
        )
        _collect(candidates, prompts, needle)

    logger.debug("%d suggestions for %r", len(candidates), query)
    return list(candidates)[:SUGGESTION_LIMIT]
