"""
Per-entity search adapters.

Each adapter turns SearchFilters into a database query for one entity kind
and maps the rows into the unified SearchResult shape. The returned total is
the database count before the adapter's own offset/limit window.
"""

import logging
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from chatprompt.core.config import settings
from chatprompt.core.utils import truncate_text
from chatprompt.database.models import Conversation, Message, Prompt
from chatprompt.search.unified import query_builder
from chatprompt.schemas.db_objects import CategoryRead
from chatprompt.search.unified.schemas import (
    ConversationMeta,
    MessageMeta,
    PromptMeta,
    ResultKind,
    SearchFilters,
    SearchResult,
)
from chatprompt.search.unified.scoring import calculate_relevance_score

logger = logging.getLogger(__name__)

AdapterResult = Tuple[List[SearchResult], int]


class EntitySearch:
    """Base class for the adapters."""

    kind: ResultKind

    def search(
        self,
        session: Session,
        user_id: UUID,
        filters: SearchFilters,
        limit: int,
        offset: int,
    ) -> AdapterResult:
        raise NotImplementedError

    @staticmethod
    def _page(query, limit: int, offset: int, order_column) -> Tuple[list, int]:
        total = query.count()
        rows = query.order_by(desc(order_column)).offset(offset).limit(limit).all()
        return rows, total


class ConversationSearch(EntitySearch):
    kind = ResultKind.CONVERSATION

    def search(self, session, user_id, filters, limit, offset):
        query = query_builder.conversation_visibility(session.query(Conversation), user_id)
        query = query_builder.apply_conversation_filters(query, filters)

        rows, total = self._page(query, limit, offset, Conversation.created_at)
        results = [self._to_result(conversation, filters.query or "") for conversation in rows]
        logger.debug("Conversation search matched %d rows (returned %d)", total, len(results))
        return results, total

    @staticmethod
    def _to_result(conversation: Conversation, text_query: str) -> SearchResult:
        description = conversation.description or ""
        return SearchResult(
            id=conversation.id,
            type=ResultKind.CONVERSATION,
            title=conversation.title,
            content=description,
            excerpt=truncate_text(description or conversation.title, settings.excerpt_length),
            metadata=ConversationMeta(
                status=conversation.status,
                tags=conversation.tags,
                is_pinned=conversation.is_pinned,
            ),
            score=calculate_relevance_score(f"{conversation.title} {description}", text_query),
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
        )


class PromptSearch(EntitySearch):
    kind = ResultKind.PROMPT

    def search(self, session, user_id, filters, limit, offset):
        query = query_builder.prompt_visibility(session.query(Prompt), user_id)
        query = query_builder.apply_prompt_filters(query, filters, user_id)

        rows, total = self._page(query, limit, offset, Prompt.created_at)
        results = [self._to_result(prompt, filters.query or "") for prompt in rows]
        logger.debug("Prompt search matched %d rows (returned %d)", total, len(results))
        return results, total

    @staticmethod
    def _to_result(prompt: Prompt, text_query: str) -> SearchResult:
        description = prompt.description or ""
        category = CategoryRead.model_validate(prompt.category) if prompt.category else None
        return SearchResult(
            id=prompt.id,
            type=ResultKind.PROMPT,
            title=prompt.title,
            content=prompt.content,
            excerpt=truncate_text(description or prompt.content, settings.excerpt_length),
            metadata=PromptMeta(
                category=category,
                tags=prompt.tags,
                is_public=prompt.is_public,
                usage_count=prompt.usage_count,
            ),
            score=calculate_relevance_score(
                f"{prompt.title} {description} {prompt.content}", text_query
            ),
            created_at=prompt.created_at,
            updated_at=prompt.updated_at,
        )


class MessageSearch(EntitySearch):
    kind = ResultKind.MESSAGE

    def search(self, session, user_id, filters, limit, offset):
        # Messages are only reachable through the caller's visible conversations
        visible = query_builder.conversation_visibility(session.query(Conversation.id), user_id)
        conversation_ids = [row.id for row in visible.all()]
        if not conversation_ids:
            return [], 0

        query = (
            session.query(Message)
            .options(joinedload(Message.conversation))
            .filter(Message.conversation_id.in_(conversation_ids))
        )
        query = query_builder.apply_text_filter(query, [Message.content], filters.query)
        query = query_builder.apply_date_range(query, Message.created_at, filters.date_range)

        rows, total = self._page(query, limit, offset, Message.created_at)
        results = [self._to_result(message, filters.query or "") for message in rows]
        logger.debug("Message search matched %d rows (returned %d)", total, len(results))
        return results, total

    @staticmethod
    def _to_result(message: Message, text_query: str) -> SearchResult:
        conversation_title = message.conversation.title if message.conversation else None
        return SearchResult(
            id=message.id,
            type=ResultKind.MESSAGE,
            title=f'Message in "{conversation_title or "Untitled"}"',
            content=message.content,
            excerpt=truncate_text(message.content, settings.excerpt_length),
            metadata=MessageMeta(
                role=message.role,
                conversation_id=message.conversation_id,
                conversation_title=conversation_title,
            ),
            score=calculate_relevance_score(message.content, text_query),
            created_at=message.created_at,
            updated_at=message.created_at,
        )
