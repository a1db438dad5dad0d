"""
Per-user dashboard summaries.
"""
import logging
import uuid
from datetime import timedelta
from typing import List, Union

from sqlalchemy import desc, func

from chatprompt.core.utils import as_uuid, utcnow
from chatprompt.database.models import Conversation, Message, Prompt, PromptUsage
from chatprompt.database.session import get_session
from chatprompt.schemas.db_objects import ConversationRead, DashboardStats, PromptRead
from chatprompt.search.unified.query_builder import conversation_visibility, prompt_visibility

logger = logging.getLogger(__name__)


def get_dashboard_stats(user_id: Union[str, uuid.UUID]) -> DashboardStats:
    """
    Count the user's conversations, visible prompts, messages and recent activity.

    Deleted conversations and their messages are not counted. "Today" starts at
    midnight UTC; "this week" is the last seven days.
    """
    user_id = as_uuid(user_id)
    now = utcnow()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = now - timedelta(days=7)

    with get_session() as session:
        conversations = conversation_visibility(session.query(Conversation), user_id)

        stats = DashboardStats(
            total_conversations=conversations.count(),
            active_conversations=conversations.filter(Conversation.status == "active").count(),
            total_prompts=prompt_visibility(session.query(Prompt), user_id).count(),
            total_messages=(
                session.query(func.count(Message.id))
                .join(Conversation, Message.conversation_id == Conversation.id)
                .filter(Conversation.user_id == user_id, Conversation.status != "deleted")
                .scalar()
            ),
            prompts_used_today=session.query(PromptUsage).filter(
                PromptUsage.user_id == user_id, PromptUsage.used_at >= start_of_day
            ).count(),
            conversations_created_this_week=conversations.filter(
                Conversation.created_at >= week_ago
            ).count(),
        )

    logger.debug(f"Dashboard stats for {user_id}: {stats}")
    return stats


def get_recent_conversations(user_id: Union[str, uuid.UUID], limit: int = 5) -> List[ConversationRead]:
    with get_session() as session:
        conversations = (
            conversation_visibility(session.query(Conversation), as_uuid(user_id))
            .order_by(desc(Conversation.updated_at))
            .limit(limit)
            .all()
        )
        return [ConversationRead.model_validate(c) for c in conversations]


def get_popular_prompts(user_id: Union[str, uuid.UUID], limit: int = 5) -> List[PromptRead]:
    with get_session() as session:
        prompts = (
            prompt_visibility(session.query(Prompt), as_uuid(user_id))
            .order_by(desc(Prompt.usage_count), desc(Prompt.created_at))
            .limit(limit)
            .all()
        )
        return [PromptRead.model_validate(p) for p in prompts]
