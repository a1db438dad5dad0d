"""
Conversation service module for conversation management operations.

Every operation is scoped to the acting user. A conversation that exists but
belongs to someone else behaves exactly like one that does not exist.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import desc
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import NoResultFound

from chatprompt.core.utils import as_uuid, utcnow
from chatprompt.database.models import Conversation, ConversationTag, Message
from chatprompt.database.session import get_session
from chatprompt.schemas.db_objects import ConversationRead, MessageRead
from chatprompt.search.unified.query_builder import conversation_visibility, ilike_any

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status", "is_pinned", "tags")


def _coerce_id(value: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    try:
        return as_uuid(value)
    except (ValueError, AttributeError):
        return None


def _owned_conversation(
    session: Session, conversation_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[Conversation]:
    """
    Fetch one non-deleted conversation owned by the user.

    Returns None on not-found; any other database error propagates.
    """
    try:
        return conversation_visibility(session.query(Conversation), user_id).filter(
            Conversation.id == conversation_id
        ).one()
    except NoResultFound:
        return None


def list_conversations(
    user_id: Union[str, uuid.UUID],
    status: Optional[str] = None,
    search: Optional[str] = None,
    tags: Optional[List[str]] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[List[ConversationRead], int]:
    """
    List the user's conversations, most recently updated first.

    Args:
        user_id: The acting user
        status: Optional status filter ("all" or None disables it)
        search: Optional substring matched against title and description
        tags: Optional tags; a conversation matches if it shares any of them
        limit: Maximum number of conversations to return (None for all)
        offset: Number of conversations to skip

    Returns:
        Tuple of (list of ConversationRead objects, total count)
    """
    user_id = as_uuid(user_id)
    with get_session() as session:
        query = conversation_visibility(session.query(Conversation), user_id)

        if status and status != "all":
            query = query.filter(Conversation.status == status)
        if search:
            query = query.filter(ilike_any([Conversation.title, Conversation.description], search))
        if tags:
            query = query.filter(Conversation.tag_rows.any(ConversationTag.tag.in_(tags)))

        total_count = query.count()

        query = query.order_by(desc(Conversation.updated_at))
        if limit:
            query = query.offset(offset).limit(limit)

        return [ConversationRead.model_validate(c) for c in query.all()], total_count


def get_conversation(
    conversation_id: Union[str, uuid.UUID], user_id: Union[str, uuid.UUID]
) -> Optional[ConversationRead]:
    """
    Get a single conversation by its ID.

    Returns:
        ConversationRead object or None if not found or not visible
    """
    conversation_id = _coerce_id(conversation_id)
    if conversation_id is None:
        return None

    with get_session() as session:
        conversation = _owned_conversation(session, conversation_id, as_uuid(user_id))
        return ConversationRead.model_validate(conversation) if conversation else None


def create_conversation(
    user_id: Union[str, uuid.UUID],
    title: str,
    description: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> ConversationRead:
    with get_session() as session:
        conversation = Conversation(
            user_id=as_uuid(user_id),
            title=title,
            description=description,
            tags=tags or [],
        )
        session.add(conversation)
        session.commit()
        logger.info(f"Created conversation {conversation.id}")
        return ConversationRead.model_validate(conversation)


def update_conversation(
    conversation_id: Union[str, uuid.UUID],
    user_id: Union[str, uuid.UUID],
    data: Dict[str, Any],
) -> Optional[ConversationRead]:
    """
    Update title, description, status, pin flag or tags.

    Unknown keys are ignored. Returns None if the conversation is not visible.
    """
    conversation_id = _coerce_id(conversation_id)
    if conversation_id is None:
        return None

    with get_session() as session:
        conversation = _owned_conversation(session, conversation_id, as_uuid(user_id))
        if conversation is None:
            return None

        for field in UPDATABLE_FIELDS:
            if field in data:
                setattr(conversation, field, data[field])
        conversation.updated_at = utcnow()

        session.commit()
        return ConversationRead.model_validate(conversation)


def delete_conversation(conversation_id: Union[str, uuid.UUID], user_id: Union[str, uuid.UUID]) -> bool:
    """Soft delete: the row stays, with status 'deleted'. Returns False if not visible."""
    conversation_id = _coerce_id(conversation_id)
    if conversation_id is None:
        return False

    with get_session() as session:
        conversation = _owned_conversation(session, conversation_id, as_uuid(user_id))
        if conversation is None:
            return False
        conversation.status = "deleted"
        session.commit()
        logger.info(f"Soft-deleted conversation {conversation_id}")
        return True


def get_conversation_messages(
    conversation_id: Union[str, uuid.UUID], user_id: Union[str, uuid.UUID]
) -> Optional[List[MessageRead]]:
    """
    Get the messages of a visible conversation, oldest first.

    Returns None if the conversation is not visible.
    """
    conversation_id = _coerce_id(conversation_id)
    if conversation_id is None:
        return None

    with get_session() as session:
        if _owned_conversation(session, conversation_id, as_uuid(user_id)) is None:
            return None

        messages = session.query(Message).filter(
            Message.conversation_id == conversation_id
        ).order_by(Message.created_at).all()
        return [MessageRead.model_validate(m) for m in messages]


def add_message(
    conversation_id: Union[str, uuid.UUID],
    user_id: Union[str, uuid.UUID],
    role: str,
    content: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> Optional[MessageRead]:
    """
    Append a message and touch the conversation's updated_at.

    Returns None if the conversation is not visible.
    """
    conversation_id = _coerce_id(conversation_id)
    if conversation_id is None:
        return None

    with get_session() as session:
        conversation = _owned_conversation(session, conversation_id, as_uuid(user_id))
        if conversation is None:
            return None

        message = Message(
            conversation_id=conversation_id,
            role=role,
            content=content,
            meta_info=metadata or {},
        )
        session.add(message)
        conversation.updated_at = utcnow()
        session.commit()
        return MessageRead.model_validate(message)
