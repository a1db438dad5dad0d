"""
Export and import of a user's corpus in the interchange document format.

Export reads every visible conversation (with its messages, oldest first) and
every prompt the user owns. Import creates new records for the acting user,
one record at a time, and keeps going when a record fails: each failure
becomes a human-readable entry in the result's error list.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, Union
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from chatprompt.core.utils import as_uuid, utcnow
from chatprompt.database.models import Conversation, Message, Prompt, PromptCategory
from chatprompt.database.session import get_session
from chatprompt.interchange.schemas import (
    ExportDocument,
    ExportedConversation,
    ExportedMessage,
    ExportedPrompt,
    ImportedConversation,
    ImportedMessage,
    ImportedPrompt,
    ImportResult,
)

logger = logging.getLogger(__name__)

ImportSource = Union[Mapping, str, bytes, bytearray, ExportDocument]


def export_corpus(user_id: Union[str, UUID]) -> ExportDocument:
    """
    Build the export document for a user.

    Args:
        user_id: Owner of the corpus

    Returns:
        ExportDocument with non-deleted conversations and owned prompts,
        newest first. Database errors propagate.
    """
    user_id = as_uuid(user_id)

    with get_session() as session:
        conversations = (
            session.query(Conversation)
            .options(selectinload(Conversation.messages))
            .filter(Conversation.user_id == user_id, Conversation.status != "deleted")
            .order_by(desc(Conversation.created_at))
            .all()
        )
        # Public prompts of other users are not part of the corpus
        prompts = (
            session.query(Prompt)
            .filter(Prompt.user_id == user_id)
            .order_by(desc(Prompt.created_at))
            .all()
        )

        document = ExportDocument(
            exported_at=utcnow(),
            conversations=[export_conversation(c) for c in conversations],
            prompts=[export_prompt(p) for p in prompts],
        )

    logger.info(
        "Exported %d conversations and %d prompts for user %s",
        len(document.conversations), len(document.prompts), user_id,
    )
    return document


def export_conversation(conversation: Conversation) -> ExportedConversation:
    # Storage order is not trusted; messages are always emitted oldest first
    messages = sorted(conversation.messages, key=lambda m: m.created_at)
    return ExportedConversation(
        id=conversation.id,
        title=conversation.title,
        description=conversation.description,
        messages=[
            ExportedMessage(role=m.role, content=m.content, timestamp=m.created_at)
            for m in messages
        ],
        tags=conversation.tags,
        created_at=conversation.created_at,
    )


def export_prompt(prompt: Prompt) -> ExportedPrompt:
    return ExportedPrompt(
        id=prompt.id,
        title=prompt.title,
        content=prompt.content,
        description=prompt.description,
        category=prompt.category.name if prompt.category else None,
        tags=prompt.tags,
        usage_count=prompt.usage_count,
        created_at=prompt.created_at,
    )


def load_document(document: ImportSource) -> Dict[str, Any]:
    """
    Normalize an import source into a mapping.

    Raises:
        ValueError: if the source is not valid JSON or not a JSON object, or
            if "conversations"/"prompts" are present but not lists.
    """
    if isinstance(document, ExportDocument):
        return document.model_dump(mode="json")

    data = json.loads(document) if isinstance(document, (str, bytes, bytearray)) else document
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object at the top level")

    for key in ("conversations", "prompts"):
        value = data.get(key)
        if value is not None and not isinstance(value, list):
            raise ValueError(f'"{key}" must be a list')
    return dict(data)


def import_corpus(user_id: Union[str, UUID], document: ImportSource) -> ImportResult:
    """
    Import conversations and prompts for a user.

    Records are processed sequentially in input order, each committed on its
    own, so the error list lines up with the input. This function never
    raises for bad input or failing records; everything is reported in the
    returned ImportResult.
    """
    result = ImportResult()

    try:
        user_id = as_uuid(user_id)
        data = load_document(document)
    except ValueError as e:
        logger.error("Rejected import document: %s", e)
        result.errors.append(f"Invalid import document: {e}")
        return result

    with get_session() as session:
        for raw in data.get("conversations") or []:
            _import_conversation(session, user_id, raw, result)

        raw_prompts = data.get("prompts") or []
        if raw_prompts:
            category_map = _load_category_map(session, result)
            for raw in raw_prompts:
                _import_prompt(session, user_id, raw, category_map, result)

    logger.info(
        "Imported %d conversations and %d prompts for user %s (%d errors)",
        result.conversations, result.prompts, user_id, len(result.errors),
    )
    return result


def _record_title(raw: Any) -> str:
    if isinstance(raw, Mapping) and raw.get("title"):
        return str(raw["title"])
    return "Untitled"


def _reason(error: Exception) -> str:
    """Short, single-line description of a record failure."""
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
            for err in error.errors()
        )
    if isinstance(error, SQLAlchemyError) and getattr(error, "orig", None) is not None:
        return str(error.orig)
    return str(error)


def _load_category_map(session: Session, result: ImportResult) -> Dict[str, UUID]:
    """Lowercased category name -> id, fetched once per import."""
    try:
        return {c.name.lower(): c.id for c in session.query(PromptCategory).all()}
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Could not load prompt categories: %s", e)
        result.errors.append(f"Failed to load prompt categories: {_reason(e)}")
        return {}


def _import_conversation(session: Session, user_id: UUID, raw: Any, result: ImportResult) -> None:
    title = _record_title(raw)

    try:
        record = ImportedConversation.model_validate(raw)
        conversation = Conversation(
            user_id=user_id,
            title=record.title,
            description=record.description,
            tags=record.tags,
        )
        session.add(conversation)
        session.commit()
        conversation_id = conversation.id
    except (ValidationError, SQLAlchemyError) as e:
        session.rollback()
        logger.error(f"Error importing conversation {title!r}: {e}")
        result.errors.append(f'Failed to import conversation "{title}": {_reason(e)}')
        return
    except Exception as e:
        session.rollback()
        logger.exception(f"Unexpected error importing conversation {title!r}")
        result.errors.append(f'Unexpected error importing conversation "{title}": {e}')
        return

    if record.messages:
        try:
            messages = [ImportedMessage.model_validate(m) for m in record.messages]
            now = utcnow()
            session.add_all([
                Message(
                    conversation_id=conversation_id,
                    role=m.role,
                    content=m.content,
                    created_at=m.timestamp or now,
                )
                for m in messages
            ])
            session.commit()
        except Exception as e:
            # The conversation row is already committed and still counts
            session.rollback()
            logger.error(f"Error importing messages for {title!r}: {e}")
            result.errors.append(f'Failed to import messages for "{title}": {_reason(e)}')

    result.conversations += 1


def _import_prompt(
    session: Session,
    user_id: UUID,
    raw: Any,
    category_map: Dict[str, UUID],
    result: ImportResult,
) -> None:
    title = _record_title(raw)

    try:
        record = ImportedPrompt.model_validate(raw)
        # Unknown category names are not an error, the prompt is just uncategorized
        category_id = category_map.get(record.category.lower()) if record.category else None
        session.add(Prompt(
            user_id=user_id,
            title=record.title,
            content=record.content,
            description=record.description,
            category_id=category_id,
            tags=record.tags,
            is_public=False,  # imported prompts are always private
        ))
        session.commit()
    except (ValidationError, SQLAlchemyError) as e:
        session.rollback()
        logger.error(f"Error importing prompt {title!r}: {e}")
        result.errors.append(f'Failed to import prompt "{title}": {_reason(e)}')
        return
    except Exception as e:
        session.rollback()
        logger.exception(f"Unexpected error importing prompt {title!r}")
        result.errors.append(f'Unexpected error importing prompt "{title}": {e}')
        return

    result.prompts += 1
