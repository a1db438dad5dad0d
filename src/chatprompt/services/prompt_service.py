"""
Prompt service module for prompt templates, categories and usage tracking.

Reads see the user's own prompts plus every public prompt. Writes are
restricted to the owner; system templates (no owner) are read-only.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import desc, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import NoResultFound

from chatprompt.core.settings import DEFAULT_CATEGORY_COLOR
from chatprompt.core.utils import as_uuid, as_uuid_list, utcnow
from chatprompt.database.models import Prompt, PromptCategory, PromptTag, PromptUsage
from chatprompt.database.session import get_session
from chatprompt.schemas.db_objects import CategoryRead, PromptRead
from chatprompt.search.unified.query_builder import ilike_any, prompt_visibility

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content", "description", "category_id", "tags", "is_public")


def _coerce_id(value) -> Optional[uuid.UUID]:
    if value is None:
        return None
    try:
        return as_uuid(value)
    except (ValueError, AttributeError):
        return None


def _owned_prompt(session: Session, prompt_id: uuid.UUID, user_id: uuid.UUID) -> Optional[Prompt]:
    try:
        return session.query(Prompt).filter(Prompt.id == prompt_id, Prompt.user_id == user_id).one()
    except NoResultFound:
        return None


def list_prompts(
    user_id: Union[str, uuid.UUID],
    category_id: Optional[Union[str, uuid.UUID]] = None,
    search: Optional[str] = None,
    tags: Optional[List[str]] = None,
    is_public: Optional[bool] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> Tuple[List[PromptRead], int]:
    """
    List visible prompts, most used first, newest first within equal usage.

    Args:
        user_id: The acting user
        category_id: Optional category filter
        search: Optional substring matched against title, description and content
        tags: Optional tags; a prompt matches if it shares any of them
        is_public: Optional filter on the public flag
        limit: Maximum number of prompts to return (None for all)
        offset: Number of prompts to skip

    Returns:
        Tuple of (list of PromptRead objects, total count)
    """
    user_id = as_uuid(user_id)
    with get_session() as session:
        query = prompt_visibility(session.query(Prompt), user_id)

        if category_id:
            query = query.filter(Prompt.category_id.in_(as_uuid_list([category_id])))
        if search:
            query = query.filter(ilike_any([Prompt.title, Prompt.description, Prompt.content], search))
        if tags:
            query = query.filter(Prompt.tag_rows.any(PromptTag.tag.in_(tags)))
        if is_public is not None:
            query = query.filter(Prompt.is_public.is_(is_public))

        total_count = query.count()

        query = query.order_by(desc(Prompt.usage_count), desc(Prompt.created_at))
        if limit:
            query = query.offset(offset).limit(limit)

        return [PromptRead.model_validate(p) for p in query.all()], total_count


def list_visible_prompts(user_id: Union[str, uuid.UUID]) -> List[PromptRead]:
    """All prompts the user can see, most used first."""
    prompts, _ = list_prompts(user_id)
    return prompts


def get_prompt(prompt_id: Union[str, uuid.UUID], user_id: Union[str, uuid.UUID]) -> Optional[PromptRead]:
    """
    Get a single visible prompt.

    Returns:
        PromptRead object or None if not found or not visible
    """
    prompt_id = _coerce_id(prompt_id)
    if prompt_id is None:
        return None

    with get_session() as session:
        try:
            prompt = prompt_visibility(session.query(Prompt), as_uuid(user_id)).filter(
                Prompt.id == prompt_id
            ).one()
        except NoResultFound:
            return None
        return PromptRead.model_validate(prompt)


def create_prompt(
    user_id: Union[str, uuid.UUID],
    title: str,
    content: str,
    description: Optional[str] = None,
    category_id: Optional[Union[str, uuid.UUID]] = None,
    tags: Optional[List[str]] = None,
    is_public: bool = False,
) -> PromptRead:
    with get_session() as session:
        prompt = Prompt(
            user_id=as_uuid(user_id),
            title=title,
            content=content,
            description=description,
            category_id=_coerce_id(category_id),
            tags=tags or [],
            is_public=is_public,
        )
        session.add(prompt)
        session.commit()
        logger.info(f"Created prompt {prompt.id}")
        # Reload so the joined category is populated
        session.refresh(prompt)
        return PromptRead.model_validate(prompt)


def update_prompt(
    prompt_id: Union[str, uuid.UUID],
    user_id: Union[str, uuid.UUID],
    data: Dict[str, Any],
) -> Optional[PromptRead]:
    """
    Update an owned prompt. Unknown keys are ignored.

    Returns None if the prompt does not exist or is not owned by the user.
    """
    prompt_id = _coerce_id(prompt_id)
    if prompt_id is None:
        return None

    with get_session() as session:
        prompt = _owned_prompt(session, prompt_id, as_uuid(user_id))
        if prompt is None:
            return None

        for field in UPDATABLE_FIELDS:
            if field not in data:
                continue
            value = data[field]
            if field == "category_id":
                value = _coerce_id(value)
            setattr(prompt, field, value)
        prompt.updated_at = utcnow()

        session.commit()
        session.refresh(prompt)
        return PromptRead.model_validate(prompt)


def delete_prompt(prompt_id: Union[str, uuid.UUID], user_id: Union[str, uuid.UUID]) -> bool:
    """Hard delete of an owned prompt; its usage rows go with it."""
    prompt_id = _coerce_id(prompt_id)
    if prompt_id is None:
        return False

    with get_session() as session:
        prompt = _owned_prompt(session, prompt_id, as_uuid(user_id))
        if prompt is None:
            return False
        session.delete(prompt)
        session.commit()
        logger.info(f"Deleted prompt {prompt_id}")
        return True


def record_prompt_usage(
    prompt_id: Union[str, uuid.UUID],
    user_id: Union[str, uuid.UUID],
    conversation_id: Optional[Union[str, uuid.UUID]] = None,
) -> bool:
    """
    Record one use of a visible prompt and bump its usage counter.

    The counter is incremented in the database, not read-modify-written, so
    concurrent recordings are never lost. Returns False if the prompt is not
    visible to the user.
    """
    prompt_id = _coerce_id(prompt_id)
    if prompt_id is None:
        return False
    user_id = as_uuid(user_id)

    with get_session() as session:
        visible = prompt_visibility(session.query(Prompt.id), user_id).filter(
            Prompt.id == prompt_id
        ).first()
        if visible is None:
            return False

        session.add(PromptUsage(
            prompt_id=prompt_id,
            user_id=user_id,
            conversation_id=_coerce_id(conversation_id),
        ))
        session.execute(
            update(Prompt)
            .where(Prompt.id == prompt_id)
            .values(usage_count=Prompt.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        session.commit()
        return True


def list_categories() -> List[CategoryRead]:
    """All prompt categories, by name."""
    with get_session() as session:
        categories = session.query(PromptCategory).order_by(PromptCategory.name).all()
        return [CategoryRead.model_validate(c) for c in categories]


def create_category(name: str, description: Optional[str] = None, color: Optional[str] = None) -> CategoryRead:
    with get_session() as session:
        category = PromptCategory(
            name=name,
            description=description,
            color=color or DEFAULT_CATEGORY_COLOR,
        )
        session.add(category)
        session.commit()
        logger.info(f"Created prompt category {name!r}")
        return CategoryRead.model_validate(category)
