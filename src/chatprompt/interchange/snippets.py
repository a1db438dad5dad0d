"""
IDE-facing views of prompts: comment snippets and workspace configuration.

Both outputs are derived, never stored, and depend only on the prompts passed
in plus the integration endpoint.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from chatprompt.core.config import settings
from chatprompt.core.settings import (
    AUTOCOMPLETE_TRIGGER_CHARACTERS,
    KEYBINDING_PREFIX,
    SNIPPET_HEADER,
)
from chatprompt.core.utils import slugify_title
from chatprompt.interchange.codec import export_corpus

logger = logging.getLogger(__name__)


def _category_name(prompt) -> Optional[str]:
    # Export documents carry the name, read models carry the category object
    category = getattr(prompt, "category", None)
    if category is None or isinstance(category, str):
        return category
    return category.name


def generate_snippet(prompt) -> str:
    """
    Render a prompt as a comment block that can be pasted into a source file.

    Accepts anything with title, description, tags, usage_count and content
    attributes (ORM prompts, PromptRead, ExportedPrompt).
    """
    return (
        f"// {SNIPPET_HEADER} - {prompt.title}\n"
        f"// {prompt.description or 'No description'}\n"
        f"// Tags: {', '.join(prompt.tags)}\n"
        f"// Usage: {prompt.usage_count} times\n"
        f"\n"
        f"/*\n"
        f"{prompt.content}\n"
        f"*/"
    )


def keybinding_for(title: str) -> str:
    return f"{KEYBINDING_PREFIX} {slugify_title(title)}"


def generate_workspace_config(prompts: Iterable, api_endpoint: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the workspace settings object for a list of prompts.

    Args:
        prompts: Prompts in the order they should appear
        api_endpoint: Integration endpoint; defaults to the app_url setting

    Returns:
        Mapping with the prompt entries, auto-complete and integration settings
    """
    return {
        "chatprompt.prompts": [
            {
                "id": str(prompt.id),
                "title": prompt.title,
                "description": prompt.description,
                "content": prompt.content,
                "tags": list(prompt.tags),
                "category": _category_name(prompt),
                "keybinding": keybinding_for(prompt.title),
            }
            for prompt in prompts
        ],
        "chatprompt.autoComplete": {
            "enabled": True,
            "triggerCharacters": list(AUTOCOMPLETE_TRIGGER_CHARACTERS),
        },
        "chatprompt.integration": {
            "apiEndpoint": api_endpoint or settings.app_url,
            "syncEnabled": True,
        },
    }


def sync_workspace(user_id: Union[str, UUID], api_endpoint: Optional[str] = None) -> Dict[str, Any]:
    """
    Prepare everything an IDE needs to sync: the export document and the
    workspace config for the exported prompts.

    Returns a status mapping instead of raising when the export fails.
    """
    try:
        document = export_corpus(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Workspace sync failed for user {user_id}: {e}")
        return {"success": False, "message": f"Sync failed: {e}"}

    return {
        "success": True,
        "message": "Sync data prepared successfully",
        "data": {
            "export": document.model_dump(mode="json"),
            "config": generate_workspace_config(document.prompts, api_endpoint),
        },
    }
