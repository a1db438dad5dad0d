"""
Utility functions shared across modules: text trimming, ids, timestamps.
"""

import re
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def as_uuid(value: Union[str, uuid.UUID]) -> uuid.UUID:
    """
    Coerce a string or UUID into a UUID.

    Raises ValueError for anything that is not a valid UUID.
    """
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def as_uuid_list(values: Optional[Iterable[Union[str, uuid.UUID]]]) -> List[uuid.UUID]:
    """Coerce a list of ids, silently dropping values that are not UUIDs."""
    result = []
    for value in values or []:
        try:
            result.append(as_uuid(value))
        except (ValueError, AttributeError):
            continue
    return result


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to max_length, strip the cut edge and mark it with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def slugify_title(title: str) -> str:
    """Lowercase a title and replace whitespace runs with dashes."""
    return re.sub(r"\s+", "-", title.lower())
