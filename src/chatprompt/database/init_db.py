"""
Schema creation helpers used by the CLI and the test suite.
"""

import logging

from chatprompt.database.engine import get_engine
from chatprompt.database.models import Base

logger = logging.getLogger(__name__)


def create_schema() -> None:
    """Create all tables that do not exist yet."""
    engine = get_engine()
    Base.metadata.create_all(engine)
    logger.info("Schema created on %s", engine.url.render_as_string(hide_password=True))


def drop_schema() -> None:
    Base.metadata.drop_all(get_engine())
