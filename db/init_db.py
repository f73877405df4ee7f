"""Create the ``projects`` table (and its index) on the configured database.

Usage:
    DATABASE_URL=postgresql+psycopg://... python -m db.init_db
"""

import logging

from db.models import Base
from db.session import get_engine
from infrastructure.log_setup import configure_logging

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create every table declared on ``Base``; existing tables are left alone."""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    configure_logging()
    init_db()
