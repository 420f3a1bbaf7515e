"""Generate database session"""

import logging
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings, configure_logging, get_settings
from src.db.schema import Base

_LOGGER = logging.getLogger(__name__)


def init_database(settings: Optional[Settings] = None) -> sessionmaker[Session]:
    """
    Application start-up
    ----
    Set up logging, connect to the configured database and ensure all tables are created.
    Returns the factory that hands out sessions (see get_db).
    """
    settings = settings or get_settings()
    configure_logging(settings)
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    Base.metadata.create_all(bind=engine)
    _LOGGER.info("Connected to database %s", engine.url.render_as_string(hide_password=True))
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """One session per request, always closed afterwards."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
