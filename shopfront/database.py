from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool
from typing import Generator
import logging
from sqlalchemy.exc import SQLAlchemyError

from .config import settings, Settings

logger = logging.getLogger(__name__)


def build_engine(config: Settings):
    """
    Create the engine for the configured database.

    SQLite (tests) shares one in-memory connection across threads; every other
    backend gets explicit connect and pool checkout timeouts.
    """
    if config.database_url.startswith("sqlite"):
        return create_engine(
            config.database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    url = config.database_url
    # psycopg 3 is the installed driver; a bare postgresql:// would pick psycopg2
    if url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url[len("postgresql://"):]

    logger.info(f"Connecting to {config.env} database")
    return create_engine(
        url,
        connect_args={"connect_timeout": config.db_connect_timeout},
        pool_timeout=config.db_pool_timeout,
        pool_pre_ping=True,
        echo=config.env == "local",
    )


engine = build_engine(settings)


def get_session() -> Generator[Session, None, None]:
    """
    Get a database session.
    """
    with Session(engine) as session:
        yield session


def init_db():
    """
    Initialize the database by creating all tables if they don't exist.
    """
    # Registers the tables on SQLModel.metadata
    from . import models  # noqa: F401

    logger.debug("Initializing database tables")
    try:
        SQLModel.metadata.create_all(engine)
        logger.debug("Database tables initialized successfully")
    except SQLAlchemyError as e:
        logger.error(f"Error initializing database: {str(e)}")
        raise


def drop_all_tables():
    """
    Drop all tables in the database.
    """
    logger.debug("Dropping all tables")
    try:
        SQLModel.metadata.drop_all(engine)
        logger.debug("All tables dropped successfully")
    except SQLAlchemyError as e:
        logger.error(f"Error dropping tables: {str(e)}")
        raise
