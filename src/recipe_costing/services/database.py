"""
Database engine and session handling for the costing services.

Recipes, inventory items and custom unit conversions live in a single SQLite
file whose location comes from Config. Services obtain sessions through
session_scope(); tests swap get_session_factory() for an in-memory factory.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, close_all_sessions, sessionmaker
from sqlalchemy.pool import StaticPool

from ..models.base import Base
from ..utils.config import get_config

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


@event.listens_for(Engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    """
    Turn on SQLite foreign key enforcement for every new connection.

    Needed for UnitConversion rows to be removed with their inventory item and
    for recipe lines to be unlinked (SET NULL) when stock is deleted.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Build an engine for the costing database.

    Args:
        database_url: SQLAlchemy URL; defaults to the configured database file,
            whose directory is created on demand
        echo: Log every SQL statement

    Returns:
        Engine; in-memory URLs share one connection through StaticPool
    """
    if database_url is None:
        config = get_config()
        config.ensure_directories()
        database_url = config.database_url

    logger.info(f"Creating database engine: {database_url}")

    connect_args = {"check_same_thread": False}
    if ":memory:" in database_url or "mode=memory" in database_url:
        return create_engine(
            database_url, echo=echo, connect_args=connect_args, poolclass=StaticPool
        )

    connect_args["timeout"] = 30
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def expected_tables() -> List[str]:
    """Names of every table the costing models declare."""
    from .. import models  # noqa: F401

    return sorted(Base.metadata.tables)


def init_database(engine: Optional[Engine] = None) -> None:
    """
    Create any missing costing tables. Existing tables are left alone.

    Args:
        engine: Engine to use; defaults to the global engine
    """
    engine = engine or get_engine()
    tables = expected_tables()
    Base.metadata.create_all(engine)
    logger.info(f"Database schema ready ({len(tables)} tables)")


def get_engine(force_recreate: bool = False) -> Engine:
    """Return the global engine, creating it on first use."""
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()

    return _engine


def get_session_factory() -> sessionmaker:
    """Return the global session factory bound to get_engine()."""
    global _SessionFactory

    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)

    return _SessionFactory


def get_session() -> Session:
    """Open a new session from the current factory."""
    return get_session_factory()()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Run a block in one transaction.

    Commits when the block finishes, rolls back and re-raises on any
    exception, and always closes the session.

    Example:
        with session_scope() as session:
            session.add(UnitConversion(inventory_item_id=7, recipe_unit="g",
                                       inventory_unit="unit", conversion_factor="0.002"))
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def verify_database(engine: Optional[Engine] = None) -> bool:
    """
    Check that every costing table exists.

    Returns:
        False when the database cannot be inspected or a table is missing
    """
    try:
        present = set(inspect(engine or get_engine()).get_table_names())
    except SQLAlchemyError as e:
        logger.error(f"Database verification failed: {e}")
        return False

    missing = [table for table in expected_tables() if table not in present]
    if missing:
        logger.warning(f"Database is missing tables: {', '.join(missing)}")
    return not missing


def close_connections() -> None:
    """Close open sessions and dispose of the global engine."""
    global _engine, _SessionFactory

    if _SessionFactory is not None:
        close_all_sessions()
        _SessionFactory = None

    if _engine is not None:
        _engine.dispose()
        _engine = None

    logger.info("Database connections closed")


def initialize_app_database() -> None:
    """Open (or create) the configured database file and make sure its schema exists."""
    config = get_config()
    action = "Using existing" if config.database_exists() else "Creating new"
    logger.info(f"{action} database at: {config.database_path}")

    engine = get_engine()
    init_database(engine)

    if not verify_database(engine):
        logger.warning("Database verification failed - tables may not exist")
