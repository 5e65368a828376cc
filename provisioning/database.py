from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import ArgumentError, IntegrityError, OperationalError
from db.engine import create_db_engine
from provisioning.exceptions import DatabaseConnectionError
import logging

logger = logging.getLogger(__name__)

HASHED_KEY_COLUMN = "hashed_key"


def build_engine(database_url: str) -> Engine:
    """Create the engine, reporting a bad URL, a missing driver or an unusable path as a connection failure"""
    try:
        return create_db_engine(database_url)
    except (ArgumentError, ImportError, OSError) as e:
        logger.error(f"Could not create database engine: {e}")
        raise DatabaseConnectionError(f"Could not connect to database: {e}")


def open_connection(engine: Engine) -> Connection:
    """Connect eagerly so an unreachable database fails before any query"""
    try:
        connection = engine.connect()
    except OperationalError as e:
        logger.error(f"Could not connect to database: {e.orig}")
        raise DatabaseConnectionError(f"Could not connect to database: {e.orig}")
    logger.info(f"Connected to {engine.url.render_as_string(hide_password=True)}")
    return connection


def is_duplicate_key_hash(error: IntegrityError) -> bool:
    # SQLite names the column, PostgreSQL the constraint and the column
    return HASHED_KEY_COLUMN in str(error.orig)
