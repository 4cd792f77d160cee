"""
==================================================
Database connectivity utilities for the source DB.
==================================================

Provides engine creation and connection checks for the Oracle database
holding the source table metadata. Connection settings come from
core.config; every argument can be overridden.

Example:
    >>> from utils.database_utils import create_sqlalchemy_engine, verify_connection
    >>>
    >>> success, message = verify_connection()
    >>> engine = create_sqlalchemy_engine()
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config

logger = logging.getLogger(__name__)


def create_sqlalchemy_engine(
    url: Optional[URL] = None,
    echo: bool = False,
    pool_size: int = 2,
    max_overflow: int = 2
) -> Engine:
    """
    Create SQLAlchemy engine for the source database.

    Args:
        url: Connection URL (defaults to config.get_connection_url())
        echo: Enable SQL statement logging
        pool_size: Connection pool size
        max_overflow: Maximum overflow connections

    Returns:
        Configured SQLAlchemy Engine
    """
    return create_engine(
        url or config.get_connection_url(),
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True  # Verify connections before using
    )


def check_database_available(engine: Optional[Engine] = None) -> bool:
    """
    Check whether the source database accepts connections.

    Args:
        engine: Engine to test (a temporary one is created when omitted)

    Returns:
        True if a trivial query succeeds, False otherwise
    """
    owns_engine = engine is None
    engine = engine or create_sqlalchemy_engine()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1 FROM DUAL"))
        return True
    except SQLAlchemyError as e:
        logger.debug(f"Database not available: {e}")
        return False
    finally:
        if owns_engine:
            engine.dispose()


def verify_connection(engine: Optional[Engine] = None) -> Tuple[bool, str]:
    """
    Verify database connection and return status with details.

    Returns:
        Tuple of (success: bool, message: str)
    """
    target = f"{config.db_host}:{config.db_port}/{config.db.service_name}"
    if check_database_available(engine):
        return True, f"Connected to Oracle at {target}"
    return False, f"Oracle database at {target} is not available"
