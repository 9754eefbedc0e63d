"""Database module for the URL shortener service."""
from shortener.db.base import (
    DatabaseHealthCheck,
    create_engine,
    create_session_factory,
    create_tables,
)
from shortener.db.resilience import (
    StoreTimeoutError,
    initialize_database_connection,
    with_store_timeout,
)
from shortener.db.session import db_transaction, get_db

__all__ = [
    "DatabaseHealthCheck",
    "StoreTimeoutError",
    "create_engine",
    "create_session_factory",
    "create_tables",
    "db_transaction",
    "get_db",
    "initialize_database_connection",
    "with_store_timeout",
]
