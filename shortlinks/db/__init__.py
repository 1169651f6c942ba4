"""Database module for the short links service."""
from shortlinks.db.base import engine, get_engine, create_tables, DatabaseHealthCheck
from shortlinks.db.session import get_db, db_transaction

__all__ = [
    "engine",
    "get_engine",
    "create_tables",
    "DatabaseHealthCheck",
    "get_db",
    "db_transaction",
]
