"""
Database module - relational store (SQLAlchemy) and MongoDB session store connections.
"""
from placement_portal.db.database import Database, create_db_engine
from placement_portal.db.mongodb import get_mongo_client, test_mongo_connection

__all__ = [
    "Database",
    "create_db_engine",
    "get_mongo_client",
    "test_mongo_connection"
]
