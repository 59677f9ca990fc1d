"""
MongoDB Connection Utility

MongoDB stores:
- Server-side login sessions (shared by every API instance)

WHY MongoDB for these?
- TTL indexes expire sessions without a cleanup job
- Any number of API processes can read the same session
"""
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from placement_portal.core.config import Settings
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

# Collection name constants (avoid typos)
COLLECTIONS = {
    "sessions": "sessions",
}


def get_mongo_client(settings: Settings) -> MongoClient:
    """Create a MongoDB client (connection pooling handled internally by pymongo)"""
    return MongoClient(settings.mongodb_uri, tz_aware=True)


def get_mongo_db(client: MongoClient, settings: Settings) -> Database:
    """Get the sessions database"""
    return client[settings.mongodb_db]


def get_collection(db: Database, name: str) -> Collection:
    return db[COLLECTIONS[name]]


def test_mongo_connection(client: MongoClient) -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        client.admin.command("ping")
        return True
    except Exception as e:
        logger.warning("mongodb_unreachable", error=str(e))
        return False


def init_mongo_indexes(db: Database) -> None:
    """
    Create indexes for the session collection.
    Call this once during app startup.
    """
    sessions = get_collection(db, "sessions")

    # Mongo's TTL monitor deletes a session once expires_at has passed
    sessions.create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)

    logger.info("mongodb_indexes_ready")
