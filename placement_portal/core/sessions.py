"""
Server-side session storage.

The cookie only ever holds an opaque session id; the data (the user id)
lives behind a SessionStore:

- InMemorySessionStore: single process, used in tests and local dev
- MongoSessionStore: shared by every API instance, expired by a TTL index
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from pymongo.collection import Collection

from placement_portal.core.config import Settings
from placement_portal.db.mongodb import (
    get_collection, get_mongo_client, get_mongo_db, init_mongo_indexes, test_mongo_connection
)
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore(ABC):
    """get / set / destroy keyed by session id."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[dict]:
        """Return session data, or None when missing or expired."""

    @abstractmethod
    def set(self, session_id: str, data: dict, ttl_seconds: int) -> None:
        ...

    @abstractmethod
    def destroy(self, session_id: str) -> None:
        ...

    def ping(self) -> bool:
        return True


class InMemorySessionStore(SessionStore):
    """Process-local store. Not shared across server instances."""

    def __init__(self, prune_interval_seconds: int = 24 * 60 * 60):
        self._sessions: Dict[str, Tuple[datetime, dict]] = {}
        self._lock = threading.Lock()
        self._prune_interval = timedelta(seconds=prune_interval_seconds)
        self._last_prune = _now()

    def get(self, session_id: str) -> Optional[dict]:
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            expires_at, data = entry
            if expires_at <= _now():
                del self._sessions[session_id]
                return None
            return dict(data)

    def set(self, session_id: str, data: dict, ttl_seconds: int) -> None:
        with self._lock:
            self._sessions[session_id] = (_now() + timedelta(seconds=ttl_seconds), dict(data))
            self._prune_expired()

    def destroy(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def _prune_expired(self) -> None:
        # caller holds the lock
        now = _now()
        if now - self._last_prune < self._prune_interval:
            return
        expired = [sid for sid, (expires_at, _) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        self._last_prune = now

    def __len__(self) -> int:
        return len(self._sessions)


class MongoSessionStore(SessionStore):
    """Sessions in a MongoDB collection with a TTL index on expires_at."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def get(self, session_id: str) -> Optional[dict]:
        doc = self.collection.find_one({"_id": session_id})
        if not doc:
            return None
        # TTL monitor runs about once a minute; don't trust a stale doc
        if doc["expires_at"] <= _now():
            self.destroy(session_id)
            return None
        return doc["data"]

    def set(self, session_id: str, data: dict, ttl_seconds: int) -> None:
        self.collection.replace_one(
            {"_id": session_id},
            {"_id": session_id, "data": data, "expires_at": _now() + timedelta(seconds=ttl_seconds)},
            upsert=True
        )

    def destroy(self, session_id: str) -> None:
        self.collection.delete_one({"_id": session_id})

    def ping(self) -> bool:
        return test_mongo_connection(self.collection.database.client)


def build_session_store(settings: Settings) -> SessionStore:
    """Pick the session backend named in settings."""
    if settings.session_backend == "mongo":
        db = get_mongo_db(get_mongo_client(settings), settings)
        init_mongo_indexes(db)
        logger.info("session_store_selected", backend="mongo", database=settings.mongodb_db)
        return MongoSessionStore(get_collection(db, "sessions"))

    logger.info("session_store_selected", backend="memory")
    return InMemorySessionStore(prune_interval_seconds=settings.session_max_age_seconds)
