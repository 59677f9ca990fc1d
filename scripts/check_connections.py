#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the relational store and session store are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from sqlalchemy.engine import make_url

from placement_portal.core.config import get_settings
from placement_portal.core.sessions import build_session_store
from placement_portal.db.database import Database


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT PORTAL - CONNECTION CHECK")
    print("=" * 50)

    # Relational store
    print("\n[1] Checking database...")
    print(f"    URL: {make_url(settings.sqlalchemy_url).render_as_string(hide_password=True)}")
    database = Database(settings.sqlalchemy_url)
    db_ok = database.test_connection()
    print(f"    Database: {'CONNECTED' if db_ok else 'FAILED'}")
    database.dispose()

    # Session store
    print(f"\n[2] Checking session store ({settings.session_backend})...")
    if settings.session_backend == "mongo":
        print(f"    URI: {settings.mongodb_uri}")
        print(f"    Database: {settings.mongodb_db}")
    try:
        sessions_ok = build_session_store(settings).ping()
    except Exception as e:
        print(f"    Error: {e}")
        sessions_ok = False
    print(f"    Session store: {'CONNECTED' if sessions_ok else 'FAILED'}")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0 if db_ok and sessions_ok else 1


if __name__ == "__main__":
    sys.exit(main())
