#!/usr/bin/env python3
"""
Demo Data Script

Creates tables (if missing) and loads the sample campus used for demos:
1 admin, 3 employers, 5 students, 6 jobs, 5 applications.
Does nothing if an `admin` user already exists.

Run: python scripts/seed_demo_data.py
"""
import sys
sys.path.insert(0, '.')

from placement_portal.core.config import get_settings
from placement_portal.db.database import Database
from placement_portal.services.seed_service import seed_database
from placement_portal.services.storage import DatabaseStorage
from placement_portal.utils.logging import configure_logging


def main():
    settings = get_settings()
    configure_logging(settings)

    database = Database(settings.sqlalchemy_url, echo=settings.debug)
    database.create_all()

    passwords = seed_database(DatabaseStorage(database), log_credentials=False)
    database.dispose()

    if passwords is None:
        print("Database already seeded (admin user exists). Nothing to do.")
        return

    print("Seeded demo data. Change these passwords immediately:")
    print("  admin     -> username: admin")
    for role, password in passwords.items():
        print(f"  {role:<9} password: {password}")
    print("  employers -> techcorp, innovateinc, globalenterprises")
    print("  students  -> alice, bob, carol, david, emma")


if __name__ == "__main__":
    main()
