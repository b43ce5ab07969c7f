"""
Seed the system administrator (and demo agent) if the admin username does
not exist yet. Run from the project root with .env loaded.

Usage:
  python scripts/seed_users.py
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fieldcollect.core.config import settings
from fieldcollect.core.logging import setup_logging
from fieldcollect.db.init_db import init_db
from fieldcollect.db.session import SessionLocal


def main():
    setup_logging()
    db = SessionLocal()
    try:
        created = init_db(db)
        if created:
            print(f"Seeded admin user '{settings.INITIAL_ADMIN_USERNAME}'")
        else:
            print(f"Admin user '{settings.INITIAL_ADMIN_USERNAME}' already exists, nothing to do")
    finally:
        db.close()


if __name__ == "__main__":
    main()
