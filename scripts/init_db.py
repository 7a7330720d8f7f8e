#!/usr/bin/env python3
"""
Standalone database initialization script.
Creates the schema and, when the directory is empty, an initial ADMIN account
(INITIAL_ADMIN_USER_NAME / INITIAL_ADMIN_PASSWORD).
"""

import sys
import os
import logging

# Ensure we're using the right Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from app.config import settings
from app.security import PasswordHasher
from domain.enums import Role
from domain.models import SessionLocal, init_database
from repositories import UserRepository

logger = logging.getLogger("calorietracker.scripts.init_db")


def seed_admin(db, hasher=None) -> bool:
    """Create the bootstrap administrator if no account exists yet."""
    repo = UserRepository(db)
    if repo.count_all() > 0:
        logger.info("Directory already populated; skipping admin seed")
        return False
    if not settings.initial_admin_password:
        logger.warning("INITIAL_ADMIN_PASSWORD not set; skipping admin seed")
        return False

    hasher = hasher or PasswordHasher()
    repo.create_user(
        user_name=settings.initial_admin_user_name,
        name="Administrator",
        password_hash=hasher.hash(settings.initial_admin_password),
        role=Role.ADMIN,
        calorie_target=settings.default_calorie_target,
    )
    logger.info(f"admin_seeded user_name={settings.initial_admin_user_name}")
    return True


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()), format=settings.log_format
    )
    try:
        init_database()
        db = SessionLocal()
        try:
            seed_admin(db)
        finally:
            db.close()
    except Exception:
        logger.exception("Database initialization failed")
        return 1
    return 0


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("CalorieTracker Database Initialization")
    print("=" * 60 + "\n")

    exit_code = main()

    print("\n" + "=" * 60)
    print("SUCCESS! Your database is ready to use." if exit_code == 0 else "FAILED! Check the errors above.")
    print("=" * 60 + "\n")

    sys.exit(exit_code)
