#!/usr/bin/env python3
"""
setup_db.py: create the schema and, optionally, an admin account.

    python -m scripts.setup_db
    python -m scripts.setup_db --admin-username admin --admin-email admin@example.com --admin-password 'S3cretpass'

An existing user with the given username is promoted to admin; if a
password is given, theirs is replaced and their sessions are revoked.
"""
import argparse

from fastapi import HTTPException
from pydantic import ValidationError

import models  # noqa: F401  registers every table on Base.metadata
from core.database import Base, SessionLocal, engine
from core.logging_config import setup_logging, get_logger
from core.config import settings
from schemas.auth_schemas import CreateUserRequest
from services.auth_service import AuthService
from services.token_service import TokenService
from utils.hashing import get_password_hash

logger = get_logger("scripts.setup_db")


def create_schema():
    Base.metadata.create_all(bind=engine)
    logger.info("Schema created", extra={"tables": sorted(Base.metadata.tables)})


def ensure_admin(username: str, email: str | None, password: str | None):
    db = SessionLocal()
    try:
        user = AuthService.get_user_by_username(db, username)

        if user:
            user.is_admin = True
            if password:
                user.hashed_password = get_password_hash(password)
            db.commit()
            if password:
                TokenService.revoke_all_user_tokens(user.id, db)
            logger.info("Existing user promoted to admin", extra={"user_id": user.id})
            return user

        if not email or not password:
            raise SystemExit("--admin-email and --admin-password are required to create a new admin")

        try:
            request = CreateUserRequest(username=username, email=email, password=password)
        except ValidationError as e:
            raise SystemExit(f"Invalid admin details:\n{e}")

        try:
            user = AuthService.create_user(request, db, is_admin=True)
        except HTTPException as e:
            raise SystemExit(e.detail)

        logger.info("Admin user created", extra={"user_id": user.id})
        return user
    finally:
        db.close()


def main():
    ap = argparse.ArgumentParser(description="Create database tables and an optional admin user")
    ap.add_argument("--admin-username", help="Username of the admin to create or promote")
    ap.add_argument("--admin-email", help="Email for a newly created admin")
    ap.add_argument("--admin-password", help="Password for a new admin, or a reset for an existing one")
    args = ap.parse_args()

    setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)

    create_schema()

    if args.admin_username:
        ensure_admin(args.admin_username, args.admin_email, args.admin_password)

    print("Done.")


if __name__ == "__main__":
    main()
