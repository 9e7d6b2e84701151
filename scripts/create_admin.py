#!/usr/bin/env python3
"""
Create (or promote) an ADMIN account.

User management routes require an admin session, so a fresh deployment needs
one account created out of band.
"""
import asyncio
import os
import sys
import logging
import argparse
import getpass

# Add the parent directory to the path so we can import from app
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.core.database import get_db_context, initialize_db, close_db_connection
from app.crud import user as crud
from app.db.models.user import UserRole
from app.schemas.user import UserCreate
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


async def create_admin(name: str, email: str, password: str) -> int:
    await initialize_db()
    try:
        async with get_db_context() as db:
            existing = await crud.get_user_by_email(db, email)
            if existing:
                updated = await crud.update_user(
                    db, existing.id, {"role": UserRole.ADMIN, "password": password}
                )
                if not updated:
                    logger.error(f"Could not promote {email}")
                    return 1
                logger.info(f"Promoted existing user {email} to ADMIN")
                return 0

            created = await crud.create_user(
                db, UserCreate(name=name, email=email, password=password, role=UserRole.ADMIN)
            )
            if not created:
                logger.error(f"Could not create {email}")
                return 1
            logger.info(f"Created ADMIN user {email} ({created.id})")
            return 0
    finally:
        await close_db_connection()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("email", help="Login email")
    parser.add_argument("--name", default="Administrator", help="Display name (default: Administrator)")
    parser.add_argument("--password", help="Password (prompted when omitted)")
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 6:
        parser.error("password must be at least 6 characters")

    sys.exit(asyncio.run(create_admin(args.name, args.email, password)))
