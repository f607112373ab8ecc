#!/usr/bin/env python3
"""
Admin Account Bootstrap Script

Admins cannot self-register through the API. This script creates one
directly in the database, or promotes and reactivates an existing user
with the same email.

Usage:
    # Create an admin
    python scripts/create_admin.py --email admin@example.com --name "Site Admin" --password secret123

    # Promote an existing account
    python scripts/create_admin.py --email someone@example.com --promote
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from app.auth import hash_password
from app.database import async_session, init_db
from app.models import User, UserRole

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


async def create_admin(email: str, name: str, password: str, phone: str = "") -> User:
    async with async_session() as session:
        result = await session.execute(select(User).where(User.email == email.lower()))
        if result.scalar_one_or_none():
            raise SystemExit(f"User {email} already exists (use --promote)")

        user = User(
            role=UserRole.ADMIN.value,
            name=name,
            email=email.lower(),
            password_hash=hash_password(password),
            phone=phone,
        )
        session.add(user)
        await session.commit()
        return user


async def promote(email: str) -> User:
    async with async_session() as session:
        result = await session.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        if not user:
            raise SystemExit(f"User {email} not found")

        user.role = UserRole.ADMIN.value
        user.is_active = True
        await session.commit()
        return user


async def main() -> None:
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("--email", required=True, help="Admin email address")
    parser.add_argument("--name", default="Admin", help="Display name")
    parser.add_argument("--password", help="Password (min 6 characters)")
    parser.add_argument("--phone", default="", help="Contact phone")
    parser.add_argument("--promote", action="store_true", help="Promote an existing user")

    args = parser.parse_args()

    await init_db()

    if args.promote:
        user = await promote(args.email)
        logger.info(f"Promoted {user.email} to admin")
        return

    if not args.password or len(args.password) < 6:
        parser.error("--password of at least 6 characters is required")

    user = await create_admin(args.email, args.name, args.password, args.phone)
    logger.info(f"Created admin {user.email} ({user.id})")


if __name__ == "__main__":
    asyncio.run(main())
