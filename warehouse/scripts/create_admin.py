# Seed the first admin account.
#
#   ADMIN_USERNAME=admin ADMIN_PASSWORD=... python -m warehouse.scripts.create_admin

import asyncio
import os

from sqlalchemy import select

from warehouse.core.config import APP_ENV
from warehouse.core.db import AsyncSessionLocal, init_models
from warehouse.core.security import hash_password
from warehouse.models.users.user_models import User
from warehouse.utils.logger import get_logger

logger = get_logger("scripts.create_admin")


async def create_admin(username: str, password: str, name: str = "Administrator") -> bool:
    async with AsyncSessionLocal() as session:
        exists = await session.scalar(select(User.id).where(User.username == username))
        if exists:
            logger.info("Admin already present", extra={"username": username})
            return False

        session.add(
            User(
                username=username,
                password_hash=hash_password(password),
                name=name,
                role="admin",
                is_active=True,
            )
        )
        await session.commit()
        logger.info("Admin user created", extra={"username": username})
        return True


async def main():
    password = os.getenv("ADMIN_PASSWORD")
    if not password:
        raise SystemExit("ADMIN_PASSWORD must be set")

    if APP_ENV == "development":
        await init_models()
    await create_admin(os.getenv("ADMIN_USERNAME", "admin"), password)


if __name__ == "__main__":
    asyncio.run(main())
