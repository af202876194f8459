from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from warehouse.models.users.user_models import User
from warehouse.core.security import verify_password, create_access_token
from warehouse.schemas.auth.auth_schemas import TokenResponse, LoginUser
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.constants.activity_codes import ActivityCode
from warehouse.utils.logger import get_logger

logger = get_logger("auth.service")


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, username: str, password: str) -> TokenResponse:
    logger.info("Authenticating user", extra={"username": username})

    user = await db.scalar(select(User).where(User.username == username))

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"username": username})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"username": username})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    user.last_login = datetime.now(timezone.utc)

    access_token = create_access_token(
        subject=user.username,
        token_version=user.token_version,
        role=user.role,
    )

    await emit_activity(
        db,
        user_id=user.id,
        username=user.username,
        code=ActivityCode.LOGIN,
        **actor_context(user),
    )

    await db.commit()

    logger.info("Login successful", extra={"user_id": user.id})

    return TokenResponse(
        access_token=access_token,
        user=LoginUser(
            id=user.id,
            username=user.username,
            name=user.name,
            role=user.role,
        ),
    )
