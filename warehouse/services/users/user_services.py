from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from warehouse.models.users.user_models import User
from warehouse.schemas.users.user_schemas import (
    UserCreateSchema,
    UserOut,
    UserListData,
)
from warehouse.core.security import hash_password
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.constants.activity_codes import ActivityCode
from warehouse.core.exceptions import AppException
from warehouse.constants.error_codes import ErrorCode
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


# =========================
# CREATE USER
# =========================
async def create_user(db: AsyncSession, payload: UserCreateSchema, admin) -> UserOut:
    username = payload.username.strip()

    exists = await db.scalar(select(User.id).where(User.username == username))
    if exists:
        raise AppException(409, "Username already exists", ErrorCode.USERNAME_EXISTS)

    user = User(
        username=username,
        password_hash=hash_password(payload.password),
        name=payload.name,
        role=payload.role,
    )

    db.add(user)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise AppException(409, "Username already exists", ErrorCode.USERNAME_EXISTS)

    await emit_activity(
        db,
        user_id=admin.id,
        username=admin.username,
        code=ActivityCode.CREATE_USER,
        **actor_context(admin),
        target_username=user.username,
        target_role=user.role.capitalize(),
    )

    await db.commit()
    await db.refresh(user)

    logger.info("User created", extra={"user_id": user.id})
    return UserOut.model_validate(user)


# =========================
# LIST USERS
# =========================
async def list_users(
    db: AsyncSession,
    *,
    search: str | None = None,
    role: str | None = None,
    include_inactive: bool = False,
) -> UserListData:
    stmt = select(User)

    if search:
        stmt = stmt.where(
            User.username.ilike(f"%{search}%") | User.name.ilike(f"%{search}%")
        )

    if role:
        stmt = stmt.where(User.role == role)

    if not include_inactive:
        stmt = stmt.where(User.is_active.is_(True))

    total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
    users = (await db.scalars(stmt.order_by(User.username))).all()

    return UserListData(
        total=total or 0,
        items=[UserOut.model_validate(u) for u in users],
    )
