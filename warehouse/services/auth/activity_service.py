# warehouse/services/auth/activity_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from warehouse.models.support.activity_models import UserActivity
from warehouse.schemas.auth.activity_schemas import (
    UserActivityOut,
    UserActivityFilters,
    UserActivityListData,
)
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


async def list_user_activities(
    *,
    db: AsyncSession,
    filters: UserActivityFilters,
) -> UserActivityListData:
    conditions = []

    if filters.user_id:
        conditions.append(UserActivity.user_id == filters.user_id)

    if filters.username:
        conditions.append(UserActivity.username_snapshot.ilike(f"%{filters.username}%"))

    if filters.code:
        conditions.append(UserActivity.code == filters.code.upper())

    total = await db.scalar(
        select(func.count(UserActivity.id)).where(*conditions)
    )

    activities = (
        await db.scalars(
            select(UserActivity)
            .where(*conditions)
            .order_by(UserActivity.created_at.desc(), UserActivity.id.desc())
            .limit(filters.page_size)
            .offset((filters.page - 1) * filters.page_size)
        )
    ).all()

    logger.info(
        "User activities fetched",
        extra={"total": total, "page": filters.page, "page_size": filters.page_size},
    )

    return UserActivityListData(
        total=total or 0,
        items=[UserActivityOut.model_validate(a) for a in activities],
    )
