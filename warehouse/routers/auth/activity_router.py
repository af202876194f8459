# warehouse/routers/auth/activity_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.auth.activity_schemas import UserActivityFilters, UserActivityListData
from warehouse.services.auth.activity_service import list_user_activities
from warehouse.utils.check_roles import require_role
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/activities", tags=["User Activities"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[UserActivityListData])
async def list_user_activities_api(
    filters: UserActivityFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),
):
    logger.info(
        "List user activities requested",
        extra=filters.model_dump(exclude_none=True),
    )

    result = await list_user_activities(db=db, filters=filters)

    return success_response("User activities fetched successfully", result)
