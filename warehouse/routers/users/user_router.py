from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.users.user_schemas import (
    UserCreateSchema,
    UserOut,
    UserListData,
)
from warehouse.services.users.user_services import create_user, list_users
from warehouse.utils.check_roles import require_role
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/users", tags=["Users"])
logger = get_logger(__name__)


@router.post("/", response_model=APIResponse[UserOut])
async def create_user_api(
    payload: UserCreateSchema,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role(["admin"])),
):
    logger.info("Create user request", extra={"username": payload.username})
    user = await create_user(db, payload, admin)
    return success_response("User created successfully", user)


# any signed-in user; feeds the borrower / recipient pickers
@router.get("/", response_model=APIResponse[UserListData])
async def list_users_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    search: str | None = Query(None),
    role: str | None = Query(None),
    include_inactive: bool = Query(False),
):
    users = await list_users(db, search=search, role=role, include_inactive=include_inactive)
    return success_response("Users fetched", users)
