from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.auth.auth_schemas import LoginRequest, TokenResponse
from warehouse.services.auth.auth_service import login_user
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=APIResponse[TokenResponse])
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt", extra={"username": payload.username})

    tokens = await login_user(db, payload.username, payload.password)

    return success_response("Login successful", tokens)
