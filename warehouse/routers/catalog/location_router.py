# warehouse/routers/catalog/location_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.catalog.location_schemas import (
    LocationCreate,
    LocationOut,
    LocationListData,
)
from warehouse.services.catalog.location_service import (
    create_location,
    list_locations,
    get_location_for_code,
)
from warehouse.utils.check_roles import require_role
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response

router = APIRouter(prefix="/locations", tags=["Locations"])


@router.post("/", response_model=APIResponse[LocationOut], status_code=status.HTTP_201_CREATED)
async def create_location_api(
    payload: LocationCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(["admin", "warehouse"])),
):
    location = await create_location(db, payload, user)
    return success_response("Location created successfully", location)


@router.get("/", response_model=APIResponse[LocationListData])
async def list_locations_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    search: str | None = Query(None),
    area: str | None = Query(None),
):
    data = await list_locations(db, search=search, area=area)
    return success_response("Locations fetched successfully", data)


@router.get("/code/{code}", response_model=APIResponse[LocationOut])
async def get_location_by_code_api(
    code: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    location = await get_location_for_code(db, code)
    return success_response("Location fetched successfully", location)
