# warehouse/routers/catalog/item_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.catalog.item_schemas import (
    ItemCreate,
    ItemUpdate,
    ItemOut,
    ItemListData,
)
from warehouse.services.catalog.item_service import (
    create_item,
    list_items,
    get_item,
    get_item_for_code,
    update_item,
)
from warehouse.utils.check_roles import require_role
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/items", tags=["Items"])
logger = get_logger(__name__)


@router.post("/", response_model=APIResponse[ItemOut], status_code=status.HTTP_201_CREATED)
async def create_item_api(
    payload: ItemCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(["admin"])),
):
    logger.info("Create item", extra={"item_code": payload.code})
    item = await create_item(db, payload, user)
    return success_response("Item created successfully", item)


@router.get("/", response_model=APIResponse[ItemListData])
async def list_items_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    search: str | None = Query(None, description="Search by code or name"),
    category_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_items(
        db,
        search=search,
        category_id=category_id,
        page=page,
        page_size=page_size,
    )
    return success_response("Items fetched successfully", data)


@router.get("/code/{code}", response_model=APIResponse[ItemOut])
async def get_item_by_code_api(
    code: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    item = await get_item_for_code(db, code)
    return success_response("Item fetched successfully", item)


@router.get("/{item_id}", response_model=APIResponse[ItemOut])
async def get_item_api(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    item = await get_item(db, item_id)
    return success_response("Item fetched successfully", item)


@router.patch("/{item_id}", response_model=APIResponse[ItemOut])
async def update_item_api(
    item_id: int,
    payload: ItemUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(["admin"])),
):
    item = await update_item(db, item_id, payload, user)
    return success_response("Item updated successfully", item)
