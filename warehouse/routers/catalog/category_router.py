# warehouse/routers/catalog/category_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.catalog.category_schemas import CategoryCreate, CategoryOut
from warehouse.services.catalog.category_service import create_category, list_categories
from warehouse.utils.check_roles import require_role
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("/", response_model=APIResponse[CategoryOut], status_code=status.HTTP_201_CREATED)
async def create_category_api(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(["admin", "warehouse"])),
):
    category = await create_category(db, payload, user)
    return success_response("Category created successfully", category)


@router.get("/", response_model=APIResponse[list[CategoryOut]])
async def list_categories_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_categories(db)
    return success_response("Categories fetched successfully", data)
