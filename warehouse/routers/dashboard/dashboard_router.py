# warehouse/routers/dashboard/dashboard_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.dashboard.dashboard_schemas import DashboardSummaryOut
from warehouse.services.dashboard.dashboard_service import dashboard_summary
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=APIResponse[DashboardSummaryOut])
async def dashboard_summary_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await dashboard_summary(db)
    return success_response("Dashboard fetched successfully", data)
