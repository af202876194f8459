# warehouse/routers/inventory/flow_router.py

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.constants.flow_type import FlowType
from warehouse.core.db import get_db
from warehouse.schemas.inventory.flow_schemas import FlowEntryOut, FlowListData
from warehouse.services.inventory.flow_service import list_flows, list_item_flows
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response

router = APIRouter(prefix="/flow", tags=["Item Flow"])


@router.get("/", response_model=APIResponse[FlowListData])
async def list_flows_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    item_id: int | None = Query(None),
    location_id: int | None = Query(None, description="Matches either side of the movement"),
    flow_type: FlowType | None = Query(None),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None, description="Inclusive"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_flows(
        db,
        item_id=item_id,
        location_id=location_id,
        flow_type=flow_type,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )
    return success_response("Flows fetched successfully", data)


@router.get("/item/{item_id}", response_model=APIResponse[list[FlowEntryOut]])
async def list_item_flows_api(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_item_flows(db, item_id)
    return success_response("Item flows fetched successfully", data)
