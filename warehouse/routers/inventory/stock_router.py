# warehouse/routers/inventory/stock_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.schemas.inventory.stock_schemas import (
    StockInCreate,
    StockInScan,
    StockOutCreate,
    StockOutScan,
    LedgerRecordOut,
    StockListData,
    LowStockRowOut,
)
from warehouse.services.inventory.stock_in_service import (
    record_stock_in,
    record_stock_in_by_code,
)
from warehouse.services.inventory.stock_out_service import (
    record_stock_out,
    record_stock_out_by_code,
)
from warehouse.services.inventory.stock_query_service import list_stock, list_low_stock
from warehouse.utils.check_roles import require_role
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/stock", tags=["Stock"])
logger = get_logger(__name__)

STOCK_WRITERS = ["admin", "warehouse"]


# =====================================================
# STOCK IN
# =====================================================
@router.post(
    "/in",
    response_model=APIResponse[LedgerRecordOut],
    status_code=status.HTTP_201_CREATED,
)
async def stock_in_api(
    payload: StockInCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(STOCK_WRITERS)),
):
    logger.info(
        "Stock in",
        extra={"item_id": payload.item_id, "location_id": payload.location_id},
    )
    result = await record_stock_in(db, payload, user)
    return success_response("Stock in recorded", result)


@router.post(
    "/in/scan",
    response_model=APIResponse[LedgerRecordOut],
    status_code=status.HTTP_201_CREATED,
)
async def stock_in_scan_api(
    payload: StockInScan,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(STOCK_WRITERS)),
):
    logger.info(
        "Stock in (scan)",
        extra={"item_code": payload.item_code, "location_code": payload.location_code},
    )
    result = await record_stock_in_by_code(db, payload, user)
    return success_response("Stock in recorded", result)


# =====================================================
# STOCK OUT
# =====================================================
@router.post(
    "/out",
    response_model=APIResponse[LedgerRecordOut],
    status_code=status.HTTP_201_CREATED,
)
async def stock_out_api(
    payload: StockOutCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(STOCK_WRITERS)),
):
    logger.info(
        "Stock out",
        extra={"item_id": payload.item_id, "location_id": payload.location_id},
    )
    result = await record_stock_out(db, payload, user)
    return success_response("Stock out recorded", result)


@router.post(
    "/out/scan",
    response_model=APIResponse[LedgerRecordOut],
    status_code=status.HTTP_201_CREATED,
)
async def stock_out_scan_api(
    payload: StockOutScan,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(STOCK_WRITERS)),
):
    logger.info(
        "Stock out (scan)",
        extra={"item_code": payload.item_code, "location_code": payload.location_code},
    )
    result = await record_stock_out_by_code(db, payload, user)
    return success_response("Stock out recorded", result)


# =====================================================
# QUERIES
# =====================================================
@router.get("/", response_model=APIResponse[StockListData])
async def list_stock_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    item_id: int | None = Query(None),
    location_id: int | None = Query(None),
    category_id: int | None = Query(None),
    search: str | None = Query(None, description="Search by item code or name"),
):
    data = await list_stock(
        db,
        item_id=item_id,
        location_id=location_id,
        category_id=category_id,
        search=search,
    )
    return success_response("Stock fetched successfully", data)


@router.get("/low-stock", response_model=APIResponse[list[LowStockRowOut]])
async def list_low_stock_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_low_stock(db)
    return success_response("Low stock fetched successfully", data)
