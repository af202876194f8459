# warehouse/routers/inventory/borrow_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.db import get_db
from warehouse.models.enums.borrow_status import BorrowKind, BorrowStatus
from warehouse.schemas.inventory.borrow_schemas import (
    BorrowCreate,
    BorrowScan,
    ReturnCreate,
    BorrowRecordListData,
)
from warehouse.schemas.inventory.stock_schemas import LedgerRecordOut
from warehouse.services.inventory.borrow_service import (
    record_borrow,
    record_borrow_by_code,
    record_return,
    list_borrow_records,
)
from warehouse.utils.check_roles import require_role
from warehouse.utils.get_user import get_current_user
from warehouse.utils.response import APIResponse, success_response
from warehouse.utils.logger import get_logger

router = APIRouter(prefix="/borrow", tags=["Borrow"])
logger = get_logger(__name__)

BORROW_HANDLERS = ["admin", "warehouse", "receiver"]


@router.post(
    "/borrow",
    response_model=APIResponse[LedgerRecordOut],
    status_code=status.HTTP_201_CREATED,
)
async def borrow_api(
    payload: BorrowCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(BORROW_HANDLERS)),
):
    logger.info(
        "Borrow",
        extra={
            "item_id": payload.item_id,
            "location_id": payload.location_id,
            "borrower_id": payload.borrower_id,
        },
    )
    result = await record_borrow(db, payload, user)
    return success_response("Borrow recorded", result)


@router.post(
    "/borrow/scan",
    response_model=APIResponse[LedgerRecordOut],
    status_code=status.HTTP_201_CREATED,
)
async def borrow_scan_api(
    payload: BorrowScan,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(BORROW_HANDLERS)),
):
    logger.info(
        "Borrow (scan)",
        extra={"item_code": payload.item_code, "location_code": payload.location_code},
    )
    result = await record_borrow_by_code(db, payload, user)
    return success_response("Borrow recorded", result)


@router.post(
    "/return",
    response_model=APIResponse[LedgerRecordOut],
    status_code=status.HTTP_201_CREATED,
)
async def return_api(
    payload: ReturnCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(BORROW_HANDLERS)),
):
    logger.info("Return", extra={"borrow_id": payload.record_id})
    result = await record_return(db, payload, user)
    return success_response("Return recorded", result)


@router.get("/", response_model=APIResponse[BorrowRecordListData])
async def list_borrow_records_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    kind: BorrowKind | None = Query(None),
    record_status: BorrowStatus | None = Query(None, alias="status"),
    borrower_id: int | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_borrow_records(
        db,
        kind=kind,
        status=record_status,
        borrower_id=borrower_id,
        page=page,
        page_size=page_size,
    )
    return success_response("Borrow records fetched successfully", data)
