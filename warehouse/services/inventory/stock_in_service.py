# warehouse/services/inventory/stock_in_service.py

from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.flow_type import FlowType
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.inventory.stock_in_models import StockInRecord
from warehouse.schemas.inventory.stock_schemas import (
    StockInCreate,
    StockInDetails,
    StockInScan,
    LedgerRecordOut,
)
from warehouse.services.catalog.lookup_service import (
    get_item_or_404,
    get_location_or_404,
    get_item_by_code,
    get_location_by_code,
)
from warehouse.services.inventory.balance_service import increment
from warehouse.services.inventory.flow_service import append_flow
from warehouse.services.inventory.ledger_transaction import ledger_transaction
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.business_date import business_today
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


async def _stock_in(
    db: AsyncSession,
    item: Item,
    location: Location,
    payload: StockInDetails,
    user,
) -> LedgerRecordOut:
    # stock-in has no balance precondition
    async with ledger_transaction(
        db, "stock_in", item_id=item.id, location_id=location.id, quantity=payload.quantity
    ):
        record = StockInRecord(
            item_id=item.id,
            location_id=location.id,
            quantity=payload.quantity,
            operator_id=user.id,
            supplier=payload.supplier,
            batch_no=payload.batch_no,
            remark=payload.remark,
            business_date=payload.business_date or business_today(),
            brand=payload.brand,
            model=payload.model,
            spec=payload.spec,
            serial_no=payload.serial_no,
            photo_url=payload.photo_url,
        )
        db.add(record)
        await db.flush()

        on_hand = await increment(
            db,
            item_id=item.id,
            location_id=location.id,
            quantity=payload.quantity,
        )

        await append_flow(
            db,
            item_id=item.id,
            to_location_id=location.id,
            quantity=payload.quantity,
            operator_id=user.id,
            flow_type=FlowType.IN,
            related_record_id=record.id,
            remark=payload.remark,
            serial_no=payload.serial_no,
            photo_url=payload.photo_url,
        )

        await emit_activity(
            db,
            user_id=user.id,
            username=user.username,
            code=ActivityCode.STOCK_IN,
            **actor_context(user),
            quantity=payload.quantity,
            item_code=item.code,
            location_code=location.code,
            record_id=record.id,
        )

    logger.info(
        "Stock in recorded",
        extra={
            "record_id": record.id,
            "item_id": item.id,
            "location_id": location.id,
            "quantity": payload.quantity,
        },
    )
    return LedgerRecordOut(record_id=record.id, quantity_on_hand=on_hand)


async def record_stock_in(
    db: AsyncSession,
    payload: StockInCreate,
    user,
) -> LedgerRecordOut:
    item = await get_item_or_404(db, payload.item_id)
    location = await get_location_or_404(db, payload.location_id)
    return await _stock_in(db, item, location, payload, user)


async def record_stock_in_by_code(
    db: AsyncSession,
    payload: StockInScan,
    user,
) -> LedgerRecordOut:
    item = await get_item_by_code(db, payload.item_code)
    location = await get_location_by_code(db, payload.location_code)
    return await _stock_in(db, item, location, payload, user)
