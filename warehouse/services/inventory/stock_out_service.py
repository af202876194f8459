# warehouse/services/inventory/stock_out_service.py

from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.flow_type import FlowType
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.inventory.stock_out_models import StockOutRecord
from warehouse.schemas.inventory.stock_schemas import (
    StockOutCreate,
    StockOutDetails,
    StockOutScan,
    LedgerRecordOut,
)
from warehouse.services.catalog.lookup_service import (
    get_item_or_404,
    get_location_or_404,
    get_item_by_code,
    get_location_by_code,
    get_user_or_404,
)
from warehouse.services.inventory.balance_service import decrement, ensure_available
from warehouse.services.inventory.flow_service import append_flow
from warehouse.services.inventory.ledger_transaction import ledger_transaction
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.business_date import business_today
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


async def _stock_out(
    db: AsyncSession,
    item: Item,
    location: Location,
    payload: StockOutDetails,
    user,
) -> LedgerRecordOut:
    recipient_name = payload.recipient_name
    if payload.recipient_id is not None:
        recipient = await get_user_or_404(db, payload.recipient_id, "Recipient")
        recipient_name = recipient_name or recipient.name

    await ensure_available(
        db,
        item_id=item.id,
        location_id=location.id,
        quantity=payload.quantity,
    )

    async with ledger_transaction(
        db, "stock_out", item_id=item.id, location_id=location.id, quantity=payload.quantity
    ):
        record = StockOutRecord(
            item_id=item.id,
            location_id=location.id,
            quantity=payload.quantity,
            operator_id=user.id,
            recipient_id=payload.recipient_id,
            recipient_name=recipient_name,
            purpose=payload.purpose,
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

        # re-checks the floor; a concurrent decrement since ensure_available lands here
        on_hand = await decrement(
            db,
            item_id=item.id,
            location_id=location.id,
            quantity=payload.quantity,
        )

        await append_flow(
            db,
            item_id=item.id,
            from_location_id=location.id,
            quantity=payload.quantity,
            operator_id=user.id,
            flow_type=FlowType.OUT,
            related_record_id=record.id,
            remark=payload.remark,
            serial_no=payload.serial_no,
            photo_url=payload.photo_url,
        )

        await emit_activity(
            db,
            user_id=user.id,
            username=user.username,
            code=ActivityCode.STOCK_OUT,
            **actor_context(user),
            quantity=payload.quantity,
            item_code=item.code,
            location_code=location.code,
            record_id=record.id,
        )

    logger.info(
        "Stock out recorded",
        extra={
            "record_id": record.id,
            "item_id": item.id,
            "location_id": location.id,
            "quantity": payload.quantity,
        },
    )
    return LedgerRecordOut(record_id=record.id, quantity_on_hand=on_hand)


async def record_stock_out(
    db: AsyncSession,
    payload: StockOutCreate,
    user,
) -> LedgerRecordOut:
    item = await get_item_or_404(db, payload.item_id)
    location = await get_location_or_404(db, payload.location_id)
    return await _stock_out(db, item, location, payload, user)


async def record_stock_out_by_code(
    db: AsyncSession,
    payload: StockOutScan,
    user,
) -> LedgerRecordOut:
    item = await get_item_by_code(db, payload.item_code)
    location = await get_location_by_code(db, payload.location_code)
    return await _stock_out(db, item, location, payload, user)
