# warehouse/services/inventory/borrow_service.py

from datetime import datetime, timezone

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.flow_type import FlowType
from warehouse.core.exceptions import AlreadyReturnedError, NotFoundError
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.enums.borrow_status import BorrowKind, BorrowStatus
from warehouse.models.inventory.borrow_models import BorrowRecord
from warehouse.models.users.user_models import User
from warehouse.schemas.inventory.borrow_schemas import (
    BorrowCreate,
    BorrowDetails,
    BorrowScan,
    ReturnCreate,
    BorrowRecordOut,
    BorrowRecordListData,
)
from warehouse.schemas.inventory.stock_schemas import LedgerRecordOut
from warehouse.services.catalog.lookup_service import (
    get_item_or_404,
    get_location_or_404,
    get_item_by_code,
    get_location_by_code,
    get_user_or_404,
)
from warehouse.services.inventory.balance_service import (
    decrement,
    increment,
    ensure_available,
)
from warehouse.services.inventory.flow_service import append_flow
from warehouse.services.inventory.ledger_transaction import ledger_transaction
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# BORROW
# =====================================================
async def _borrow(
    db: AsyncSession,
    item: Item,
    location: Location,
    payload: BorrowDetails,
    user,
) -> LedgerRecordOut:
    await get_user_or_404(db, payload.borrower_id, "Borrower")

    await ensure_available(
        db,
        item_id=item.id,
        location_id=location.id,
        quantity=payload.quantity,
    )

    async with ledger_transaction(
        db, "borrow", item_id=item.id, location_id=location.id, quantity=payload.quantity
    ):
        record = BorrowRecord(
            item_id=item.id,
            location_id=location.id,
            quantity=payload.quantity,
            borrower_id=payload.borrower_id,
            operator_id=user.id,
            kind=BorrowKind.borrow.value,
            status=BorrowStatus.borrowed.value,
            borrow_date=datetime.now(timezone.utc),
            expected_return_date=payload.expected_return_date,
            remark=payload.remark,
            photo_url=payload.photo_url,
        )
        db.add(record)
        await db.flush()

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
            flow_type=FlowType.BORROW,
            related_record_id=record.id,
            remark=payload.remark,
            photo_url=payload.photo_url,
        )

        await emit_activity(
            db,
            user_id=user.id,
            username=user.username,
            code=ActivityCode.BORROW_ITEM,
            **actor_context(user),
            quantity=payload.quantity,
            item_code=item.code,
            location_code=location.code,
            borrower_id=payload.borrower_id,
            record_id=record.id,
        )

    logger.info(
        "Borrow recorded",
        extra={
            "record_id": record.id,
            "item_id": item.id,
            "location_id": location.id,
            "quantity": payload.quantity,
            "borrower_id": payload.borrower_id,
        },
    )
    return LedgerRecordOut(record_id=record.id, quantity_on_hand=on_hand)


async def record_borrow(
    db: AsyncSession,
    payload: BorrowCreate,
    user,
) -> LedgerRecordOut:
    item = await get_item_or_404(db, payload.item_id)
    location = await get_location_or_404(db, payload.location_id)
    return await _borrow(db, item, location, payload, user)


async def record_borrow_by_code(
    db: AsyncSession,
    payload: BorrowScan,
    user,
) -> LedgerRecordOut:
    item = await get_item_by_code(db, payload.item_code)
    location = await get_location_by_code(db, payload.location_code)
    return await _borrow(db, item, location, payload, user)


# =====================================================
# RETURN
# =====================================================
async def record_return(
    db: AsyncSession,
    payload: ReturnCreate,
    user,
) -> LedgerRecordOut:
    borrow = await db.get(BorrowRecord, payload.record_id)
    if not borrow or borrow.kind != BorrowKind.borrow.value:
        raise NotFoundError("Borrow record", payload.record_id)

    if borrow.status != BorrowStatus.borrowed.value:
        raise AlreadyReturnedError(payload.record_id)

    item_id = borrow.item_id
    location_id = borrow.location_id
    quantity = borrow.quantity
    item_code = borrow.item.code
    location_code = borrow.location.code
    now = datetime.now(timezone.utc)

    async with ledger_transaction(
        db, "return", borrow_id=borrow.id, item_id=item_id, location_id=location_id
    ):
        record = BorrowRecord(
            item_id=item_id,
            location_id=location_id,
            quantity=quantity,
            borrower_id=borrow.borrower_id,
            operator_id=user.id,
            kind=BorrowKind.return_.value,
            status=BorrowStatus.returned.value,
            borrow_date=borrow.borrow_date,
            actual_return_date=now,
            borrow_record_id=borrow.id,
            remark=payload.remark,
            photo_url=payload.photo_url,
        )
        db.add(record)
        await db.flush()

        # only one return can move the borrow out of "borrowed"
        flipped = await db.scalar(
            update(BorrowRecord)
            .where(
                BorrowRecord.id == payload.record_id,
                BorrowRecord.status == BorrowStatus.borrowed.value,
            )
            .values(
                status=BorrowStatus.returned.value,
                actual_return_date=now,
                returned_record_id=record.id,
            )
            .returning(BorrowRecord.id)
        )
        if flipped is None:
            raise AlreadyReturnedError(payload.record_id)

        on_hand = await increment(
            db,
            item_id=item_id,
            location_id=location_id,
            quantity=quantity,
        )

        await append_flow(
            db,
            item_id=item_id,
            to_location_id=location_id,
            quantity=quantity,
            operator_id=user.id,
            flow_type=FlowType.RETURN,
            related_record_id=record.id,
            remark=payload.remark,
            photo_url=payload.photo_url,
        )

        await emit_activity(
            db,
            user_id=user.id,
            username=user.username,
            code=ActivityCode.RETURN_ITEM,
            **actor_context(user),
            quantity=quantity,
            item_code=item_code,
            location_code=location_code,
            borrow_id=payload.record_id,
            record_id=record.id,
        )

    logger.info(
        "Return recorded",
        extra={
            "record_id": record.id,
            "borrow_id": payload.record_id,
            "item_id": item_id,
            "location_id": location_id,
            "quantity": quantity,
        },
    )
    return LedgerRecordOut(record_id=record.id, quantity_on_hand=on_hand)


# =====================================================
# LIST
# =====================================================
async def list_borrow_records(
    db: AsyncSession,
    *,
    kind: BorrowKind | None = None,
    status: BorrowStatus | None = None,
    borrower_id: int | None = None,
    page: int = 1,
    page_size: int = 50,
) -> BorrowRecordListData:
    Borrower = aliased(User)
    Operator = aliased(User)

    filters = []
    if kind:
        filters.append(BorrowRecord.kind == BorrowKind(kind).value)
    if status:
        filters.append(BorrowRecord.status == BorrowStatus(status).value)
    if borrower_id:
        filters.append(BorrowRecord.borrower_id == borrower_id)

    total = await db.scalar(
        select(func.count()).select_from(BorrowRecord).where(*filters)
    )

    stmt = (
        select(
            BorrowRecord.id,
            BorrowRecord.item_id,
            Item.code.label("item_code"),
            Item.name.label("item_name"),
            Item.unit,
            BorrowRecord.location_id,
            Location.code.label("location_code"),
            Location.name.label("location_name"),
            BorrowRecord.quantity,
            BorrowRecord.borrower_id,
            Borrower.username.label("borrower_username"),
            Borrower.name.label("borrower_name"),
            BorrowRecord.operator_id,
            Operator.username.label("operator_username"),
            Operator.name.label("operator_name"),
            BorrowRecord.kind,
            BorrowRecord.status,
            BorrowRecord.borrow_date,
            BorrowRecord.expected_return_date,
            BorrowRecord.actual_return_date,
            BorrowRecord.returned_record_id,
            BorrowRecord.borrow_record_id,
            BorrowRecord.remark,
            BorrowRecord.photo_url,
            BorrowRecord.created_at,
        )
        .join(Item, Item.id == BorrowRecord.item_id)
        .join(Location, Location.id == BorrowRecord.location_id)
        .join(Borrower, Borrower.id == BorrowRecord.borrower_id)
        .join(Operator, Operator.id == BorrowRecord.operator_id)
        .where(*filters)
        .order_by(BorrowRecord.created_at.desc(), BorrowRecord.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    rows = (await db.execute(stmt)).all()

    return BorrowRecordListData(
        total=total or 0,
        items=[BorrowRecordOut.model_validate(r) for r in rows],
    )
