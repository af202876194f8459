from datetime import date

import pytest
from sqlalchemy import select

from warehouse.constants.flow_type import FlowType
from warehouse.core.exceptions import InsufficientStockError, NotFoundError
from warehouse.models.inventory.flow_models import ItemFlow
from warehouse.models.inventory.stock_in_models import StockInRecord
from warehouse.models.inventory.stock_out_models import StockOutRecord
from warehouse.models.support.activity_models import UserActivity
from warehouse.schemas.inventory.stock_schemas import (
    StockInCreate,
    StockInScan,
    StockOutCreate,
    StockOutScan,
)
from warehouse.services.inventory.stock_in_service import (
    record_stock_in,
    record_stock_in_by_code,
)
from warehouse.services.inventory.stock_out_service import (
    record_stock_out,
    record_stock_out_by_code,
)

from ledger_helpers import read_balance, count_rows, signed_flow_sum


async def _stock_in(db, seed, quantity, location_id=None, **extra):
    return await record_stock_in(
        db,
        StockInCreate(
            item_id=seed.widget_id,
            location_id=location_id or seed.shelf_id,
            quantity=quantity,
            **extra,
        ),
        seed.keeper,
    )


async def _stock_out(db, seed, quantity, **extra):
    return await record_stock_out(
        db,
        StockOutCreate(
            item_id=seed.widget_id,
            location_id=seed.shelf_id,
            quantity=quantity,
            **extra,
        ),
        seed.keeper,
    )


# =====================================================
# STOCK IN
# =====================================================
async def test_stock_in_on_fresh_pair_creates_balance_and_flow(db, seed, session_factory):
    result = await _stock_in(db, seed, 4, location_id=seed.room_id, supplier="ACME")

    assert result.quantity_on_hand == 4
    assert await read_balance(session_factory, seed.widget_id, seed.room_id) == 4

    async with session_factory() as session:
        flows = (await session.scalars(select(ItemFlow))).all()
        record = await session.get(StockInRecord, result.record_id)

    assert len(flows) == 1
    flow = flows[0]
    assert flow.flow_type == FlowType.IN.value
    assert flow.to_location_id == seed.room_id
    assert flow.from_location_id is None
    assert flow.quantity == 4
    assert flow.related_record_id == result.record_id
    assert flow.operator_id == seed.keeper.id

    assert record.supplier == "ACME"
    assert record.business_date is not None


async def test_stock_in_keeps_supplied_business_date(db, seed, session_factory):
    result = await _stock_in(db, seed, 1, business_date=date(2024, 3, 1))

    async with session_factory() as session:
        record = await session.get(StockInRecord, result.record_id)

    assert record.business_date == date(2024, 3, 1)


async def test_stock_in_by_code(db, seed, session_factory):
    result = await record_stock_in_by_code(
        db,
        StockInScan(item_code=" W-001 ", location_code="Z-09", quantity=2),
        seed.keeper,
    )

    assert result.quantity_on_hand == 2
    assert await read_balance(session_factory, seed.widget_id, seed.room_id) == 2


async def test_stock_in_unknown_code_writes_nothing(db, seed, session_factory):
    with pytest.raises(NotFoundError) as exc:
        await record_stock_in_by_code(
            db,
            StockInScan(item_code="NOPE", location_code="Z-09", quantity=2),
            seed.keeper,
        )

    assert exc.value.details["entity"] == "item"
    assert await count_rows(session_factory, StockInRecord) == 0
    assert await count_rows(session_factory, ItemFlow) == 0


async def test_stock_in_unknown_location_id(db, seed):
    with pytest.raises(NotFoundError) as exc:
        await record_stock_in(
            db,
            StockInCreate(item_id=seed.widget_id, location_id=9999, quantity=1),
            seed.keeper,
        )

    assert exc.value.details["entity"] == "location"


async def test_stock_in_logs_activity(db, seed, session_factory):
    result = await _stock_in(db, seed, 3)

    async with session_factory() as session:
        activity = await session.scalar(select(UserActivity))

    assert activity.code == "STOCK_IN"
    assert activity.user_id == seed.keeper.id
    assert activity.message.startswith(f"Warehouse ({seed.keeper.username}) stocked in 3 x W-001")
    assert "W-001" in activity.message
    assert f"record {result.record_id}" in activity.message


# =====================================================
# STOCK OUT
# =====================================================
async def test_stock_out_then_insufficient(db, seed, session_factory):
    await _stock_in(db, seed, 10)

    first = await _stock_out(db, seed, 7, recipient_id=seed.receiver.id, purpose="repair")
    assert first.quantity_on_hand == 3

    with pytest.raises(InsufficientStockError) as exc:
        await _stock_out(db, seed, 5)

    assert exc.value.details["available"] == 3
    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 3
    assert await count_rows(session_factory, StockOutRecord) == 1

    async with session_factory() as session:
        record = await session.get(StockOutRecord, first.record_id)

    # recipient name falls back to the user's display name
    assert record.recipient_name == seed.receiver.name


async def test_stock_out_without_any_balance_row(db, seed, session_factory):
    with pytest.raises(InsufficientStockError):
        await _stock_out(db, seed, 1)

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) is None
    assert await count_rows(session_factory, ItemFlow) == 0


async def test_stock_out_unknown_recipient(db, seed, session_factory):
    await _stock_in(db, seed, 5)

    with pytest.raises(NotFoundError) as exc:
        await _stock_out(db, seed, 1, recipient_id=4242)

    assert exc.value.details["entity"] == "recipient"
    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 5


async def test_stock_out_flow_leaves_source_location(db, seed, session_factory):
    await _stock_in(db, seed, 5)
    result = await record_stock_out_by_code(
        db,
        StockOutScan(item_code="W-001", location_code="A-01", quantity=2),
        seed.keeper,
    )

    async with session_factory() as session:
        flow = await session.scalar(
            select(ItemFlow).where(ItemFlow.flow_type == FlowType.OUT.value)
        )

    assert flow.from_location_id == seed.shelf_id
    assert flow.to_location_id is None
    assert flow.related_record_id == result.record_id
    assert await signed_flow_sum(session_factory, seed.widget_id, seed.shelf_id) == 3
