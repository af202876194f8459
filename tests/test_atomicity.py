import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from warehouse.core.exceptions import InsufficientStockError, StoreFailureError
from warehouse.models.inventory.borrow_models import BorrowRecord
from warehouse.models.inventory.flow_models import ItemFlow
from warehouse.models.inventory.stock_in_models import StockInRecord
from warehouse.models.inventory.stock_out_models import StockOutRecord
from warehouse.models.support.activity_models import UserActivity
from warehouse.schemas.inventory.borrow_schemas import BorrowCreate, ReturnCreate
from warehouse.schemas.inventory.stock_schemas import StockInCreate, StockOutCreate
from warehouse.services.inventory import borrow_service, stock_in_service, stock_out_service

from ledger_helpers import read_balance, count_rows, signed_flow_sum


async def _failing_append(*args, **kwargs):
    raise OperationalError("INSERT INTO item_flows", {}, Exception("disk I/O error"))


def _stock_in_payload(seed, quantity):
    return StockInCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=quantity)


async def test_flow_failure_rolls_back_stock_in(db, seed, session_factory, monkeypatch):
    await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 6), seed.keeper)

    monkeypatch.setattr(stock_in_service, "append_flow", _failing_append)

    with pytest.raises(StoreFailureError) as exc:
        await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 4), seed.keeper)

    assert exc.value.status_code == 500
    assert exc.value.details == {"operation": "stock_in"}

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 6
    assert await count_rows(session_factory, StockInRecord) == 1
    assert await count_rows(session_factory, ItemFlow) == 1
    assert await count_rows(session_factory, UserActivity) == 1


async def test_flow_failure_on_first_stock_in_leaves_no_balance_row(db, seed, session_factory, monkeypatch):
    monkeypatch.setattr(stock_in_service, "append_flow", _failing_append)

    with pytest.raises(StoreFailureError):
        await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 4), seed.keeper)

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) is None
    assert await count_rows(session_factory, StockInRecord) == 0


async def test_flow_failure_rolls_back_stock_out(db, seed, session_factory, monkeypatch):
    await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 8), seed.keeper)
    monkeypatch.setattr(stock_out_service, "append_flow", _failing_append)

    with pytest.raises(StoreFailureError):
        await stock_out_service.record_stock_out(
            db,
            StockOutCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=3),
            seed.keeper,
        )

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 8
    assert await count_rows(session_factory, StockOutRecord) == 0
    assert await signed_flow_sum(session_factory, seed.widget_id, seed.shelf_id) == 8


async def test_unexpected_error_rolls_back_and_propagates(db, seed, session_factory, monkeypatch):
    async def broken_activity(*args, **kwargs):
        raise RuntimeError("template store offline")

    monkeypatch.setattr(borrow_service, "emit_activity", broken_activity)
    await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 5), seed.keeper)

    with pytest.raises(RuntimeError):
        await borrow_service.record_borrow(
            db,
            BorrowCreate(
                item_id=seed.widget_id,
                location_id=seed.shelf_id,
                quantity=2,
                borrower_id=seed.borrower.id,
            ),
            seed.receiver,
        )

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 5
    assert await count_rows(session_factory, BorrowRecord) == 0


async def test_stale_precheck_is_caught_by_store(db, seed, session_factory, monkeypatch):
    """A decrement whose pre-check saw an old balance still cannot pass zero."""
    await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 3), seed.keeper)

    async def stale_precheck(*args, **kwargs):
        return 10

    monkeypatch.setattr(stock_out_service, "ensure_available", stale_precheck)

    with pytest.raises(InsufficientStockError) as exc:
        await stock_out_service.record_stock_out(
            db,
            StockOutCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=5),
            seed.keeper,
        )

    assert exc.value.details["available"] == 3
    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 3
    assert await count_rows(session_factory, StockOutRecord) == 0
    assert await signed_flow_sum(session_factory, seed.widget_id, seed.shelf_id) == 3


async def test_competing_decrements_after_shared_precheck(db, seed, session_factory, monkeypatch):
    """Two issues that both passed the pre-check: only one fits in the balance."""
    await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 10), seed.keeper)

    async def passed_precheck(*args, **kwargs):
        return 10

    monkeypatch.setattr(stock_out_service, "ensure_available", passed_precheck)

    payload = StockOutCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=7)

    async with session_factory() as first, session_factory() as second:
        await stock_out_service.record_stock_out(first, payload, seed.keeper)

        with pytest.raises(InsufficientStockError):
            await stock_out_service.record_stock_out(second, payload, seed.keeper)

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 3
    assert await count_rows(session_factory, StockOutRecord) == 1



async def test_flow_failure_rolls_back_return(db, seed, session_factory, monkeypatch):
    await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 10), seed.keeper)
    borrowed = await borrow_service.record_borrow(
        db,
        BorrowCreate(
            item_id=seed.widget_id,
            location_id=seed.shelf_id,
            quantity=4,
            borrower_id=seed.borrower.id,
        ),
        seed.receiver,
    )
    activities_before = await count_rows(session_factory, UserActivity)

    monkeypatch.setattr(borrow_service, "append_flow", _failing_append)

    with pytest.raises(StoreFailureError) as exc:
        await borrow_service.record_return(db, ReturnCreate(record_id=borrowed.record_id), seed.receiver)

    assert exc.value.details == {"operation": "return"}

    async with session_factory() as session:
        borrow = await session.get(BorrowRecord, borrowed.record_id)

    assert borrow.status == "borrowed"
    assert borrow.returned_record_id is None
    assert borrow.actual_return_date is None
    assert await count_rows(session_factory, BorrowRecord, BorrowRecord.kind == "return") == 0
    assert await count_rows(session_factory, UserActivity) == activities_before
    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 6
    assert await signed_flow_sum(session_factory, seed.widget_id, seed.shelf_id) == 6


async def test_simultaneous_decrements_never_overdraw(db, seed, session_factory):
    await stock_in_service.record_stock_in(db, _stock_in_payload(seed, 10), seed.keeper)

    payload = StockOutCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=7)

    async def issue():
        async with session_factory() as session:
            return await stock_out_service.record_stock_out(session, payload, seed.keeper)

    results = await asyncio.gather(issue(), issue(), return_exceptions=True)

    failures = [r for r in results if isinstance(r, Exception)]
    successes = [r for r in results if not isinstance(r, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], InsufficientStockError)
    assert successes[0].quantity_on_hand == 3

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 3
    assert await count_rows(session_factory, StockOutRecord) == 1
    assert await signed_flow_sum(session_factory, seed.widget_id, seed.shelf_id) == 3

def test_store_failure_error_code():
    assert StoreFailureError("x").error_code == "STORE_FAILURE"
