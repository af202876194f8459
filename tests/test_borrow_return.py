import pytest
from sqlalchemy import select

from warehouse.constants.flow_type import FlowType
from warehouse.core.exceptions import (
    AlreadyReturnedError,
    InsufficientStockError,
    NotFoundError,
)
from warehouse.models.inventory.borrow_models import BorrowRecord
from warehouse.models.inventory.flow_models import ItemFlow
from warehouse.schemas.inventory.borrow_schemas import BorrowCreate, BorrowScan, ReturnCreate
from warehouse.schemas.inventory.stock_schemas import StockInCreate
from warehouse.services.inventory.borrow_service import (
    record_borrow,
    record_borrow_by_code,
    record_return,
    list_borrow_records,
)
from warehouse.services.inventory.stock_in_service import record_stock_in

from ledger_helpers import read_balance, count_rows, signed_flow_sum


@pytest.fixture
async def stocked(db, seed):
    await record_stock_in(
        db,
        StockInCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=10),
        seed.keeper,
    )
    return seed


async def _borrow(db, seed, quantity=5):
    return await record_borrow(
        db,
        BorrowCreate(
            item_id=seed.widget_id,
            location_id=seed.shelf_id,
            quantity=quantity,
            borrower_id=seed.borrower.id,
            remark="site visit",
        ),
        seed.receiver,
    )


async def test_borrow_then_return_restores_balance(db, stocked, session_factory):
    seed = stocked

    borrowed = await _borrow(db, seed, 5)
    assert borrowed.quantity_on_hand == 5

    returned = await record_return(db, ReturnCreate(record_id=borrowed.record_id), seed.receiver)
    assert returned.quantity_on_hand == 10
    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 10

    async with session_factory() as session:
        original = await session.get(BorrowRecord, borrowed.record_id)
        closing = await session.get(BorrowRecord, returned.record_id)
        flows = (
            await session.scalars(select(ItemFlow).order_by(ItemFlow.id))
        ).all()

    assert original.status == "returned"
    assert original.returned_record_id == closing.id
    assert original.borrow_record_id is None
    assert original.actual_return_date is not None

    assert closing.kind == "return"
    assert closing.status == "returned"
    assert closing.quantity == 5
    assert closing.borrower_id == seed.borrower.id
    assert closing.borrow_date == original.borrow_date
    assert closing.borrow_record_id == original.id
    assert closing.returned_record_id is None

    assert [f.flow_type for f in flows] == [
        FlowType.IN.value,
        FlowType.BORROW.value,
        FlowType.RETURN.value,
    ]
    borrow_flow, return_flow = flows[1], flows[2]
    assert borrow_flow.from_location_id == seed.shelf_id
    assert borrow_flow.related_record_id == borrowed.record_id
    assert return_flow.to_location_id == seed.shelf_id
    assert return_flow.related_record_id == returned.record_id


async def test_second_return_is_rejected(db, stocked, session_factory):
    seed = stocked
    borrowed = await _borrow(db, seed, 5)

    await record_return(db, ReturnCreate(record_id=borrowed.record_id), seed.receiver)

    with pytest.raises(AlreadyReturnedError) as exc:
        await record_return(db, ReturnCreate(record_id=borrowed.record_id), seed.receiver)

    assert exc.value.status_code == 409
    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 10
    assert await count_rows(session_factory, BorrowRecord, BorrowRecord.kind == "return") == 1


async def test_return_racing_a_completed_return(db, stocked, session_factory):
    """A return whose in-memory copy is stale loses at the status flip."""
    seed = stocked
    borrowed = await _borrow(db, seed, 4)

    async with session_factory() as late:
        stale = await late.get(BorrowRecord, borrowed.record_id)
        assert stale.status == "borrowed"

        async with session_factory() as early:
            await record_return(early, ReturnCreate(record_id=borrowed.record_id), seed.keeper)

        with pytest.raises(AlreadyReturnedError):
            await record_return(late, ReturnCreate(record_id=borrowed.record_id), seed.receiver)

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 10
    assert await count_rows(session_factory, BorrowRecord, BorrowRecord.kind == "return") == 1
    assert await signed_flow_sum(session_factory, seed.widget_id, seed.shelf_id) == 10


async def test_return_of_unknown_record(db, seed):
    with pytest.raises(NotFoundError) as exc:
        await record_return(db, ReturnCreate(record_id=777), seed.receiver)

    assert exc.value.details["entity"] == "borrow_record"


async def test_return_record_id_must_point_at_a_borrow(db, stocked):
    seed = stocked
    borrowed = await _borrow(db, seed, 1)
    returned = await record_return(db, ReturnCreate(record_id=borrowed.record_id), seed.receiver)

    with pytest.raises(NotFoundError):
        await record_return(db, ReturnCreate(record_id=returned.record_id), seed.receiver)


async def test_borrow_more_than_on_hand(db, stocked, session_factory):
    seed = stocked

    with pytest.raises(InsufficientStockError):
        await _borrow(db, seed, 11)

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 10
    assert await count_rows(session_factory, BorrowRecord) == 0


async def test_borrow_unknown_borrower(db, stocked):
    seed = stocked

    with pytest.raises(NotFoundError) as exc:
        await record_borrow(
            db,
            BorrowCreate(
                item_id=seed.widget_id,
                location_id=seed.shelf_id,
                quantity=1,
                borrower_id=31337,
            ),
            seed.receiver,
        )

    assert exc.value.details["entity"] == "borrower"


async def test_borrow_by_code_and_listing(db, stocked):
    seed = stocked
    await record_borrow_by_code(
        db,
        BorrowScan(item_code="W-001", location_code="A-01", quantity=2, borrower_id=seed.borrower.id),
        seed.receiver,
    )
    second = await _borrow(db, seed, 1)
    await record_return(db, ReturnCreate(record_id=second.record_id), seed.keeper)

    everything = await list_borrow_records(db)
    assert everything.total == 3
    assert everything.items[0].kind == "return"
    assert everything.items[0].operator_username == seed.keeper.username
    assert everything.items[-1].item_code == "W-001"
    assert everything.items[-1].borrower_username == seed.borrower.username

    open_borrows = await list_borrow_records(db, kind="borrow", status="borrowed")
    assert open_borrows.total == 1
    assert open_borrows.items[0].quantity == 2
