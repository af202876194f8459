from datetime import timedelta

import pytest

from warehouse.constants.flow_type import FlowType
from warehouse.core.exceptions import NotFoundError
from warehouse.schemas.inventory.borrow_schemas import BorrowCreate, ReturnCreate
from warehouse.schemas.inventory.stock_schemas import StockInCreate, StockOutCreate
from warehouse.services.dashboard.dashboard_service import dashboard_summary
from warehouse.services.inventory.borrow_service import record_borrow, record_return
from warehouse.services.inventory.flow_service import list_flows, list_item_flows
from warehouse.services.inventory.stock_in_service import record_stock_in
from warehouse.services.inventory.stock_out_service import record_stock_out
from warehouse.services.inventory.stock_query_service import list_stock, list_low_stock
from warehouse.utils.business_date import business_today

from ledger_helpers import read_balance, signed_flow_sum


@pytest.fixture
async def activity(db, seed):
    """in 10 widget @A, in 4 widget @Z, in 20 cable @A, out 7 widget @A, borrow+return 2 @A."""
    keeper = seed.keeper

    await record_stock_in(db, StockInCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=10), keeper)
    await record_stock_in(db, StockInCreate(item_id=seed.widget_id, location_id=seed.room_id, quantity=4), keeper)
    await record_stock_in(db, StockInCreate(item_id=seed.cable_id, location_id=seed.shelf_id, quantity=20), keeper)
    await record_stock_out(db, StockOutCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=7), keeper)

    borrowed = await record_borrow(
        db,
        BorrowCreate(
            item_id=seed.widget_id,
            location_id=seed.shelf_id,
            quantity=2,
            borrower_id=seed.borrower.id,
        ),
        seed.receiver,
    )
    await record_return(db, ReturnCreate(record_id=borrowed.record_id), seed.receiver)
    return seed


# =====================================================
# FLOW
# =====================================================
async def test_balances_match_flow_sums(activity, session_factory):
    seed = activity
    pairs = [
        (seed.widget_id, seed.shelf_id),
        (seed.widget_id, seed.room_id),
        (seed.cable_id, seed.shelf_id),
    ]

    for item_id, location_id in pairs:
        balance = await read_balance(session_factory, item_id, location_id)
        assert balance == await signed_flow_sum(session_factory, item_id, location_id)

    assert await read_balance(session_factory, seed.widget_id, seed.shelf_id) == 3


async def test_list_flows_newest_first(db, activity):
    result = await list_flows(db)

    assert result.total == 6
    assert [f.flow_type for f in result.items][:2] == [FlowType.RETURN, FlowType.BORROW]
    assert result.items[0].operator_username == activity.receiver.username
    assert result.items[-1].to_location_code == "A-01"


async def test_list_flows_filters(db, activity):
    seed = activity

    by_item = await list_flows(db, item_id=seed.cable_id)
    assert by_item.total == 1

    # location matches either side of the movement
    at_shelf = await list_flows(db, location_id=seed.shelf_id)
    assert at_shelf.total == 5

    outs = await list_flows(db, flow_type=FlowType.OUT)
    assert outs.total == 1
    assert outs.items[0].from_location_code == "A-01"
    assert outs.items[0].to_location_id is None


async def test_list_flows_date_window_is_inclusive(db, activity):
    today = business_today()

    assert (await list_flows(db, start_date=today, end_date=today)).total == 6
    assert (await list_flows(db, end_date=today - timedelta(days=1))).total == 0
    assert (await list_flows(db, start_date=today + timedelta(days=1))).total == 0


async def test_list_flows_pagination(db, activity):
    page_one = await list_flows(db, page=1, page_size=4)
    page_two = await list_flows(db, page=2, page_size=4)

    assert page_one.total == page_two.total == 6
    assert len(page_one.items) == 4
    assert len(page_two.items) == 2
    assert not {f.id for f in page_one.items} & {f.id for f in page_two.items}


async def test_list_item_flows(db, activity):
    flows = await list_item_flows(db, activity.widget_id)
    assert len(flows) == 5
    assert all(f.item_code == "W-001" for f in flows)

    with pytest.raises(NotFoundError):
        await list_item_flows(db, 9999)


# =====================================================
# STOCK
# =====================================================
async def test_list_stock_puts_low_rows_first(db, activity):
    stock = await list_stock(db)

    assert stock.total == 3
    # widget min_stock is 5: both widget rows (3 and 4) are low
    assert [row.is_low_stock for row in stock.items] == [True, True, False]
    assert stock.items[-1].item_code == "C-002"
    assert stock.items[-1].quantity == 20


async def test_list_stock_filters(db, activity):
    seed = activity

    at_room = await list_stock(db, location_id=seed.room_id)
    assert [(r.item_code, r.quantity) for r in at_room.items] == [("W-001", 4)]

    searched = await list_stock(db, search="cab")
    assert [r.item_code for r in searched.items] == ["C-002"]

    by_category = await list_stock(db, category_id=seed.tools_id)
    assert {r.item_code for r in by_category.items} == {"W-001"}


async def test_low_stock_ordered_by_shortage(db, activity):
    rows = await list_low_stock(db)

    assert [(r.location_code, r.quantity, r.shortage) for r in rows] == [
        ("A-01", 3, 2),
        ("Z-09", 4, 1),
    ]


async def test_low_stock_boundary_is_inclusive(db, seed):
    await record_stock_in(
        db,
        StockInCreate(item_id=seed.widget_id, location_id=seed.shelf_id, quantity=5),
        seed.keeper,
    )

    rows = await list_low_stock(db)
    assert len(rows) == 1
    assert rows[0].shortage == 0


# =====================================================
# DASHBOARD
# =====================================================
async def test_dashboard_summary(db, activity):
    summary = await dashboard_summary(db)

    assert summary.total_items == 2
    assert summary.total_locations == 2
    assert summary.total_stock_quantity == 27
    # widget totals 7 across locations, above its min_stock of 5; cable has min_stock 0
    assert summary.low_stock_count == 0

    assert [(c.category, c.item_count, c.total_quantity) for c in summary.category_stats] == [
        ("Uncategorized", 1, 20),
        ("Tools", 1, 7),
    ]


async def test_dashboard_trend_has_thirty_days(db, activity):
    summary = await dashboard_summary(db)
    trend = summary.in_out_trend
    today = business_today()

    assert len(trend) == 30
    assert trend[0].date == today - timedelta(days=29)
    assert trend[-1].date == today
    assert [p.date for p in trend] == sorted({p.date for p in trend})

    assert trend[-1].stock_in_qty == 34
    assert trend[-1].stock_out_qty == 7
    assert all(p.stock_in_qty == 0 and p.stock_out_qty == 0 for p in trend[:-1])


async def test_dashboard_trend_uses_business_date(db, seed):
    today = business_today()
    await record_stock_in(
        db,
        StockInCreate(
            item_id=seed.cable_id,
            location_id=seed.shelf_id,
            quantity=6,
            business_date=today - timedelta(days=3),
        ),
        seed.keeper,
    )
    await record_stock_in(
        db,
        StockInCreate(
            item_id=seed.cable_id,
            location_id=seed.shelf_id,
            quantity=9,
            business_date=today - timedelta(days=45),
        ),
        seed.keeper,
    )

    trend = (await dashboard_summary(db)).in_out_trend
    by_day = {p.date: p.stock_in_qty for p in trend}

    assert by_day[today - timedelta(days=3)] == 6
    assert sum(by_day.values()) == 6


async def test_dashboard_on_empty_ledger(db, seed):
    summary = await dashboard_summary(db)

    assert summary.total_stock_quantity == 0
    # widget (min 5) and cable (min 0) both have nothing on hand
    assert summary.low_stock_count == 2
    assert len(summary.in_out_trend) == 30
    assert {c.category for c in summary.category_stats} == {"Tools", "Uncategorized"}
