# warehouse/services/dashboard/dashboard_service.py

from datetime import timedelta

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.config import TREND_DAYS, UNCATEGORIZED_LABEL
from warehouse.models.catalog.category_models import Category
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.inventory.balance_models import StockBalance
from warehouse.models.inventory.stock_in_models import StockInRecord
from warehouse.models.inventory.stock_out_models import StockOutRecord
from warehouse.schemas.dashboard.dashboard_schemas import (
    CategoryStat,
    TrendPoint,
    DashboardSummaryOut,
)
from warehouse.utils.business_date import business_today


def _item_totals():
    # per-item stock summed across locations; items with no balance rows count as 0
    return (
        select(
            Item.id.label("item_id"),
            Item.category_id,
            Item.min_stock,
            func.coalesce(func.sum(StockBalance.quantity), 0).label("total_quantity"),
        )
        .outerjoin(StockBalance, StockBalance.item_id == Item.id)
        .group_by(Item.id, Item.category_id, Item.min_stock)
        .subquery()
    )


async def _category_stats(db: AsyncSession, totals) -> list[CategoryStat]:
    rows = (
        await db.execute(
            select(
                Category.name,
                func.count(totals.c.item_id),
                func.coalesce(func.sum(totals.c.total_quantity), 0),
            )
            .select_from(totals)
            .outerjoin(Category, Category.id == totals.c.category_id)
            .group_by(Category.name)
        )
    ).all()

    merged: dict[str, list[int]] = {}
    for name, item_count, total_quantity in rows:
        key = name or UNCATEGORIZED_LABEL
        bucket = merged.setdefault(key, [0, 0])
        bucket[0] += item_count
        bucket[1] += int(total_quantity)

    stats = [
        CategoryStat(category=name, item_count=c, total_quantity=q)
        for name, (c, q) in merged.items()
    ]
    stats.sort(key=lambda s: (-s.total_quantity, s.category))
    return stats


async def _daily_totals(db: AsyncSession, model, start, end) -> dict:
    rows = (
        await db.execute(
            select(model.business_date, func.sum(model.quantity))
            .where(model.business_date >= start, model.business_date <= end)
            .group_by(model.business_date)
        )
    ).all()
    return {d: int(q) for d, q in rows}


async def _in_out_trend(db: AsyncSession) -> list[TrendPoint]:
    today = business_today()
    start = today - timedelta(days=TREND_DAYS - 1)

    ins = await _daily_totals(db, StockInRecord, start, today)
    outs = await _daily_totals(db, StockOutRecord, start, today)

    trend = []
    for offset in range(TREND_DAYS):
        day = start + timedelta(days=offset)
        trend.append(
            TrendPoint(
                date=day,
                stock_in_qty=ins.get(day, 0),
                stock_out_qty=outs.get(day, 0),
            )
        )
    return trend


async def dashboard_summary(db: AsyncSession) -> DashboardSummaryOut:
    total_items = await db.scalar(select(func.count(Item.id)))
    total_locations = await db.scalar(select(func.count(Location.id)))
    total_stock_quantity = await db.scalar(
        select(func.coalesce(func.sum(StockBalance.quantity), 0))
    )

    totals = _item_totals()

    low_stock_count = await db.scalar(
        select(func.count())
        .select_from(totals)
        .where(totals.c.total_quantity <= totals.c.min_stock)
    )

    return DashboardSummaryOut(
        total_items=total_items or 0,
        total_locations=total_locations or 0,
        total_stock_quantity=int(total_stock_quantity or 0),
        low_stock_count=low_stock_count or 0,
        category_stats=await _category_stats(db, totals),
        in_out_trend=await _in_out_trend(db),
    )
