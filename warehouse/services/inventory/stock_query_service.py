# warehouse/services/inventory/stock_query_service.py

from sqlalchemy import select, func, case, or_
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.inventory.balance_models import StockBalance
from warehouse.schemas.inventory.stock_schemas import (
    StockRowOut,
    LowStockRowOut,
    StockListData,
)

IS_LOW = StockBalance.quantity <= Item.min_stock
TOUCHED_AT = func.coalesce(StockBalance.updated_at, StockBalance.created_at)


def _stock_select():
    return (
        select(
            StockBalance.item_id,
            Item.code.label("item_code"),
            Item.name.label("item_name"),
            Item.category,
            Item.unit,
            Item.brand,
            Item.model,
            Item.spec,
            Item.min_stock,
            StockBalance.location_id,
            Location.code.label("location_code"),
            Location.name.label("location_name"),
            StockBalance.quantity,
            case((IS_LOW, True), else_=False).label("is_low_stock"),
            TOUCHED_AT.label("updated_at"),
        )
        .join(Item, Item.id == StockBalance.item_id)
        .join(Location, Location.id == StockBalance.location_id)
    )


# =====================================================
# STOCK LIST
# =====================================================
async def list_stock(
    db: AsyncSession,
    *,
    item_id: int | None = None,
    location_id: int | None = None,
    search: str | None = None,
    category_id: int | None = None,
) -> StockListData:
    filters = []

    if item_id:
        filters.append(StockBalance.item_id == item_id)

    if location_id:
        filters.append(StockBalance.location_id == location_id)

    if search:
        filters.append(
            or_(
                Item.code.ilike(f"%{search}%"),
                Item.name.ilike(f"%{search}%"),
            )
        )

    if category_id:
        filters.append(Item.category_id == category_id)

    rows = (
        await db.execute(
            _stock_select()
            .where(*filters)
            .order_by(
                case((IS_LOW, 1), else_=0).desc(),
                TOUCHED_AT.desc(),
                StockBalance.item_id,
                StockBalance.location_id,
            )
        )
    ).all()

    return StockListData(
        total=len(rows),
        items=[StockRowOut.model_validate(r) for r in rows],
    )


# =====================================================
# LOW STOCK
# =====================================================
async def list_low_stock(db: AsyncSession) -> list[LowStockRowOut]:
    shortage = (Item.min_stock - StockBalance.quantity).label("shortage")

    rows = (
        await db.execute(
            _stock_select()
            .add_columns(shortage)
            .where(IS_LOW)
            .order_by(shortage.desc(), Item.code, Location.code)
        )
    ).all()

    return [LowStockRowOut.model_validate(r) for r in rows]
