# warehouse/services/inventory/balance_service.py
#
# Balance store. Every mutation is a single conditional statement evaluated
# by the database, so concurrent writers on the same (item, location) row
# serialise on the row instead of trusting an earlier read.

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.exceptions import InsufficientStockError, LedgerValidationError
from warehouse.models.inventory.balance_models import StockBalance
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _require_positive(quantity: int):
    if quantity is None or quantity <= 0:
        raise LedgerValidationError(
            "Quantity must be greater than zero",
            {"quantity": quantity},
        )


def _balance_row(item_id: int, location_id: int):
    return (
        StockBalance.item_id == item_id,
        StockBalance.location_id == location_id,
    )


async def get_balance(
    db: AsyncSession,
    *,
    item_id: int,
    location_id: int,
) -> int | None:
    return await db.scalar(
        select(StockBalance.quantity).where(*_balance_row(item_id, location_id))
    )


async def _ensure_balance_row(db: AsyncSession, *, item_id: int, location_id: int):
    dialect = db.get_bind().dialect.name
    insert = _DIALECT_INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Unsupported database dialect: {dialect}")

    await db.execute(
        insert(StockBalance)
        .values(item_id=item_id, location_id=location_id, quantity=0)
        .on_conflict_do_nothing(index_elements=["item_id", "location_id"])
    )


async def increment(
    db: AsyncSession,
    *,
    item_id: int,
    location_id: int,
    quantity: int,
) -> int:
    """Add stock, creating the (item, location) row at zero first if absent."""
    _require_positive(quantity)

    await _ensure_balance_row(db, item_id=item_id, location_id=location_id)

    new_quantity = await db.scalar(
        update(StockBalance)
        .where(*_balance_row(item_id, location_id))
        .values(quantity=StockBalance.quantity + quantity)
        .returning(StockBalance.quantity)
    )

    logger.debug(
        "Balance incremented",
        extra={
            "item_id": item_id,
            "location_id": location_id,
            "delta": quantity,
            "quantity": new_quantity,
        },
    )
    return new_quantity


async def decrement(
    db: AsyncSession,
    *,
    item_id: int,
    location_id: int,
    quantity: int,
) -> int:
    """Remove stock. The floor is part of the UPDATE predicate, not a prior read."""
    _require_positive(quantity)

    new_quantity = await db.scalar(
        update(StockBalance)
        .where(
            *_balance_row(item_id, location_id),
            StockBalance.quantity >= quantity,
        )
        .values(quantity=StockBalance.quantity - quantity)
        .returning(StockBalance.quantity)
    )

    if new_quantity is None:
        available = await get_balance(db, item_id=item_id, location_id=location_id)
        logger.info(
            "Decrement rejected by stock floor",
            extra={
                "item_id": item_id,
                "location_id": location_id,
                "requested": quantity,
                "available": available,
            },
        )
        raise InsufficientStockError(
            item_id=item_id,
            location_id=location_id,
            requested=quantity,
            available=available,
        )

    logger.debug(
        "Balance decremented",
        extra={
            "item_id": item_id,
            "location_id": location_id,
            "delta": -quantity,
            "quantity": new_quantity,
        },
    )
    return new_quantity


async def ensure_available(
    db: AsyncSession,
    *,
    item_id: int,
    location_id: int,
    quantity: int,
):
    """Fast-path rejection before a unit opens. decrement() still enforces the floor."""
    _require_positive(quantity)

    available = await get_balance(db, item_id=item_id, location_id=location_id)
    if available is None or available < quantity:
        raise InsufficientStockError(
            item_id=item_id,
            location_id=location_id,
            requested=quantity,
            available=available,
        )
    return available
