# warehouse/services/catalog/lookup_service.py
#
# Reference resolution shared by the ledger recorders. Every lookup fails
# with NotFoundError before any ledger unit opens.

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.core.exceptions import NotFoundError
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.users.user_models import User


async def get_item_or_404(db: AsyncSession, item_id: int) -> Item:
    item = await db.get(Item, item_id)
    if not item:
        raise NotFoundError("Item", item_id)
    return item


async def get_location_or_404(db: AsyncSession, location_id: int) -> Location:
    location = await db.get(Location, location_id)
    if not location:
        raise NotFoundError("Location", location_id)
    return location


async def get_item_by_code(db: AsyncSession, code: str) -> Item:
    item = await db.scalar(select(Item).where(Item.code == code.strip()))
    if not item:
        raise NotFoundError("Item", code)
    return item


async def get_location_by_code(db: AsyncSession, code: str) -> Location:
    location = await db.scalar(select(Location).where(Location.code == code.strip()))
    if not location:
        raise NotFoundError("Location", code)
    return location


async def get_user_or_404(db: AsyncSession, user_id: int, entity: str = "User") -> User:
    user = await db.get(User, user_id)
    if not user or not user.is_active:
        raise NotFoundError(entity, user_id)
    return user
