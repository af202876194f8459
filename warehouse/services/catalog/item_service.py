# warehouse/services/catalog/item_service.py

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.error_codes import ErrorCode
from warehouse.core.config import DEFAULT_ITEM_UNIT
from warehouse.core.exceptions import AppException, NotFoundError
from warehouse.models.catalog.category_models import Category
from warehouse.models.catalog.item_models import Item
from warehouse.schemas.catalog.item_schemas import (
    ItemCreate,
    ItemUpdate,
    ItemOut,
    ItemListData,
)
from warehouse.services.catalog.lookup_service import get_item_or_404, get_item_by_code
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = ("name", "unit", "min_stock", "brand", "model", "spec", "description")


def _map_item(item: Item) -> ItemOut:
    return ItemOut(
        id=item.id,
        code=item.code,
        name=item.name,
        category_id=item.category_id,
        category=item.category,
        unit=item.unit,
        min_stock=item.min_stock,
        brand=item.brand,
        model=item.model,
        spec=item.spec,
        description=item.description,
        created_by_name=item.created_by_username,
        updated_by_name=item.updated_by_username,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


# =====================================================
# CATEGORY RECONCILIATION
# =====================================================
async def resolve_category(
    db: AsyncSession,
    category_id: int | None,
    category_name: str | None,
    user,
) -> tuple[int | None, str | None]:
    """Return the (category_id, category) pair to store on an item.

    category_id wins when given. A bare name is matched against existing
    categories and created when missing.
    """
    if category_id is not None:
        category = await db.get(Category, category_id)
        if not category:
            raise NotFoundError("Category", category_id)
        return category.id, category.name

    name = (category_name or "").strip()
    if not name:
        return None, None

    category = await db.scalar(select(Category).where(Category.name == name))
    if not category:
        category = Category(
            name=name,
            created_by_id=user.id,
            updated_by_id=user.id,
        )
        db.add(category)
        await db.flush()
        logger.info(
            "Category created from item",
            extra={"category_id": category.id, "category_name": name},
        )

    return category.id, category.name


# =====================================================
# CREATE
# =====================================================
async def create_item(db: AsyncSession, payload: ItemCreate, user) -> ItemOut:
    code = payload.code.strip()

    exists = await db.scalar(select(Item.id).where(Item.code == code))
    if exists:
        raise AppException(409, "Item code already exists", ErrorCode.ITEM_CODE_EXISTS)

    category_id, category = await resolve_category(
        db, payload.category_id, payload.category, user
    )

    item = Item(
        code=code,
        name=payload.name,
        unit=payload.unit or DEFAULT_ITEM_UNIT,
        min_stock=payload.min_stock,
        category_id=category_id,
        category=category,
        brand=payload.brand,
        model=payload.model,
        spec=payload.spec,
        description=payload.description,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(item)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        # lost a race on the unique code
        raise AppException(409, "Item code already exists", ErrorCode.ITEM_CODE_EXISTS)

    await emit_activity(
        db,
        user_id=user.id,
        username=user.username,
        code=ActivityCode.CREATE_ITEM,
        **actor_context(user),
        target_name=item.name,
        item_code=item.code,
    )

    await db.commit()
    await db.refresh(item)

    logger.info("Item created", extra={"item_id": item.id, "item_code": item.code})
    return _map_item(item)


# =====================================================
# READ
# =====================================================
async def list_items(
    db: AsyncSession,
    *,
    search: str | None = None,
    category_id: int | None = None,
    page: int = 1,
    page_size: int = 50,
) -> ItemListData:
    filters = []

    if search:
        filters.append(
            or_(
                Item.code.ilike(f"%{search}%"),
                Item.name.ilike(f"%{search}%"),
            )
        )

    if category_id:
        filters.append(Item.category_id == category_id)

    total = await db.scalar(select(func.count()).select_from(Item).where(*filters))

    items = (
        await db.scalars(
            select(Item)
            .where(*filters)
            .order_by(Item.created_at.desc(), Item.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
    ).unique().all()

    return ItemListData(
        total=total or 0,
        items=[_map_item(i) for i in items],
    )


async def get_item(db: AsyncSession, item_id: int) -> ItemOut:
    return _map_item(await get_item_or_404(db, item_id))


async def get_item_for_code(db: AsyncSession, code: str) -> ItemOut:
    return _map_item(await get_item_by_code(db, code))


# =====================================================
# UPDATE
# =====================================================
async def update_item(
    db: AsyncSession,
    item_id: int,
    payload: ItemUpdate,
    user,
) -> ItemOut:
    item = await get_item_or_404(db, item_id)
    data = payload.model_dump(exclude_unset=True)

    changes = []

    for field in UPDATABLE_FIELDS:
        if field in data and data[field] is not None and data[field] != getattr(item, field):
            setattr(item, field, data[field])
            changes.append(field)

    if "category_id" in data or "category" in data:
        category_id, category = await resolve_category(
            db, data.get("category_id"), data.get("category"), user
        )
        if (category_id, category) != (item.category_id, item.category):
            item.category_id = category_id
            item.category = category
            changes.append("category")

    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.NO_CHANGES_DETECTED)

    item.updated_by_id = user.id

    await emit_activity(
        db,
        user_id=user.id,
        username=user.username,
        code=ActivityCode.UPDATE_ITEM,
        **actor_context(user),
        target_name=item.name,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(item)

    logger.info("Item updated", extra={"item_id": item.id, "changes": changes})
    return _map_item(item)
