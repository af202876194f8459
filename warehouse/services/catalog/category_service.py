# warehouse/services/catalog/category_service.py

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.error_codes import ErrorCode
from warehouse.core.exceptions import AppException, NotFoundError
from warehouse.models.catalog.category_models import Category
from warehouse.schemas.catalog.category_schemas import CategoryCreate, CategoryOut
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


async def create_category(db: AsyncSession, payload: CategoryCreate, user) -> CategoryOut:
    name = payload.name.strip()

    if payload.parent_id is not None:
        parent = await db.get(Category, payload.parent_id)
        if not parent:
            raise NotFoundError("Parent category", payload.parent_id)

    exists = await db.scalar(select(Category.id).where(Category.name == name))
    if exists:
        raise AppException(409, "Category already exists", ErrorCode.CATEGORY_EXISTS)

    category = Category(
        name=name,
        parent_id=payload.parent_id,
        description=payload.description,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(category)

    try:
        await db.flush()
        await emit_activity(
            db,
            user_id=user.id,
            username=user.username,
            code=ActivityCode.CREATE_CATEGORY,
            **actor_context(user),
            target_name=name,
        )
        await db.commit()

    except IntegrityError:
        await db.rollback()
        raise AppException(409, "Category already exists", ErrorCode.CATEGORY_EXISTS)

    await db.refresh(category)
    logger.info("Category created", extra={"category_id": category.id})
    return CategoryOut.model_validate(category)


async def list_categories(db: AsyncSession) -> list[CategoryOut]:
    categories = (
        await db.scalars(select(Category).order_by(Category.name))
    ).unique().all()
    return [CategoryOut.model_validate(c) for c in categories]
