# warehouse/services/catalog/location_service.py

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from warehouse.constants.activity_codes import ActivityCode
from warehouse.constants.error_codes import ErrorCode
from warehouse.core.exceptions import AppException
from warehouse.models.catalog.location_models import Location
from warehouse.schemas.catalog.location_schemas import (
    LocationCreate,
    LocationOut,
    LocationListData,
)
from warehouse.services.catalog.lookup_service import get_location_by_code
from warehouse.utils.activity_helpers import emit_activity, actor_context
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# CREATE LOCATION
# =====================================================
async def create_location(db: AsyncSession, payload: LocationCreate, user) -> LocationOut:
    code = payload.code.strip()

    exists = await db.scalar(select(Location.id).where(Location.code == code))
    if exists:
        raise AppException(409, "Location code already exists", ErrorCode.LOCATION_CODE_EXISTS)

    location = Location(
        code=code,
        name=payload.name,
        area=payload.area,
        description=payload.description,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(location)

    try:
        await db.flush()
        await emit_activity(
            db,
            user_id=user.id,
            username=user.username,
            code=ActivityCode.CREATE_LOCATION,
            **actor_context(user),
            target_name=code,
        )
        await db.commit()

    except IntegrityError:
        await db.rollback()
        raise AppException(409, "Location code already exists", ErrorCode.LOCATION_CODE_EXISTS)

    await db.refresh(location)
    logger.info("Location created", extra={"location_id": location.id, "location_code": code})
    return LocationOut.model_validate(location)


# =====================================================
# LIST LOCATIONS
# =====================================================
async def list_locations(
    db: AsyncSession,
    *,
    search: str | None = None,
    area: str | None = None,
) -> LocationListData:
    filters = []

    if search:
        filters.append(
            or_(
                Location.code.ilike(f"%{search}%"),
                Location.name.ilike(f"%{search}%"),
            )
        )

    if area:
        filters.append(Location.area == area)

    locations = (
        await db.scalars(select(Location).where(*filters).order_by(Location.code))
    ).unique().all()

    return LocationListData(
        total=len(locations),
        items=[LocationOut.model_validate(l) for l in locations],
    )


async def get_location_for_code(db: AsyncSession, code: str) -> LocationOut:
    return LocationOut.model_validate(await get_location_by_code(db, code))
