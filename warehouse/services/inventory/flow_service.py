# warehouse/services/inventory/flow_service.py

from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from warehouse.constants.flow_type import FlowType
from warehouse.core.exceptions import NotFoundError
from warehouse.models.catalog.item_models import Item
from warehouse.models.catalog.location_models import Location
from warehouse.models.inventory.flow_models import ItemFlow
from warehouse.models.users.user_models import User
from warehouse.schemas.inventory.flow_schemas import FlowEntryOut, FlowListData
from warehouse.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# APPEND
# =====================================================
async def append_flow(
    db: AsyncSession,
    *,
    item_id: int,
    quantity: int,
    operator_id: int,
    flow_type: FlowType,
    related_record_id: int,
    from_location_id: int | None = None,
    to_location_id: int | None = None,
    remark: str | None = None,
    serial_no: str | None = None,
    photo_url: str | None = None,
) -> ItemFlow:
    flow = ItemFlow(
        item_id=item_id,
        from_location_id=from_location_id,
        to_location_id=to_location_id,
        quantity=quantity,
        operator_id=operator_id,
        flow_type=flow_type.value,
        related_record_id=related_record_id,
        remark=remark,
        serial_no=serial_no,
        photo_url=photo_url,
    )
    db.add(flow)
    await db.flush()
    return flow


# =====================================================
# QUERY
# =====================================================
def _day_start(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def _flow_filters(
    *,
    item_id: int | None,
    location_id: int | None,
    flow_type: FlowType | None,
    start_date: date | None,
    end_date: date | None,
) -> list:
    filters = []

    if item_id:
        filters.append(ItemFlow.item_id == item_id)

    if location_id:
        filters.append(
            or_(
                ItemFlow.from_location_id == location_id,
                ItemFlow.to_location_id == location_id,
            )
        )

    if flow_type:
        filters.append(ItemFlow.flow_type == FlowType(flow_type).value)

    if start_date:
        filters.append(ItemFlow.created_at >= _day_start(start_date))

    # end_date covers the whole calendar day
    if end_date:
        filters.append(ItemFlow.created_at < _day_start(end_date + timedelta(days=1)))

    return filters


def _flow_select():
    FromLocation = aliased(Location)
    ToLocation = aliased(Location)

    return (
        select(
            ItemFlow.id,
            ItemFlow.item_id,
            Item.code.label("item_code"),
            Item.name.label("item_name"),
            Item.unit,
            ItemFlow.from_location_id,
            FromLocation.code.label("from_location_code"),
            FromLocation.name.label("from_location_name"),
            ItemFlow.to_location_id,
            ToLocation.code.label("to_location_code"),
            ToLocation.name.label("to_location_name"),
            ItemFlow.quantity,
            ItemFlow.flow_type,
            ItemFlow.related_record_id,
            ItemFlow.operator_id,
            User.username.label("operator_username"),
            User.name.label("operator_name"),
            ItemFlow.remark,
            ItemFlow.serial_no,
            ItemFlow.photo_url,
            ItemFlow.created_at,
        )
        .join(Item, Item.id == ItemFlow.item_id)
        .outerjoin(FromLocation, FromLocation.id == ItemFlow.from_location_id)
        .outerjoin(ToLocation, ToLocation.id == ItemFlow.to_location_id)
        .join(User, User.id == ItemFlow.operator_id)
    )


async def list_flows(
    db: AsyncSession,
    *,
    item_id: int | None = None,
    location_id: int | None = None,
    flow_type: FlowType | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    page: int = 1,
    page_size: int = 50,
) -> FlowListData:
    filters = _flow_filters(
        item_id=item_id,
        location_id=location_id,
        flow_type=flow_type,
        start_date=start_date,
        end_date=end_date,
    )

    total = await db.scalar(
        select(func.count()).select_from(ItemFlow).where(*filters)
    )

    rows = (
        await db.execute(
            _flow_select()
            .where(*filters)
            .order_by(ItemFlow.created_at.desc(), ItemFlow.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
    ).all()

    logger.debug(
        "Flows listed",
        extra={"total": total, "page": page, "page_size": page_size},
    )

    return FlowListData(
        total=total or 0,
        items=[FlowEntryOut.model_validate(r) for r in rows],
    )


async def list_item_flows(db: AsyncSession, item_id: int) -> list[FlowEntryOut]:
    exists = await db.scalar(select(Item.id).where(Item.id == item_id))
    if not exists:
        raise NotFoundError("Item", item_id)

    rows = (
        await db.execute(
            _flow_select()
            .where(ItemFlow.item_id == item_id)
            .order_by(ItemFlow.created_at.desc(), ItemFlow.id.desc())
        )
    ).all()

    return [FlowEntryOut.model_validate(r) for r in rows]
