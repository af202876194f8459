from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from warehouse.constants.flow_type import FlowType


class FlowEntryOut(BaseModel):
    id: int
    item_id: int
    item_code: str
    item_name: str
    unit: str

    from_location_id: Optional[int]
    from_location_code: Optional[str]
    from_location_name: Optional[str]
    to_location_id: Optional[int]
    to_location_code: Optional[str]
    to_location_name: Optional[str]

    quantity: int
    flow_type: FlowType
    related_record_id: Optional[int]

    operator_id: int
    operator_username: str
    operator_name: str

    remark: Optional[str]
    serial_no: Optional[str]
    photo_url: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class FlowListData(BaseModel):
    total: int
    items: List[FlowEntryOut]
