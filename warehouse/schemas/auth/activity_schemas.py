# warehouse/schemas/auth/activity_schemas.py

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from fastapi import Query


class UserActivityFilters(BaseModel):
    user_id: Optional[int] = Query(None)
    username: Optional[str] = Query(None)
    code: Optional[str] = Query(None, description="ActivityCode, e.g. STOCK_OUT")

    page: int = Query(1, ge=1)
    page_size: int = Query(20, ge=1, le=100)


class UserActivityOut(BaseModel):
    id: int
    user_id: Optional[int]
    username_snapshot: str
    code: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class UserActivityListData(BaseModel):
    total: int
    items: List[UserActivityOut]
