from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class LocationCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1)
    area: Optional[str] = None
    description: Optional[str] = None


class LocationOut(BaseModel):
    id: int
    code: str
    name: str
    area: Optional[str]
    description: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class LocationListData(BaseModel):
    total: int
    items: List[LocationOut]
