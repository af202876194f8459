from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    parent_id: Optional[int] = None
    description: Optional[str] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    parent_id: Optional[int]
    description: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
