from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ItemCreate(BaseModel):
    code: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1)
    category_id: Optional[int] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    min_stock: int = Field(default=0, ge=0)
    brand: Optional[str] = None
    model: Optional[str] = None
    spec: Optional[str] = None
    description: Optional[str] = None


class ItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category_id: Optional[int] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    min_stock: Optional[int] = Field(default=None, ge=0)
    brand: Optional[str] = None
    model: Optional[str] = None
    spec: Optional[str] = None
    description: Optional[str] = None


class ItemOut(BaseModel):
    id: int
    code: str
    name: str
    category_id: Optional[int]
    category: Optional[str]
    unit: str
    min_stock: int
    brand: Optional[str]
    model: Optional[str]
    spec: Optional[str]
    description: Optional[str]

    created_by_name: Optional[str]
    updated_by_name: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ItemListData(BaseModel):
    total: int
    items: List[ItemOut]
