from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime


# ==============================
# STOCK IN
# ==============================
class StockInDetails(BaseModel):
    quantity: int = Field(gt=0, description="Received quantity")
    supplier: Optional[str] = None
    batch_no: Optional[str] = None
    remark: Optional[str] = None
    business_date: Optional[date] = Field(
        default=None, description="Defaults to today"
    )
    brand: Optional[str] = None
    model: Optional[str] = None
    spec: Optional[str] = None
    serial_no: Optional[str] = None
    photo_url: Optional[str] = None


class StockInCreate(StockInDetails):
    item_id: int
    location_id: int


class StockInScan(StockInDetails):
    item_code: str = Field(min_length=1)
    location_code: str = Field(min_length=1)


# ==============================
# STOCK OUT
# ==============================
class StockOutDetails(BaseModel):
    quantity: int = Field(gt=0, description="Issued quantity")
    recipient_id: Optional[int] = None
    recipient_name: Optional[str] = None
    purpose: Optional[str] = None
    remark: Optional[str] = None
    business_date: Optional[date] = Field(
        default=None, description="Defaults to today"
    )
    brand: Optional[str] = None
    model: Optional[str] = None
    spec: Optional[str] = None
    serial_no: Optional[str] = None
    photo_url: Optional[str] = None


class StockOutCreate(StockOutDetails):
    item_id: int
    location_id: int


class StockOutScan(StockOutDetails):
    item_code: str = Field(min_length=1)
    location_code: str = Field(min_length=1)


# ==============================
# RESULTS
# ==============================
class LedgerRecordOut(BaseModel):
    record_id: int
    quantity_on_hand: int


class StockRowOut(BaseModel):
    item_id: int
    item_code: str
    item_name: str
    category: Optional[str]
    unit: str
    brand: Optional[str]
    model: Optional[str]
    spec: Optional[str]
    min_stock: int

    location_id: int
    location_code: str
    location_name: str

    quantity: int
    is_low_stock: bool
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class LowStockRowOut(StockRowOut):
    shortage: int


class StockListData(BaseModel):
    total: int
    items: List[StockRowOut]
