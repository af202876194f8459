from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime


class BorrowDetails(BaseModel):
    quantity: int = Field(gt=0)
    borrower_id: int
    expected_return_date: Optional[datetime] = None
    remark: Optional[str] = None
    photo_url: Optional[str] = None


class BorrowCreate(BorrowDetails):
    item_id: int
    location_id: int


class BorrowScan(BorrowDetails):
    item_code: str = Field(min_length=1)
    location_code: str = Field(min_length=1)


class ReturnCreate(BaseModel):
    record_id: int
    remark: Optional[str] = None
    photo_url: Optional[str] = None


class BorrowRecordOut(BaseModel):
    id: int
    item_id: int
    item_code: str
    item_name: str
    unit: str
    location_id: int
    location_code: str
    location_name: str
    quantity: int

    borrower_id: int
    borrower_username: str
    borrower_name: str
    operator_id: int
    operator_username: str
    operator_name: str

    kind: Literal["borrow", "return"]
    status: Literal["borrowed", "returned", "overdue"]
    borrow_date: Optional[datetime]
    expected_return_date: Optional[datetime]
    actual_return_date: Optional[datetime]
    returned_record_id: Optional[int]
    borrow_record_id: Optional[int]

    remark: Optional[str]
    photo_url: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class BorrowRecordListData(BaseModel):
    total: int
    items: List[BorrowRecordOut]
