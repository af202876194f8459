from pydantic import BaseModel
from typing import List
import datetime


class CategoryStat(BaseModel):
    category: str
    item_count: int
    total_quantity: int


class TrendPoint(BaseModel):
    date: datetime.date
    stock_in_qty: int
    stock_out_qty: int


class DashboardSummaryOut(BaseModel):
    total_items: int
    total_locations: int
    total_stock_quantity: int
    low_stock_count: int
    category_stats: List[CategoryStat]
    in_out_trend: List[TrendPoint]
