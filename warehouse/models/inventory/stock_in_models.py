from sqlalchemy import Column, Integer, String, Date, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin


class StockInRecord(Base, TimestampMixin):
    """Goods received into a location. Immutable; corrections are new records."""

    __tablename__ = "stock_in_records"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    operator_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    supplier = Column(String(255), nullable=True)
    batch_no = Column(String(100), nullable=True)
    remark = Column(String(500), nullable=True)
    business_date = Column(Date, nullable=False, index=True)

    brand = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    spec = Column(String(255), nullable=True)
    serial_no = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)

    item = relationship("Item", lazy="selectin")
    location = relationship("Location", lazy="selectin")
    operator = relationship("User", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_in_quantity_positive"),
        Index("ix_stock_in_item_location", "item_id", "location_id"),
    )

    def __repr__(self):
        return f"<StockInRecord id={self.id} item_id={self.item_id} location_id={self.location_id} qty={self.quantity}>"
