from sqlalchemy import Column, Integer, String, Date, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin


class StockOutRecord(Base, TimestampMixin):
    """Goods issued from a location. Immutable."""

    __tablename__ = "stock_out_records"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    operator_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    recipient_name = Column(String(150), nullable=True)
    purpose = Column(String(255), nullable=True)
    remark = Column(String(500), nullable=True)
    business_date = Column(Date, nullable=False, index=True)

    brand = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    spec = Column(String(255), nullable=True)
    serial_no = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)

    item = relationship("Item", lazy="selectin")
    location = relationship("Location", lazy="selectin")
    operator = relationship("User", foreign_keys=[operator_id], lazy="selectin")
    recipient = relationship("User", foreign_keys=[recipient_id], lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_out_quantity_positive"),
        Index("ix_stock_out_item_location", "item_id", "location_id"),
    )

    def __repr__(self):
        return f"<StockOutRecord id={self.id} item_id={self.item_id} location_id={self.location_id} qty={self.quantity}>"
