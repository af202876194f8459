from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin


class StockBalance(Base, TimestampMixin):
    """On-hand quantity per (item, location). Derived from item_flows, kept incrementally."""

    __tablename__ = "stock_balances"

    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), primary_key=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), primary_key=True, index=True)
    quantity = Column(Integer, nullable=False, default=0)

    item = relationship("Item", back_populates="balances", lazy="selectin")
    location = relationship("Location", back_populates="balances", lazy="selectin")

    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_stock_balance_quantity_non_negative"),)

    def __repr__(self):
        return f"<StockBalance item_id={self.item_id} location_id={self.location_id} qty={self.quantity}>"
