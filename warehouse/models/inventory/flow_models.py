from sqlalchemy import Column, Integer, String, CheckConstraint, ForeignKey, Index
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin


class ItemFlow(Base, TimestampMixin):
    """Movement log. APPEND-ONLY. Never updated, never deleted."""

    __tablename__ = "item_flows"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True)
    from_location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=True, index=True)
    to_location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=True, index=True)
    quantity = Column(Integer, nullable=False)
    operator_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    flow_type = Column(String(20), nullable=False, index=True)
    related_record_id = Column(Integer, nullable=True)
    remark = Column(String(500), nullable=True)
    serial_no = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)

    item = relationship("Item", lazy="selectin")
    operator = relationship("User", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_item_flow_quantity_positive"),
        CheckConstraint(
            "flow_type IN ('in', 'out', 'transfer', 'borrow', 'return')",
            name="ck_item_flow_type",
        ),
        CheckConstraint(
            "from_location_id IS NOT NULL OR to_location_id IS NOT NULL",
            name="ck_item_flow_has_location",
        ),
        Index("ix_item_flow_item_created", "item_id", "created_at"),
        Index("ix_item_flow_type_related", "flow_type", "related_record_id"),
    )

    def __repr__(self):
        return (
            f"<ItemFlow id={self.id} item_id={self.item_id} {self.flow_type} "
            f"{self.from_location_id}->{self.to_location_id} qty={self.quantity}>"
        )
