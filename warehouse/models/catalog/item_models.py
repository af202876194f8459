from sqlalchemy import Column, Integer, String, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, AuditMixin


class Item(Base, TimestampMixin, AuditMixin):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)
    code = Column(String(64), nullable=False, unique=True, index=True)  # scannable identifier
    name = Column(String(255), nullable=False, index=True)
    unit = Column(String(20), nullable=False, default="pcs")
    min_stock = Column(Integer, nullable=False, default=0)

    # category_id is authoritative; category mirrors its name for display
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    category = Column(String(100), nullable=True)

    brand = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    spec = Column(String(255), nullable=True)
    description = Column(String(500), nullable=True)

    category_ref = relationship("Category", lazy="selectin")
    balances = relationship("StockBalance", back_populates="item", lazy="noload")

    __table_args__ = (
        CheckConstraint("min_stock >= 0", name="ck_item_min_stock_non_negative"),
        Index("ix_item_name_category", "name", "category_id"),
    )

    def __repr__(self):
        return f"<Item id={self.id} code={self.code} name={self.name}>"
