from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, AuditMixin


class Category(Base, TimestampMixin, AuditMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    parent_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    description = Column(String(500), nullable=True)

    parent = relationship("Category", remote_side=[id], lazy="selectin")

    def __repr__(self):
        return f"<Category id={self.id} name={self.name}>"
