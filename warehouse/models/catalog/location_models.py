from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin, AuditMixin


class Location(Base, TimestampMixin, AuditMixin):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), nullable=False, unique=True, index=True)  # scannable shelf / room label
    name = Column(String(100), nullable=False)
    area = Column(String(100), nullable=True, index=True)
    description = Column(String(500), nullable=True)

    balances = relationship("StockBalance", back_populates="location", lazy="noload")

    def __repr__(self):
        return f"<Location id={self.id} code={self.code}>"
