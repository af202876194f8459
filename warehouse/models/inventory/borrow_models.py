from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from warehouse.core.db import Base
from warehouse.models.base.mixins import TimestampMixin
from warehouse.models.enums.borrow_status import BorrowStatus


class BorrowRecord(Base, TimestampMixin):
    """Borrow and return events share this table, tagged by kind.

    A borrow row moves borrowed -> returned exactly once and then names
    its return row in returned_record_id. The return row names the borrow
    it closes in borrow_record_id.
    """

    __tablename__ = "borrow_records"

    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="RESTRICT"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    borrower_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    operator_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    kind = Column(String(10), nullable=False, index=True)
    status = Column(String(10), nullable=False, default=BorrowStatus.borrowed.value, index=True)

    borrow_date = Column(DateTime(timezone=True), nullable=True)
    expected_return_date = Column(DateTime(timezone=True), nullable=True)
    actual_return_date = Column(DateTime(timezone=True), nullable=True)
    returned_record_id = Column(Integer, ForeignKey("borrow_records.id", ondelete="RESTRICT"), nullable=True, unique=True)
    borrow_record_id = Column(Integer, ForeignKey("borrow_records.id", ondelete="RESTRICT"), nullable=True, unique=True)

    remark = Column(String(500), nullable=True)
    photo_url = Column(String(500), nullable=True)

    item = relationship("Item", lazy="selectin")
    location = relationship("Location", lazy="selectin")
    borrower = relationship("User", foreign_keys=[borrower_id], lazy="selectin")
    operator = relationship("User", foreign_keys=[operator_id], lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_borrow_quantity_positive"),
        CheckConstraint("kind IN ('borrow', 'return')", name="ck_borrow_kind"),
        CheckConstraint("status IN ('borrowed', 'returned', 'overdue')", name="ck_borrow_status"),
        Index("ix_borrow_kind_status", "kind", "status"),
        Index("ix_borrow_borrower_status", "borrower_id", "status"),
    )

    def __repr__(self):
        return f"<BorrowRecord id={self.id} kind={self.kind} status={self.status} qty={self.quantity}>"
