"""Payment FMS request model moving through the approval pipeline."""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class PaymentFms(Base):
    __tablename__ = "payment_fms_requests"

    id = Column(Integer, primary_key=True, index=True)
    unique_no = Column(String(100), nullable=False, index=True)
    fms_name = Column(String(100), nullable=False)
    pay_to = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    remarks = Column(Text, nullable=True)
    attachment = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="Pending", index=True)
    stage_remarks = Column(Text, nullable=True)
    payment_type = Column(String(50), nullable=True)
    # plannedN is stamped when the record enters stage N, actualN when stage N processes it
    planned1 = Column(DateTime(timezone=True), nullable=True)
    actual1 = Column(DateTime(timezone=True), nullable=True)
    planned2 = Column(DateTime(timezone=True), nullable=True)
    actual2 = Column(DateTime(timezone=True), nullable=True)
    planned3 = Column(DateTime(timezone=True), nullable=True)
    actual3 = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    events = relationship(
        "PaymentFmsEvent",
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="PaymentFmsEvent.id",
    )
