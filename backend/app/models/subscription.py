"""Subscription moving through approval, payment and periodic renewal."""

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    subscription_no = Column(String(20), nullable=False, unique=True, index=True)
    company_name = Column(String(255), nullable=False)
    subscriber_name = Column(String(255), nullable=False)
    subscription_name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    frequency = Column(String(20), nullable=False)
    purpose = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="Pending", index=True)
    approval_no = Column(String(20), nullable=True)
    approval_note = Column(Text, nullable=True)
    approved_by = Column(String(255), nullable=True)
    payment_method = Column(String(50), nullable=True)
    transaction_id = Column(String(100), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    # planned1/actual1 cover approval, planned2/actual2 cover payment
    planned1 = Column(DateTime(timezone=True), nullable=True)
    actual1 = Column(DateTime(timezone=True), nullable=True)
    planned2 = Column(DateTime(timezone=True), nullable=True)
    actual2 = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    renewals = relationship(
        "SubscriptionRenewal",
        back_populates="subscription",
        cascade="all, delete-orphan",
        order_by="SubscriptionRenewal.id",
    )
