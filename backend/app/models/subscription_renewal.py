"""Renewal decision recorded against a paid subscription."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class SubscriptionRenewal(Base):
    __tablename__ = "subscription_renewals"

    id = Column(Integer, primary_key=True, index=True)
    renewal_no = Column(String(20), nullable=False, unique=True, index=True)
    subscription_id = Column(Integer, ForeignKey("subscriptions.id"), nullable=False, index=True)
    renewal_status = Column(String(20), nullable=False)
    approved_by = Column(String(255), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    end_date = Column(Date, nullable=True)
    new_end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    subscription = relationship("Subscription", back_populates="renewals")

    @property
    def subscription_no(self) -> str:
        return self.subscription.subscription_no

    @property
    def company_name(self) -> str:
        return self.subscription.company_name

    @property
    def subscription_name(self) -> str:
        return self.subscription.subscription_name
