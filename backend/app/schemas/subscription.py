"""Subscription schemas: creation, approval, payment and renewal."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.schemas.payment_fms import CamelModel


class SubscriptionStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    PAID = "Paid"
    CANCELLED = "Cancelled"


class Frequency(str, Enum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    YEARLY = "Yearly"


class SubscriptionPaymentMethod(str, Enum):
    CREDIT_CARD = "Credit Card"
    BANK_TRANSFER = "Bank Transfer"
    UPI = "UPI"


class SubscriptionCreate(CamelModel):
    subscription_no: Optional[str] = None
    company_name: str = Field(min_length=1, max_length=255)
    subscriber_name: str = Field(min_length=1, max_length=255)
    subscription_name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0)
    frequency: Frequency
    purpose: Optional[str] = None

    @field_validator("company_name", "subscriber_name", "subscription_name")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class SubscriptionRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    subscription_no: str
    company_name: str
    subscriber_name: str
    subscription_name: str
    price: float
    frequency: str
    purpose: Optional[str] = None
    status: str
    approval_no: Optional[str] = None
    approval_note: Optional[str] = None
    approved_by: Optional[str] = None
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    planned1: Optional[datetime] = None
    actual1: Optional[datetime] = None
    planned2: Optional[datetime] = None
    actual2: Optional[datetime] = None
    created_at: datetime


class SubscriptionNumber(CamelModel):
    subscription_no: str


class SubscriptionRenewalRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    renewal_no: str
    subscription_id: int
    subscription_no: str
    company_name: str
    subscription_name: str
    renewal_status: str
    approved_by: Optional[str] = None
    price: float
    end_date: Optional[date] = None
    new_end_date: Optional[date] = None
    created_at: datetime


class SubscriptionApprovalSubmit(CamelModel):
    subscription_no: str = Field(min_length=1)
    approval: Literal["Approved", "Rejected"]
    note: Optional[str] = None
    approved_by: Optional[str] = None


class SubscriptionPaymentSubmit(CamelModel):
    subscription_no: str = Field(min_length=1)
    payment_method: SubscriptionPaymentMethod = SubscriptionPaymentMethod.CREDIT_CARD
    transaction_id: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None


class SubscriptionRenewalSubmit(CamelModel):
    subscription_no: str = Field(min_length=1)
    renewal_status: Literal["Approved", "Rejected"]
    approved_by: Optional[str] = None
