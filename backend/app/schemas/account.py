"""Account-section entry schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.app.schemas.payment_fms import CamelModel


class FmsDomain(str, Enum):
    STORE = "Store"
    REPAIR = "Repair"
    CAR_FMS = "Car-FMS"
    SUBSCRIPTION = "Subscription"
    FREIGHT = "Freight"
    SALES = "Sales"
    PRODUCTION = "Production"
    MAKE_PAYMENT = "Make Payment"


class AccountStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    RECTIFY = "Rectify"
    FILED = "Filed"


class AccountEntryCreate(CamelModel):
    fms: FmsDomain
    reference_no: str = Field(min_length=1, max_length=100)
    party_name: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(ge=0)
    remarks: Optional[str] = None


class AccountEntryRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    fms: str
    reference_no: str
    party_name: str
    amount: float
    status: str
    remarks: Optional[str] = None
    audit_remarks: Optional[str] = None
    rectify_remarks: Optional[str] = None
    audited_at: Optional[datetime] = None
    filed_at: Optional[datetime] = None
    created_at: datetime


class AuditProcess(CamelModel):
    status: Literal["Approved", "Rejected"]
    remarks: Optional[str] = None


class RectifyResubmit(CamelModel):
    remarks: str = Field(min_length=1)


class FileBills(CamelModel):
    ids: List[int] = Field(min_length=1)
