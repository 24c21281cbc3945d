"""Payment FMS request schemas.

Payloads are accepted with either camelCase or snake_case keys and always
serialized with camelCase keys.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    PAID = "Paid"
    PROCESSED = "Processed"


class PaymentType(str, Enum):
    CASH = "Cash"
    BANK_TRANSFER = "Bank Transfer"
    UPI = "UPI"
    OTHER = "Other"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaymentFmsCreate(CamelModel):
    unique_no: str = Field(min_length=1, max_length=100)
    fms_name: str = Field(min_length=1, max_length=100)
    pay_to: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(ge=0)
    remarks: Optional[str] = None
    attachment: Optional[str] = None

    @field_validator("unique_no", "fms_name", "pay_to")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PaymentFmsRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    unique_no: str
    fms_name: str
    pay_to: str
    amount: float
    remarks: Optional[str] = None
    attachment: Optional[str] = None
    status: str
    stage_remarks: Optional[str] = None
    payment_type: Optional[str] = None
    planned1: Optional[datetime] = None
    actual1: Optional[datetime] = None
    planned2: Optional[datetime] = None
    actual2: Optional[datetime] = None
    planned3: Optional[datetime] = None
    actual3: Optional[datetime] = None
    created_at: datetime


class PaymentFmsEventRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    record_id: int
    from_status: Optional[str] = None
    to_status: str
    remarks: Optional[str] = None
    created_at: datetime


class ApprovalProcess(CamelModel):
    status: Literal["Approved", "Rejected"]
    stage_remarks: Optional[str] = None


class MakePaymentProcess(CamelModel):
    payment_type: PaymentType = PaymentType.CASH


class TallyEntryProcess(CamelModel):
    ids: List[int] = Field(min_length=1)
