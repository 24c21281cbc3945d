"""Deserialization boundary for records returned by the workflow API.

The API is not consistent about key casing, so every raw record passes
through one of the transforms below before a stage sees it. Both are total:
missing or malformed values fall back to a default instead of raising.
"""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from backend.app.core.settings import CURRENCY_SYMBOL
from backend.app.core.time import utc_now


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_view(self) -> dict:
        """camelCase dict as consumed by a table view."""
        view = self.model_dump(by_alias=True)
        for field in ("amount", "price"):
            if field in view:
                view[f"{field}Display"] = format_amount(view[field])
        return view


class PaymentRecord(_Record):
    id: str = ""
    status: str = "Pending"
    unique_no: str = ""
    fms_name: str = ""
    pay_to: str = ""
    amount: float = 0.0
    remarks: str = ""
    stage_remarks: str = ""
    attachment: str = ""
    payment_type: str = ""
    planned1: str = ""
    actual1: str = ""
    planned2: str = ""
    actual2: str = ""
    planned3: str = ""
    actual3: str = ""
    created_at: str = ""


class AccountRecord(_Record):
    id: str = ""
    fms: str = ""
    reference_no: str = ""
    party_name: str = ""
    amount: float = 0.0
    status: str = "Pending"
    remarks: str = ""
    audit_remarks: str = ""
    rectify_remarks: str = ""
    audited_at: str = ""
    filed_at: str = ""
    created_at: str = ""


class SubscriptionRecord(_Record):
    id: str = ""
    subscription_no: str = ""
    company_name: str = ""
    subscriber_name: str = ""
    subscription_name: str = ""
    price: float = 0.0
    frequency: str = ""
    purpose: str = ""
    status: str = "Pending"
    approval_no: str = ""
    approval_note: str = ""
    approved_by: str = ""
    payment_method: str = ""
    transaction_id: str = ""
    start_date: str = ""
    end_date: str = ""
    created_at: str = ""


class RenewalRecord(_Record):
    id: str = ""
    renewal_no: str = ""
    subscription_no: str = ""
    company_name: str = ""
    subscription_name: str = ""
    renewal_status: str = ""
    approved_by: str = ""
    price: float = 0.0
    end_date: str = ""
    new_end_date: str = ""
    created_at: str = ""


def _raw_mapping(item: Any) -> Mapping:
    if isinstance(item, _Record):
        return item.to_view()
    if isinstance(item, Mapping):
        return item
    return {}


def _pick(item: Mapping, camel: str, snake: str | None = None, default: str = "") -> str:
    for key in (camel, snake):
        if key is None:
            continue
        value = item.get(key)
        if value is None or value == "":
            continue
        return value if isinstance(value, str) else str(value)
    return default


def _amount(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def _now_iso() -> str:
    return utc_now().isoformat()


def transform_payment_fms(item: Any) -> PaymentRecord:
    raw = _raw_mapping(item)
    return PaymentRecord(
        id=_pick(raw, "id"),
        status=_pick(raw, "status", default="Pending"),
        unique_no=_pick(raw, "uniqueNo", "unique_no"),
        fms_name=_pick(raw, "fmsName", "fms_name"),
        pay_to=_pick(raw, "payTo", "pay_to"),
        amount=_amount(raw.get("amount")),
        remarks=_pick(raw, "remarks"),
        stage_remarks=_pick(raw, "stageRemarks", "stage_remarks"),
        attachment=_pick(raw, "attachment"),
        payment_type=_pick(raw, "paymentType", "payment_type"),
        planned1=_pick(raw, "planned1"),
        actual1=_pick(raw, "actual1"),
        planned2=_pick(raw, "planned2"),
        actual2=_pick(raw, "actual2"),
        planned3=_pick(raw, "planned3"),
        actual3=_pick(raw, "actual3"),
        created_at=_pick(raw, "createdAt", "created_at") or _now_iso(),
    )


def transform_account_entry(item: Any) -> AccountRecord:
    raw = _raw_mapping(item)
    return AccountRecord(
        id=_pick(raw, "id"),
        fms=_pick(raw, "fms"),
        reference_no=_pick(raw, "referenceNo", "reference_no"),
        party_name=_pick(raw, "partyName", "party_name"),
        amount=_amount(raw.get("amount")),
        status=_pick(raw, "status", default="Pending"),
        remarks=_pick(raw, "remarks"),
        audit_remarks=_pick(raw, "auditRemarks", "audit_remarks"),
        rectify_remarks=_pick(raw, "rectifyRemarks", "rectify_remarks"),
        audited_at=_pick(raw, "auditedAt", "audited_at"),
        filed_at=_pick(raw, "filedAt", "filed_at"),
        created_at=_pick(raw, "createdAt", "created_at") or _now_iso(),
    )



def transform_subscription(item: Any) -> SubscriptionRecord:
    raw = _raw_mapping(item)
    return SubscriptionRecord(
        id=_pick(raw, "id"),
        subscription_no=_pick(raw, "subscriptionNo", "subscription_no"),
        company_name=_pick(raw, "companyName", "company_name"),
        subscriber_name=_pick(raw, "subscriberName", "subscriber_name"),
        subscription_name=_pick(raw, "subscriptionName", "subscription_name"),
        price=_amount(raw.get("price")),
        frequency=_pick(raw, "frequency"),
        purpose=_pick(raw, "purpose"),
        status=_pick(raw, "status", default="Pending"),
        approval_no=_pick(raw, "approvalNo", "approval_no"),
        approval_note=_pick(raw, "approvalNote", "approval_note"),
        approved_by=_pick(raw, "approvedBy", "approved_by"),
        payment_method=_pick(raw, "paymentMethod", "payment_method"),
        transaction_id=_pick(raw, "transactionId", "transaction_id"),
        start_date=_pick(raw, "startDate", "start_date"),
        end_date=_pick(raw, "endDate", "end_date"),
        created_at=_pick(raw, "createdAt", "created_at") or _now_iso(),
    )


def transform_subscription_renewal(item: Any) -> RenewalRecord:
    raw = _raw_mapping(item)
    return RenewalRecord(
        id=_pick(raw, "id"),
        renewal_no=_pick(raw, "renewalNo", "renewal_no"),
        subscription_no=_pick(raw, "subscriptionNo", "subscription_no"),
        company_name=_pick(raw, "companyName", "company_name"),
        subscription_name=_pick(raw, "subscriptionName", "subscription_name"),
        renewal_status=_pick(raw, "renewalStatus", "renewal_status"),
        approved_by=_pick(raw, "approvedBy", "approved_by"),
        price=_amount(raw.get("price")),
        end_date=_pick(raw, "endDate", "end_date"),
        new_end_date=_pick(raw, "newEndDate", "new_end_date"),
        created_at=_pick(raw, "createdAt", "created_at") or _now_iso(),
    )

def format_amount(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"
