from datetime import datetime

import pytest

from backend.app.stages.transform import (
    PaymentRecord,
    format_amount,
    transform_account_entry,
    transform_payment_fms,
    transform_subscription,
    transform_subscription_renewal,
)

CAMEL = {
    "id": "7",
    "uniqueNo": "PAY-100",
    "fmsName": "Store",
    "payTo": "Acme",
    "amount": 500,
    "remarks": "steel",
    "stageRemarks": "ok",
    "attachment": "bill.pdf",
    "paymentType": "UPI",
    "status": "Paid",
    "planned1": "2024-01-01T00:00:00",
    "createdAt": "2024-01-01T00:00:00",
}

SNAKE = {
    "id": "7",
    "unique_no": "PAY-100",
    "fms_name": "Store",
    "pay_to": "Acme",
    "amount": 500,
    "remarks": "steel",
    "stage_remarks": "ok",
    "attachment": "bill.pdf",
    "payment_type": "UPI",
    "status": "Paid",
    "planned1": "2024-01-01T00:00:00",
    "created_at": "2024-01-01T00:00:00",
}


def test_snake_case_maps_like_camel_case():
    assert transform_payment_fms(SNAKE) == transform_payment_fms(CAMEL)


def test_camel_case_preferred_over_snake_case():
    record = transform_payment_fms({"uniqueNo": "CAMEL", "unique_no": "SNAKE", "amount": 1})
    assert record.unique_no == "CAMEL"


def test_empty_camel_value_falls_back_to_snake():
    record = transform_payment_fms({"payTo": "", "pay_to": "Acme"})
    assert record.pay_to == "Acme"


@pytest.mark.parametrize("raw", [CAMEL, SNAKE, {}, {"amount": "12.5"}, {"id": 3, "status": ""}])
def test_transform_is_idempotent(raw):
    once = transform_payment_fms(raw)
    assert transform_payment_fms(once) == once
    assert transform_payment_fms(once.to_view()) == once


def test_defaults_for_missing_fields():
    record = transform_payment_fms({})
    assert record.id == ""
    assert record.status == "Pending"
    assert record.amount == 0
    assert record.stage_remarks == ""
    assert datetime.fromisoformat(record.created_at)


@pytest.mark.parametrize("raw", [None, "not a record", 42, {"amount": "abc"}, {"amount": None}, {"amount": float("nan")}])
def test_transform_never_raises(raw):
    record = transform_payment_fms(raw)
    assert isinstance(record, PaymentRecord)
    assert record.amount == 0


def test_numeric_values_become_strings():
    record = transform_payment_fms({"id": 12, "uniqueNo": 1001, "amount": "99.5"})
    assert record.id == "12"
    assert record.unique_no == "1001"
    assert record.amount == 99.5


def test_view_uses_camel_case_keys():
    view = transform_payment_fms(SNAKE).to_view()
    assert view["uniqueNo"] == "PAY-100"
    assert view["stageRemarks"] == "ok"
    assert view["createdAt"] == "2024-01-01T00:00:00"
    assert "unique_no" not in view
    assert view["amountDisplay"] == "₹500.00"


def test_account_entry_transform():
    snake = transform_account_entry({"id": 1, "reference_no": "BILL-1", "party_name": "Acme", "amount": "10"})
    camel = transform_account_entry({"id": "1", "referenceNo": "BILL-1", "partyName": "Acme", "amount": 10})
    assert snake.reference_no == "BILL-1"
    assert snake.id == camel.id
    assert snake.party_name == camel.party_name


def test_format_amount():
    assert format_amount(5240) == "₹5,240.00"


def test_subscription_transform_accepts_either_casing():
    snake = transform_subscription({"id": 3, "subscription_no": "SN-003", "company_name": "Acme", "price": "1200"})
    camel = transform_subscription({"id": "3", "subscriptionNo": "SN-003", "companyName": "Acme", "price": 1200})
    assert snake.subscription_no == camel.subscription_no == "SN-003"
    assert snake.price == camel.price == 1200.0
    assert snake.status == "Pending"
    assert transform_subscription(snake.to_view()) == snake


def test_renewal_transform_is_total():
    record = transform_subscription_renewal(None)
    assert record.renewal_no == ""
    assert record.price == 0.0
    assert transform_subscription_renewal({"renewal_no": "RN-001", "new_end_date": "2025-02-20"}).new_end_date == "2025-02-20"
