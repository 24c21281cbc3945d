from datetime import timedelta

import httpx
import pytest

from backend.app.core.time import utc_today
from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app
from backend.app.stages.api_client import SubscriptionApi
from backend.app.stages.subscription import (
    SubscriptionApprovalStage,
    SubscriptionForm,
    SubscriptionPaymentStage,
    SubscriptionRenewalStage,
    SubscriptionStage,
)

pytestmark = pytest.mark.anyio

BASE_URL = "http://testserver/api"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def make_api() -> SubscriptionApi:
    return SubscriptionApi(base_url=BASE_URL, transport=httpx.ASGITransport(app=app))


def recording_api():
    calls = []

    def respond(request: httpx.Request):
        calls.append(request)
        return httpx.Response(200, json={"success": True, "data": [], "error": None})

    return SubscriptionApi(base_url=BASE_URL, transport=httpx.MockTransport(respond)), calls


def cloud_form(company_name: str = "Acme Corp", frequency: str = "Monthly") -> SubscriptionForm:
    return SubscriptionForm(
        company_name=company_name,
        subscriber_name="Ravi",
        subscription_name="Cloud Suite",
        price="1200",
        frequency=frequency,
    )


async def test_full_subscription_cycle():
    async with make_api() as api:
        subscriptions = SubscriptionStage(api)
        await subscriptions.prepare_form()
        assert subscriptions.form.subscription_no == "SN-001"
        subscriptions.form = cloud_form()
        subscriptions.form.subscription_no = "SN-001"
        assert await subscriptions.submit()
        [created] = subscriptions.records
        assert created.subscription_no == "SN-001"
        assert created.to_view()["priceDisplay"] == "₹1,200.00"
        assert subscriptions.form == SubscriptionForm()

        approval = SubscriptionApprovalStage(api)
        await approval.refresh()
        assert [s.subscription_no for s in approval.pending] == ["SN-001"]
        assert await approval.process("SN-001", "Approved", "ok", "Manager")
        assert approval.pending == []
        assert approval.history[0].approval_no == "AP-001"
        assert approval.notifier.last.message == "Subscription Approved"

        payment = SubscriptionPaymentStage(api)
        await payment.refresh()
        assert [s.subscription_no for s in payment.pending] == ["SN-001"]
        start = utc_today() - timedelta(days=20)
        assert await payment.process("SN-001", start, payment_method="UPI", transaction_id="TXN-9")
        [paid] = payment.history
        assert paid.status == "Paid"
        assert paid.start_date == start.isoformat()
        assert paid.end_date

        renewal = SubscriptionRenewalStage(api)
        await renewal.refresh()
        assert [s.subscription_no for s in renewal.pending] == ["SN-001"]
        assert await renewal.process("SN-001", "Approved", "Manager")
        assert renewal.pending == []
        [renewed] = renewal.history
        assert renewed.renewal_no == "RN-001"
        assert renewed.end_date == paid.end_date
        assert renewed.new_end_date > paid.end_date
        assert renewal.notifier.last.message == "Subscription renewed"


async def test_rejected_renewal_cancels():
    async with make_api() as api:
        await SubscriptionStage(api).submit(cloud_form())
        await SubscriptionApprovalStage(api).process("SN-001", "Approved")
        await SubscriptionPaymentStage(api).process("SN-001", (utc_today() - timedelta(days=40)).isoformat())

        renewal = SubscriptionRenewalStage(api)
        assert await renewal.process("SN-001", "Rejected")
        assert renewal.pending == []
        assert renewal.history[0].renewal_status == "Rejected"
        assert renewal.notifier.last.message == "Subscription Renewal Rejected"

        subscriptions = SubscriptionStage(api)
        await subscriptions.refresh()
        assert subscriptions.records[0].status == "Cancelled"


async def test_frequency_filter_and_search():
    async with make_api() as api:
        stage = SubscriptionStage(api)
        await stage.submit(cloud_form("Acme Corp", "Monthly"))
        await stage.submit(cloud_form("Globex", "Yearly"))

        assert stage.frequencies() == ["Monthly", "Yearly"]
        stage.frequency_filter = "Yearly"
        assert [s.company_name for s in stage.filtered()] == ["Globex"]
        stage.frequency_filter = ""
        assert [s.company_name for s in stage.list("acme")] == ["Acme Corp"]
        assert [s.company_name for s in stage.list("sn-002")] == ["Globex"]


@pytest.mark.parametrize(
    "form",
    [
        SubscriptionForm(subscriber_name="Ravi", subscription_name="Suite", price="10", frequency="Monthly"),
        SubscriptionForm(company_name="Acme", subscriber_name="Ravi", subscription_name="Suite", price="10"),
        SubscriptionForm(company_name="Acme", subscriber_name="Ravi", subscription_name="Suite", price="0", frequency="Monthly"),
    ],
)
async def test_invalid_subscription_form_makes_no_call(form):
    api, calls = recording_api()
    async with api:
        stage = SubscriptionStage(api)
        assert await stage.submit(form) is False
    assert calls == []
    assert stage.notifier.last.level == "error"


async def test_stage_inputs_validated_before_any_call():
    api, calls = recording_api()
    async with api:
        assert await SubscriptionApprovalStage(api).process("SN-001", "Maybe") is False
        payment = SubscriptionPaymentStage(api)
        assert await payment.process("SN-001", "") is False
        assert payment.notifier.last.message == "Please select a start date"
        assert await payment.process("SN-001", "2025-02-01", "2025-01-01") is False
        assert await payment.process("SN-001", "not-a-date") is False
        assert await payment.process("SN-001", "2025-02-01", payment_method="Cheque") is False
        renewal = SubscriptionRenewalStage(api)
        assert await renewal.process("SN-001", "") is False
        assert renewal.notifier.last.message == "Please select an action"
    assert calls == []


async def test_payment_conflict_reported():
    async with make_api() as api:
        await SubscriptionStage(api).submit(cloud_form())
        payment = SubscriptionPaymentStage(api)
        assert await payment.process("SN-001", utc_today()) is False
        assert payment.notifier.errors() == ["Failed to submit payment"]
