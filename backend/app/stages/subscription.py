"""Subscription stages: register, approve, pay and renew."""

from dataclasses import dataclass
from datetime import date

from backend.app.stages.api_client import ApiError, SubscriptionApi
from backend.app.stages.notifications import Notifier
from backend.app.stages.page import (
    SUBSCRIPTION_APPROVAL_PAGE,
    SUBSCRIPTION_PAYMENT_PAGE,
    SUBSCRIPTION_RENEWAL_PAGE,
    SUBSCRIPTIONS_PAGE,
    PageConfig,
)
from backend.app.stages.queue import ListStage, StagedQueue, StageValidationError

FREQUENCIES = ("Monthly", "Quarterly", "Yearly")
SUBSCRIPTION_PAYMENT_METHODS = ("Credit Card", "Bank Transfer", "UPI")
DEFAULT_SUBSCRIPTION_PAYMENT_METHOD = "Credit Card"
DECISIONS = ("Approved", "Rejected")

SEARCH_FIELDS = ("subscription_no", "company_name", "subscription_name")


def _as_date(value: date | str | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise StageValidationError(f"Invalid date {value}")


@dataclass
class SubscriptionForm:
    subscription_no: str = ""
    company_name: str = ""
    subscriber_name: str = ""
    subscription_name: str = ""
    price: str | float = ""
    frequency: str = ""
    purpose: str = ""

    def parsed_price(self) -> float:
        try:
            return float(self.price)
        except (TypeError, ValueError):
            return 0.0

    def validate(self) -> None:
        if not (self.company_name and self.subscriber_name and self.subscription_name and self.price):
            raise StageValidationError("Please fill in all required fields")
        if self.frequency not in FREQUENCIES:
            raise StageValidationError("Please select a frequency")
        if self.parsed_price() <= 0:
            raise StageValidationError("Price must be greater than zero")

    def to_payload(self) -> dict:
        return {
            "subscriptionNo": self.subscription_no or None,
            "companyName": self.company_name,
            "subscriberName": self.subscriber_name,
            "subscriptionName": self.subscription_name,
            "price": self.parsed_price(),
            "frequency": self.frequency,
            "purpose": self.purpose,
        }


class SubscriptionStage(ListStage):
    page = SUBSCRIPTIONS_PAGE
    search_fields = SEARCH_FIELDS
    fetch_failure = "Failed to fetch subscriptions"

    def __init__(self, api: SubscriptionApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_all, page=page, notifier=notifier)
        self.api = api
        self.form = SubscriptionForm()
        self.frequency_filter = ""

    def frequencies(self) -> list:
        return sorted({record.frequency for record in self.records if record.frequency})

    def filtered(self) -> list:
        records = super().filtered()
        if not self.frequency_filter:
            return records
        return [record for record in records if record.frequency == self.frequency_filter]

    async def prepare_form(self) -> None:
        """Start a fresh form carrying the next subscription number."""
        try:
            number = await self.api.generate_number()
        except ApiError as exc:
            self._report_failure("Failed to generate subscription number", exc)
            return
        if not self._disposed:
            self.form = SubscriptionForm(subscription_no=number)

    async def submit(self, form: SubscriptionForm | None = None) -> bool:
        form = form or self.form
        try:
            form.validate()
        except StageValidationError as exc:
            return self._reject(exc)

        async def create():
            await self.api.create(form.to_payload())
            if not self._disposed:
                self.form = SubscriptionForm()

        return await self._submit(create, "Failed to add subscription", "Subscription added successfully")


class SubscriptionApprovalStage(StagedQueue):
    page = SUBSCRIPTION_APPROVAL_PAGE
    search_fields = SEARCH_FIELDS

    def __init__(self, api: SubscriptionApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_approval_pending, api.get_approval_history, page=page, notifier=notifier)
        self.api = api

    async def process(self, subscription_no: str, decision: str = "Approved", note: str = "", approved_by: str = "") -> bool:
        if decision not in DECISIONS:
            return self._reject(StageValidationError("Choose Approved or Rejected"))
        payload = {"subscriptionNo": subscription_no, "approval": decision, "note": note, "approvedBy": approved_by}
        return await self._submit(
            lambda: self.api.submit_approval(payload),
            "Failed to submit approval",
            f"Subscription {decision}",
        )


class SubscriptionPaymentStage(StagedQueue):
    page = SUBSCRIPTION_PAYMENT_PAGE
    search_fields = SEARCH_FIELDS

    def __init__(self, api: SubscriptionApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_payment_pending, api.get_payment_history, page=page, notifier=notifier)
        self.api = api

    async def process(
        self,
        subscription_no: str,
        start_date: date | str | None,
        end_date: date | str | None = None,
        payment_method: str = DEFAULT_SUBSCRIPTION_PAYMENT_METHOD,
        transaction_id: str = "",
    ) -> bool:
        """Record payment; without an end date the server closes one billing period."""
        try:
            start, end = _as_date(start_date), _as_date(end_date)
            if start is None:
                raise StageValidationError("Please select a start date")
            if end is not None and end < start:
                raise StageValidationError("End date must not be before start date")
            if payment_method not in SUBSCRIPTION_PAYMENT_METHODS:
                raise StageValidationError("Please select a payment method")
        except StageValidationError as exc:
            return self._reject(exc)
        payload = {
            "subscriptionNo": subscription_no,
            "paymentMethod": payment_method,
            "transactionId": transaction_id or None,
            "startDate": start.isoformat(),
            "endDate": end.isoformat() if end else None,
        }
        return await self._submit(
            lambda: self.api.submit_payment(payload),
            "Failed to submit payment",
            "Payment recorded successfully",
        )


class SubscriptionRenewalStage(StagedQueue):
    page = SUBSCRIPTION_RENEWAL_PAGE
    search_fields = SEARCH_FIELDS
    pending_failure = "Failed to fetch pending renewals"
    history_failure = "Failed to fetch renewal history"

    def __init__(self, api: SubscriptionApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_renewal_pending, api.get_renewal_history, page=page, notifier=notifier)
        self.api = api

    async def process(self, subscription_no: str, action: str, approved_by: str = "") -> bool:
        if action not in DECISIONS:
            return self._reject(StageValidationError("Please select an action"))
        payload = {"subscriptionNo": subscription_no, "renewalStatus": action, "approvedBy": approved_by}
        success = "Subscription renewed" if action == "Approved" else "Subscription Renewal Rejected"
        return await self._submit(lambda: self.api.submit_renewal(payload), "Failed to submit renewal", success)
