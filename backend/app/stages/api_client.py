"""Async clients for the workflow API.

Responses are unwrapped from the ``{success, data, error}`` envelope and
passed through the record transforms, so callers only ever see canonical
records. Any failure surfaces as ``ApiError``.
"""

from typing import Any, Iterable, List

import httpx

from backend.app.core.logging import get_logger
from backend.app.core.settings import get_settings
from backend.app.stages.transform import (
    AccountRecord,
    PaymentRecord,
    RenewalRecord,
    SubscriptionRecord,
    transform_account_entry,
    transform_payment_fms,
    transform_subscription,
    transform_subscription_renewal,
)

logger = get_logger(__name__)


class ApiError(Exception):
    """A request to the workflow API failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _wire_id(record_id: Any):
    if isinstance(record_id, str) and record_id.isdigit():
        return int(record_id)
    return record_id


class _EnvelopeClient:
    def __init__(self, base_url: str | None = None, client: httpx.AsyncClient | None = None, transport=None):
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, failure: str, json: Any = None, params: dict | None = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.request(method, url, json=json, params=params)
        except httpx.HTTPError as exc:
            raise ApiError(f"{failure}: {exc}") from exc
        logger.debug("%s %s -> %s", method, url, response.status_code)
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(f"{failure}: invalid response body", response.status_code) from exc
        if not isinstance(body, dict) or not body.get("success"):
            error = body.get("error") if isinstance(body, dict) else None
            raise ApiError(error or failure, response.status_code)
        return body.get("data")


class PaymentFmsApi(_EnvelopeClient):
    """Client for ``/payment-fms`` endpoints."""

    async def _list(self, path: str, failure: str) -> List[PaymentRecord]:
        data = await self._request("GET", path, failure)
        return [transform_payment_fms(item) for item in data or []]

    async def create(self, payload: dict) -> PaymentRecord:
        data = await self._request("POST", "/payment-fms/create", "Failed to create payment request", json=payload)
        return transform_payment_fms(data)

    async def get_all(self) -> List[PaymentRecord]:
        return await self._list("/payment-fms/all", "Failed to fetch payment requests")

    async def delete(self, record_id: str) -> None:
        await self._request("DELETE", f"/payment-fms/{record_id}", "Failed to delete payment request")

    async def get_events(self, record_id: str) -> list:
        return await self._request("GET", f"/payment-fms/{record_id}/events", "Failed to fetch request history") or []

    async def get_approval_pending(self) -> List[PaymentRecord]:
        return await self._list("/payment-fms/approval/pending", "Failed to fetch approval pending")

    async def get_approval_history(self) -> List[PaymentRecord]:
        return await self._list("/payment-fms/approval/history", "Failed to fetch approval history")

    async def process_approval(self, record_id: str, status: str, stage_remarks: str | None = None) -> PaymentRecord:
        data = await self._request(
            "PATCH",
            f"/payment-fms/approval/{record_id}/process",
            "Failed to process approval",
            json={"status": status, "stageRemarks": stage_remarks},
        )
        return transform_payment_fms(data)

    async def get_make_payment_pending(self) -> List[PaymentRecord]:
        return await self._list("/payment-fms/make-payment/pending", "Failed to fetch make payment pending")

    async def get_make_payment_history(self) -> List[PaymentRecord]:
        return await self._list("/payment-fms/make-payment/history", "Failed to fetch make payment history")

    async def process_make_payment(self, record_id: str, payment_type: str) -> PaymentRecord:
        data = await self._request(
            "PATCH",
            f"/payment-fms/make-payment/{record_id}/process",
            "Failed to process payment",
            json={"paymentType": payment_type},
        )
        return transform_payment_fms(data)

    async def get_tally_entry_pending(self) -> List[PaymentRecord]:
        return await self._list("/payment-fms/tally-entry/pending", "Failed to fetch tally entry pending")

    async def get_tally_entry_history(self) -> List[PaymentRecord]:
        return await self._list("/payment-fms/tally-entry/history", "Failed to fetch tally entry history")

    async def process_tally_entry(self, record_ids: Iterable[str]) -> List[PaymentRecord]:
        data = await self._request(
            "POST",
            "/payment-fms/tally-entry/process",
            "Failed to process tally entries",
            json={"ids": [_wire_id(record_id) for record_id in record_ids]},
        )
        return [transform_payment_fms(item) for item in data or []]


class AccountApi(_EnvelopeClient):
    """Client for ``/account`` endpoints."""

    async def _list(self, path: str, failure: str, params: dict | None = None) -> List[AccountRecord]:
        query = {key: value for key, value in (params or {}).items() if value}
        data = await self._request("GET", path, failure, params=query or None)
        return [transform_account_entry(item) for item in data or []]

    async def create_entry(self, payload: dict) -> AccountRecord:
        data = await self._request("POST", "/account/entries", "Failed to create account entry", json=payload)
        return transform_account_entry(data)

    async def get_audit(self, fms: str | None = None) -> List[AccountRecord]:
        return await self._list("/account/audit", "Failed to fetch audit entries", {"fms": fms})

    async def process_audit(self, entry_id: str, status: str, remarks: str | None = None) -> AccountRecord:
        data = await self._request(
            "PATCH",
            f"/account/audit/{entry_id}/process",
            "Failed to process audit",
            json={"status": status, "remarks": remarks},
        )
        return transform_account_entry(data)

    async def get_rectify(self, fms: str | None = None) -> List[AccountRecord]:
        return await self._list("/account/rectify", "Failed to fetch rectify entries", {"fms": fms})

    async def resubmit(self, entry_id: str, remarks: str) -> AccountRecord:
        data = await self._request(
            "POST",
            f"/account/rectify/{entry_id}/resubmit",
            "Failed to resubmit for audit",
            json={"remarks": remarks},
        )
        return transform_account_entry(data)

    async def get_tally_data(self, fms: str | None = None) -> List[AccountRecord]:
        return await self._list("/account/tally-data", "Failed to fetch tally data", {"fms": fms})

    async def file_bills(self, entry_ids: Iterable[str]) -> List[AccountRecord]:
        data = await self._request(
            "POST",
            "/account/tally-data/file",
            "Failed to file bills",
            json={"ids": [_wire_id(entry_id) for entry_id in entry_ids]},
        )
        return [transform_account_entry(item) for item in data or []]

    async def get_bill_filed(self, category: str | None = None) -> List[AccountRecord]:
        return await self._list("/account/bill-filed", "Failed to fetch filed bills", {"category": category})


class SubscriptionApi(_EnvelopeClient):
    """Client for the subscription, approval, payment and renewal endpoints."""

    async def _list(self, path: str, failure: str) -> List[SubscriptionRecord]:
        data = await self._request("GET", path, failure)
        return [transform_subscription(item) for item in data or []]

    async def generate_number(self) -> str:
        data = await self._request("GET", "/subscription/generate-number", "Failed to generate subscription number")
        return (data or {}).get("subscriptionNo", "")

    async def create(self, payload: dict) -> SubscriptionRecord:
        data = await self._request("POST", "/subscription/create", "Failed to create subscription", json=payload)
        return transform_subscription(data)

    async def get_all(self) -> List[SubscriptionRecord]:
        return await self._list("/subscription/all", "Failed to fetch subscriptions")

    async def get_approval_pending(self) -> List[SubscriptionRecord]:
        return await self._list("/subscription-approval/pending", "Failed to fetch pending approvals")

    async def get_approval_history(self) -> List[SubscriptionRecord]:
        return await self._list("/subscription-approval/history", "Failed to fetch approval history")

    async def submit_approval(self, payload: dict) -> SubscriptionRecord:
        data = await self._request("POST", "/subscription-approval/submit", "Failed to submit approval", json=payload)
        return transform_subscription(data)

    async def get_payment_pending(self) -> List[SubscriptionRecord]:
        return await self._list("/subscription-payment/pending", "Failed to fetch pending payments")

    async def get_payment_history(self) -> List[SubscriptionRecord]:
        return await self._list("/subscription-payment/history", "Failed to fetch payment history")

    async def submit_payment(self, payload: dict) -> SubscriptionRecord:
        data = await self._request("POST", "/subscription-payment/submit", "Failed to submit payment", json=payload)
        return transform_subscription(data)

    async def get_renewal_pending(self) -> List[SubscriptionRecord]:
        return await self._list("/subscription-renewal/pending", "Failed to fetch pending renewals")

    async def get_renewal_history(self) -> List[RenewalRecord]:
        data = await self._request("GET", "/subscription-renewal/history", "Failed to fetch renewal history")
        return [transform_subscription_renewal(item) for item in data or []]

    async def submit_renewal(self, payload: dict) -> RenewalRecord:
        data = await self._request("POST", "/subscription-renewal/submit", "Failed to submit renewal", json=payload)
        return transform_subscription_renewal(data)
