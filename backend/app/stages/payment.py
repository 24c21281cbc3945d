"""Payment pipeline stages: request, approval, make payment, tally entry."""

from dataclasses import dataclass
from typing import Iterable, List

from backend.app.stages.api_client import ApiError, PaymentFmsApi
from backend.app.stages.notifications import Notifier
from backend.app.stages.page import APPROVAL_PAGE, MAKE_PAYMENT_PAGE, REQUEST_FORM_PAGE, TALLY_ENTRY_PAGE, PageConfig
from backend.app.stages.queue import ListStage, StagedQueue, StageValidationError

APPROVAL_DECISIONS = ("Approved", "Rejected")
PAYMENT_TYPES = ("Cash", "Bank Transfer", "UPI", "Other")
DEFAULT_PAYMENT_TYPE = "Cash"


@dataclass
class RequestForm:
    unique_no: str = ""
    fms_name: str = ""
    pay_to: str = ""
    amount: str | float = ""
    remarks: str = ""
    attachment: str = ""

    def parsed_amount(self) -> float:
        try:
            return float(self.amount)
        except (TypeError, ValueError):
            return 0.0

    def validate(self) -> None:
        if not (self.unique_no and self.fms_name and self.pay_to and self.amount):
            raise StageValidationError("Please fill in all required fields")
        amount = self.parsed_amount()
        if amount <= 0:
            raise StageValidationError("Amount must be greater than zero")

    def to_payload(self) -> dict:
        return {
            "uniqueNo": self.unique_no,
            "fmsName": self.fms_name,
            "payTo": self.pay_to,
            "amount": self.parsed_amount(),
            "remarks": self.remarks,
            "attachment": self.attachment or None,
        }


class RequestStage(ListStage):
    page = REQUEST_FORM_PAGE
    fetch_failure = "Failed to fetch requests"

    def __init__(self, api: PaymentFmsApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_all, page=page, notifier=notifier)
        self.api = api
        self.form = RequestForm()

    async def submit(self, form: RequestForm | None = None) -> bool:
        form = form or self.form
        try:
            form.validate()
        except StageValidationError as exc:
            return self._reject(exc)

        async def create():
            await self.api.create(form.to_payload())
            if not self._disposed:
                self.form = RequestForm()

        return await self._submit(create, "Failed to submit request", "Request submitted successfully!")

    async def remove(self, record_id: str) -> bool:
        try:
            await self.api.delete(record_id)
        except ApiError as exc:
            self._report_failure("Failed to delete request", exc)
            return False
        if self._disposed:
            return True
        self.records = [record for record in self.records if record.id != record_id]
        self.notifier.success("Request deleted")
        return True


class ApprovalStage(StagedQueue):
    page = APPROVAL_PAGE

    def __init__(self, api: PaymentFmsApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_approval_pending, api.get_approval_history, page=page, notifier=notifier)
        self.api = api

    async def process(self, record_id: str, decision: str = "Approved", remarks: str = "") -> bool:
        if decision not in APPROVAL_DECISIONS:
            return self._reject(StageValidationError("Choose Approved or Rejected"))
        return await self._submit(
            lambda: self.api.process_approval(record_id, decision, remarks),
            "Failed to process approval",
            f"Request {decision.lower()} successfully!",
        )


class MakePaymentStage(StagedQueue):
    page = MAKE_PAYMENT_PAGE
    pending_failure = "Failed to fetch pending payments"

    def __init__(self, api: PaymentFmsApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_make_payment_pending, api.get_make_payment_history, page=page, notifier=notifier)
        self.api = api

    async def process(self, record_id: str, payment_type: str = DEFAULT_PAYMENT_TYPE) -> bool:
        if payment_type not in PAYMENT_TYPES:
            return self._reject(StageValidationError("Please select a payment type"))
        return await self._submit(
            lambda: self.api.process_make_payment(record_id, payment_type),
            "Failed to process payment",
            "Payment processed successfully!",
        )


class TallyEntryStage(StagedQueue):
    page = TALLY_ENTRY_PAGE
    search_fields = ("unique_no", "pay_to")
    pending_failure = "Failed to fetch pending entries"

    def __init__(self, api: PaymentFmsApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_tally_entry_pending, api.get_tally_entry_history, page=page, notifier=notifier)
        self.api = api
        self._selected: List[str] = []

    @property
    def selected_ids(self) -> List[str]:
        return list(self._selected)

    def _pending_ids(self) -> List[str]:
        return [record.id for record in self.pending]

    def _on_loaded(self, queue: str) -> None:
        if queue == "pending":
            current = set(self._pending_ids())
            self._selected = [record_id for record_id in self._selected if record_id in current]

    def select_all(self, checked: bool) -> None:
        self._selected = self._pending_ids() if checked else []

    def select_one(self, record_id: str, checked: bool) -> None:
        if checked:
            if record_id in self._pending_ids() and record_id not in self._selected:
                self._selected.append(record_id)
        else:
            self._selected = [selected for selected in self._selected if selected != record_id]

    async def submit_batch(self, record_ids: Iterable[str] | None = None) -> bool:
        ids = list(record_ids) if record_ids is not None else self.selected_ids
        if not ids:
            return self._reject(StageValidationError("Please select at least one entry"))

        async def process():
            await self.api.process_tally_entry(ids)
            if not self._disposed:
                self._selected = []

        return await self._submit(process, "Failed to process entries", f"{len(ids)} entries processed successfully!")
