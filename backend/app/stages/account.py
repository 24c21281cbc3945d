"""Account-section stages: audit, rectify, tally data and bill filed."""

from typing import Iterable, List

from backend.app.stages.api_client import AccountApi
from backend.app.stages.notifications import Notifier
from backend.app.stages.page import AUDIT_PAGE, BILL_FILED_PAGE, RECTIFY_PAGE, TALLY_DATA_PAGE, PageConfig
from backend.app.stages.queue import ListStage, StageValidationError

FMS_DOMAINS = ("Store", "Repair", "Car-FMS", "Subscription", "Freight", "Sales", "Production", "Make Payment")
BILL_CATEGORIES = ("all", "Store", "Repair", "Freight", "Sales", "Production")


class _DomainStage(ListStage):
    """List stage scoped to one FMS domain picked from a filter."""

    search_fields = ("reference_no", "party_name")

    def __init__(self, fetch, page: PageConfig | None = None, notifier: Notifier | None = None, fms: str = "Store"):
        self._fetch_for = fetch
        super().__init__(lambda: self._fetch_for(self.selected_filter), page=page, notifier=notifier)
        self.selected_filter = fms

    async def select_filter(self, fms: str) -> bool:
        if fms not in FMS_DOMAINS:
            return self._reject(StageValidationError(f"Unknown FMS domain {fms}"))
        self.selected_filter = fms
        await self.refresh()
        return True


class AuditStage(_DomainStage):
    page = AUDIT_PAGE
    fetch_failure = "Failed to fetch audit entries"

    def __init__(self, api: AccountApi, page: PageConfig | None = None, notifier: Notifier | None = None, fms: str = "Store"):
        super().__init__(api.get_audit, page=page, notifier=notifier, fms=fms)
        self.api = api

    async def process(self, entry_id: str, decision: str, remarks: str = "") -> bool:
        if decision not in ("Approved", "Rejected"):
            return self._reject(StageValidationError("Choose Approved or Rejected"))
        return await self._submit(
            lambda: self.api.process_audit(entry_id, decision, remarks),
            "Failed to process audit",
            f"Entry {decision.lower()} successfully!",
        )


class RectifyStage(_DomainStage):
    page = RECTIFY_PAGE
    fetch_failure = "Failed to fetch rectify entries"

    def __init__(self, api: AccountApi, page: PageConfig | None = None, notifier: Notifier | None = None, fms: str = "Store"):
        super().__init__(api.get_rectify, page=page, notifier=notifier, fms=fms)
        self.api = api

    def rows(self) -> list:
        """Filtered entries as table rows, the audit decision shown as the original remark."""
        return [{**record.to_view(), "originalRemark": record.audit_remarks} for record in self.filtered()]

    async def resubmit(self, entry_id: str, remarks: str) -> bool:
        if not (remarks or "").strip():
            return self._reject(StageValidationError("Please describe the rectification"))
        return await self._submit(
            lambda: self.api.resubmit(entry_id, remarks.strip()),
            "Failed to resubmit for audit",
            "Rectification submitted for re-audit!",
        )


class TallyDataStage(_DomainStage):
    page = TALLY_DATA_PAGE
    fetch_failure = "Failed to fetch tally data"

    def __init__(self, api: AccountApi, page: PageConfig | None = None, notifier: Notifier | None = None, fms: str = "Store"):
        super().__init__(api.get_tally_data, page=page, notifier=notifier, fms=fms)
        self.api = api

    async def file_bills(self, entry_ids: Iterable[str]) -> bool:
        ids: List[str] = list(entry_ids)
        if not ids:
            return self._reject(StageValidationError("Please select at least one bill"))
        return await self._submit(
            lambda: self.api.file_bills(ids),
            "Failed to file bills",
            f"{len(ids)} bills filed successfully!",
        )


class BillFiledStage(ListStage):
    page = BILL_FILED_PAGE
    search_fields = ("reference_no", "party_name")
    fetch_failure = "Failed to fetch filed bills"

    def __init__(self, api: AccountApi, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(api.get_bill_filed, page=page, notifier=notifier)
        self.api = api
        self.category_filter = "all"

    def filtered(self) -> list:
        records = super().filtered()
        if self.category_filter == "all":
            return records
        return [record for record in records if record.fms == self.category_filter]

    def set_category(self, category: str) -> bool:
        if category not in BILL_CATEGORIES:
            return self._reject(StageValidationError(f"Unknown bill category {category}"))
        self.category_filter = category
        return True
