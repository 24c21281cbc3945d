"""Generic list and pending/history queue state shared by every stage."""

import asyncio
from typing import Awaitable, Callable, Iterable, List, Sequence

from backend.app.core.logging import get_logger
from backend.app.stages.api_client import ApiError
from backend.app.stages.notifications import Notifier
from backend.app.stages.page import PageConfig

logger = get_logger(__name__)

Fetch = Callable[[], Awaitable[list]]


class StageValidationError(Exception):
    """Input rejected before any request is made."""


def search_records(records: Iterable, term: str | None, fields: Sequence[str]) -> list:
    """Case-insensitive substring match of ``term`` against ``fields``."""
    needle = (term or "").lower()
    if not needle:
        return list(records)
    return [
        record
        for record in records
        if any(needle in str(getattr(record, name, "") or "").lower() for name in fields)
    ]


class _StageBase:
    page: PageConfig
    search_fields: Sequence[str] = ("unique_no", "fms_name", "pay_to")

    def __init__(self, page: PageConfig | None = None, notifier: Notifier | None = None):
        if page is not None:
            self.page = page
        self.notifier = notifier or Notifier()
        self.search_term = ""
        self.loading = False
        self.submitting = False
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop applying responses; anything still in flight is discarded."""
        self._disposed = True

    def _report_failure(self, message: str, exc: Exception) -> None:
        logger.error("%s: %s", message, exc)
        if not self._disposed:
            self.notifier.error(message)

    def _reject(self, exc: StageValidationError) -> bool:
        if not self._disposed:
            self.notifier.error(str(exc))
        return False

    async def _submit(self, action: Callable[[], Awaitable], failure: str, success: str | None = None) -> bool:
        """Run a mutating call, refresh on success, report either way."""
        self.submitting = True
        try:
            await action()
        except ApiError as exc:
            self._report_failure(failure, exc)
            return False
        finally:
            if not self._disposed:
                self.submitting = False
        await self.refresh()
        if success and not self._disposed:
            self.notifier.success(success)
        return True

    async def refresh(self) -> None:
        raise NotImplementedError


class ListStage(_StageBase):
    """A stage showing a single fetched list."""

    fetch_failure = "Failed to fetch records"

    def __init__(self, fetch: Fetch, page: PageConfig | None = None, notifier: Notifier | None = None):
        super().__init__(page=page, notifier=notifier)
        self._fetch = fetch
        self.records: List = []

    async def refresh(self) -> None:
        if self._disposed:
            return
        self.loading = True
        try:
            records = await self._fetch()
        except ApiError as exc:
            self._report_failure(self.fetch_failure, exc)
            return
        finally:
            if not self._disposed:
                self.loading = False
        if self._disposed:
            return
        self.records = list(records)

    def filtered(self) -> list:
        return search_records(self.records, self.search_term, self.search_fields)

    def list(self, search_term: str | None = None) -> list:
        if search_term is not None:
            self.search_term = search_term
        return self.filtered()


class StagedQueue(_StageBase):
    """Pending and history queues of one workflow stage.

    Both queues are fetched concurrently and awaited jointly; a failure in
    one is reported on its own and leaves the other queue's update intact.
    Whatever was displayed before a failed fetch stays in place.
    """

    pending_failure = "Failed to fetch pending requests"
    history_failure = "Failed to fetch history"

    def __init__(
        self,
        fetch_pending: Fetch,
        fetch_history: Fetch,
        page: PageConfig | None = None,
        notifier: Notifier | None = None,
    ):
        super().__init__(page=page, notifier=notifier)
        self._fetchers = {"pending": fetch_pending, "history": fetch_history}
        self.pending: List = []
        self.history: List = []
        self.active_tab = "pending"

    async def _load(self, queue: str) -> None:
        try:
            records = await self._fetchers[queue]()
        except ApiError as exc:
            failure = self.pending_failure if queue == "pending" else self.history_failure
            self._report_failure(failure, exc)
            return
        if self._disposed:
            return
        setattr(self, queue, list(records))
        self._on_loaded(queue)

    def _on_loaded(self, queue: str) -> None:
        """Hook for stages holding state derived from a queue."""

    async def refresh(self) -> None:
        if self._disposed:
            return
        self.loading = True
        try:
            await asyncio.gather(self._load("pending"), self._load("history"))
        finally:
            if not self._disposed:
                self.loading = False

    def filtered(self, tab: str | None = None) -> list:
        records = self.history if (tab or self.active_tab) == "history" else self.pending
        return search_records(records, self.search_term, self.search_fields)
