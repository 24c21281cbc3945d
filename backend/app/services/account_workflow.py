"""Account-section audit loop: audit, rectify, tally data and bill filing."""

from decimal import Decimal
from typing import Iterable, List

from sqlalchemy.orm import Session

from backend.app.core.errors import InvalidTransitionError, RecordNotFoundError, WorkflowValidationError
from backend.app.core.logging import get_logger
from backend.app.core.time import utc_now
from backend.app.models.account_entry import AccountEntry
from backend.app.schemas.account import AccountEntryCreate, AccountStatus, FmsDomain

logger = get_logger(__name__)


def _domain_filter(query, fms: str | None):
    if fms:
        try:
            query = query.filter(AccountEntry.fms == FmsDomain(fms).value)
        except ValueError:
            raise WorkflowValidationError(f"Unknown FMS domain {fms!r}")
    return query


def _entries_with_status(db: Session, status: AccountStatus, fms: str | None = None) -> List[AccountEntry]:
    query = db.query(AccountEntry).filter(AccountEntry.status == status.value)
    query = _domain_filter(query, fms)
    return query.order_by(AccountEntry.created_at.asc(), AccountEntry.id.asc()).all()


def get_entry(db: Session, entry_id: int) -> AccountEntry:
    entry = db.query(AccountEntry).filter(AccountEntry.id == entry_id).first()
    if not entry:
        raise RecordNotFoundError(f"Account entry {entry_id} not found")
    return entry


def create_entry(db: Session, payload: AccountEntryCreate) -> AccountEntry:
    entry = AccountEntry(
        fms=payload.fms.value,
        reference_no=payload.reference_no,
        party_name=payload.party_name,
        amount=Decimal(str(payload.amount)),
        remarks=payload.remarks,
        status=AccountStatus.PENDING.value,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def list_audit_queue(db: Session, fms: str | None = None) -> List[AccountEntry]:
    return _entries_with_status(db, AccountStatus.PENDING, fms)


def list_rectify_queue(db: Session, fms: str | None = None) -> List[AccountEntry]:
    return _entries_with_status(db, AccountStatus.RECTIFY, fms)


def list_tally_data(db: Session, fms: str | None = None) -> List[AccountEntry]:
    return _entries_with_status(db, AccountStatus.APPROVED, fms)


def list_bill_filed(db: Session, category: str | None = None) -> List[AccountEntry]:
    if category == "all":
        category = None
    return _entries_with_status(db, AccountStatus.FILED, category)


def process_audit(db: Session, entry_id: int, decision: str, remarks: str | None = None) -> AccountEntry:
    """Approve an entry or send it to Rectify."""
    if decision not in ("Approved", "Rejected"):
        raise WorkflowValidationError("Audit decision must be Approved or Rejected")
    entry = get_entry(db, entry_id)
    target = AccountStatus.APPROVED if decision == "Approved" else AccountStatus.RECTIFY
    if entry.status != AccountStatus.PENDING.value:
        raise InvalidTransitionError(entry.id, entry.status, target.value)
    entry.status = target.value
    entry.audit_remarks = remarks
    entry.audited_at = utc_now()
    db.commit()
    db.refresh(entry)
    logger.info("account entry %s (%s) audited: %s", entry.id, entry.reference_no, entry.status)
    return entry


def resubmit_for_audit(db: Session, entry_id: int, rectify_remarks: str) -> AccountEntry:
    entry = get_entry(db, entry_id)
    if entry.status != AccountStatus.RECTIFY.value:
        raise InvalidTransitionError(entry.id, entry.status, AccountStatus.PENDING.value)
    entry.status = AccountStatus.PENDING.value
    entry.rectify_remarks = rectify_remarks
    entry.audited_at = None
    db.commit()
    db.refresh(entry)
    logger.info("account entry %s (%s) resubmitted for audit", entry.id, entry.reference_no)
    return entry


def file_bills(db: Session, entry_ids: Iterable[int]) -> List[AccountEntry]:
    ids = list(dict.fromkeys(entry_ids))
    if not ids:
        raise WorkflowValidationError("Select at least one bill")
    entries = {entry.id: entry for entry in db.query(AccountEntry).filter(AccountEntry.id.in_(ids)).all()}
    missing = [entry_id for entry_id in ids if entry_id not in entries]
    if missing:
        raise RecordNotFoundError(f"Account entries not found: {', '.join(str(i) for i in missing)}")
    for entry_id in ids:
        entry = entries[entry_id]
        if entry.status != AccountStatus.APPROVED.value:
            raise InvalidTransitionError(entry.id, entry.status, AccountStatus.FILED.value)

    now = utc_now()
    for entry in entries.values():
        entry.status = AccountStatus.FILED.value
        entry.filed_at = now
    db.commit()
    for entry in entries.values():
        db.refresh(entry)
    logger.info("filed %d bills", len(ids))
    return [entries[entry_id] for entry_id in ids]
