"""Payment FMS workflow: request -> approval -> payment -> tally entry.

Every status change goes through ``_transition`` so the allowed moves live in
one table and each move is written to the event log.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy.orm import Session

from backend.app.core.errors import InvalidTransitionError, RecordNotFoundError, WorkflowValidationError
from backend.app.core.logging import get_logger
from backend.app.core.time import utc_now
from backend.app.models.payment_fms import PaymentFms
from backend.app.models.payment_fms_event import PaymentFmsEvent
from backend.app.schemas.payment_fms import PaymentFmsCreate, PaymentStatus, PaymentType

logger = get_logger(__name__)

ALLOWED_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.APPROVED, PaymentStatus.REJECTED},
    PaymentStatus.APPROVED: {PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.PROCESSED},
    PaymentStatus.REJECTED: set(),
    PaymentStatus.PROCESSED: set(),
}


@dataclass(frozen=True)
class StageQueues:
    pending: tuple
    history: tuple


STAGE_QUEUES = {
    "approval": StageQueues(
        pending=(PaymentStatus.PENDING,),
        history=(PaymentStatus.APPROVED, PaymentStatus.REJECTED, PaymentStatus.PAID, PaymentStatus.PROCESSED),
    ),
    "make-payment": StageQueues(
        pending=(PaymentStatus.APPROVED,),
        history=(PaymentStatus.PAID, PaymentStatus.PROCESSED),
    ),
    "tally-entry": StageQueues(
        pending=(PaymentStatus.PAID,),
        history=(PaymentStatus.PROCESSED,),
    ),
}


def can_transition(current: str, target: str) -> bool:
    try:
        return PaymentStatus(target) in ALLOWED_TRANSITIONS[PaymentStatus(current)]
    except (KeyError, ValueError):
        return False


def _transition(db: Session, record: PaymentFms, target: PaymentStatus, remarks: str | None = None) -> None:
    if not can_transition(record.status, target.value):
        raise InvalidTransitionError(record.id, record.status, target.value)
    db.add(PaymentFmsEvent(record_id=record.id, from_status=record.status, to_status=target.value, remarks=remarks))
    logger.info("payment request %s (%s): %s -> %s", record.id, record.unique_no, record.status, target.value)
    record.status = target.value


def get_record(db: Session, record_id: int) -> PaymentFms:
    record = db.query(PaymentFms).filter(PaymentFms.id == record_id).first()
    if not record:
        raise RecordNotFoundError(f"Payment request {record_id} not found")
    return record


def create_request(db: Session, payload: PaymentFmsCreate) -> PaymentFms:
    now = utc_now()
    record = PaymentFms(
        unique_no=payload.unique_no,
        fms_name=payload.fms_name,
        pay_to=payload.pay_to,
        amount=Decimal(str(payload.amount)),
        remarks=payload.remarks,
        attachment=payload.attachment,
        status=PaymentStatus.PENDING.value,
        planned1=now,
        created_at=now,
    )
    db.add(record)
    db.flush()
    db.add(PaymentFmsEvent(record_id=record.id, from_status=None, to_status=record.status, remarks=payload.remarks))
    db.commit()
    db.refresh(record)
    logger.info("payment request %s (%s) created for %s", record.id, record.unique_no, record.pay_to)
    return record


def list_requests(db: Session) -> List[PaymentFms]:
    return db.query(PaymentFms).order_by(PaymentFms.created_at.desc(), PaymentFms.id.desc()).all()


def delete_request(db: Session, record_id: int) -> None:
    record = get_record(db, record_id)
    if record.status != PaymentStatus.PENDING.value:
        raise InvalidTransitionError(record.id, record.status, "Deleted")
    db.delete(record)
    db.commit()
    logger.info("payment request %s (%s) deleted", record_id, record.unique_no)


def list_stage_queue(db: Session, stage: str, queue: str) -> List[PaymentFms]:
    try:
        statuses = getattr(STAGE_QUEUES[stage], queue)
    except (KeyError, AttributeError):
        raise RecordNotFoundError(f"Unknown queue {stage}/{queue}")
    query = db.query(PaymentFms).filter(PaymentFms.status.in_([s.value for s in statuses]))
    if queue == "pending":
        return query.order_by(PaymentFms.created_at.asc(), PaymentFms.id.asc()).all()
    return query.order_by(PaymentFms.updated_at.desc(), PaymentFms.id.desc()).all()


def process_approval(db: Session, record_id: int, decision: str, stage_remarks: str | None = None) -> PaymentFms:
    if decision not in (PaymentStatus.APPROVED.value, PaymentStatus.REJECTED.value):
        raise WorkflowValidationError("Approval decision must be Approved or Rejected")
    record = get_record(db, record_id)
    _transition(db, record, PaymentStatus(decision), stage_remarks)
    now = utc_now()
    record.stage_remarks = stage_remarks
    record.actual1 = now
    if decision == PaymentStatus.APPROVED.value:
        record.planned2 = now
    db.commit()
    db.refresh(record)
    return record


def process_payment(db: Session, record_id: int, payment_type: str) -> PaymentFms:
    try:
        payment_type = PaymentType(payment_type).value
    except ValueError:
        raise WorkflowValidationError(f"Unsupported payment type {payment_type!r}")
    record = get_record(db, record_id)
    _transition(db, record, PaymentStatus.PAID, payment_type)
    now = utc_now()
    record.payment_type = payment_type
    record.actual2 = now
    record.planned3 = now
    db.commit()
    db.refresh(record)
    return record


def process_tally_batch(db: Session, record_ids: Iterable[int]) -> List[PaymentFms]:
    """Move every listed Paid record to Processed, or none of them."""
    ids = list(dict.fromkeys(record_ids))
    if not ids:
        raise WorkflowValidationError("Select at least one entry")
    records = db.query(PaymentFms).filter(PaymentFms.id.in_(ids)).all()
    found = {record.id: record for record in records}
    missing = [record_id for record_id in ids if record_id not in found]
    if missing:
        raise RecordNotFoundError(f"Payment requests not found: {', '.join(str(i) for i in missing)}")

    now = utc_now()
    try:
        for record_id in ids:
            record = found[record_id]
            _transition(db, record, PaymentStatus.PROCESSED)
            record.actual3 = now
    except InvalidTransitionError:
        db.rollback()
        raise
    db.commit()
    for record in records:
        db.refresh(record)
    return [found[record_id] for record_id in ids]


def list_events(db: Session, record_id: int) -> List[PaymentFmsEvent]:
    return get_record(db, record_id).events
