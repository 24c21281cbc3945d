"""Subscription workflow: create -> approval -> payment -> periodic renewal.

A paid subscription comes up for renewal once its end date falls inside
``RENEWAL_WINDOW_DAYS``. Approving a renewal extends the end date by one
billing period; rejecting it cancels the subscription.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.app.core.errors import (
    DuplicateRecordError,
    InvalidTransitionError,
    RecordNotFoundError,
    WorkflowValidationError,
)
from backend.app.core.logging import get_logger
from backend.app.core.time import add_months, utc_now, utc_today
from backend.app.models.subscription import Subscription
from backend.app.models.subscription_renewal import SubscriptionRenewal
from backend.app.schemas.subscription import (
    Frequency,
    SubscriptionCreate,
    SubscriptionPaymentMethod,
    SubscriptionStatus,
)
from backend.app.services.payment_workflow import StageQueues

logger = get_logger(__name__)

RENEWAL_WINDOW_DAYS = 30

FREQUENCY_MONTHS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}

ALLOWED_TRANSITIONS = {
    SubscriptionStatus.PENDING: {SubscriptionStatus.APPROVED, SubscriptionStatus.REJECTED},
    SubscriptionStatus.APPROVED: {SubscriptionStatus.PAID},
    SubscriptionStatus.PAID: {SubscriptionStatus.CANCELLED},
    SubscriptionStatus.REJECTED: set(),
    SubscriptionStatus.CANCELLED: set(),
}

STAGE_QUEUES = {
    "approval": StageQueues(
        pending=(SubscriptionStatus.PENDING,),
        history=(
            SubscriptionStatus.APPROVED,
            SubscriptionStatus.REJECTED,
            SubscriptionStatus.PAID,
            SubscriptionStatus.CANCELLED,
        ),
    ),
    "payment": StageQueues(
        pending=(SubscriptionStatus.APPROVED,),
        history=(SubscriptionStatus.PAID, SubscriptionStatus.CANCELLED),
    ),
}


def _months(frequency: str) -> int:
    try:
        return FREQUENCY_MONTHS[Frequency(frequency)]
    except ValueError:
        return 12


def period_end(start: date, frequency: str) -> date:
    """Last day of the billing period starting on ``start``."""
    return add_months(start, _months(frequency)) - timedelta(days=1)


def _next_number(db: Session, column, prefix: str) -> str:
    number = (db.query(func.count(column)).scalar() or 0) + 1
    while db.query(column).filter(column == f"{prefix}-{number:03d}").first() is not None:
        number += 1
    return f"{prefix}-{number:03d}"


def _transition(subscription: Subscription, target: SubscriptionStatus) -> None:
    try:
        allowed = target in ALLOWED_TRANSITIONS[SubscriptionStatus(subscription.status)]
    except ValueError:
        allowed = False
    if not allowed:
        raise InvalidTransitionError(subscription.id, subscription.status, target.value)
    logger.info(
        "subscription %s (%s): %s -> %s",
        subscription.id,
        subscription.subscription_no,
        subscription.status,
        target.value,
    )
    subscription.status = target.value


def generate_subscription_no(db: Session) -> str:
    return _next_number(db, Subscription.subscription_no, "SN")


def get_subscription(db: Session, subscription_no: str) -> Subscription:
    subscription = db.query(Subscription).filter(Subscription.subscription_no == subscription_no).first()
    if not subscription:
        raise RecordNotFoundError(f"Subscription {subscription_no} not found")
    return subscription


def create_subscription(db: Session, payload: SubscriptionCreate) -> Subscription:
    subscription_no = (payload.subscription_no or "").strip() or generate_subscription_no(db)
    if db.query(Subscription.id).filter(Subscription.subscription_no == subscription_no).first():
        raise DuplicateRecordError(f"Subscription {subscription_no} already exists")
    now = utc_now()
    subscription = Subscription(
        subscription_no=subscription_no,
        company_name=payload.company_name,
        subscriber_name=payload.subscriber_name,
        subscription_name=payload.subscription_name,
        price=Decimal(str(payload.price)),
        frequency=payload.frequency.value,
        purpose=payload.purpose,
        status=SubscriptionStatus.PENDING.value,
        planned1=now,
        created_at=now,
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    logger.info("subscription %s created for %s", subscription.subscription_no, subscription.company_name)
    return subscription


def list_subscriptions(db: Session) -> List[Subscription]:
    return db.query(Subscription).order_by(Subscription.created_at.desc(), Subscription.id.desc()).all()


def list_stage_queue(db: Session, stage: str, queue: str) -> List[Subscription]:
    try:
        statuses = getattr(STAGE_QUEUES[stage], queue)
    except (KeyError, AttributeError):
        raise RecordNotFoundError(f"Unknown queue {stage}/{queue}")
    query = db.query(Subscription).filter(Subscription.status.in_([s.value for s in statuses]))
    if queue == "pending":
        return query.order_by(Subscription.created_at.asc(), Subscription.id.asc()).all()
    return query.order_by(Subscription.updated_at.desc(), Subscription.id.desc()).all()


def submit_approval(
    db: Session,
    subscription_no: str,
    decision: str,
    note: str | None = None,
    approved_by: str | None = None,
) -> Subscription:
    if decision not in (SubscriptionStatus.APPROVED.value, SubscriptionStatus.REJECTED.value):
        raise WorkflowValidationError("Approval decision must be Approved or Rejected")
    subscription = get_subscription(db, subscription_no)
    _transition(subscription, SubscriptionStatus(decision))
    now = utc_now()
    subscription.approval_no = _next_number(db, Subscription.approval_no, "AP")
    subscription.approval_note = note
    subscription.approved_by = approved_by
    subscription.actual1 = now
    if decision == SubscriptionStatus.APPROVED.value:
        subscription.planned2 = now
    db.commit()
    db.refresh(subscription)
    return subscription


def submit_payment(
    db: Session,
    subscription_no: str,
    payment_method: str,
    start_date: date,
    end_date: date | None = None,
    transaction_id: str | None = None,
) -> Subscription:
    try:
        payment_method = SubscriptionPaymentMethod(payment_method).value
    except ValueError:
        raise WorkflowValidationError(f"Unsupported payment method {payment_method!r}")
    subscription = get_subscription(db, subscription_no)
    end_date = end_date or period_end(start_date, subscription.frequency)
    if end_date < start_date:
        raise WorkflowValidationError("End date must not be before start date")
    _transition(subscription, SubscriptionStatus.PAID)
    subscription.payment_method = payment_method
    subscription.transaction_id = transaction_id
    subscription.start_date = start_date
    subscription.end_date = end_date
    subscription.actual2 = utc_now()
    db.commit()
    db.refresh(subscription)
    return subscription


def list_renewal_pending(db: Session, today: date | None = None) -> List[Subscription]:
    """Paid subscriptions that have expired or expire within the renewal window."""
    threshold = (today or utc_today()) + timedelta(days=RENEWAL_WINDOW_DAYS)
    return (
        db.query(Subscription)
        .filter(Subscription.status == SubscriptionStatus.PAID.value)
        .filter(Subscription.end_date.is_not(None))
        .filter(Subscription.end_date <= threshold)
        .order_by(Subscription.end_date.asc(), Subscription.id.asc())
        .all()
    )


def list_renewal_history(db: Session) -> List[SubscriptionRenewal]:
    return db.query(SubscriptionRenewal).order_by(SubscriptionRenewal.id.desc()).all()


def submit_renewal(
    db: Session,
    subscription_no: str,
    renewal_status: str,
    approved_by: str | None = None,
) -> SubscriptionRenewal:
    if renewal_status not in (SubscriptionStatus.APPROVED.value, SubscriptionStatus.REJECTED.value):
        raise WorkflowValidationError("Renewal decision must be Approved or Rejected")
    subscription = get_subscription(db, subscription_no)
    if subscription.status != SubscriptionStatus.PAID.value:
        raise InvalidTransitionError(subscription.id, subscription.status, "Renewed")

    renewal = SubscriptionRenewal(
        renewal_no=_next_number(db, SubscriptionRenewal.renewal_no, "RN"),
        subscription_id=subscription.id,
        renewal_status=renewal_status,
        approved_by=approved_by,
        price=subscription.price,
        end_date=subscription.end_date,
    )
    if renewal_status == SubscriptionStatus.APPROVED.value:
        subscription.end_date = add_months(subscription.end_date or utc_today(), _months(subscription.frequency))
        renewal.new_end_date = subscription.end_date
        logger.info("subscription %s renewed until %s", subscription.subscription_no, subscription.end_date)
    else:
        _transition(subscription, SubscriptionStatus.CANCELLED)
    db.add(renewal)
    db.commit()
    db.refresh(renewal)
    return renewal
