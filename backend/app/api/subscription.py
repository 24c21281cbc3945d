"""Subscription endpoints: register, approve, pay and renew."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.schemas.envelope import Envelope, ok
from backend.app.schemas.subscription import (
    SubscriptionApprovalSubmit,
    SubscriptionCreate,
    SubscriptionNumber,
    SubscriptionPaymentSubmit,
    SubscriptionRead,
    SubscriptionRenewalRead,
    SubscriptionRenewalSubmit,
)
from backend.app.services import subscription_workflow

router = APIRouter(tags=["subscription"])


def _subscriptions(subscriptions) -> List[SubscriptionRead]:
    return [SubscriptionRead.model_validate(subscription) for subscription in subscriptions]


@router.get("/subscription/generate-number", response_model=Envelope[SubscriptionNumber])
async def generate_subscription_number(db: Session = Depends(get_db)):
    return ok(SubscriptionNumber(subscription_no=subscription_workflow.generate_subscription_no(db)))


@router.post("/subscription/create", response_model=Envelope[SubscriptionRead], status_code=status.HTTP_201_CREATED)
async def create_subscription(payload: SubscriptionCreate, db: Session = Depends(get_db)):
    return ok(SubscriptionRead.model_validate(subscription_workflow.create_subscription(db, payload)))


@router.get("/subscription/all", response_model=Envelope[List[SubscriptionRead]])
async def list_subscriptions(db: Session = Depends(get_db)):
    return ok(_subscriptions(subscription_workflow.list_subscriptions(db)))


@router.get("/subscription-approval/pending", response_model=Envelope[List[SubscriptionRead]])
async def approval_pending(db: Session = Depends(get_db)):
    return ok(_subscriptions(subscription_workflow.list_stage_queue(db, "approval", "pending")))


@router.get("/subscription-approval/history", response_model=Envelope[List[SubscriptionRead]])
async def approval_history(db: Session = Depends(get_db)):
    return ok(_subscriptions(subscription_workflow.list_stage_queue(db, "approval", "history")))


@router.post("/subscription-approval/submit", response_model=Envelope[SubscriptionRead])
async def submit_approval(payload: SubscriptionApprovalSubmit, db: Session = Depends(get_db)):
    subscription = subscription_workflow.submit_approval(
        db, payload.subscription_no, payload.approval, payload.note, payload.approved_by
    )
    return ok(SubscriptionRead.model_validate(subscription))


@router.get("/subscription-payment/pending", response_model=Envelope[List[SubscriptionRead]])
async def payment_pending(db: Session = Depends(get_db)):
    return ok(_subscriptions(subscription_workflow.list_stage_queue(db, "payment", "pending")))


@router.get("/subscription-payment/history", response_model=Envelope[List[SubscriptionRead]])
async def payment_history(db: Session = Depends(get_db)):
    return ok(_subscriptions(subscription_workflow.list_stage_queue(db, "payment", "history")))


@router.post("/subscription-payment/submit", response_model=Envelope[SubscriptionRead])
async def submit_payment(payload: SubscriptionPaymentSubmit, db: Session = Depends(get_db)):
    subscription = subscription_workflow.submit_payment(
        db,
        payload.subscription_no,
        payload.payment_method.value,
        payload.start_date,
        payload.end_date,
        payload.transaction_id,
    )
    return ok(SubscriptionRead.model_validate(subscription))


@router.get("/subscription-renewal/pending", response_model=Envelope[List[SubscriptionRead]])
async def renewal_pending(db: Session = Depends(get_db)):
    return ok(_subscriptions(subscription_workflow.list_renewal_pending(db)))


@router.get("/subscription-renewal/history", response_model=Envelope[List[SubscriptionRenewalRead]])
async def renewal_history(db: Session = Depends(get_db)):
    renewals = subscription_workflow.list_renewal_history(db)
    return ok([SubscriptionRenewalRead.model_validate(renewal) for renewal in renewals])


@router.post("/subscription-renewal/submit", response_model=Envelope[SubscriptionRenewalRead])
async def submit_renewal(payload: SubscriptionRenewalSubmit, db: Session = Depends(get_db)):
    renewal = subscription_workflow.submit_renewal(
        db, payload.subscription_no, payload.renewal_status, payload.approved_by
    )
    return ok(SubscriptionRenewalRead.model_validate(renewal))
