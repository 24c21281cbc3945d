"""Payment FMS workflow endpoints."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.schemas.envelope import Envelope, ok
from backend.app.schemas.payment_fms import (
    ApprovalProcess,
    MakePaymentProcess,
    PaymentFmsCreate,
    PaymentFmsEventRead,
    PaymentFmsRead,
    TallyEntryProcess,
)
from backend.app.services import payment_workflow

router = APIRouter(prefix="/payment-fms", tags=["payment-fms"])


def _records(records) -> List[PaymentFmsRead]:
    return [PaymentFmsRead.model_validate(record) for record in records]


@router.post("/create", response_model=Envelope[PaymentFmsRead], status_code=status.HTTP_201_CREATED)
async def create_payment_request(payload: PaymentFmsCreate, db: Session = Depends(get_db)):
    record = payment_workflow.create_request(db, payload)
    return ok(PaymentFmsRead.model_validate(record))


@router.get("/all", response_model=Envelope[List[PaymentFmsRead]])
async def list_payment_requests(db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.list_requests(db)))


@router.get("/approval/pending", response_model=Envelope[List[PaymentFmsRead]])
async def approval_pending(db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.list_stage_queue(db, "approval", "pending")))


@router.get("/approval/history", response_model=Envelope[List[PaymentFmsRead]])
async def approval_history(db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.list_stage_queue(db, "approval", "history")))


@router.patch("/approval/{record_id}/process", response_model=Envelope[PaymentFmsRead])
async def process_approval(record_id: int, payload: ApprovalProcess, db: Session = Depends(get_db)):
    record = payment_workflow.process_approval(db, record_id, payload.status, payload.stage_remarks)
    return ok(PaymentFmsRead.model_validate(record))


@router.get("/make-payment/pending", response_model=Envelope[List[PaymentFmsRead]])
async def make_payment_pending(db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.list_stage_queue(db, "make-payment", "pending")))


@router.get("/make-payment/history", response_model=Envelope[List[PaymentFmsRead]])
async def make_payment_history(db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.list_stage_queue(db, "make-payment", "history")))


@router.patch("/make-payment/{record_id}/process", response_model=Envelope[PaymentFmsRead])
async def process_make_payment(record_id: int, payload: MakePaymentProcess, db: Session = Depends(get_db)):
    record = payment_workflow.process_payment(db, record_id, payload.payment_type.value)
    return ok(PaymentFmsRead.model_validate(record))


@router.get("/tally-entry/pending", response_model=Envelope[List[PaymentFmsRead]])
async def tally_entry_pending(db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.list_stage_queue(db, "tally-entry", "pending")))


@router.get("/tally-entry/history", response_model=Envelope[List[PaymentFmsRead]])
async def tally_entry_history(db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.list_stage_queue(db, "tally-entry", "history")))


@router.post("/tally-entry/process", response_model=Envelope[List[PaymentFmsRead]])
async def process_tally_entry(payload: TallyEntryProcess, db: Session = Depends(get_db)):
    return ok(_records(payment_workflow.process_tally_batch(db, payload.ids)))


@router.get("/{record_id}/events", response_model=Envelope[List[PaymentFmsEventRead]])
async def list_payment_request_events(record_id: int, db: Session = Depends(get_db)):
    events = payment_workflow.list_events(db, record_id)
    return ok([PaymentFmsEventRead.model_validate(event) for event in events])


@router.delete("/{record_id}", response_model=Envelope[None])
async def delete_payment_request(record_id: int, db: Session = Depends(get_db)):
    payment_workflow.delete_request(db, record_id)
    return ok()
