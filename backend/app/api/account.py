"""Account-section endpoints: audit, rectify, tally data, bill filed."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.schemas.account import AccountEntryCreate, AccountEntryRead, AuditProcess, FileBills, RectifyResubmit
from backend.app.schemas.envelope import Envelope, ok
from backend.app.services import account_workflow

router = APIRouter(prefix="/account", tags=["account"])


def _entries(entries) -> List[AccountEntryRead]:
    return [AccountEntryRead.model_validate(entry) for entry in entries]


@router.post("/entries", response_model=Envelope[AccountEntryRead], status_code=status.HTTP_201_CREATED)
async def create_account_entry(payload: AccountEntryCreate, db: Session = Depends(get_db)):
    return ok(AccountEntryRead.model_validate(account_workflow.create_entry(db, payload)))


@router.get("/audit", response_model=Envelope[List[AccountEntryRead]])
async def audit_queue(fms: str | None = None, db: Session = Depends(get_db)):
    return ok(_entries(account_workflow.list_audit_queue(db, fms)))


@router.patch("/audit/{entry_id}/process", response_model=Envelope[AccountEntryRead])
async def process_audit(entry_id: int, payload: AuditProcess, db: Session = Depends(get_db)):
    entry = account_workflow.process_audit(db, entry_id, payload.status, payload.remarks)
    return ok(AccountEntryRead.model_validate(entry))


@router.get("/rectify", response_model=Envelope[List[AccountEntryRead]])
async def rectify_queue(fms: str | None = None, db: Session = Depends(get_db)):
    return ok(_entries(account_workflow.list_rectify_queue(db, fms)))


@router.post("/rectify/{entry_id}/resubmit", response_model=Envelope[AccountEntryRead])
async def resubmit_rectified_entry(entry_id: int, payload: RectifyResubmit, db: Session = Depends(get_db)):
    entry = account_workflow.resubmit_for_audit(db, entry_id, payload.remarks)
    return ok(AccountEntryRead.model_validate(entry))


@router.get("/tally-data", response_model=Envelope[List[AccountEntryRead]])
async def tally_data(fms: str | None = None, db: Session = Depends(get_db)):
    return ok(_entries(account_workflow.list_tally_data(db, fms)))


@router.post("/tally-data/file", response_model=Envelope[List[AccountEntryRead]])
async def file_bills(payload: FileBills, db: Session = Depends(get_db)):
    return ok(_entries(account_workflow.file_bills(db, payload.ids)))


@router.get("/bill-filed", response_model=Envelope[List[AccountEntryRead]])
async def bill_filed(category: str | None = None, db: Session = Depends(get_db)):
    return ok(_entries(account_workflow.list_bill_filed(db, category)))
