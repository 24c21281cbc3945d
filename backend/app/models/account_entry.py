"""Account-section bill entry audited per FMS domain."""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class AccountEntry(Base):
    __tablename__ = "account_entries"

    id = Column(Integer, primary_key=True, index=True)
    fms = Column(String(50), nullable=False, index=True)
    reference_no = Column(String(100), nullable=False, index=True)
    party_name = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), nullable=False, default="Pending", index=True)
    remarks = Column(Text, nullable=True)
    audit_remarks = Column(Text, nullable=True)
    rectify_remarks = Column(Text, nullable=True)
    audited_at = Column(DateTime(timezone=True), nullable=True)
    filed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
