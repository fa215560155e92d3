"""Fee record: one billed or paid instance for a student, optionally scoped to a month."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.core.enums import PaymentStatus
from app.db.session import Base


def _fee_id() -> str:
    return f"FEE#{uuid.uuid4()}"


class FeeRecord(Base):
    """
    Ledger row for a student fee.
    month/academic_year are set only for MONTHLY fee types and identify the billed month.
    Duplicates for the same month are allowed; the pending calculation tolerates them.
    """

    __tablename__ = "fee_records"
    __table_args__ = (
        CheckConstraint(
            "payment_status IN ('PAID','PENDING','OVERDUE')",
            name="chk_fee_record_payment_status",
        ),
        Index("ix_fee_records_student_fee_type", "student_id", "fee_type"),
    )

    id = Column(String(64), primary_key=True, default=_fee_id)
    student_id = Column(String(64), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    roll_number = Column(String(32), nullable=True)
    fee_type = Column(String(50), nullable=False)
    amount = Column(Numeric(12, 2), nullable=True)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    month = Column(String(20), nullable=True)  # e.g. "January"
    academic_year = Column(String(20), nullable=True)  # e.g. "2024-2025"
    due_date = Column(Date, nullable=True)
    payment_date = Column(Date, nullable=True)
    payment_method = Column(String(30), nullable=True)
    transaction_id = Column(String(100), nullable=True)
    remarks = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    student = relationship("Student", back_populates="fee_records")
