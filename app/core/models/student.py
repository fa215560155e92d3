"""Student profile: the attributes the fee engine anchors on."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base


def _student_id() -> str:
    return f"STU#{uuid.uuid4()}"


class Student(Base):
    """Student enrolled in the school. admission_date anchors monthly fee accrual."""

    __tablename__ = "students"

    id = Column(String(64), primary_key=True, default=_student_id)
    roll_number = Column(String(32), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=False)
    class_name = Column(String(50), nullable=False)
    date_of_birth = Column(Date, nullable=True)
    parent_name = Column(String(255), nullable=True)
    parent_phone = Column(String(50), nullable=True)
    parent_email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    admission_date = Column(Date, nullable=True)
    # Exempts the student from the one-time ADMISSION_FEE
    exclude_admission_fee = Column(Boolean, nullable=False, default=False)
    transport_enabled = Column(Boolean, nullable=False, default=False)
    # YYYY-MM; transport accrues from here instead of the admission month
    transport_start_month = Column(String(7), nullable=True)
    status = Column(String(20), nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    fee_records = relationship("FeeRecord", back_populates="student", cascade="all, delete-orphan")
