"""Fee structure catalog: one standard charge per fee type."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Numeric, String

from app.db.session import Base


class FeeStructure(Base):
    """Standard amount and billing frequency for a fee type. fee_type is immutable after creation."""

    __tablename__ = "fee_structures"
    __table_args__ = (
        CheckConstraint(
            "frequency IN ('ONE_TIME','MONTHLY')",
            name="chk_fee_structure_frequency",
        ),
        CheckConstraint("amount >= 0", name="chk_fee_structure_amount"),
    )

    # FEE_STRUCTURE#<fee_type>
    id = Column(String(100), primary_key=True)
    fee_type = Column(String(50), nullable=False, unique=True)
    amount = Column(Numeric(12, 2), nullable=False)
    frequency = Column(String(20), nullable=False)  # ONE_TIME, MONTHLY
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
