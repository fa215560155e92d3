"""Fees schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from app.core.enums import FeeFrequency, PaymentMethod, PaymentStatus

T = TypeVar("T")

# Decimal internally, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by the fee and student endpoints."""

    success: bool = True
    message: str
    data: T


# --- Fee Structure ---
class FeeStructureCreate(CamelModel):
    fee_type: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., ge=0)
    frequency: FeeFrequency

    @field_validator("fee_type")
    @classmethod
    def normalize_fee_type(cls, v: str) -> str:
        return v.strip().upper()


class FeeStructureUpdate(CamelModel):
    amount: Optional[Decimal] = Field(None, ge=0)
    frequency: Optional[FeeFrequency] = None


class FeeStructureResponse(CamelModel):
    id: str
    fee_type: str
    amount: Money
    frequency: FeeFrequency
    created_at: datetime
    updated_at: datetime


# --- Fee Record ---
class FeeRecordCreate(CamelModel):
    student_id: str
    roll_number: Optional[str] = None
    fee_type: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., gt=0)
    due_date: date
    month: Optional[str] = Field(None, max_length=20, description="Month name, e.g. January (monthly fees only)")
    academic_year: Optional[str] = Field(None, max_length=20, description="e.g. 2024-2025 (monthly fees only)")
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[date] = None
    transaction_id: Optional[str] = Field(None, max_length=100)
    remarks: Optional[str] = None

    @field_validator("fee_type")
    @classmethod
    def normalize_fee_type(cls, v: str) -> str:
        return v.strip().upper()


class PaymentCreate(CamelModel):
    payment_method: PaymentMethod = PaymentMethod.CASH
    transaction_id: Optional[str] = Field(None, max_length=100)


class FeeRecordResponse(CamelModel):
    id: str
    student_id: str
    roll_number: Optional[str] = None
    fee_type: str
    amount: Optional[Money] = None
    payment_status: PaymentStatus
    month: Optional[str] = None
    academic_year: Optional[str] = None
    due_date: Optional[date] = None
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    remarks: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# --- Pending calculation ---
class PendingBreakdownItem(CamelModel):
    fee_type: str
    structure_amount: Money
    pending_amount: Money
    frequency: FeeFrequency
    # "<Month> <Year>: <symbol><amount>", MONTHLY only
    months: Optional[List[str]] = None


class PendingFeesResponse(CamelModel):
    student_id: str
    total_pending: Money
    breakdown: List[PendingBreakdownItem]


class StudentFeeSummary(CamelModel):
    """Fee block of the student dashboard."""

    paid: List[FeeRecordResponse]
    total_paid: Money
    total_pending: Money
    pending_breakdown: List[PendingBreakdownItem]
