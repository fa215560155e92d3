"""Fees service: fee structure catalog, fee ledger, payments and pending balance."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PaymentMethod, PaymentStatus
from app.core.exceptions import NotFoundError, ServiceError
from app.core.models import FeeRecord, FeeStructure, Student

from .calculator import calculate_pending_fees, school_today, to_amount
from .schemas import (
    FeeRecordCreate,
    FeeRecordResponse,
    FeeStructureCreate,
    FeeStructureResponse,
    FeeStructureUpdate,
    PaymentCreate,
    PendingFeesResponse,
    StudentFeeSummary,
)

logger = logging.getLogger(__name__)


def _structure_id(fee_type: str) -> str:
    return f"FEE_STRUCTURE#{fee_type}"


# --- Fee Structure ---
async def get_fee_structures(db: AsyncSession) -> List[FeeStructure]:
    """Full catalog, no filtering."""
    result = await db.execute(select(FeeStructure).order_by(FeeStructure.fee_type))
    return list(result.scalars().all())


async def create_fee_structure(
    db: AsyncSession,
    payload: FeeStructureCreate,
) -> FeeStructureResponse:
    existing = await db.get(FeeStructure, _structure_id(payload.fee_type))
    if existing:
        raise ServiceError(
            f"Fee structure for {payload.fee_type} already exists",
            status.HTTP_409_CONFLICT,
        )
    structure = FeeStructure(
        id=_structure_id(payload.fee_type),
        fee_type=payload.fee_type,
        amount=payload.amount,
        frequency=payload.frequency.value,
    )
    db.add(structure)
    await db.commit()
    await db.refresh(structure)
    logger.info("Created fee structure %s: %s %s", structure.fee_type, structure.amount, structure.frequency)
    return FeeStructureResponse.model_validate(structure)


async def list_fee_structures(db: AsyncSession) -> List[FeeStructureResponse]:
    return [FeeStructureResponse.model_validate(s) for s in await get_fee_structures(db)]


async def update_fee_structure(
    db: AsyncSession,
    fee_type: str,
    payload: FeeStructureUpdate,
) -> FeeStructureResponse:
    """Change amount/frequency going forward. fee_type itself never changes."""
    structure = await db.get(FeeStructure, _structure_id(fee_type.strip().upper()))
    if not structure:
        raise NotFoundError("Fee structure not found")
    if payload.amount is not None:
        structure.amount = payload.amount
    if payload.frequency is not None:
        structure.frequency = payload.frequency.value
    await db.commit()
    await db.refresh(structure)
    logger.info("Updated fee structure %s: %s %s", structure.fee_type, structure.amount, structure.frequency)
    return FeeStructureResponse.model_validate(structure)


# --- Fee Records ---
async def get_fee_records_for_student(db: AsyncSession, student_id: str) -> List[FeeRecord]:
    """All ledger rows for one student, any status, most recent due date first."""
    result = await db.execute(
        select(FeeRecord)
        .where(FeeRecord.student_id == student_id)
        .order_by(FeeRecord.due_date.desc(), FeeRecord.created_at.desc())
    )
    return list(result.scalars().all())


async def create_fee_record(db: AsyncSession, payload: FeeRecordCreate) -> FeeRecordResponse:
    student = await db.get(Student, payload.student_id)
    if not student:
        raise NotFoundError("Student not found")
    record = FeeRecord(
        student_id=student.id,
        roll_number=payload.roll_number or student.roll_number,
        fee_type=payload.fee_type,
        amount=payload.amount,
        due_date=payload.due_date,
        payment_status=payload.payment_status.value,
        month=payload.month.strip() if payload.month else None,
        academic_year=payload.academic_year.strip() if payload.academic_year else None,
        payment_method=payload.payment_method.value if payload.payment_method else None,
        payment_date=payload.payment_date,
        transaction_id=payload.transaction_id,
        remarks=payload.remarks or "",
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    logger.info("Created fee record %s (%s, %s) for student %s", record.id, record.fee_type, record.payment_status, student.id)
    return FeeRecordResponse.model_validate(record)


async def list_student_fee_records(db: AsyncSession, student_id: str) -> List[FeeRecordResponse]:
    return [FeeRecordResponse.model_validate(r) for r in await get_fee_records_for_student(db, student_id)]


async def record_payment(
    db: AsyncSession,
    fee_id: str,
    payload: Optional[PaymentCreate] = None,
    paid_on: Optional[date] = None,
) -> FeeRecordResponse:
    """Mark a fee record PAID. Last write wins. No payload means a cash payment."""
    payload = payload or PaymentCreate()
    record = await db.get(FeeRecord, fee_id)
    if not record:
        raise NotFoundError("Fee record not found")
    record.payment_status = PaymentStatus.PAID.value
    record.payment_date = paid_on or school_today()
    record.payment_method = (payload.payment_method or PaymentMethod.CASH).value
    record.transaction_id = payload.transaction_id or ""
    await db.commit()
    await db.refresh(record)
    logger.info("Recorded payment for fee record %s via %s", record.id, record.payment_method)
    return FeeRecordResponse.model_validate(record)


# --- Pending ---
async def get_student(db: AsyncSession, student_id: str) -> Student:
    student = await db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return student


async def calculate_pending_fees_for_student(
    db: AsyncSession,
    student: Student,
    as_of: Optional[date] = None,
) -> PendingFeesResponse:
    """Load the catalog and the student's ledger, then compute the pending balance."""
    structures = await get_fee_structures(db)
    records = await get_fee_records_for_student(db, student.id)
    logger.debug(
        "Student %s: %d fee structure(s), %d fee record(s)",
        student.id,
        len(structures),
        len(records),
    )
    return calculate_pending_fees(student, structures, records, as_of=as_of)


async def get_student_fee_summary(
    db: AsyncSession,
    student: Student,
    as_of: Optional[date] = None,
) -> StudentFeeSummary:
    """Paid records and totals shown on the student dashboard."""
    structures = await get_fee_structures(db)
    records = await get_fee_records_for_student(db, student.id)
    paid = [r for r in records if r.payment_status == PaymentStatus.PAID.value]
    total_paid = sum((to_amount(r.amount) for r in paid), Decimal("0.00"))
    pending = calculate_pending_fees(student, structures, records, as_of=as_of)
    return StudentFeeSummary(
        paid=[FeeRecordResponse.model_validate(r) for r in paid],
        total_paid=total_paid,
        total_pending=pending.total_pending,
        pending_breakdown=pending.breakdown,
    )
