"""Student service: profile CRUD and roll number generation."""

import logging
import secrets
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.fees.calculator import school_today
from app.core.exceptions import NotFoundError, ServiceError
from app.core.models import Student

from .schemas import StudentCreate, StudentResponse, StudentUpdate

logger = logging.getLogger(__name__)


def generate_roll_number_candidate(year: int) -> str:
    """STU<year><6 digits>, e.g. STU2024048213."""
    return f"STU{year}{secrets.randbelow(10**6):06d}"


async def generate_roll_number(
    db: AsyncSession,
    year: int,
    max_attempts: int = 20,
) -> str:
    """Unique roll number for the admission year (retries on collision)."""
    for _ in range(max_attempts):
        candidate = generate_roll_number_candidate(year)
        result = await db.execute(
            select(Student.id).where(Student.roll_number == candidate)
        )
        if result.scalar_one_or_none() is None:
            return candidate
    raise ServiceError(
        "Could not generate unique roll number",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def create_student(db: AsyncSession, payload: StudentCreate) -> StudentResponse:
    admission_date = payload.admission_date or school_today()
    roll_number = await generate_roll_number(db, admission_date.year)
    student = Student(
        roll_number=roll_number,
        full_name=payload.full_name.strip(),
        class_name=payload.class_name.strip(),
        date_of_birth=payload.date_of_birth,
        parent_name=payload.parent_name,
        parent_phone=payload.parent_phone,
        parent_email=str(payload.parent_email) if payload.parent_email else "",
        address=payload.address,
        admission_date=admission_date,
        exclude_admission_fee=payload.exclude_admission_fee,
        transport_enabled=payload.transport_enabled,
        transport_start_month=payload.transport_start_month,
        status="ACTIVE",
    )
    db.add(student)
    await db.commit()
    await db.refresh(student)
    logger.info("Created student %s with roll number %s", student.id, roll_number)
    return StudentResponse.model_validate(student)


async def list_students(
    db: AsyncSession,
    class_name: Optional[str] = None,
) -> List[StudentResponse]:
    stmt = select(Student)
    if class_name:
        stmt = stmt.where(Student.class_name == class_name)
    stmt = stmt.order_by(Student.class_name, Student.full_name)
    result = await db.execute(stmt)
    return [StudentResponse.model_validate(s) for s in result.scalars().all()]


async def get_student(db: AsyncSession, student_id: str) -> StudentResponse:
    student = await db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    return StudentResponse.model_validate(student)


async def update_student(
    db: AsyncSession,
    student_id: str,
    payload: StudentUpdate,
) -> StudentResponse:
    student = await db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "parent_email" and value is not None:
            value = str(value)
        setattr(student, field, value)
    await db.commit()
    await db.refresh(student)
    logger.info("Updated student %s", student.id)
    return StudentResponse.model_validate(student)


async def delete_student(db: AsyncSession, student_id: str) -> None:
    """Remove the profile together with its fee records."""
    student = await db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student not found")
    await db.delete(student)
    await db.commit()
    logger.info("Deleted student %s", student_id)
