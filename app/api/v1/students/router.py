"""Students router: fee-relevant student profiles (admin)."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.fees.schemas import ApiResponse
from app.auth.dependencies import require_roles
from app.core.enums import UserRole
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import StudentCreate, StudentResponse, StudentUpdate
from . import service

router = APIRouter(
    prefix="/api/v1/students",
    tags=["students"],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)


@router.post(
    "",
    response_model=ApiResponse[StudentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentResponse]:
    try:
        student = await service.create_student(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(
        message=f"Student created successfully with roll number: {student.roll_number}",
        data=student,
    )


@router.get(
    "",
    response_model=ApiResponse[List[StudentResponse]],
)
async def list_students(
    class_name: Optional[str] = Query(None, alias="class"),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[StudentResponse]]:
    students = await service.list_students(db, class_name=class_name)
    return ApiResponse(message="Students retrieved successfully", data=students)


@router.get(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
)
async def get_student(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentResponse]:
    try:
        student = await service.get_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Student retrieved successfully", data=student)


@router.put(
    "/{student_id}",
    response_model=ApiResponse[StudentResponse],
)
async def update_student(
    student_id: str,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentResponse]:
    try:
        student = await service.update_student(db, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Student updated successfully", data=student)


@router.delete(
    "/{student_id}",
    response_model=ApiResponse[None],
)
async def delete_student(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[None]:
    try:
        await service.delete_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Student deleted successfully", data=None)
