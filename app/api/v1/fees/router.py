"""Fees router: fee structures, fee records, payments, pending balance (admin)."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_roles
from app.core.enums import UserRole
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import (
    ApiResponse,
    FeeRecordCreate,
    FeeRecordResponse,
    FeeStructureCreate,
    FeeStructureResponse,
    FeeStructureUpdate,
    PaymentCreate,
    PendingFeesResponse,
)
from . import service

router = APIRouter(
    prefix="/api/v1/fees",
    tags=["fees"],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)


# --- Fee Structure ---
@router.post(
    "/structures",
    response_model=ApiResponse[FeeStructureResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_fee_structure(
    payload: FeeStructureCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[FeeStructureResponse]:
    try:
        structure = await service.create_fee_structure(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Fee structure created successfully", data=structure)


@router.get(
    "/structures",
    response_model=ApiResponse[List[FeeStructureResponse]],
)
async def list_fee_structures(
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[FeeStructureResponse]]:
    structures = await service.list_fee_structures(db)
    return ApiResponse(message="Fee structures retrieved successfully", data=structures)


@router.put(
    "/structures/{fee_type}",
    response_model=ApiResponse[FeeStructureResponse],
)
async def update_fee_structure(
    fee_type: str,
    payload: FeeStructureUpdate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[FeeStructureResponse]:
    try:
        structure = await service.update_fee_structure(db, fee_type, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Fee structure updated successfully", data=structure)


# --- Fee Records ---
@router.post(
    "",
    response_model=ApiResponse[FeeRecordResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_fee_record(
    payload: FeeRecordCreate,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[FeeRecordResponse]:
    try:
        record = await service.create_fee_record(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Fee created successfully", data=record)


@router.put(
    "/{fee_id}/payment",
    response_model=ApiResponse[FeeRecordResponse],
)
async def record_payment(
    fee_id: str,
    payload: Optional[PaymentCreate] = None,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[FeeRecordResponse]:
    try:
        record = await service.record_payment(db, fee_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return ApiResponse(message="Payment recorded successfully", data=record)


@router.get(
    "/students/{student_id}",
    response_model=ApiResponse[List[FeeRecordResponse]],
)
async def get_student_fees(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[List[FeeRecordResponse]]:
    records = await service.list_student_fee_records(db, student_id)
    return ApiResponse(message="Fees retrieved successfully", data=records)


@router.get(
    "/students/{student_id}/pending",
    response_model=ApiResponse[PendingFeesResponse],
    response_model_exclude_none=True,
)
async def calculate_pending_fees(
    student_id: str,
    as_of: Optional[date] = Query(None, description="Evaluate as of this date (defaults to today)"),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PendingFeesResponse]:
    try:
        student = await service.get_student(db, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    pending = await service.calculate_pending_fees_for_student(db, student, as_of=as_of)
    return ApiResponse(message="Pending fees calculated successfully", data=pending)
