"""Student portal router: the logged-in student's own fees."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.fees import service as fee_service
from app.api.v1.fees.schemas import ApiResponse, FeeRecordResponse, StudentFeeSummary
from app.auth.dependencies import require_student
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.db.session import get_db

router = APIRouter(prefix="/api/v1/student", tags=["student-portal"])


@router.get(
    "/fees",
    response_model=ApiResponse[List[FeeRecordResponse]],
)
async def get_my_fees(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
) -> ApiResponse[List[FeeRecordResponse]]:
    records = await fee_service.list_student_fee_records(db, current_user.student_id)
    return ApiResponse(message="Fees retrieved successfully", data=records)


@router.get(
    "/fees/summary",
    response_model=ApiResponse[StudentFeeSummary],
    response_model_exclude_none=True,
)
async def get_my_fee_summary(
    as_of: Optional[date] = Query(None, description="Evaluate as of this date (defaults to today)"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_student),
) -> ApiResponse[StudentFeeSummary]:
    """Dashboard fee block: paid records, total paid, pending total and breakdown."""
    try:
        student = await fee_service.get_student(db, current_user.student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    summary = await fee_service.get_student_fee_summary(db, student, as_of=as_of)
    return ApiResponse(message="Fee summary retrieved successfully", data=summary)
