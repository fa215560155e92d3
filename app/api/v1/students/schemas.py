"""Student profile schemas (fee-relevant attributes)."""

from datetime import date, datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.api.v1.fees.schemas import CamelModel

_YEAR_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class StudentCreate(CamelModel):
    """roll_number and id are generated in the backend."""

    full_name: str = Field(..., min_length=1, max_length=255)
    class_name: str = Field(..., min_length=1, max_length=50)
    date_of_birth: Optional[date] = None
    parent_name: Optional[str] = None
    parent_phone: str = Field(..., min_length=1, max_length=50)
    parent_email: Optional[EmailStr] = None
    address: Optional[str] = None
    admission_date: Optional[date] = Field(None, description="Defaults to today")
    exclude_admission_fee: bool = False
    transport_enabled: bool = False
    transport_start_month: Optional[str] = Field(None, pattern=_YEAR_MONTH_PATTERN, description="YYYY-MM")


class StudentUpdate(CamelModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    class_name: Optional[str] = Field(None, min_length=1, max_length=50)
    date_of_birth: Optional[date] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = Field(None, min_length=1, max_length=50)
    parent_email: Optional[EmailStr] = None
    address: Optional[str] = None
    admission_date: Optional[date] = None
    exclude_admission_fee: Optional[bool] = None
    transport_enabled: Optional[bool] = None
    transport_start_month: Optional[str] = Field(None, pattern=_YEAR_MONTH_PATTERN, description="YYYY-MM")
    status: Optional[str] = None

    # Omit these to leave them unchanged; the columns are NOT NULL
    @field_validator("full_name", "class_name", "exclude_admission_fee", "transport_enabled", "status")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().upper()
        if v not in ("ACTIVE", "INACTIVE"):
            raise ValueError("status must be ACTIVE or INACTIVE")
        return v


class StudentResponse(CamelModel):
    id: str
    roll_number: str
    full_name: str
    class_name: str
    date_of_birth: Optional[date] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
    address: Optional[str] = None
    admission_date: Optional[date] = None
    exclude_admission_fee: bool
    transport_enabled: bool
    transport_start_month: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime
