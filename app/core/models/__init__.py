from app.core.models.student import Student
from app.core.models.fee_structure import FeeStructure
from app.core.models.fee_record import FeeRecord

__all__ = [
    "Student",
    "FeeStructure",
    "FeeRecord",
]
