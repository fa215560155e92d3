from enum import Enum


class FeeFrequency(str, Enum):
    ONE_TIME = "ONE_TIME"
    MONTHLY = "MONTHLY"


class PaymentStatus(str, Enum):
    PAID = "PAID"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"


class FeeType(str, Enum):
    """Well-known fee types. The catalog may define others."""

    ADMISSION_FEE = "ADMISSION_FEE"
    MONTHLY_FEE = "MONTHLY_FEE"
    TRANSPORT_FEE = "TRANSPORT_FEE"
    EXAM_FEE = "EXAM_FEE"
    ANNUAL_FEE = "ANNUAL_FEE"
    MISC = "MISC"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    UPI = "UPI"
    CARD = "CARD"
    BANK = "BANK"
    CHEQUE = "CHEQUE"


class UserRole(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
