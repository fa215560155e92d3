"""
Pending fee calculation.

Reconciles the fee structure catalog with one student's fee ledger:
- ONE_TIME fees are owed once; any PAID record closes them, PENDING records reduce them.
- MONTHLY fees accrue every calendar month from the accrual start through the current month.
  Each month is closed by any PAID record for that month, otherwise reduced by its PENDING records.

Everything here is pure: callers load the rows and pass them in.
"""

import logging
import re
from collections import defaultdict
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Set
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.core.enums import FeeFrequency, FeeType, PaymentStatus
from app.core.models import FeeRecord, FeeStructure, Student

from .schemas import PendingBreakdownItem, PendingFeesResponse

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_MONTH_LOOKUP: Dict[str, int] = {}
for _number, _name in enumerate(MONTH_NAMES, start=1):
    _MONTH_LOOKUP[_name.lower()] = _number
    _MONTH_LOOKUP[_name[:3].lower()] = _number

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
# Standalone four-digit years: "2024-2025" -> 2024, 2025; "12024" -> nothing
_YEAR_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")


class MonthKey(NamedTuple):
    """Calendar month used to match monthly fee records."""

    year: int
    month: int

    @classmethod
    def from_date(cls, value: date) -> "MonthKey":
        return cls(value.year, value.month)

    def next(self) -> "MonthKey":
        if self.month == 12:
            return MonthKey(self.year + 1, 1)
        return MonthKey(self.year, self.month + 1)

    @property
    def label(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"


def to_amount(value) -> Decimal:
    """Coerce a stored amount to a 2-place Decimal. Missing or non-numeric values count as zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    if not amount.is_finite():
        return ZERO
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal, currency_symbol: str) -> str:
    """3000.00 -> '₹3000', 1500.50 -> '₹1500.50'."""
    if amount == amount.to_integral_value():
        return f"{currency_symbol}{int(amount)}"
    return f"{currency_symbol}{amount.quantize(CENT)}"


def parse_month_name(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    return _MONTH_LOOKUP.get(str(value).strip().lower())


def parse_years(value: Optional[str]) -> Set[int]:
    if not value:
        return set()
    return {int(y) for y in _YEAR_RE.findall(str(value))}


def record_month_keys(record: FeeRecord) -> Set[MonthKey]:
    """Months a ledger row applies to. Rows without a usable month or year apply to none."""
    month = parse_month_name(record.month)
    if month is None:
        return set()
    return {MonthKey(year, month) for year in parse_years(record.academic_year)}


def parse_year_month(value: Optional[str]) -> Optional[MonthKey]:
    """Parse a 'YYYY-MM' string."""
    if not value:
        return None
    match = _YEAR_MONTH_RE.match(str(value).strip())
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return MonthKey(year, month)


def coerce_date(value) -> Optional[date]:
    """
    Read a calendar date from a date, datetime or ISO string.

    Date-only strings are taken as wall-clock dates. Datetime strings keep the date
    exactly as written, without converting between timezones.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        if _DATE_ONLY_RE.match(text):
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def resolve_anchor_date(admission_date, created_at, today: date) -> date:
    """Admission date, else creation date, else today."""
    for source, value in (("admission_date", admission_date), ("created_at", created_at)):
        parsed = coerce_date(value)
        if parsed is not None:
            return parsed
        if value not in (None, ""):
            logger.warning("Unparseable %s %r; trying next anchor", source, value)
    return today


def school_today() -> date:
    return datetime.now(ZoneInfo(settings.school_timezone)).date()


def iter_months(start: MonthKey, end: MonthKey) -> Iterator[MonthKey]:
    """Every month from start through end inclusive. Empty when start is after end."""
    current = start
    while current <= end:
        yield current
        current = current.next()


def _sum_status(records: Iterable[FeeRecord], status: PaymentStatus) -> Decimal:
    return sum(
        (to_amount(r.amount) for r in records if r.payment_status == status.value),
        ZERO,
    )


def _has_paid(records: Iterable[FeeRecord]) -> bool:
    return any(r.payment_status == PaymentStatus.PAID.value for r in records)


def _one_time_pending(
    student: Student,
    structure: FeeStructure,
    records: List[FeeRecord],
) -> Optional[PendingBreakdownItem]:
    if structure.fee_type == FeeType.ADMISSION_FEE.value and student.exclude_admission_fee:
        logger.debug("%s: excluded for student %s", structure.fee_type, student.id)
        return None

    # A single PAID record closes a one-time fee regardless of its amount
    if _has_paid(records):
        return None

    structure_amount = to_amount(structure.amount)
    pending = structure_amount - _sum_status(records, PaymentStatus.PENDING)
    if pending <= 0:
        return None
    return PendingBreakdownItem(
        fee_type=structure.fee_type,
        structure_amount=structure_amount,
        pending_amount=pending,
        frequency=FeeFrequency.ONE_TIME,
    )


def _accrual_start(student: Student, structure: FeeStructure, anchor: date) -> Optional[MonthKey]:
    """First month a monthly fee is owed, or None when the fee does not apply to the student."""
    admission_month = MonthKey.from_date(anchor)
    if structure.fee_type != FeeType.TRANSPORT_FEE.value:
        return admission_month
    if not student.transport_enabled:
        logger.debug("%s: transport not enabled for student %s", structure.fee_type, student.id)
        return None
    if student.transport_start_month:
        start = parse_year_month(student.transport_start_month)
        if start is not None:
            return start
        logger.warning(
            "Invalid transport_start_month %r for student %s; using admission month",
            student.transport_start_month,
            student.id,
        )
    return admission_month


def _monthly_pending(
    student: Student,
    structure: FeeStructure,
    records: List[FeeRecord],
    anchor: date,
    current: MonthKey,
    currency_symbol: str,
) -> Optional[PendingBreakdownItem]:
    start = _accrual_start(student, structure, anchor)
    if start is None:
        return None

    by_month: Dict[MonthKey, List[FeeRecord]] = defaultdict(list)
    for record in records:
        for key in record_month_keys(record):
            by_month[key].append(record)

    structure_amount = to_amount(structure.amount)
    total = ZERO
    months: List[str] = []
    for key in iter_months(start, current):
        matched = by_month.get(key, [])
        if _has_paid(matched):
            continue
        recorded = _sum_status(matched, PaymentStatus.PENDING)
        if recorded >= structure_amount:
            continue
        month_pending = structure_amount - recorded
        total += month_pending
        months.append(f"{key.label}: {format_amount(month_pending, currency_symbol)}")

    logger.debug(
        "%s: %s..%s, %d month(s) pending, total %s",
        structure.fee_type,
        start.label,
        current.label,
        len(months),
        total,
    )
    if total <= 0:
        return None
    return PendingBreakdownItem(
        fee_type=structure.fee_type,
        structure_amount=structure_amount,
        pending_amount=total,
        frequency=FeeFrequency.MONTHLY,
        months=months,
    )


def calculate_pending_fees(
    student: Student,
    structures: Iterable[FeeStructure],
    records: Iterable[FeeRecord],
    as_of: Optional[date] = None,
    currency_symbol: Optional[str] = None,
) -> PendingFeesResponse:
    """
    Outstanding balance for one student, itemized per fee type.

    `as_of` fixes "today" (defaults to the current date in the school timezone).
    Inputs are not modified.
    """
    today = as_of or school_today()
    symbol = settings.currency_symbol if currency_symbol is None else currency_symbol
    anchor = resolve_anchor_date(student.admission_date, student.created_at, today)
    current = MonthKey.from_date(today)

    records_by_type: Dict[str, List[FeeRecord]] = defaultdict(list)
    for record in records:
        records_by_type[record.fee_type].append(record)

    total_pending = ZERO
    breakdown: List[PendingBreakdownItem] = []
    for structure in structures:
        type_records = records_by_type.get(structure.fee_type, [])
        if structure.frequency == FeeFrequency.ONE_TIME.value:
            item = _one_time_pending(student, structure, type_records)
        elif structure.frequency == FeeFrequency.MONTHLY.value:
            item = _monthly_pending(student, structure, type_records, anchor, current, symbol)
        else:
            logger.warning("Skipping %s: unknown frequency %r", structure.fee_type, structure.frequency)
            continue
        if item is not None:
            total_pending += item.pending_amount
            breakdown.append(item)

    logger.info(
        "Pending fees for student %s as of %s: %s across %d fee type(s)",
        student.id,
        today.isoformat(),
        total_pending,
        len(breakdown),
    )
    return PendingFeesResponse(
        student_id=student.id,
        total_pending=total_pending,
        breakdown=breakdown,
    )
