"""
Seed script to populate the fee structure catalog with the school's standard fees.

Existing fee types are left untouched, so the script is safe to re-run.
"""
import asyncio
import logging
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import FeeFrequency, FeeType
from app.core.models import FeeStructure
from app.db.schema_check import ensure_tables
from app.db.session import AsyncSessionLocal, engine

logger = logging.getLogger(__name__)

# (fee_type, amount, frequency)
DEFAULT_FEE_STRUCTURES: List[Tuple[str, Decimal, FeeFrequency]] = [
    (FeeType.ADMISSION_FEE.value, Decimal("10000.00"), FeeFrequency.ONE_TIME),
    (FeeType.MONTHLY_FEE.value, Decimal("3000.00"), FeeFrequency.MONTHLY),
    (FeeType.TRANSPORT_FEE.value, Decimal("1200.00"), FeeFrequency.MONTHLY),
    (FeeType.ANNUAL_FEE.value, Decimal("1500.00"), FeeFrequency.ONE_TIME),
    (FeeType.EXAM_FEE.value, Decimal("500.00"), FeeFrequency.ONE_TIME),
]


async def seed_fee_structures(db: AsyncSession) -> int:
    """Insert missing default fee structures. Returns how many were created."""
    created = 0
    for fee_type, amount, frequency in DEFAULT_FEE_STRUCTURES:
        structure_id = f"FEE_STRUCTURE#{fee_type}"
        if await db.get(FeeStructure, structure_id) is not None:
            logger.info("Fee structure %s already exists", fee_type)
            continue
        db.add(
            FeeStructure(
                id=structure_id,
                fee_type=fee_type,
                amount=amount,
                frequency=frequency.value,
            )
        )
        created += 1
        logger.info("Created fee structure %s: %s %s", fee_type, amount, frequency.value)
    await db.commit()
    return created


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    await ensure_tables(engine)
    async with AsyncSessionLocal() as db:
        try:
            created = await seed_fee_structures(db)
        except Exception:
            await db.rollback()
            raise
    logger.info("Fee structure seed done (%d created).", created)


if __name__ == "__main__":
    asyncio.run(main())
