from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import FeeStructure
from app.db.seed_fee_structures import DEFAULT_FEE_STRUCTURES, seed_fee_structures


@pytest.mark.asyncio
async def test_seed_creates_default_catalog(db_session: AsyncSession) -> None:
    created = await seed_fee_structures(db_session)
    assert created == len(DEFAULT_FEE_STRUCTURES)

    rows = (await db_session.execute(select(FeeStructure))).scalars().all()
    by_type = {r.fee_type: r for r in rows}
    assert by_type["MONTHLY_FEE"].frequency == "MONTHLY"
    assert by_type["ADMISSION_FEE"].frequency == "ONE_TIME"
    assert Decimal(by_type["MONTHLY_FEE"].amount) == Decimal("3000.00")


@pytest.mark.asyncio
async def test_seed_keeps_existing_structures(db_session: AsyncSession) -> None:
    db_session.add(
        FeeStructure(
            id="FEE_STRUCTURE#MONTHLY_FEE",
            fee_type="MONTHLY_FEE",
            amount=Decimal("4200.00"),
            frequency="MONTHLY",
        )
    )
    await db_session.commit()

    created = await seed_fee_structures(db_session)
    assert created == len(DEFAULT_FEE_STRUCTURES) - 1
    existing = await db_session.get(FeeStructure, "FEE_STRUCTURE#MONTHLY_FEE")
    assert Decimal(existing.amount) == Decimal("4200.00")
    assert await seed_fee_structures(db_session) == 0
