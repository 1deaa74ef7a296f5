"""Pytest fixtures for statutory payroll tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_statutory.calculators.types import PayrollEntrySnapshot
from payroll_statutory.models import Base, PayrollEntry, PayrollRun, Profile
from tests.factories import make_snapshot

# In-memory SQLite shared across the engine's connections
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Create a fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@dataclass(frozen=True)
class SeededPayroll:
    """Identifiers of the seeded organization, employees and runs."""

    organization_id: UUID
    other_organization_id: UUID
    asha_id: UUID
    vikram_id: UUID
    april_run_id: UUID
    may_run_id: UUID
    draft_run_id: UUID
    previous_fy_run_id: UUID
    empty_run_id: UUID


def _entry(
    run: PayrollRun,
    profile: Profile,
    gross: str,
    net: str,
    tds: str | None,
    basic: str | None = None,
    **extra: Any,
) -> PayrollEntry:
    breakdown = []
    if basic is not None:
        breakdown.append({"name": "Basic Salary", "annual": str(Decimal(basic) * 12), "monthly": basic})
    breakdown.append({"name": "HRA", "annual": "96000", "monthly": "8000"})
    return PayrollEntry(
        id=uuid4(),
        payroll_run_id=run.id,
        profile_id=profile.id,
        organization_id=run.organization_id,
        annual_ctc=Decimal("900000"),
        gross_earnings=Decimal(gross),
        total_deductions=Decimal(gross) - Decimal(net),
        net_pay=Decimal(net),
        tds_amount=Decimal(tds) if tds is not None else None,
        lwp_days=extra.pop("lwp_days", 0),
        working_days=extra.pop("working_days", 30),
        paid_days=extra.pop("paid_days", 30),
        earnings_breakdown=breakdown,
        status="locked",
        **extra,
    )


@pytest_asyncio.fixture
async def seeded(session: AsyncSession) -> SeededPayroll:
    """Organization with two employees across FY 2023-2024.

    - Asha: April 60000/3000 TDS, May 62000/3200 TDS
    - Vikram: April 40000/no TDS, May 41000/500 TDS
    - A draft run in the year, a locked run outside it, and a locked run
      with no entries for the other organization.
    """
    org_id = uuid4()
    other_org_id = uuid4()

    asha = Profile(
        id=uuid4(),
        organization_id=org_id,
        full_name="Asha Rao",
        department="Engineering",
        job_title="Developer",
    )
    vikram = Profile(
        id=uuid4(),
        organization_id=org_id,
        full_name="Vikram Shah",
        department="Finance",
        job_title=None,
    )
    session.add_all([asha, vikram])

    april = PayrollRun(id=uuid4(), organization_id=org_id, pay_period="2023-04", status="locked")
    may = PayrollRun(id=uuid4(), organization_id=org_id, pay_period="2023-05", status="locked")
    june_draft = PayrollRun(id=uuid4(), organization_id=org_id, pay_period="2023-06", status="draft")
    previous_fy = PayrollRun(id=uuid4(), organization_id=org_id, pay_period="2023-03", status="locked")
    other_org = PayrollRun(
        id=uuid4(), organization_id=other_org_id, pay_period="2023-07", status="locked"
    )
    session.add_all([april, may, june_draft, previous_fy, other_org])
    await session.flush()

    session.add_all([
        _entry(april, asha, "60000", "55000", "3000", basic="24000", pf_employee=Decimal("1800")),
        _entry(may, asha, "62000", "56800", "3200", basic="24800", pf_employee=Decimal("1800")),
        _entry(april, vikram, "40000", "38000", None, lwp_days=2, paid_days=28),
        _entry(may, vikram, "41000", "38500", "500"),
        # Excluded: draft run and previous financial year
        _entry(june_draft, asha, "99999", "99999", "9999"),
        _entry(previous_fy, asha, "77777", "77777", "7777"),
    ])
    await session.commit()

    return SeededPayroll(
        organization_id=org_id,
        other_organization_id=other_org_id,
        asha_id=asha.id,
        vikram_id=vikram.id,
        april_run_id=april.id,
        may_run_id=may.id,
        draft_run_id=june_draft.id,
        previous_fy_run_id=previous_fy.id,
        empty_run_id=other_org.id,
    )


@pytest.fixture
def basic_pay_entry() -> PayrollEntrySnapshot:
    """Gross 50000 with a 20000 basic component and no precomputed PF."""
    return make_snapshot(
        gross="50000",
        breakdown=[("HRA", "15000"), ("Basic Pay", "20000"), ("Special Allowance", "15000")],
    )
