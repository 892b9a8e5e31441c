from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from family_service.domain.models import (
    DEFAULT_RULES,
    DependencyBasis,
    DependencyCalculation,
    LegalDependant,
    SupportFrequency,
)


@pytest.fixture
def as_of() -> date:
    """Fixed assessment date so durations are deterministic"""
    return date(2024, 1, 1)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 1, 15, 9, 30)


@pytest.fixture
def rules():
    return DEFAULT_RULES


@pytest.fixture
def config_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "config"


@pytest.fixture
def make_calculation(as_of):
    """Factory: monthly support over two years unless overridden"""
    def _make(
        income='100000',
        needs='40000',
        support='20000',
        basis=DependencyBasis.PARENT,
        frequency=SupportFrequency.MONTHLY,
        start=date(2022, 1, 1),
        end=None,
    ) -> DependencyCalculation:
        return DependencyCalculation.create(
            deceased_monthly_income=Decimal(income),
            dependant_monthly_needs=Decimal(needs),
            support_provided=Decimal(support),
            dependency_basis=basis,
            support_frequency=frequency,
            support_start_date=start,
            support_end_date=end,
            assessment_date=as_of,
        )
    return _make


@pytest.fixture
def declare(now):
    """Factory: declare a dependant of deceased D-001"""
    def _declare(dependant_id='P-001', basis=DependencyBasis.SPOUSE, **kwargs) -> LegalDependant:
        dependant, _ = LegalDependant.declare(
            deceased_id='D-001',
            dependant_id=dependant_id,
            dependency_basis=basis,
            now=now,
            **kwargs,
        )
        return dependant
    return _declare
