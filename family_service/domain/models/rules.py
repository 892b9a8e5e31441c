"""
Domain Models - Legal Rules
Statutory thresholds and rounding conventions used by the policies
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LegalRules:
    """Rule constants - Immutable. Defaults are the statutory values."""

    # Rounding
    money_quantum: Decimal = Decimal('0.01')
    percentage_places: int = 4
    rounding_tolerance: Decimal = Decimal('0.01')

    # S.29 qualification
    s29_min_support_months: int = 6
    s29_min_coverage_pct: Decimal = Decimal('30')
    enhanced_min_coverage_pct: Decimal = Decimal('90')
    enhanced_min_support_months: int = 24
    support_income_ceiling_ratio: Decimal = Decimal('1.5')

    # Dependency level bands (percentage -> level)
    full_dependency_pct: Decimal = Decimal('75')
    partial_dependency_pct: Decimal = Decimal('25')
    non_priority_min_pct: Decimal = Decimal('25')

    # Advisory provision
    provision_needs_factor: Decimal = Decimal('0.6')
    lump_sum_months: int = 24

    # Guardianship
    majority_age: int = 18
    guardian_max_age: int = 70
    guardian_min_age_gap: int = 18

    def __post_init__(self):
        if self.money_quantum <= Decimal('0'):
            raise ValueError("Money quantum must be positive")
        if self.percentage_places < 0:
            raise ValueError("Percentage places cannot be negative")
        if self.rounding_tolerance < Decimal('0'):
            raise ValueError("Rounding tolerance cannot be negative")
        for name in (
            's29_min_coverage_pct',
            'enhanced_min_coverage_pct',
            'full_dependency_pct',
            'partial_dependency_pct',
            'non_priority_min_pct',
        ):
            value = getattr(self, name)
            if not Decimal('0') <= value <= Decimal('100'):
                raise ValueError(f"{name} must be between 0 and 100, got {value}")
        if self.partial_dependency_pct > self.full_dependency_pct:
            raise ValueError("Partial dependency band cannot exceed full dependency band")
        if self.s29_min_support_months > self.enhanced_min_support_months:
            raise ValueError("Enhanced provision cannot require less support than S.29")
        if self.majority_age <= 0:
            raise ValueError("Majority age must be positive")


DEFAULT_RULES = LegalRules()
