"""
Domain Models - Dependency Calculation
Financial evidence that a person was maintained by the deceased (S.29)

The value object is immutable: every "update" returns a new instance and
re-runs validation.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models.legal import (
    AssessmentMethod,
    DependencyBasis,
    DependencyLevel,
    SupportFrequency,
)
from family_service.domain.models.rules import DEFAULT_RULES, LegalRules
from family_service.utils.money import (
    HUNDRED,
    ZERO,
    floor_money,
    percentage_of,
    quantize_percentage,
    to_decimal,
)
from family_service.utils.time import today_eat


# Multipliers that convert a support payment to its monthly equivalent
MONTHLY_FACTORS = {
    SupportFrequency.WEEKLY: Decimal('4.33'),
    SupportFrequency.BIWEEKLY: Decimal('2.165'),
    SupportFrequency.MONTHLY: Decimal('1'),
    SupportFrequency.QUARTERLY: Decimal('1') / Decimal('3'),
    SupportFrequency.YEARLY: Decimal('1') / Decimal('12'),
}


def level_for_percentage(percentage: Decimal, rules: LegalRules = DEFAULT_RULES) -> DependencyLevel:
    """Map a dependency percentage onto NONE / PARTIAL / FULL"""
    if percentage >= rules.full_dependency_pct:
        return DependencyLevel.FULL
    if percentage >= rules.partial_dependency_pct:
        return DependencyLevel.PARTIAL
    return DependencyLevel.NONE


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (day of month ignored)"""
    return (end.year - start.year) * 12 + (end.month - start.month)


@dataclass(frozen=True)
class DependencyCalculation:
    """Financial dependency assessment - Immutable"""
    deceased_monthly_income: Decimal
    dependant_monthly_needs: Decimal
    support_provided: Decimal
    dependency_basis: DependencyBasis
    support_start_date: date
    assessment_date: date
    assessment_method: AssessmentMethod = AssessmentMethod.INCOME_PERCENTAGE
    support_frequency: SupportFrequency = SupportFrequency.MONTHLY
    support_end_date: Optional[date] = None
    dependency_level: DependencyLevel = DependencyLevel.NONE
    dependency_percentage: Decimal = ZERO
    evidence_documents: Tuple[str, ...] = ()
    is_verified: bool = False
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None
    court_order_reference: Optional[str] = None
    court_order_date: Optional[date] = None
    special_circumstances: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'evidence_documents', tuple(self.evidence_documents))
        object.__setattr__(self, 'special_circumstances', tuple(self.special_circumstances))
        self._validate()

    def _validate(self) -> None:
        today = today_eat()

        if self.deceased_monthly_income < ZERO:
            raise DomainValidationError(
                "Deceased monthly income cannot be negative", field="deceased_monthly_income"
            )
        if self.dependant_monthly_needs < ZERO:
            raise DomainValidationError(
                "Dependant monthly needs cannot be negative", field="dependant_monthly_needs"
            )
        if self.support_provided < ZERO:
            raise DomainValidationError("Support provided cannot be negative", field="support_provided")

        if not ZERO <= self.dependency_percentage <= HUNDRED:
            raise DomainValidationError(
                "Dependency percentage must be between 0 and 100", field="dependency_percentage"
            )

        if self.support_start_date > today:
            raise DomainValidationError(
                "Support start date cannot be in the future", field="support_start_date"
            )
        if self.support_end_date is not None and self.support_end_date < self.support_start_date:
            raise DomainValidationError(
                "Support end date cannot be before start date", field="support_end_date"
            )
        if self.assessment_date > today:
            raise DomainValidationError(
                "Assessment date cannot be in the future", field="assessment_date"
            )

        if self.court_order_reference and self.court_order_date is None:
            raise DomainValidationError(
                "Court order date is required when court order reference is provided",
                field="court_order_date",
            )
        if self.court_order_date is not None and not self.court_order_reference:
            raise DomainValidationError(
                "Court order reference is required when court order date is provided",
                field="court_order_reference",
            )
        if self.court_order_date is not None and self.court_order_date > today:
            raise DomainValidationError(
                "Court order date cannot be in the future", field="court_order_date"
            )

        if self.is_verified and self.verified_at is None:
            raise DomainValidationError(
                "Verification date is required when dependency is verified", field="verified_at"
            )

    def _check_support_ceiling(self, rules: LegalRules) -> "DependencyCalculation":
        """Run by the factories; the ceiling comes from the configured rules"""
        ceiling = self.deceased_monthly_income * rules.support_income_ceiling_ratio
        if self.support_provided > ceiling:
            raise DomainValidationError(
                "Support provided exceeds reasonable proportion of deceased income",
                field="support_provided",
            )
        return self

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        deceased_monthly_income,
        dependant_monthly_needs,
        support_provided,
        dependency_basis: DependencyBasis,
        assessment_method: AssessmentMethod = AssessmentMethod.INCOME_PERCENTAGE,
        support_frequency: SupportFrequency = SupportFrequency.MONTHLY,
        support_start_date: Optional[date] = None,
        support_end_date: Optional[date] = None,
        assessment_date: Optional[date] = None,
        rules: LegalRules = DEFAULT_RULES,
    ) -> "DependencyCalculation":
        """
        Build an initial assessment from raw financial figures.

        The dependency percentage is the share of the dependant's needs the
        deceased covered, capped at 100. Support above the configured share
        of the deceased's income is rejected.
        """
        assessment_date = assessment_date or today_eat()
        income = to_decimal(deceased_monthly_income)
        needs = to_decimal(dependant_monthly_needs)
        support = to_decimal(support_provided)

        monthly = support * MONTHLY_FACTORS[SupportFrequency(support_frequency)]
        percentage = min(quantize_percentage(percentage_of(monthly, needs), 2), HUNDRED)
        if percentage < ZERO:
            percentage = ZERO

        return cls(
            deceased_monthly_income=income,
            dependant_monthly_needs=needs,
            support_provided=support,
            dependency_basis=DependencyBasis(dependency_basis),
            support_start_date=support_start_date or assessment_date,
            support_end_date=support_end_date,
            assessment_date=assessment_date,
            assessment_method=AssessmentMethod(assessment_method),
            support_frequency=SupportFrequency(support_frequency),
            dependency_level=level_for_percentage(percentage, rules),
            dependency_percentage=percentage,
        )._check_support_ceiling(rules)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DependencyCalculation":
        """Rebuild from the JSON projection produced by to_dict()"""
        from family_service.domain.schemas.dependency import DependencyCalculationSchema

        schema = DependencyCalculationSchema.model_validate(data)
        return cls(**schema.to_domain_kwargs())

    # ------------------------------------------------------------------
    # "Mutations" - each returns a new instance
    # ------------------------------------------------------------------

    def update_support_details(
        self,
        support_provided,
        frequency: SupportFrequency,
        start_date: date,
        end_date: Optional[date] = None,
        rules: LegalRules = DEFAULT_RULES,
    ) -> "DependencyCalculation":
        return replace(
            self,
            support_provided=to_decimal(support_provided),
            support_frequency=SupportFrequency(frequency),
            support_start_date=start_date,
            support_end_date=end_date,
        )._check_support_ceiling(rules)

    def update_assessment(
        self,
        dependency_level: DependencyLevel,
        dependency_percentage,
        assessment_method: AssessmentMethod,
        assessment_date: date,
    ) -> "DependencyCalculation":
        return replace(
            self,
            dependency_level=DependencyLevel(dependency_level),
            dependency_percentage=to_decimal(dependency_percentage),
            assessment_method=AssessmentMethod(assessment_method),
            assessment_date=assessment_date,
        )

    def add_evidence_document(self, document_id: str) -> "DependencyCalculation":
        if document_id in self.evidence_documents:
            return self
        return replace(self, evidence_documents=self.evidence_documents + (document_id,))

    def remove_evidence_document(self, document_id: str) -> "DependencyCalculation":
        remaining = tuple(d for d in self.evidence_documents if d != document_id)
        return replace(self, evidence_documents=remaining)

    def verify(
        self,
        verified_by: str,
        verified_at: datetime,
        court_order_reference: Optional[str] = None,
        court_order_date: Optional[date] = None,
    ) -> "DependencyCalculation":
        return replace(
            self,
            is_verified=True,
            verified_at=verified_at,
            verified_by=verified_by,
            court_order_reference=court_order_reference or self.court_order_reference,
            court_order_date=court_order_date or self.court_order_date,
        )

    def mark_as_unverified(self) -> "DependencyCalculation":
        return replace(self, is_verified=False, verified_at=None, verified_by=None)

    def add_special_circumstance(self, circumstance: str) -> "DependencyCalculation":
        return replace(self, special_circumstances=self.special_circumstances + (circumstance,))

    # ------------------------------------------------------------------
    # Derived figures
    # ------------------------------------------------------------------

    @property
    def monthly_support_amount(self) -> Decimal:
        return self.support_provided * MONTHLY_FACTORS[self.support_frequency]

    @property
    def dependency_ratio(self) -> Decimal:
        """Share of the deceased's income that went to this dependant"""
        if self.deceased_monthly_income == ZERO:
            return ZERO
        return self.monthly_support_amount / self.deceased_monthly_income

    @property
    def support_coverage(self) -> Decimal:
        """Percentage of the dependant's needs covered by the deceased"""
        return percentage_of(self.monthly_support_amount, self.dependant_monthly_needs)

    def is_total_dependency(self, rules: LegalRules = DEFAULT_RULES) -> bool:
        return self.support_coverage >= rules.enhanced_min_coverage_pct

    def is_partial_dependency(self, rules: LegalRules = DEFAULT_RULES) -> bool:
        return rules.s29_min_coverage_pct <= self.support_coverage < rules.enhanced_min_coverage_pct

    def is_minimal_dependency(self, rules: LegalRules = DEFAULT_RULES) -> bool:
        return ZERO < self.support_coverage < rules.s29_min_coverage_pct

    def support_duration_months(self, as_of: Optional[date] = None) -> int:
        """Months of support; open-ended support runs to as_of (default today)"""
        end = self.support_end_date or as_of or today_eat()
        return max(0, months_between(self.support_start_date, end))

    def qualifies_for_s29(self, rules: LegalRules = DEFAULT_RULES, as_of: Optional[date] = None) -> bool:
        """Substantial dependency: 6+ months, 30%+ of needs, recognised relationship"""
        return (
            self.support_duration_months(as_of) >= rules.s29_min_support_months
            and self.support_coverage >= rules.s29_min_coverage_pct
            and self.dependency_basis != DependencyBasis.OTHER
        )

    def qualifies_for_enhanced_provision(
        self,
        rules: LegalRules = DEFAULT_RULES,
        as_of: Optional[date] = None,
    ) -> bool:
        return (
            self.qualifies_for_s29(rules, as_of)
            and self.support_coverage >= rules.enhanced_min_coverage_pct
            and self.support_duration_months(as_of) >= rules.enhanced_min_support_months
        )

    def recommended_monthly_provision(
        self,
        rules: LegalRules = DEFAULT_RULES,
        as_of: Optional[date] = None,
    ) -> Decimal:
        """Advisory: previous support, capped at a share of needs. Zero if not S.29"""
        if not self.qualifies_for_s29(rules, as_of):
            return ZERO
        capped = min(self.monthly_support_amount, self.dependant_monthly_needs * rules.provision_needs_factor)
        return floor_money(capped, rules.money_quantum)

    def recommended_lump_sum_provision(
        self,
        rules: LegalRules = DEFAULT_RULES,
        as_of: Optional[date] = None,
    ) -> Decimal:
        return self.recommended_monthly_provision(rules, as_of) * rules.lump_sum_months

    def to_dict(
        self,
        as_of: Optional[date] = None,
        rules: LegalRules = DEFAULT_RULES,
    ) -> Dict[str, Any]:
        """JSON projection: stored fields plus derived classification"""
        from family_service.domain.schemas.dependency import DependencyCalculationSchema

        data = DependencyCalculationSchema.from_domain(self).model_dump(mode="json")
        data.update({
            'monthly_support_amount': str(self.monthly_support_amount),
            'dependency_ratio': str(self.dependency_ratio),
            'support_coverage': str(self.support_coverage),
            'is_total_dependency': self.is_total_dependency(rules),
            'is_partial_dependency': self.is_partial_dependency(rules),
            'is_minimal_dependency': self.is_minimal_dependency(rules),
            'support_duration_months': self.support_duration_months(as_of),
            'qualifies_for_s29': self.qualifies_for_s29(rules, as_of),
            'qualifies_for_enhanced_provision': self.qualifies_for_enhanced_provision(rules, as_of),
        })
        return data
