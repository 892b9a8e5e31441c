"""
DEPENDENCY ASSESSMENT ENGINE
Financial evidence → S.29 qualification, advisory provision, estate provision

RESPONSIBILITIES:
- Build calculations under the configured rules
- Qualify a calculation under S.29 (and for enhanced provision)
- Suggest a dependency level/percentage from coverage
- Recommend (advisory) monthly and lump-sum provision
- Apply assessments to LegalDependant records
- Order and cap dependant entitlements against available assets

RULES:
❌ Recommendations never written into court-order fields
✅ Court orders are authoritative and paid first
✅ Deterministic output
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models import (
    DEFAULT_RULES,
    DependencyCalculation,
    DependencyLevel,
    LegalDependant,
    LegalRules,
)
from family_service.domain.models.dependency import level_for_percentage
from family_service.domain.models.events import DependencyAssessed
from family_service.utils.money import (
    HUNDRED,
    ZERO,
    floor_money,
    format_kes,
    percentage_of,
    quantize_percentage,
    to_decimal,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionRecommendation:
    """Advisory provision for one dependant - Immutable"""
    qualifies_for_s29: bool
    qualifies_for_enhanced_provision: bool
    recommended_monthly_provision: Decimal
    recommended_lump_sum: Decimal
    rationale: str


@dataclass(frozen=True)
class DependencySuggestion:
    """Suggested classification derived from support coverage"""
    dependency_percentage: Decimal
    dependency_level: DependencyLevel
    explanation: str


@dataclass(frozen=True)
class ProvisionEntitlement:
    """One dependant's slice of the estate provision"""
    dependant_id: str
    entitlement_amount: Decimal
    percentage_of_estate: Decimal
    priority: int  # 1 = court order, 2 = priority dependant, 3 = other
    is_guaranteed: bool


@dataclass(frozen=True)
class EstateProvisionPlan:
    """Ordered entitlements against available assets - Immutable"""
    estate_value: Decimal
    available_assets: Decimal
    entitlements: Tuple[ProvisionEntitlement, ...]
    total_entitlements: Decimal
    estate_coverage: Decimal
    shortfall: Decimal
    unallocated_assets: Decimal
    recommendations: Tuple[str, ...] = ()


class DependencyAssessmentEngine:
    """
    Dependency Assessment Engine
    Pure functions over DependencyCalculation plus entity orchestration
    """

    def __init__(self, rules: LegalRules = DEFAULT_RULES):
        self.rules = rules

    def calculate(
        self,
        deceased_monthly_income,
        dependant_monthly_needs,
        support_provided,
        dependency_basis,
        **kwargs,
    ) -> DependencyCalculation:
        """DependencyCalculation.create under the configured rules"""
        return DependencyCalculation.create(
            deceased_monthly_income,
            dependant_monthly_needs,
            support_provided,
            dependency_basis,
            rules=self.rules,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Qualification
    # ------------------------------------------------------------------

    def qualifies_for_s29(self, calculation: DependencyCalculation, as_of: Optional[date] = None) -> bool:
        return calculation.qualifies_for_s29(self.rules, as_of)

    def qualifies_for_enhanced_provision(
        self,
        calculation: DependencyCalculation,
        as_of: Optional[date] = None,
    ) -> bool:
        return calculation.qualifies_for_enhanced_provision(self.rules, as_of)

    def suggest_dependency(
        self,
        calculation: DependencyCalculation,
        as_of: Optional[date] = None,
    ) -> DependencySuggestion:
        """Coverage capped at 100 → level band, with a human explanation"""
        coverage = calculation.support_coverage
        percentage = min(quantize_percentage(coverage, 2), HUNDRED)
        level = level_for_percentage(percentage, self.rules)
        months = calculation.support_duration_months(as_of)

        explanation = (
            f"Deceased covered {percentage}% of monthly needs "
            f"({format_kes(calculation.monthly_support_amount)} of "
            f"{format_kes(calculation.dependant_monthly_needs)}) for {months} month(s)"
        )
        if not calculation.qualifies_for_s29(self.rules, as_of):
            explanation += "; does not meet S.29 substantial dependency thresholds"

        return DependencySuggestion(
            dependency_percentage=percentage,
            dependency_level=level,
            explanation=explanation,
        )

    def recommend_provision(
        self,
        calculation: DependencyCalculation,
        as_of: Optional[date] = None,
    ) -> ProvisionRecommendation:
        """Advisory only: min(previous support, needs factor × needs), lump sum over N months"""
        qualifies = calculation.qualifies_for_s29(self.rules, as_of)
        enhanced = calculation.qualifies_for_enhanced_provision(self.rules, as_of)
        monthly = calculation.recommended_monthly_provision(self.rules, as_of)
        lump_sum = calculation.recommended_lump_sum_provision(self.rules, as_of)

        if not qualifies:
            rationale = "Not a S.29 dependant on the evidence supplied; no provision recommended"
        elif enhanced:
            rationale = "Total long-term dependency: strong case for reasonable provision (S.26)"
        else:
            rationale = "Substantial dependency: provision capped at previous support"

        return ProvisionRecommendation(
            qualifies_for_s29=qualifies,
            qualifies_for_enhanced_provision=enhanced,
            recommended_monthly_provision=monthly,
            recommended_lump_sum=lump_sum,
            rationale=rationale,
        )

    # ------------------------------------------------------------------
    # Entity orchestration
    # ------------------------------------------------------------------

    def assess(
        self,
        dependant: LegalDependant,
        calculation: DependencyCalculation,
        level: Optional[DependencyLevel] = None,
        now: Optional[datetime] = None,
    ) -> DependencyAssessed:
        """Apply a calculation to a dependant record using the configured bands"""
        event = dependant.assess_financial_dependency(calculation, level=level, rules=self.rules, now=now)
        logger.info(
            "Assessed dependant %s of %s: %s at %s%% (v%d)",
            dependant.dependant_id,
            dependant.deceased_id,
            event.dependency_level.value,
            event.dependency_percentage,
            event.version,
        )
        return event

    # ------------------------------------------------------------------
    # Estate provision
    # ------------------------------------------------------------------

    @staticmethod
    def _priority(dependant: LegalDependant) -> int:
        if dependant.provision_order_issued:
            return 1
        if dependant.is_priority_dependant:
            return 2
        return 3

    def distribute_estate_provision(
        self,
        estate_value,
        dependants: Sequence[LegalDependant],
        available_assets=None,
    ) -> EstateProvisionPlan:
        """
        Allocate provision in order: court orders, priority dependants, then
        descending dependency percentage. Amounts are capped at what is left.
        """
        estate_value = to_decimal(estate_value)
        available = to_decimal(available_assets) if available_assets is not None else estate_value
        if estate_value < ZERO or available < ZERO:
            raise DomainValidationError("Estate value and available assets cannot be negative")

        ordered = sorted(
            dependants,
            key=lambda d: (self._priority(d), -d.dependency_percentage),
        )

        entitlements: List[ProvisionEntitlement] = []
        recommendations: List[str] = []
        total = ZERO

        for dependant in ordered:
            if total >= available:
                recommendations.append("Estate assets fully allocated")
                break

            remaining = available - total
            if dependant.provision_order_issued and dependant.court_approved_amount:
                amount = dependant.court_approved_amount
            else:
                amount = floor_money(
                    estate_value * dependant.dependency_percentage / HUNDRED,
                    self.rules.money_quantum,
                )

            if amount > remaining:
                amount = remaining
                recommendations.append(
                    f"Insufficient assets for full entitlement of dependant {dependant.dependant_id}"
                )

            if amount > ZERO:
                entitlements.append(ProvisionEntitlement(
                    dependant_id=dependant.dependant_id,
                    entitlement_amount=amount,
                    percentage_of_estate=quantize_percentage(
                        percentage_of(amount, estate_value), self.rules.percentage_places
                    ),
                    priority=self._priority(dependant),
                    is_guaranteed=dependant.provision_order_issued,
                ))
                total += amount

        shortfall = max(ZERO, estate_value - total)
        unallocated = max(ZERO, available - total)
        if shortfall > ZERO:
            recommendations.append(f"Estate shortfall of {format_kes(shortfall)}")
        if unallocated > ZERO:
            recommendations.append(f"Unallocated assets: {format_kes(unallocated)}")

        logger.info(
            "Estate provision: %d entitlement(s) totalling %s of %s available",
            len(entitlements),
            format_kes(total),
            format_kes(available),
        )

        return EstateProvisionPlan(
            estate_value=estate_value,
            available_assets=available,
            entitlements=tuple(entitlements),
            total_entitlements=total,
            estate_coverage=quantize_percentage(
                percentage_of(total, estate_value), self.rules.percentage_places
            ),
            shortfall=shortfall,
            unallocated_assets=unallocated,
            recommendations=tuple(recommendations),
        )
