"""
POLYGAMOUS DISTRIBUTION POLICY (S.40)
Total estate → house allocations → per-house intestate distribution

RESPONSIBILITIES:
- Partition the estate between houses per the allocation rule
- Run the intestate policy once per house on a house-scoped structure
- Report rounding remainders

RULES:
✅ Default rule: proportional to house size (wife + children units)
✅ S.40(1) equal division and explicit percentages supported
✅ Σ house allocations ≤ total estate (floor rounding)
✅ Deterministic output
"""

import logging
from decimal import Decimal
from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models import (
    DEFAULT_RULES,
    HouseAllocation,
    HouseAllocationRule,
    HouseStructure,
    KenyanLawSection,
    LegalRules,
    PolygamousDistributionPlan,
)
from family_service.domain.services.intestate_distribution_policy import IntestateDistributionPolicy
from family_service.utils.money import (
    HUNDRED,
    ZERO,
    floor_money,
    format_kes,
    quantize_percentage,
    to_decimal,
)

logger = logging.getLogger(__name__)


class PolygamousDistributionPolicy:
    """
    Polygamous Distribution Policy
    Divides a polygamous estate between houses before per-house intestacy
    """

    def __init__(
        self,
        rules: LegalRules = DEFAULT_RULES,
        default_rule: HouseAllocationRule = HouseAllocationRule.PROPORTIONAL_TO_HOUSE_SIZE,
        intestate_policy: Optional[IntestateDistributionPolicy] = None,
    ):
        self.rules = rules
        self.default_rule = HouseAllocationRule(default_rule)
        self.intestate_policy = intestate_policy or IntestateDistributionPolicy(rules)

    def calculate_distribution(
        self,
        total_estate_value,
        houses: Sequence[HouseStructure],
        rule: Optional[HouseAllocationRule] = None,
        house_share_percentages: Optional[Mapping[str, Decimal]] = None,
        minors: Optional[AbstractSet[str]] = None,
        deceased_id: Optional[str] = None,
    ) -> PolygamousDistributionPlan:
        """
        Distribute a polygamous estate.

        Args:
            total_estate_value: Net residue of the whole estate
            houses: One HouseStructure per house
            rule: Allocation rule (defaults to the configured rule)
            house_share_percentages: Explicit S.40(2) percentages per house id
            minors: Beneficiary ids whose absolute shares are held on trust
            deceased_id: Passed through to each house-scoped structure

        Returns:
            PolygamousDistributionPlan keyed by house id
        """
        total = to_decimal(total_estate_value)
        if total < ZERO:
            raise DomainValidationError(
                f"Total estate value cannot be negative, got {total}", field="total_estate_value"
            )
        self._validate_houses(houses)

        if house_share_percentages is not None:
            rule = HouseAllocationRule.FIXED_PERCENTAGES
        rule = HouseAllocationRule(rule or self.default_rule)

        fractions, warnings = self._house_fractions(houses, rule, house_share_percentages)
        logger.info(
            "S.40 distribution across %d houses using %s", len(houses), rule.value
        )

        allocations: Dict[str, HouseAllocation] = {}
        for house in houses:
            fraction = fractions[house.house_id]
            allocated_value = floor_money(total * fraction, self.rules.money_quantum)
            distribution = self.intestate_policy.calculate_distribution(
                allocated_value,
                house.to_succession_structure(deceased_id),
                minors=minors,
            )
            if not distribution.residue_distribution:
                warnings.append(
                    f"House {house.house_id} has no surviving heirs; its allocation is unresolved"
                )
            allocations[house.house_id] = HouseAllocation(
                house_id=house.house_id,
                spouse_id=house.spouse_id,
                unit_count=house.unit_count,
                allocation_percentage=quantize_percentage(
                    fraction * HUNDRED, self.rules.percentage_places
                ),
                allocated_value=allocated_value,
                distribution=distribution,
                house_name=house.house_name,
            )

        allocated = sum((a.allocated_value for a in allocations.values()), ZERO)
        assert allocated <= total, "House allocations exceed the estate"
        remainder = total - allocated
        if remainder > ZERO:
            warnings.append(
                f"Rounding remainder of {format_kes(remainder)} left unallocated between houses"
            )

        for warning in warnings:
            logger.warning("S.40: %s", warning)

        return PolygamousDistributionPlan(
            section_applied=KenyanLawSection.S40_POLYGAMY.value,
            allocation_rule=rule,
            total_estate_value=total,
            houses=allocations,
            warnings=tuple(warnings),
        )

    @staticmethod
    def _validate_houses(houses: Sequence[HouseStructure]) -> None:
        if not houses:
            raise DomainValidationError("At least one house is required", field="houses")
        house_ids = [h.house_id for h in houses]
        if len(house_ids) != len(set(house_ids)):
            raise DomainValidationError("Duplicate house ids", field="houses")

        seen = set()
        for house in houses:
            members = set(house.children_ids) | set(house.deceased_children_with_issue)
            if house.spouse_id:
                members.add(house.spouse_id)
            clash = seen & members
            if clash:
                raise DomainValidationError(
                    f"Beneficiaries listed in more than one house: {sorted(clash)}",
                    field="houses",
                )
            seen |= members

    def _house_fractions(
        self,
        houses: Sequence[HouseStructure],
        rule: HouseAllocationRule,
        house_share_percentages: Optional[Mapping[str, Decimal]],
    ):
        """Exact fraction of the estate per house, plus warnings"""
        warnings: List[str] = []
        if len(houses) == 1:
            warnings.append("Only one house supplied; S.40 division is trivial")

        if rule == HouseAllocationRule.FIXED_PERCENTAGES:
            if house_share_percentages is None:
                raise DomainValidationError(
                    "Fixed percentage allocation requires house share percentages",
                    field="house_share_percentages",
                )
            percentages = {k: to_decimal(v) for k, v in house_share_percentages.items()}
            house_ids = {h.house_id for h in houses}
            if set(percentages) != house_ids:
                raise DomainValidationError(
                    "House share percentages must name every house exactly once",
                    field="house_share_percentages",
                )
            if any(p < ZERO for p in percentages.values()):
                raise DomainValidationError(
                    "House share percentages cannot be negative", field="house_share_percentages"
                )
            total_pct = sum(percentages.values(), ZERO)
            if abs(total_pct - HUNDRED) > self.rules.rounding_tolerance:
                raise DomainValidationError(
                    f"House share percentages must total 100, got {total_pct}",
                    field="house_share_percentages",
                )
            # normalise against the actual total so the sum never exceeds the estate
            return {h.house_id: percentages[h.house_id] / total_pct for h in houses}, warnings

        if rule == HouseAllocationRule.EQUAL_HOUSES:
            count = Decimal(len(houses))
            for house in houses:
                if house.unit_count == 0:
                    warnings.append(f"House {house.house_id} has no surviving members")
            return {h.house_id: Decimal(1) / count for h in houses}, warnings

        empty = [h.house_id for h in houses if h.unit_count == 0]
        if empty:
            raise DomainValidationError(
                f"Houses without surviving members cannot share proportionally: {empty}",
                field="houses",
            )
        total_units = Decimal(sum(h.unit_count for h in houses))
        return {h.house_id: Decimal(h.unit_count) / total_units for h in houses}, warnings
