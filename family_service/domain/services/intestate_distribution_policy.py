"""
INTESTATE DISTRIBUTION POLICY
Net residue → beneficiary shares for a single (monogamous) house

RESPONSIBILITIES:
- Select the applicable section (S.35 / S.36 / S.38 / S.39)
- Compute share percentages and floor-rounded values
- Report rounding remainders and unresolved heirs as warnings

RULES:
❌ No debt or personal-effects deduction (caller supplies net residue)
❌ No walking the kinship graph beyond parents
✅ Values never rounded up: Σ share_value ≤ net residue
✅ Remainders reported, never reassigned
✅ Deterministic output
"""

import logging
from decimal import Decimal
from typing import AbstractSet, List, Optional, Sequence, Tuple

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models import (
    DEFAULT_RULES,
    BeneficiaryShare,
    IntestateDistributionResult,
    InterestType,
    KenyanLawSection,
    LegalRules,
    PersonalEffectsAllocation,
    SuccessionStructure,
)
from family_service.utils.money import (
    HUNDRED,
    ZERO,
    floor_money,
    format_kes,
    quantize_percentage,
    to_decimal,
)

logger = logging.getLogger(__name__)

PER_STIRPES_CONDITION = "Per Stirpes (S.41)"


class IntestateDistributionPolicy:
    """
    Intestate Distribution Policy
    Applies Part V of the Law of Succession Act to one house
    """

    def __init__(self, rules: LegalRules = DEFAULT_RULES):
        self.rules = rules

    def calculate_distribution(
        self,
        net_residue_value,
        structure: SuccessionStructure,
        minors: Optional[AbstractSet[str]] = None,
    ) -> IntestateDistributionResult:
        """
        Distribute the net residue.

        Args:
            net_residue_value: Residue after debts and personal effects
            structure: Family composition snapshot
            minors: Beneficiary ids whose absolute shares must be held on trust

        Returns:
            IntestateDistributionResult (warnings returned alongside shares)
        """
        net = to_decimal(net_residue_value)
        if net < ZERO:
            raise DomainValidationError(
                f"Net residue value cannot be negative, got {net}", field="net_residue_value"
            )

        section = self._select_section(structure)
        logger.info(
            "Intestate distribution for %s: %s applies (spouses=%d, units=%d, parents=%d)",
            structure.deceased_id or "unknown deceased",
            section.value,
            len(structure.surviving_spouses),
            structure.descendant_units,
            len(structure.living_parents),
        )

        if section == KenyanLawSection.S35_SPOUSE_AND_CHILDREN:
            result = self._spouse_and_children(net, structure)
        elif section == KenyanLawSection.S36_SPOUSE_ONLY:
            result = self._spouse_only(net, structure)
        elif section == KenyanLawSection.S38_CHILDREN_ONLY:
            result = self._children_only(net, structure, minors or frozenset())
        else:
            result = self._relatives(net, structure, minors or frozenset())

        for warning in result.warnings:
            logger.warning("%s: %s", result.section_applied, warning)
        return result

    @staticmethod
    def _select_section(structure: SuccessionStructure) -> KenyanLawSection:
        if structure.has_spouse and structure.has_issue:
            return KenyanLawSection.S35_SPOUSE_AND_CHILDREN
        if structure.has_spouse:
            return KenyanLawSection.S36_SPOUSE_ONLY
        if structure.descendant_units > 0:
            return KenyanLawSection.S38_CHILDREN_ONLY
        assert not structure.has_spouse and not structure.has_issue, "Unreachable intestacy branch"
        return KenyanLawSection.S39_NO_SPOUSE_OR_CHILDREN

    # ------------------------------------------------------------------
    # S.35 / S.36 - life interest
    # ------------------------------------------------------------------

    def _spouse_and_children(self, net: Decimal, structure: SuccessionStructure) -> IntestateDistributionResult:
        remaindermen = structure.living_children + tuple(
            gc for gcs in structure.deceased_children_with_issue.values() for gc in gcs
        )
        shares, warnings = self._life_interest_shares(
            net,
            structure.surviving_spouses,
            is_trust=True,
            description="Life interest in the whole residue (S.35(1)(b))",
            conditions=(
                "Terminates on remarriage; capital held for remaindermen: "
                + ", ".join(remaindermen)
            ),
        )
        warnings = [
            "Life interest cannot be alienated without the consent of the court (S.37)",
            "Life interest terminates on remarriage of the surviving spouse",
        ] + warnings

        return IntestateDistributionResult(
            section_applied=KenyanLawSection.S35_SPOUSE_AND_CHILDREN.value,
            description=(
                "Surviving spouse and issue: spouse takes personal and household effects "
                "absolutely and a life interest in the residue; children take as remaindermen"
            ),
            net_residue_value=net,
            residue_distribution=shares,
            personal_effects=self._spouse_effects(structure),
            warnings=tuple(warnings),
        )

    def _spouse_only(self, net: Decimal, structure: SuccessionStructure) -> IntestateDistributionResult:
        shares, warnings = self._life_interest_shares(
            net,
            structure.surviving_spouses,
            is_trust=False,
            description="Life interest in the whole residue (S.36(1)(b))",
            conditions="Terminates on remarriage",
        )
        warnings = [
            "Life interest cannot be alienated without the consent of the court (S.37)",
            "Life interest terminates on remarriage of the surviving spouse",
            "On termination of the life interest the residue devolves to S.39 relatives",
        ] + warnings

        return IntestateDistributionResult(
            section_applied=KenyanLawSection.S36_SPOUSE_ONLY.value,
            description=(
                "Surviving spouse without issue: spouse takes personal and household "
                "effects absolutely and a life interest in the residue"
            ),
            net_residue_value=net,
            residue_distribution=shares,
            personal_effects=self._spouse_effects(structure),
            warnings=tuple(warnings),
        )

    def _life_interest_shares(
        self,
        net: Decimal,
        spouses: Sequence[str],
        is_trust: bool,
        description: str,
        conditions: str,
    ) -> Tuple[Tuple[BeneficiaryShare, ...], List[str]]:
        """One share per spouse; several spouses in one house hold the interest jointly"""
        count = len(spouses)
        warnings = []
        if count > 1:
            warnings.append(
                f"Life interest held jointly by {count} surviving spouses in equal shares"
            )
            description = f"Joint {description[0].lower()}{description[1:]}"

        shares = tuple(
            BeneficiaryShare(
                beneficiary_id=spouse_id,
                share_percentage=self._percentage(Decimal(1), Decimal(count)),
                share_value=self._value(net, Decimal(1), Decimal(count)),
                interest_type=InterestType.LIFE_INTEREST,
                description=description,
                is_trust=is_trust,
                conditions=conditions,
            )
            for spouse_id in spouses
        )
        warnings.extend(self._remainder_warnings(net, shares))
        return shares, warnings

    @staticmethod
    def _spouse_effects(structure: SuccessionStructure) -> PersonalEffectsAllocation:
        return PersonalEffectsAllocation(
            beneficiary_ids=structure.surviving_spouses,
            note="Personal and household effects pass to the surviving spouse absolutely",
        )

    # ------------------------------------------------------------------
    # S.38 / S.41 - children and per stirpes substitution
    # ------------------------------------------------------------------

    def _children_only(
        self,
        net: Decimal,
        structure: SuccessionStructure,
        minors: AbstractSet[str],
    ) -> IntestateDistributionResult:
        units = Decimal(structure.descendant_units)
        shares = []

        for child_id in structure.living_children:
            shares.append(self._absolute_share(
                child_id,
                self._percentage(Decimal(1), units),
                self._value(net, Decimal(1), units),
                description="Equal share of the residue (S.38)",
                minors=minors,
            ))

        for deceased_child_id, grandchildren in structure.deceased_children_with_issue.items():
            line = units * Decimal(len(grandchildren))
            for grandchild_id in grandchildren:
                shares.append(self._absolute_share(
                    grandchild_id,
                    self._percentage(Decimal(1), line),
                    self._value(net, Decimal(1), line),
                    description=f"Share of deceased child {deceased_child_id}'s unit",
                    minors=minors,
                    conditions=PER_STIRPES_CONDITION,
                ))

        shares = tuple(shares)
        warnings = self._remainder_warnings(net, shares)
        description = f"No surviving spouse: residue divided equally among {int(units)} child unit(s)"
        if structure.deceased_children_with_issue:
            description += "; issue of deceased children take their parent's unit per stirpes (S.41)"

        return IntestateDistributionResult(
            section_applied=KenyanLawSection.S38_CHILDREN_ONLY.value,
            description=description,
            net_residue_value=net,
            residue_distribution=shares,
            warnings=tuple(warnings),
        )

    # ------------------------------------------------------------------
    # S.39 - no spouse, no issue
    # ------------------------------------------------------------------

    def _relatives(
        self,
        net: Decimal,
        structure: SuccessionStructure,
        minors: AbstractSet[str],
    ) -> IntestateDistributionResult:
        parents = structure.living_parents
        if not parents:
            return IntestateDistributionResult(
                section_applied=KenyanLawSection.S39_NO_SPOUSE_OR_CHILDREN.value,
                description="No surviving spouse, issue or parents",
                net_residue_value=net,
                residue_distribution=(),
                warnings=(
                    "No heirs resolved: escalate to brothers and sisters, half-blood relatives "
                    "and relatives to the sixth degree (S.39(1)(c)-(e))",
                    "If no relative survives the estate vests in the State (S.46)",
                ),
            )

        count = Decimal(len(parents))
        shares = tuple(
            self._absolute_share(
                parent_id,
                self._percentage(Decimal(1), count),
                self._value(net, Decimal(1), count),
                description="Equal share of the residue as surviving parent (S.39(1)(a))",
                minors=minors,
            )
            for parent_id in parents
        )
        return IntestateDistributionResult(
            section_applied=KenyanLawSection.S39_NO_SPOUSE_OR_CHILDREN.value,
            description="No surviving spouse or issue: residue passes to the surviving parent(s)",
            net_residue_value=net,
            residue_distribution=shares,
            warnings=tuple(self._remainder_warnings(net, shares)),
        )

    # ------------------------------------------------------------------
    # Arithmetic helpers
    # ------------------------------------------------------------------

    def _percentage(self, numerator: Decimal, denominator: Decimal) -> Decimal:
        return quantize_percentage(HUNDRED * numerator / denominator, self.rules.percentage_places)

    def _value(self, net: Decimal, numerator: Decimal, denominator: Decimal) -> Decimal:
        """Computed from the exact fraction, not the rounded percentage"""
        return floor_money(net * numerator / denominator, self.rules.money_quantum)

    @staticmethod
    def _absolute_share(
        beneficiary_id: str,
        percentage: Decimal,
        value: Decimal,
        description: str,
        minors: AbstractSet[str],
        conditions: Optional[str] = None,
    ) -> BeneficiaryShare:
        if beneficiary_id in minors:
            minor_condition = "Held on trust until the beneficiary attains majority"
            return BeneficiaryShare(
                beneficiary_id=beneficiary_id,
                share_percentage=percentage,
                share_value=value,
                interest_type=InterestType.TRUST_FOR_MINOR,
                description=description,
                is_trust=True,
                conditions=f"{conditions}; {minor_condition}" if conditions else minor_condition,
            )
        return BeneficiaryShare(
            beneficiary_id=beneficiary_id,
            share_percentage=percentage,
            share_value=value,
            interest_type=InterestType.ABSOLUTE,
            description=description,
            conditions=conditions,
        )

    def _remainder_warnings(self, net: Decimal, shares: Sequence[BeneficiaryShare]) -> List[str]:
        warnings = []
        allocated = sum((s.share_value for s in shares), ZERO)
        assert allocated <= net, "Floor rounding over-allocated the residue"

        remainder = net - allocated
        if remainder > ZERO:
            warnings.append(
                f"Rounding remainder of {format_kes(remainder)} left unallocated"
            )

        total_pct = sum((s.share_percentage for s in shares), ZERO)
        if shares and abs(total_pct - HUNDRED) > self.rules.rounding_tolerance:
            warnings.append(f"Share percentages total {total_pct}%, not 100%")
        return warnings
