"""
SUCCESSION ENGINE (orchestrator)
Family structure + net residue → complete intestate computation

RESPONSIBILITIES:
- Choose the monogamous or polygamous (S.40) policy
- Hold minors' shares on trust and flag beneficiaries needing a guardian
- Attach a dependant compliance report when dependants are supplied

RULES:
❌ No I/O, no persistence
✅ Policies remain individually usable
✅ Deterministic output
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from family_service.domain.models import (
    DEFAULT_RULES,
    BeneficiaryShare,
    DependencyStatusReport,
    HouseAllocationRule,
    IntestateDistributionResult,
    LegalDependant,
    LegalRules,
    PolygamousDistributionPlan,
    SuccessionStructure,
    Ward,
)
from family_service.domain.services.dependency_status_policy import DependencyStatusPolicy
from family_service.domain.services.guardianship_eligibility_policy import GuardianshipEligibilityPolicy
from family_service.domain.services.intestate_distribution_policy import IntestateDistributionPolicy
from family_service.domain.services.polygamous_distribution_policy import PolygamousDistributionPolicy
from family_service.utils.money import to_decimal
from family_service.utils.time import today_eat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuccessionComputation:
    """Result of one engine run - Immutable"""
    section_applied: str
    net_residue_value: Decimal
    intestate_result: Optional[IntestateDistributionResult] = None
    polygamous_plan: Optional[PolygamousDistributionPlan] = None
    beneficiaries_needing_guardian: Tuple[str, ...] = ()
    dependency_report: Optional[DependencyStatusReport] = None
    warnings: Tuple[str, ...] = ()

    @property
    def is_polygamous(self) -> bool:
        return self.polygamous_plan is not None

    @property
    def shares(self) -> Tuple[BeneficiaryShare, ...]:
        """Every beneficiary share, across houses when polygamous"""
        if self.polygamous_plan is not None:
            return tuple(
                share
                for house in self.polygamous_plan.houses.values()
                for share in house.distribution.residue_distribution
            )
        return self.intestate_result.residue_distribution


class SuccessionEngine:
    """
    Succession Engine
    Runs the applicable distribution policy and enriches its output
    """

    def __init__(
        self,
        rules: LegalRules = DEFAULT_RULES,
        allocation_rule: HouseAllocationRule = HouseAllocationRule.PROPORTIONAL_TO_HOUSE_SIZE,
    ):
        self.rules = rules
        self.intestate_policy = IntestateDistributionPolicy(rules)
        self.polygamous_policy = PolygamousDistributionPolicy(
            rules, default_rule=allocation_rule, intestate_policy=self.intestate_policy
        )
        self.guardianship_policy = GuardianshipEligibilityPolicy(rules)
        self.status_policy = DependencyStatusPolicy(rules)

    @classmethod
    def from_config(cls, config_engine) -> "SuccessionEngine":
        """Build from a loaded ConfigEngine"""
        return cls(config_engine.legal_rules, config_engine.allocation_rule)

    def compute(
        self,
        structure: SuccessionStructure,
        net_residue_value,
        wards: Optional[Sequence[Ward]] = None,
        dependants: Optional[Sequence[LegalDependant]] = None,
        as_of: Optional[date] = None,
    ) -> SuccessionComputation:
        """
        Compute the distribution for one estate.

        Args:
            structure: Family composition (with houses when polygamous)
            net_residue_value: Residue after debts and personal effects
            wards: Person snapshots used to detect minors / persons under disability
            dependants: LegalDependant records of the deceased, if any
            as_of: Date for age calculations (default today, EAT)
        """
        as_of = as_of or today_eat()
        wards = list(wards or [])
        needing_guardian = {
            w.person_id for w in wards if self.guardianship_policy.needs_guardian(w, as_of)
        }
        minors = frozenset(
            w.person_id for w in wards
            if w.is_minor or (w.age(as_of) is not None and w.age(as_of) < self.rules.majority_age)
        )

        warnings = []
        intestate_result = None
        polygamous_plan = None

        if structure.is_polygamous:
            ignored = self._top_level_heirs(structure)
            if ignored:
                warnings.append(
                    "Top-level heirs ignored, polygamous estates are computed per house: "
                    + ", ".join(ignored)
                )
            polygamous_plan = self.polygamous_policy.calculate_distribution(
                net_residue_value,
                structure.polygamous_houses,
                minors=minors,
                deceased_id=structure.deceased_id,
            )
            section_applied = polygamous_plan.section_applied
            warnings.extend(polygamous_plan.warnings)
        else:
            if structure.polygamous_houses and (structure.has_spouse or structure.has_issue):
                warnings.append(
                    f"House {structure.polygamous_houses[0].house_id} ignored: "
                    "top-level spouses and issue supplied"
                )
            intestate_result = self.intestate_policy.calculate_distribution(
                net_residue_value,
                self._monogamous_structure(structure),
                minors=minors,
            )
            section_applied = intestate_result.section_applied
            warnings.extend(intestate_result.warnings)

        computation = SuccessionComputation(
            section_applied=section_applied,
            net_residue_value=to_decimal(net_residue_value),
            intestate_result=intestate_result,
            polygamous_plan=polygamous_plan,
            dependency_report=(
                self.status_policy.evaluate_status(dependants, structure.deceased_id)
                if dependants is not None else None
            ),
            warnings=tuple(warnings),
        )

        beneficiaries = [s.beneficiary_id for s in computation.shares]
        flagged = tuple(b for b in beneficiaries if b in needing_guardian)
        if flagged:
            computation = replace(
                computation,
                beneficiaries_needing_guardian=flagged,
                warnings=computation.warnings + (
                    f"{len(flagged)} beneficiary(ies) require a guardian to receive their share",
                ),
            )

        logger.info(
            "Succession computed for %s under %s: %d share(s), %d guardian need(s)",
            structure.deceased_id or "unknown deceased",
            section_applied,
            len(beneficiaries),
            len(flagged),
        )
        return computation

    @staticmethod
    def _top_level_heirs(structure: SuccessionStructure) -> Tuple[str, ...]:
        return (
            structure.surviving_spouses
            + structure.living_children
            + tuple(
                gc for gcs in structure.deceased_children_with_issue.values() for gc in gcs
            )
            + structure.living_parents
        )

    @staticmethod
    def _monogamous_structure(structure: SuccessionStructure) -> SuccessionStructure:
        """A single house supplied without top-level heirs stands in for them"""
        if len(structure.polygamous_houses) == 1 and not (structure.has_spouse or structure.has_issue):
            house = structure.polygamous_houses[0]
            return SuccessionStructure(
                deceased_id=structure.deceased_id,
                surviving_spouses=(house.spouse_id,) if house.spouse_id else (),
                living_children=house.children_ids,
                deceased_children_with_issue=house.deceased_children_with_issue,
                living_parents=structure.living_parents,
            )
        return structure
