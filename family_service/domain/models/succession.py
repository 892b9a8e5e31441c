"""
Domain Models - Succession
Family composition snapshots and distribution results
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence, Tuple

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models.legal import InterestType


def _normalise_issue(
    issue: Mapping[str, Sequence[str]],
    owner: str,
) -> Dict[str, Tuple[str, ...]]:
    normalised = {}
    for child_id, grandchildren in (issue or {}).items():
        grandchildren = tuple(grandchildren)
        if not grandchildren:
            raise DomainValidationError(
                f"{owner}: deceased child {child_id} listed without surviving issue",
                field="deceased_children_with_issue",
            )
        normalised[child_id] = grandchildren
    return normalised


@dataclass(frozen=True)
class HouseStructure:
    """One S.40 house - Immutable"""
    house_id: str
    spouse_id: Optional[str] = None
    children_ids: Tuple[str, ...] = ()
    deceased_children_with_issue: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    house_name: Optional[str] = None

    def __post_init__(self):
        if not self.house_id:
            raise DomainValidationError("House id cannot be empty", field="house_id")
        object.__setattr__(self, 'children_ids', tuple(self.children_ids))
        object.__setattr__(
            self,
            'deceased_children_with_issue',
            _normalise_issue(self.deceased_children_with_issue, f"House {self.house_id}"),
        )

    @property
    def unit_count(self) -> int:
        """Surviving wife + living children + deceased children with issue"""
        return (
            (1 if self.spouse_id else 0)
            + len(self.children_ids)
            + len(self.deceased_children_with_issue)
        )

    def to_succession_structure(self, deceased_id: Optional[str] = None) -> "SuccessionStructure":
        """House-scoped structure; parents never inherit inside a house"""
        return SuccessionStructure(
            deceased_id=deceased_id,
            surviving_spouses=(self.spouse_id,) if self.spouse_id else (),
            living_children=self.children_ids,
            deceased_children_with_issue=self.deceased_children_with_issue,
            living_parents=(),
        )


@dataclass(frozen=True)
class SuccessionStructure:
    """Family composition for one calculation run - Immutable snapshot"""
    surviving_spouses: Tuple[str, ...] = ()
    living_children: Tuple[str, ...] = ()
    deceased_children_with_issue: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    living_parents: Tuple[str, ...] = ()
    deceased_id: Optional[str] = None
    polygamous_houses: Tuple[HouseStructure, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'surviving_spouses', tuple(self.surviving_spouses))
        object.__setattr__(self, 'living_children', tuple(self.living_children))
        object.__setattr__(self, 'living_parents', tuple(self.living_parents))
        object.__setattr__(self, 'polygamous_houses', tuple(self.polygamous_houses))
        object.__setattr__(
            self,
            'deceased_children_with_issue',
            _normalise_issue(self.deceased_children_with_issue, "Succession structure"),
        )
        if self.deceased_id is not None:
            heirs = (
                self.surviving_spouses
                + self.living_children
                + self.living_parents
                + tuple(gc for gcs in self.deceased_children_with_issue.values() for gc in gcs)
            )
            if self.deceased_id in heirs:
                raise DomainValidationError(
                    "The deceased cannot inherit from their own estate",
                    field="deceased_id",
                )

    @property
    def has_spouse(self) -> bool:
        return len(self.surviving_spouses) > 0

    @property
    def has_issue(self) -> bool:
        """Living children or grandchildren through a deceased child"""
        return len(self.living_children) > 0 or len(self.deceased_children_with_issue) > 0

    @property
    def is_polygamous(self) -> bool:
        return len(self.polygamous_houses) > 1

    @property
    def descendant_units(self) -> int:
        """Number of equal S.38 units (per stirpes lines count once)"""
        return len(self.living_children) + len(self.deceased_children_with_issue)


@dataclass(frozen=True)
class BeneficiaryShare:
    """One beneficiary's slice of the residue - Immutable"""
    beneficiary_id: str
    share_percentage: Decimal
    share_value: Decimal
    interest_type: InterestType
    description: str
    is_trust: bool = False
    conditions: Optional[str] = None

    def __post_init__(self):
        if not self.beneficiary_id:
            raise DomainValidationError("Beneficiary id cannot be empty", field="beneficiary_id")
        if not Decimal('0') <= self.share_percentage <= Decimal('100'):
            raise DomainValidationError(
                f"Share percentage must be between 0 and 100, got {self.share_percentage}",
                field="share_percentage",
            )
        if self.share_value < Decimal('0'):
            raise DomainValidationError("Share value cannot be negative", field="share_value")


@dataclass(frozen=True)
class PersonalEffectsAllocation:
    """Who takes the personal and household effects (outside the residue)"""
    beneficiary_ids: Tuple[str, ...]
    note: str


@dataclass(frozen=True)
class IntestateDistributionResult:
    """Outcome of one intestate policy run - Immutable"""
    section_applied: str
    description: str
    net_residue_value: Decimal
    residue_distribution: Tuple[BeneficiaryShare, ...]
    personal_effects: Optional[PersonalEffectsAllocation] = None
    warnings: Tuple[str, ...] = ()

    @property
    def total_percentage(self) -> Decimal:
        return sum((s.share_percentage for s in self.residue_distribution), Decimal('0'))

    @property
    def total_allocated(self) -> Decimal:
        return sum((s.share_value for s in self.residue_distribution), Decimal('0'))

    @property
    def unallocated_remainder(self) -> Decimal:
        """Residue left unassigned by floor rounding or missing heirs"""
        return self.net_residue_value - self.total_allocated

    def share_for(self, beneficiary_id: str) -> Optional[BeneficiaryShare]:
        """Look up a beneficiary's share (None if absent)"""
        for share in self.residue_distribution:
            if share.beneficiary_id == beneficiary_id:
                return share
        return None

    @property
    def beneficiary_ids(self) -> Tuple[str, ...]:
        return tuple(s.beneficiary_id for s in self.residue_distribution)


class HouseAllocationRule(str, Enum):
    """How S.40 divides the estate between houses"""
    PROPORTIONAL_TO_HOUSE_SIZE = "PROPORTIONAL_TO_HOUSE_SIZE"
    EQUAL_HOUSES = "EQUAL_HOUSES"
    FIXED_PERCENTAGES = "FIXED_PERCENTAGES"


@dataclass(frozen=True)
class HouseAllocation:
    """A single house's portion of a polygamous estate - Immutable"""
    house_id: str
    spouse_id: Optional[str]
    unit_count: int
    allocation_percentage: Decimal
    allocated_value: Decimal
    distribution: IntestateDistributionResult
    house_name: Optional[str] = None


@dataclass(frozen=True)
class PolygamousDistributionPlan:
    """S.40 distribution keyed by house - Immutable"""
    section_applied: str
    allocation_rule: HouseAllocationRule
    total_estate_value: Decimal
    houses: Mapping[str, HouseAllocation]
    warnings: Tuple[str, ...] = ()

    @property
    def total_allocated_to_houses(self) -> Decimal:
        return sum((h.allocated_value for h in self.houses.values()), Decimal('0'))

    @property
    def total_distributed(self) -> Decimal:
        """Sum of every beneficiary share across all houses"""
        return sum(
            (h.distribution.total_allocated for h in self.houses.values()),
            Decimal('0'),
        )

    @property
    def unallocated_remainder(self) -> Decimal:
        return self.total_estate_value - self.total_distributed
