"""
Domain Models - Guardianship
Candidate/ward snapshots and eligibility outcome (S.70 - S.73)
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models.legal import (
    AppointmentSource,
    GuardianAppointmentType,
    KenyanLawSection,
)


def age_on(date_of_birth: date, as_of: date) -> int:
    """Completed years between birth and as_of"""
    years = as_of.year - date_of_birth.year
    if (as_of.month, as_of.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return years


@dataclass(frozen=True)
class GuardianCandidate:
    """Person proposed as guardian - Immutable snapshot"""
    person_id: str
    date_of_birth: Optional[date] = None
    is_deceased: bool = False
    is_minor: bool = False
    requires_supported_decision_making: bool = False
    is_bankrupt: bool = False
    has_disqualifying_conviction: bool = False

    def __post_init__(self):
        if not self.person_id:
            raise DomainValidationError("Candidate id cannot be empty", field="person_id")

    def age(self, as_of: date) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return age_on(self.date_of_birth, as_of)


@dataclass(frozen=True)
class Ward:
    """Person who may need a guardian - Immutable snapshot"""
    person_id: str
    date_of_birth: Optional[date] = None
    is_minor: bool = False
    has_disability: bool = False
    requires_supported_decision_making: bool = False

    def __post_init__(self):
        if not self.person_id:
            raise DomainValidationError("Ward id cannot be empty", field="person_id")

    def age(self, as_of: date) -> Optional[int]:
        if self.date_of_birth is None:
            return None
        return age_on(self.date_of_birth, as_of)


@dataclass(frozen=True)
class GuardianshipContext:
    """Circumstances of the proposed appointment"""
    appointment_source: Optional[AppointmentSource] = None
    has_surviving_natural_parent: bool = False
    as_of: Optional[date] = None


@dataclass(frozen=True)
class GuardianEligibilityResult:
    """Eligibility decision - Immutable"""
    is_eligible: bool
    appointment_type: Optional[GuardianAppointmentType] = None
    requires_bond: bool = False
    bond_reason: Optional[str] = None
    rejection_reason: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    legal_basis: Optional[KenyanLawSection] = None

    def __post_init__(self):
        if self.is_eligible and self.rejection_reason:
            raise ValueError("Eligible result cannot carry a rejection reason")
        if not self.is_eligible and not self.rejection_reason:
            raise ValueError("Rejected result must state a rejection reason")
        if self.requires_bond and not self.bond_reason:
            raise ValueError("Bond requirement must state a reason")

    @classmethod
    def rejected(cls, reason: str) -> "GuardianEligibilityResult":
        return cls(is_eligible=False, rejection_reason=reason)
