"""
GUARDIANSHIP ELIGIBILITY POLICY
Candidate + ward + context → eligibility, appointment type, bond

RESPONSIBILITIES:
- Reject candidates who cannot legally act as guardian
- Classify the appointment route
- Decide bond (security) requirements

RULES:
✅ Terminal rejections are checked before classification
✅ Joint guardianship with a surviving parent is a warning, not a rejection
✅ Age limits beyond majority are advisory
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from family_service.domain.models import (
    DEFAULT_RULES,
    AppointmentSource,
    GuardianAppointmentType,
    GuardianCandidate,
    GuardianEligibilityResult,
    GuardianshipContext,
    KenyanLawSection,
    LegalRules,
    Ward,
)
from family_service.utils.time import today_eat

logger = logging.getLogger(__name__)


APPOINTMENT_TYPES: Dict[AppointmentSource, GuardianAppointmentType] = {
    AppointmentSource.WILL: GuardianAppointmentType.TESTAMENTARY,
    AppointmentSource.COURT: GuardianAppointmentType.COURT_APPOINTED,
    AppointmentSource.NATURAL: GuardianAppointmentType.NATURAL_PARENT,
}

# appointment type -> (always requires bond, statutory basis)
BOND_RULES: Dict[GuardianAppointmentType, Tuple[bool, Optional[KenyanLawSection]]] = {
    GuardianAppointmentType.TESTAMENTARY: (False, KenyanLawSection.S70_TESTAMENTARY_GUARDIAN),
    GuardianAppointmentType.COURT_APPOINTED: (True, KenyanLawSection.S71_COURT_GUARDIAN),
    GuardianAppointmentType.NATURAL_PARENT: (False, None),
    GuardianAppointmentType.DE_FACTO: (True, KenyanLawSection.S71_COURT_GUARDIAN),
}


class GuardianshipEligibilityPolicy:
    """
    Guardianship Eligibility Policy
    Decides whether a candidate may act for a ward, and on what security
    """

    def __init__(self, rules: LegalRules = DEFAULT_RULES):
        self.rules = rules

    def check_eligibility(
        self,
        candidate: GuardianCandidate,
        ward: Ward,
        context: Optional[GuardianshipContext] = None,
    ) -> GuardianEligibilityResult:
        context = context or GuardianshipContext()
        as_of = context.as_of or today_eat()

        rejection = self._rejection_reason(candidate, ward, as_of)
        if rejection:
            logger.info(
                "Guardian candidate %s rejected for ward %s: %s",
                candidate.person_id,
                ward.person_id,
                rejection,
            )
            return GuardianEligibilityResult.rejected(rejection)

        appointment_type = APPOINTMENT_TYPES.get(
            context.appointment_source, GuardianAppointmentType.DE_FACTO
        )
        always_bond, legal_basis = BOND_RULES[appointment_type]

        bond_reason = None
        if always_bond:
            bond_reason = (
                f"{appointment_type.value.replace('_', ' ').title()} guardians must give "
                "security for the ward's estate (S.72)"
            )
        elif candidate.is_bankrupt:
            bond_reason = "Candidate is an undischarged bankrupt; security required (S.72)"

        warnings = self._warnings(candidate, ward, context, appointment_type, as_of)

        result = GuardianEligibilityResult(
            is_eligible=True,
            appointment_type=appointment_type,
            requires_bond=bond_reason is not None,
            bond_reason=bond_reason,
            warnings=tuple(warnings),
            legal_basis=legal_basis,
        )
        logger.info(
            "Guardian candidate %s eligible for ward %s as %s (bond=%s)",
            candidate.person_id,
            ward.person_id,
            appointment_type.value,
            result.requires_bond,
        )
        return result

    def _rejection_reason(self, candidate: GuardianCandidate, ward: Ward, as_of: date) -> Optional[str]:
        if candidate.is_deceased:
            return "Candidate is deceased"
        if self._is_minor(candidate.is_minor, candidate.age(as_of)):
            return f"Candidate is under {self.rules.majority_age} years of age"
        if candidate.requires_supported_decision_making:
            return "Candidate lacks legal capacity"
        if candidate.person_id == ward.person_id:
            return "Candidate cannot be their own guardian"
        if candidate.has_disqualifying_conviction:
            return "Candidate has a disqualifying criminal conviction"
        return None

    def _warnings(
        self,
        candidate: GuardianCandidate,
        ward: Ward,
        context: GuardianshipContext,
        appointment_type: GuardianAppointmentType,
        as_of: date,
    ) -> List[str]:
        warnings = []
        if (
            appointment_type == GuardianAppointmentType.TESTAMENTARY
            and context.has_surviving_natural_parent
        ):
            warnings.append(
                "Surviving parent: testamentary guardian acts jointly with the parent (S.70(2))"
            )
        if appointment_type == GuardianAppointmentType.COURT_APPOINTED:
            warnings.append("Guardian must file annual accounts of the ward's estate (S.73)")

        candidate_age = candidate.age(as_of)
        if candidate_age is not None and candidate_age > self.rules.guardian_max_age:
            warnings.append(
                f"Candidate is over {self.rules.guardian_max_age}; court may require justification"
            )
        ward_age = ward.age(as_of)
        if candidate_age is not None and ward_age is not None:
            if candidate_age - ward_age < self.rules.guardian_min_age_gap:
                warnings.append(
                    f"Age gap to ward is below {self.rules.guardian_min_age_gap} years"
                )
        return warnings

    def _is_minor(self, flagged: bool, age: Optional[int]) -> bool:
        return flagged or (age is not None and age < self.rules.majority_age)

    def needs_guardian(self, ward: Ward, as_of: Optional[date] = None) -> bool:
        """Minor, or disabled and unable to decide without support"""
        if self._is_minor(ward.is_minor, ward.age(as_of or today_eat())):
            return True
        return ward.has_disability and ward.requires_supported_decision_making
