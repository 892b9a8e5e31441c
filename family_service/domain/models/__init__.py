"""
Domain Models Package
Export all domain entities and value objects
"""

from .legal import (
    # Enums
    AppointmentSource,
    AssessmentMethod,
    DependencyBasis,
    DependencyLevel,
    GuardianAppointmentType,
    InterestType,
    KenyanLawSection,
    S26ClaimStatus,
    SupportFrequency,
)
from .compliance import (
    CaseStatus,
    ComplianceFinding,
    DependencyStatusReport,
    Severity,
)
from .dependant import LegalDependant
from .dependency import DependencyCalculation
from .guardianship import (
    GuardianCandidate,
    GuardianEligibilityResult,
    GuardianshipContext,
    Ward,
)
from .lifecycle import Lifecycle
from .rules import DEFAULT_RULES, LegalRules
from .succession import (
    BeneficiaryShare,
    HouseAllocation,
    HouseAllocationRule,
    HouseStructure,
    IntestateDistributionResult,
    PersonalEffectsAllocation,
    PolygamousDistributionPlan,
    SuccessionStructure,
)

__all__ = [
    # Enums
    "AppointmentSource",
    "AssessmentMethod",
    "CaseStatus",
    "DependencyBasis",
    "DependencyLevel",
    "GuardianAppointmentType",
    "HouseAllocationRule",
    "InterestType",
    "KenyanLawSection",
    "S26ClaimStatus",
    "Severity",
    "SupportFrequency",

    # Value objects
    "BeneficiaryShare",
    "ComplianceFinding",
    "DependencyCalculation",
    "DependencyStatusReport",
    "GuardianCandidate",
    "GuardianEligibilityResult",
    "GuardianshipContext",
    "HouseAllocation",
    "HouseStructure",
    "IntestateDistributionResult",
    "LegalRules",
    "PersonalEffectsAllocation",
    "PolygamousDistributionPlan",
    "SuccessionStructure",
    "Ward",

    # Entities
    "LegalDependant",
    "Lifecycle",

    "DEFAULT_RULES",
]
