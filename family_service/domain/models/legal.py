"""
Domain Models - Legal Primitives
Statute citations and classification enums for the Law of Succession Act
"""

from enum import Enum


class KenyanLawSection(str, Enum):
    """Section of the Law of Succession Act (Cap. 160)"""
    S26_DEPENDANT_PROVISION = "S.26"
    S29_DEPENDANTS = "S.29"
    S35_SPOUSE_AND_CHILDREN = "S.35"
    S36_SPOUSE_ONLY = "S.36"
    S38_CHILDREN_ONLY = "S.38"
    S39_NO_SPOUSE_OR_CHILDREN = "S.39"
    S40_POLYGAMY = "S.40"
    S41_PER_STIRPES = "S.41"
    S46_ESCHEAT = "S.46"
    S70_TESTAMENTARY_GUARDIAN = "S.70"
    S71_COURT_GUARDIAN = "S.71"
    S72_GUARDIAN_BOND = "S.72"
    S73_GUARDIAN_ACCOUNTS = "S.73"

    @property
    def citation(self) -> str:
        """Human readable citation, e.g. 'Section 35 LSA'"""
        return f"Section {self.value[2:]} LSA"


class DependencyLevel(str, Enum):
    """Degree of financial dependency on the deceased"""
    NONE = "NONE"
    PARTIAL = "PARTIAL"
    FULL = "FULL"


class DependencyBasis(str, Enum):
    """Relationship category a dependant claims under"""
    SPOUSE = "SPOUSE"
    CHILD = "CHILD"
    ADOPTED_CHILD = "ADOPTED_CHILD"
    MINOR_CHILD = "MINOR_CHILD"
    ADULT_CHILD_STUDENT = "ADULT_CHILD_STUDENT"
    CUSTOMARY_WIFE = "CUSTOMARY_WIFE"
    EX_SPOUSE = "EX_SPOUSE"
    COHABITOR = "COHABITOR"
    PARENT = "PARENT"
    SIBLING = "SIBLING"
    EXTENDED_FAMILY = "EXTENDED_FAMILY"
    DISABLED_DEPENDANT = "DISABLED_DEPENDANT"
    OTHER = "OTHER"

    @property
    def is_priority(self) -> bool:
        """S.29(a) dependants qualify automatically"""
        return self in PRIORITY_DEPENDANT_BASES


# S.29(a): spouse(s) and children are dependants without proof of maintenance
PRIORITY_DEPENDANT_BASES = frozenset({
    DependencyBasis.SPOUSE,
    DependencyBasis.CHILD,
    DependencyBasis.ADOPTED_CHILD,
})

# S.29(b): maintained immediately before death, proof required
CONDITIONAL_DEPENDANT_BASES = frozenset({
    DependencyBasis.PARENT,
    DependencyBasis.SIBLING,
})

# Claims that only reach the estate through a S.26 court application
COURT_PROVISION_BASES = frozenset({
    DependencyBasis.EX_SPOUSE,
    DependencyBasis.COHABITOR,
})


class InterestType(str, Enum):
    """Nature of a beneficiary's interest in the residue"""
    ABSOLUTE = "ABSOLUTE"
    LIFE_INTEREST = "LIFE_INTEREST"
    TRUST_FOR_MINOR = "TRUST_FOR_MINOR"


class SupportFrequency(str, Enum):
    """How often the deceased paid support"""
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class AssessmentMethod(str, Enum):
    """How a dependency percentage was established"""
    INCOME_PERCENTAGE = "INCOME_PERCENTAGE"
    EXPENDITURE_AUDIT = "EXPENDITURE_AUDIT"
    COURT_DETERMINATION = "COURT_DETERMINATION"


class GuardianAppointmentType(str, Enum):
    """Legal route by which a guardian holds office"""
    TESTAMENTARY = "TESTAMENTARY"
    COURT_APPOINTED = "COURT_APPOINTED"
    NATURAL_PARENT = "NATURAL_PARENT"
    DE_FACTO = "DE_FACTO"


class AppointmentSource(str, Enum):
    """Where a proposed appointment comes from"""
    WILL = "WILL"
    COURT = "COURT"
    NATURAL = "NATURAL"
    INFORMAL = "INFORMAL"


class S26ClaimStatus(str, Enum):
    """Progress of a S.26 reasonable-provision claim"""
    NO_CLAIM = "NO_CLAIM"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"
