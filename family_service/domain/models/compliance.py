"""
Domain Models - Compliance
Findings and case status produced by the dependency status policy.

Findings are data: they are collected and returned, never raised.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from family_service.domain.models.legal import KenyanLawSection


class Severity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    VIOLATION = "VIOLATION"


class CaseStatus(str, Enum):
    """Overall dependency position of an estate"""
    NO_DEPENDANTS = "NO_DEPENDANTS"
    PENDING_COURT_ORDER = "PENDING_COURT_ORDER"
    NON_COMPLIANT = "NON_COMPLIANT"
    REQUIRES_REVIEW = "REQUIRES_REVIEW"
    COMPLIANT = "COMPLIANT"


@dataclass(frozen=True)
class ComplianceFinding:
    """One statutory observation about one dependant - Immutable"""
    dependant_id: str
    code: str
    message: str
    severity: Severity
    section: Optional[KenyanLawSection] = None

    @property
    def is_violation(self) -> bool:
        return self.severity == Severity.VIOLATION


@dataclass(frozen=True)
class DependencyStatusReport:
    """Aggregated dependency compliance for one deceased - Immutable"""
    deceased_id: Optional[str]
    status: CaseStatus
    findings: Tuple[ComplianceFinding, ...] = ()
    s29_compliant: bool = True
    s26_claims_resolved: bool = True
    court_orders_filed: bool = True
    evidence_complete: bool = True
    statistics: Dict[str, int] = field(default_factory=dict)
    next_steps: Tuple[str, ...] = ()

    @property
    def violations(self) -> Tuple[ComplianceFinding, ...]:
        return tuple(f for f in self.findings if f.severity == Severity.VIOLATION)

    @property
    def warnings(self) -> Tuple[ComplianceFinding, ...]:
        return tuple(f for f in self.findings if f.severity == Severity.WARNING)

    @property
    def requires_attention(self) -> bool:
        return self.status not in (CaseStatus.COMPLIANT, CaseStatus.NO_DEPENDANTS)

    def findings_for(self, dependant_id: str) -> Tuple[ComplianceFinding, ...]:
        return tuple(f for f in self.findings if f.dependant_id == dependant_id)
