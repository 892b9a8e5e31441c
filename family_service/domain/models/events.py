"""
Domain Models - Dependant Events
Audit records returned from LegalDependant mutations.

Entities never buffer these; the caller persists or dispatches them.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from family_service.domain.models.legal import DependencyBasis, DependencyLevel


@dataclass(frozen=True)
class DependantEvent:
    """Base audit event - Immutable"""
    legal_dependant_id: str
    version: int
    occurred_at: datetime

    @property
    def event_type(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class DependantDeclared(DependantEvent):
    deceased_id: str = ""
    dependant_id: str = ""
    dependency_basis: Optional[DependencyBasis] = None
    dependency_level: Optional[DependencyLevel] = None
    is_minor: bool = False


@dataclass(frozen=True)
class DependencyAssessed(DependantEvent):
    dependency_level: Optional[DependencyLevel] = None
    dependency_percentage: Decimal = Decimal('0')
    monthly_support_evidence: Optional[Decimal] = None
    dependency_ratio: Optional[Decimal] = None


@dataclass(frozen=True)
class EvidenceAdded(DependantEvent):
    document_id: str = ""
    evidence_type: Optional[str] = None


@dataclass(frozen=True)
class EvidenceVerified(DependantEvent):
    verified_by: str = ""
    verification_method: str = ""


@dataclass(frozen=True)
class Section26ClaimFiled(DependantEvent):
    amount: Decimal = Decimal('0')
    currency: str = "KES"


@dataclass(frozen=True)
class CourtProvisionOrdered(DependantEvent):
    court_order_number: str = ""
    approved_amount: Decimal = Decimal('0')
    provision_type: str = ""
    order_date: Optional[date] = None


@dataclass(frozen=True)
class DependantDetailsUpdated(DependantEvent):
    """Student, disability or custodial-parent change"""
    change: str = ""
