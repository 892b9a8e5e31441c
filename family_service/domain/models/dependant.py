"""
Domain Models - Legal Dependant
A person claiming (or entitled to) provision from a deceased's estate.

Entity: mutates in place, every mutation bumps the lifecycle version and
returns the audit event describing it. Records are never deleted.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models.dependency import DependencyCalculation, level_for_percentage
from family_service.domain.models.events import (
    CourtProvisionOrdered,
    DependantDeclared,
    DependantDetailsUpdated,
    DependencyAssessed,
    EvidenceAdded,
    EvidenceVerified,
    Section26ClaimFiled,
)
from family_service.domain.models.legal import (
    COURT_PROVISION_BASES,
    CONDITIONAL_DEPENDANT_BASES,
    DependencyBasis,
    DependencyLevel,
    KenyanLawSection,
    S26ClaimStatus,
)
from family_service.domain.models.lifecycle import Lifecycle, new_entity_id
from family_service.domain.models.rules import DEFAULT_RULES, LegalRules
from family_service.utils.money import HUNDRED, ZERO, to_decimal
from family_service.utils.time import now_eat_naive


@dataclass
class LegalDependant:
    """S.29 dependant / S.26 claimant record"""
    id: str
    deceased_id: str
    dependant_id: str
    dependency_basis: DependencyBasis
    dependency_level: DependencyLevel
    dependency_percentage: Decimal
    basis_section: KenyanLawSection
    lifecycle: Lifecycle
    assessment_date: date

    # Circumstances
    is_minor: bool = False
    is_student: bool = False
    student_until: Optional[date] = None
    has_physical_disability: bool = False
    has_mental_disability: bool = False
    requires_ongoing_care: bool = False
    disability_details: Optional[str] = None
    custodial_parent_id: Optional[str] = None

    # Financial evidence
    monthly_support: Optional[Decimal] = None
    dependency_ratio: Optional[Decimal] = None
    assessment_method: Optional[str] = None
    dependency_calculation: Optional[DependencyCalculation] = None

    # S.26 claim
    is_claimant: bool = False
    claim_amount: Optional[Decimal] = None
    currency: str = "KES"

    # Court outcome
    provision_order_issued: bool = False
    court_order_number: Optional[str] = None
    court_order_date: Optional[date] = None
    court_approved_amount: Optional[Decimal] = None
    provision_type: Optional[str] = None

    # Verification
    evidence_documents: List[str] = field(default_factory=list)
    verified_by_court_at: Optional[datetime] = None

    def __post_init__(self):
        self.dependency_basis = DependencyBasis(self.dependency_basis)
        self.dependency_level = DependencyLevel(self.dependency_level)
        self.dependency_percentage = to_decimal(self.dependency_percentage)
        self._validate()

    def _validate(self) -> None:
        if not self.deceased_id or not self.dependant_id:
            raise DomainValidationError("Deceased and dependant ids are required")
        if self.deceased_id == self.dependant_id:
            raise DomainValidationError(
                "A person cannot be a dependant of themselves", field="dependant_id"
            )
        if not ZERO <= self.dependency_percentage <= HUNDRED:
            raise DomainValidationError(
                "Dependency percentage must be between 0 and 100", field="dependency_percentage"
            )
        if self.monthly_support is not None and self.monthly_support < ZERO:
            raise DomainValidationError("Monthly support cannot be negative", field="monthly_support")
        if self.is_claimant and (self.claim_amount is None or self.claim_amount <= ZERO):
            raise DomainValidationError(
                "Claim amount must be positive for S.26 claimants", field="claim_amount"
            )

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    @classmethod
    def declare(
        cls,
        deceased_id: str,
        dependant_id: str,
        dependency_basis: DependencyBasis,
        is_minor: bool = False,
        is_student: bool = False,
        has_physical_disability: bool = False,
        has_mental_disability: bool = False,
        requires_ongoing_care: bool = False,
        custodial_parent_id: Optional[str] = None,
        dependency_level: Optional[DependencyLevel] = None,
        dependency_percentage=None,
        now: Optional[datetime] = None,
    ) -> Tuple["LegalDependant", DependantDeclared]:
        """
        Declare a dependant with the statutory defaults for its basis.

        Spouses and children are automatic S.29(a) dependants (FULL, 100%).
        Parents and siblings are conditional S.29(b) dependants (PARTIAL,
        50%) until assessed. Ex-spouses and cohabitors claim under S.26.
        """
        now = now or now_eat_naive()
        basis = DependencyBasis(dependency_basis)

        basis_section = KenyanLawSection.S29_DEPENDANTS
        if basis in COURT_PROVISION_BASES:
            basis_section = KenyanLawSection.S26_DEPENDANT_PROVISION

        if basis.is_priority:
            level, percentage = DependencyLevel.FULL, HUNDRED
        elif basis in CONDITIONAL_DEPENDANT_BASES:
            level, percentage = DependencyLevel.PARTIAL, Decimal('50')
        else:
            level = DependencyLevel(dependency_level or DependencyLevel.NONE)
            percentage = (
                to_decimal(dependency_percentage) if dependency_percentage is not None else ZERO
            )

        dependant = cls(
            id=new_entity_id(),
            deceased_id=deceased_id,
            dependant_id=dependant_id,
            dependency_basis=basis,
            dependency_level=level,
            dependency_percentage=percentage,
            basis_section=basis_section,
            lifecycle=Lifecycle.start(now),
            assessment_date=now.date(),
            is_minor=is_minor,
            is_student=is_student,
            has_physical_disability=has_physical_disability,
            has_mental_disability=has_mental_disability,
            requires_ongoing_care=requires_ongoing_care,
            custodial_parent_id=custodial_parent_id,
        )

        event = DependantDeclared(
            legal_dependant_id=dependant.id,
            version=dependant.version,
            occurred_at=now,
            deceased_id=deceased_id,
            dependant_id=dependant_id,
            dependency_basis=basis,
            dependency_level=level,
            is_minor=is_minor,
        )
        return dependant, event

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def assess_financial_dependency(
        self,
        calculation: DependencyCalculation,
        level: Optional[DependencyLevel] = None,
        rules: LegalRules = DEFAULT_RULES,
        now: Optional[datetime] = None,
    ) -> DependencyAssessed:
        """
        Apply a financial assessment.

        The level is taken from `level` when given, otherwise derived from
        the calculation's percentage. A court provision order is final.
        """
        if self.provision_order_issued:
            raise DomainValidationError(
                "Cannot reassess financial dependency after court provision order is issued"
            )
        if calculation.deceased_monthly_income > ZERO:
            ratio = calculation.dependency_ratio
            if ratio > Decimal('1'):
                ratio = Decimal('1')
        else:
            ratio = ZERO

        now = now or now_eat_naive()
        self.dependency_calculation = calculation
        self.dependency_percentage = calculation.dependency_percentage
        self.dependency_level = (
            DependencyLevel(level) if level is not None
            else level_for_percentage(calculation.dependency_percentage, rules)
        )
        self.monthly_support = calculation.monthly_support_amount
        self.dependency_ratio = ratio
        self.assessment_method = calculation.assessment_method.value
        self.assessment_date = now.date()
        self.lifecycle.touch(now)

        return DependencyAssessed(
            legal_dependant_id=self.id,
            version=self.version,
            occurred_at=now,
            dependency_level=self.dependency_level,
            dependency_percentage=self.dependency_percentage,
            monthly_support_evidence=self.monthly_support,
            dependency_ratio=self.dependency_ratio,
        )

    def add_evidence(
        self,
        document_id: str,
        evidence_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[EvidenceAdded]:
        """Attach an evidence document; a repeated id is a no-op (returns None)"""
        if not document_id:
            raise DomainValidationError("Document id cannot be empty", field="document_id")
        if document_id in self.evidence_documents:
            return None

        now = now or now_eat_naive()
        self.evidence_documents.append(document_id)
        self.lifecycle.touch(now)
        return EvidenceAdded(
            legal_dependant_id=self.id,
            version=self.version,
            occurred_at=now,
            document_id=document_id,
            evidence_type=evidence_type,
        )

    def verify_evidence(
        self,
        verifier_id: str,
        verification_method: str,
        now: Optional[datetime] = None,
    ) -> EvidenceVerified:
        if not self.evidence_documents:
            raise DomainValidationError("No evidence documents to verify")

        now = now or now_eat_naive()
        self.verified_by_court_at = now
        self.lifecycle.touch(now)
        return EvidenceVerified(
            legal_dependant_id=self.id,
            version=self.version,
            occurred_at=now,
            verified_by=verifier_id,
            verification_method=verification_method,
        )

    def file_section26_claim(
        self,
        amount,
        currency: str = "KES",
        now: Optional[datetime] = None,
    ) -> Section26ClaimFiled:
        amount = to_decimal(amount)
        if amount <= ZERO:
            raise DomainValidationError("Claim amount must be positive", field="claim_amount")
        if self.is_claimant:
            raise DomainValidationError("S.26 claim has already been filed", field="is_claimant")

        now = now or now_eat_naive()
        self.is_claimant = True
        self.claim_amount = amount
        self.currency = currency
        self.basis_section = KenyanLawSection.S26_DEPENDANT_PROVISION
        self.lifecycle.touch(now)
        return Section26ClaimFiled(
            legal_dependant_id=self.id,
            version=self.version,
            occurred_at=now,
            amount=amount,
            currency=currency,
        )

    def record_court_provision(
        self,
        order_number: str,
        approved_amount,
        provision_type: str,
        order_date: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> CourtProvisionOrdered:
        """
        Record a court provision order. Overrides any earlier assessment:
        a positive award makes the dependant FULL (100%), a nil award NONE.
        """
        approved_amount = to_decimal(approved_amount)
        if not order_number:
            raise DomainValidationError("Court order number is required", field="court_order_number")
        if approved_amount < ZERO:
            raise DomainValidationError(
                "Court approved amount cannot be negative", field="court_approved_amount"
            )

        now = now or now_eat_naive()
        order_date = order_date or now.date()
        if order_date > now.date():
            raise DomainValidationError("Court order date cannot be in the future", field="court_order_date")

        self.provision_order_issued = True
        self.court_order_number = order_number
        self.court_order_date = order_date
        self.court_approved_amount = approved_amount
        self.provision_type = provision_type
        self.verified_by_court_at = now

        if approved_amount > ZERO:
            self.dependency_level = DependencyLevel.FULL
            self.dependency_percentage = HUNDRED
        else:
            self.dependency_level = DependencyLevel.NONE
            self.dependency_percentage = ZERO

        self.lifecycle.touch(now)
        return CourtProvisionOrdered(
            legal_dependant_id=self.id,
            version=self.version,
            occurred_at=now,
            court_order_number=order_number,
            approved_amount=approved_amount,
            provision_type=provision_type,
            order_date=order_date,
        )

    def update_student_status(
        self,
        is_student: bool,
        student_until: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> DependantDetailsUpdated:
        if is_student and student_until is None and not self.is_minor:
            raise DomainValidationError(
                "Students over 18 must provide expected graduation/end date",
                field="student_until",
            )
        now = now or now_eat_naive()
        self.is_student = is_student
        self.student_until = student_until if is_student else None
        self.lifecycle.touch(now)
        return self._details_event("student_status", now)

    def update_disability_status(
        self,
        has_physical_disability: bool,
        has_mental_disability: bool,
        requires_ongoing_care: bool,
        disability_details: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> DependantDetailsUpdated:
        now = now or now_eat_naive()
        self.has_physical_disability = has_physical_disability
        self.has_mental_disability = has_mental_disability
        self.requires_ongoing_care = requires_ongoing_care
        if disability_details:
            self.disability_details = disability_details
        self.lifecycle.touch(now)
        return self._details_event("disability_status", now)

    def assign_custodial_parent(
        self,
        custodial_parent_id: str,
        now: Optional[datetime] = None,
    ) -> DependantDetailsUpdated:
        if custodial_parent_id in (self.dependant_id, self.deceased_id):
            raise DomainValidationError(
                "Custodial parent must be a living third party", field="custodial_parent_id"
            )
        now = now or now_eat_naive()
        self.custodial_parent_id = custodial_parent_id
        self.lifecycle.touch(now)
        return self._details_event("custodial_parent", now)

    def _details_event(self, change: str, now: datetime) -> DependantDetailsUpdated:
        return DependantDetailsUpdated(
            legal_dependant_id=self.id,
            version=self.version,
            occurred_at=now,
            change=change,
        )

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def key(self) -> Tuple[str, str]:
        """Natural key: one record per (deceased, dependant)"""
        return (self.deceased_id, self.dependant_id)

    @property
    def version(self) -> int:
        return self.lifecycle.version

    @property
    def is_priority_dependant(self) -> bool:
        return self.dependency_basis.is_priority

    @property
    def has_disability(self) -> bool:
        return self.has_physical_disability or self.has_mental_disability

    @property
    def has_evidence(self) -> bool:
        return len(self.evidence_documents) > 0

    @property
    def qualifies_for_s29(self) -> bool:
        """Priority basis, proven dependency, ongoing care needs, or minor/student"""
        if self.is_priority_dependant:
            return True
        if self.dependency_percentage > ZERO:
            return True
        if self.has_disability and self.requires_ongoing_care:
            return True
        return self.is_minor or self.is_student

    @property
    def s26_claim_status(self) -> S26ClaimStatus:
        if not self.is_claimant:
            return S26ClaimStatus.NO_CLAIM
        if self.provision_order_issued and self.court_approved_amount:
            return S26ClaimStatus.APPROVED
        if self.provision_order_issued:
            return S26ClaimStatus.DENIED
        return S26ClaimStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'deceased_id': self.deceased_id,
            'dependant_id': self.dependant_id,
            'basis_section': self.basis_section.value,
            'dependency_basis': self.dependency_basis.value,
            'dependency_level': self.dependency_level.value,
            'dependency_percentage': str(self.dependency_percentage),
            'is_minor': self.is_minor,
            'is_student': self.is_student,
            'has_disability': self.has_disability,
            'requires_ongoing_care': self.requires_ongoing_care,
            'custodial_parent_id': self.custodial_parent_id,
            'monthly_support': str(self.monthly_support) if self.monthly_support is not None else None,
            'is_claimant': self.is_claimant,
            'claim_amount': str(self.claim_amount) if self.claim_amount is not None else None,
            'currency': self.currency,
            'provision_order_issued': self.provision_order_issued,
            'court_order_number': self.court_order_number,
            'court_approved_amount': (
                str(self.court_approved_amount) if self.court_approved_amount is not None else None
            ),
            'evidence_documents': list(self.evidence_documents),
            'is_priority_dependant': self.is_priority_dependant,
            'qualifies_for_s29': self.qualifies_for_s29,
            's26_claim_status': self.s26_claim_status.value,
            'version': self.version,
            'created_at': self.lifecycle.created_at.isoformat(),
            'updated_at': self.lifecycle.updated_at.isoformat(),
        }
