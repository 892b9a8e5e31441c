"""
Unit Tests for LegalDependant

✅ Declaration defaults per basis
✅ Every mutation bumps the version and returns its event
✅ Court orders are authoritative
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models import (
    DependencyBasis,
    DependencyLevel,
    KenyanLawSection,
    LegalDependant,
    S26ClaimStatus,
)
from family_service.domain.models.events import (
    CourtProvisionOrdered,
    DependantDeclared,
    DependencyAssessed,
    EvidenceAdded,
    Section26ClaimFiled,
)


LATER = datetime(2024, 2, 1, 12, 0)


class TestDeclare:

    @pytest.mark.parametrize("basis", [
        DependencyBasis.SPOUSE,
        DependencyBasis.CHILD,
        DependencyBasis.ADOPTED_CHILD,
    ])
    def test_priority_bases_are_full(self, basis, now):
        dependant, event = LegalDependant.declare("D-001", "P-001", basis, now=now)

        assert dependant.dependency_level == DependencyLevel.FULL
        assert dependant.dependency_percentage == Decimal('100')
        assert dependant.basis_section == KenyanLawSection.S29_DEPENDANTS
        assert dependant.is_priority_dependant
        assert isinstance(event, DependantDeclared)
        assert event.version == 1

    @pytest.mark.parametrize("basis", [DependencyBasis.PARENT, DependencyBasis.SIBLING])
    def test_conditional_bases_are_partial(self, basis, declare):
        dependant = declare(basis=basis)

        assert dependant.dependency_level == DependencyLevel.PARTIAL
        assert dependant.dependency_percentage == Decimal('50')
        assert not dependant.is_priority_dependant

    @pytest.mark.parametrize("basis", [DependencyBasis.EX_SPOUSE, DependencyBasis.COHABITOR])
    def test_court_provision_bases_cite_s26(self, basis, declare):
        dependant = declare(basis=basis)

        assert dependant.basis_section == KenyanLawSection.S26_DEPENDANT_PROVISION
        assert dependant.dependency_level == DependencyLevel.NONE

    def test_cannot_depend_on_self(self, now):
        with pytest.raises(DomainValidationError, match="dependant of themselves"):
            LegalDependant.declare("D-001", "D-001", DependencyBasis.CHILD, now=now)

    def test_lifecycle_stamped(self, declare, now):
        dependant = declare()

        assert dependant.version == 1
        assert dependant.lifecycle.created_at == now
        assert dependant.key == ("D-001", "P-001")


class TestAssessFinancialDependency:

    def test_level_derived_from_calculation(self, declare, make_calculation):
        dependant = declare(basis=DependencyBasis.PARENT)
        event = dependant.assess_financial_dependency(make_calculation(), now=LATER)

        assert isinstance(event, DependencyAssessed)
        assert dependant.dependency_level == DependencyLevel.PARTIAL
        assert dependant.dependency_percentage == Decimal('50')
        assert dependant.monthly_support == Decimal('20000')
        assert dependant.dependency_ratio == Decimal('0.2')
        assert dependant.version == 2
        assert dependant.lifecycle.updated_at == LATER

    def test_explicit_level_wins(self, declare, make_calculation):
        dependant = declare(basis=DependencyBasis.PARENT)
        dependant.assess_financial_dependency(make_calculation(), level=DependencyLevel.FULL, now=LATER)

        assert dependant.dependency_level == DependencyLevel.FULL

    def test_rejected_after_court_order(self, declare, make_calculation):
        dependant = declare(basis=DependencyBasis.PARENT)
        dependant.record_court_provision("HCC 7/2024", '100000', "LUMP_SUM", date(2024, 1, 20), now=LATER)

        with pytest.raises(DomainValidationError, match="court provision order"):
            dependant.assess_financial_dependency(make_calculation(), now=LATER)


class TestEvidence:

    def test_add_evidence_is_idempotent(self, declare):
        dependant = declare()

        first = dependant.add_evidence("DOC-1", now=LATER)
        second = dependant.add_evidence("DOC-1", now=LATER)

        assert isinstance(first, EvidenceAdded)
        assert second is None
        assert len(dependant.evidence_documents) == 1
        assert dependant.version == 2

    def test_empty_document_id_rejected(self, declare):
        with pytest.raises(DomainValidationError):
            declare().add_evidence("")

    def test_verify_requires_evidence(self, declare):
        with pytest.raises(DomainValidationError, match="No evidence"):
            declare().verify_evidence("registrar", "DOCUMENT_REVIEW")

    def test_verify_stamps_dependant(self, declare):
        dependant = declare()
        dependant.add_evidence("DOC-1", now=LATER)
        event = dependant.verify_evidence("registrar", "DOCUMENT_REVIEW", now=LATER)

        assert dependant.verified_by_court_at == LATER
        assert event.verified_by == "registrar"
        assert event.version == 3


class TestSection26Claim:

    def test_non_positive_amount_rejected(self, declare):
        with pytest.raises(DomainValidationError, match="must be positive"):
            declare(basis=DependencyBasis.COHABITOR).file_section26_claim(0)

    def test_claim_filed(self, declare):
        dependant = declare(basis=DependencyBasis.PARENT)
        event = dependant.file_section26_claim('500000', now=LATER)

        assert isinstance(event, Section26ClaimFiled)
        assert event.currency == "KES"
        assert dependant.is_claimant
        assert dependant.claim_amount == Decimal('500000')
        assert dependant.basis_section == KenyanLawSection.S26_DEPENDANT_PROVISION
        assert dependant.s26_claim_status == S26ClaimStatus.PENDING

    def test_second_claim_rejected(self, declare):
        dependant = declare(basis=DependencyBasis.COHABITOR)
        dependant.file_section26_claim('500000', now=LATER)

        with pytest.raises(DomainValidationError, match="already been filed"):
            dependant.file_section26_claim('100', now=LATER)


class TestCourtProvision:

    def test_positive_award_makes_full(self, declare):
        dependant = declare(basis=DependencyBasis.COHABITOR)
        dependant.file_section26_claim('500000', now=LATER)
        event = dependant.record_court_provision(
            "HCC 12/2024", '300000', "LUMP_SUM", date(2024, 1, 30), now=LATER
        )

        assert isinstance(event, CourtProvisionOrdered)
        assert dependant.dependency_level == DependencyLevel.FULL
        assert dependant.dependency_percentage == Decimal('100')
        assert dependant.s26_claim_status == S26ClaimStatus.APPROVED
        assert dependant.version == 3

    def test_nil_award_makes_none(self, declare):
        dependant = declare(basis=DependencyBasis.COHABITOR)
        dependant.file_section26_claim('500000', now=LATER)
        dependant.record_court_provision("HCC 13/2024", '0', "NIL", date(2024, 1, 30), now=LATER)

        assert dependant.dependency_level == DependencyLevel.NONE
        assert dependant.dependency_percentage == Decimal('0')
        assert dependant.s26_claim_status == S26ClaimStatus.DENIED

    def test_negative_award_rejected(self, declare):
        with pytest.raises(DomainValidationError, match="cannot be negative"):
            declare().record_court_provision("HCC 1/2024", '-1', "LUMP_SUM", now=LATER)

    def test_future_order_rejected(self, declare):
        with pytest.raises(DomainValidationError, match="future"):
            declare().record_court_provision("HCC 1/2024", '10', "LUMP_SUM", date(2024, 3, 1), now=LATER)


class TestDetails:

    def test_adult_student_needs_end_date(self, declare):
        with pytest.raises(DomainValidationError, match="graduation"):
            declare(basis=DependencyBasis.CHILD).update_student_status(True)

    def test_minor_student(self, declare):
        dependant = declare(basis=DependencyBasis.CHILD, is_minor=True)
        dependant.update_student_status(True, now=LATER)

        assert dependant.is_student
        assert dependant.version == 2

    def test_disability_makes_non_priority_qualify(self, declare):
        dependant = declare(basis=DependencyBasis.EXTENDED_FAMILY)
        assert not dependant.qualifies_for_s29

        dependant.update_disability_status(True, False, True, "Cerebral palsy", now=LATER)

        assert dependant.has_disability
        assert dependant.qualifies_for_s29

    def test_custodial_parent_must_be_third_party(self, declare):
        dependant = declare(basis=DependencyBasis.CHILD, is_minor=True)

        with pytest.raises(DomainValidationError):
            dependant.assign_custodial_parent("D-001")

        dependant.assign_custodial_parent("M-001", now=LATER)
        assert dependant.custodial_parent_id == "M-001"

    def test_to_dict(self, declare):
        data = declare().to_dict()

        assert data['dependency_level'] == "FULL"
        assert data['s26_claim_status'] == "NO_CLAIM"
        assert data['version'] == 1
