"""
Unit Tests for DependencyCalculation

✅ Invariants raise DomainValidationError
✅ Frequency normalisation and coverage bands
✅ S.29 / enhanced qualification
✅ JSON projection round-trip
"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models import (
    AssessmentMethod,
    DependencyBasis,
    DependencyCalculation,
    DependencyLevel,
    LegalRules,
    SupportFrequency,
)
from family_service.utils.time import today_eat


class TestCreate:
    """Tests for the create factory"""

    def test_percentage_and_level_from_coverage(self, make_calculation):
        calc = make_calculation()

        assert calc.dependency_percentage == Decimal('50')
        assert calc.dependency_level == DependencyLevel.PARTIAL

    def test_percentage_capped_at_100(self, make_calculation):
        calc = make_calculation(needs='10000', support='20000')

        assert calc.dependency_percentage == Decimal('100')
        assert calc.dependency_level == DependencyLevel.FULL

    def test_negative_income_rejected(self, make_calculation):
        with pytest.raises(DomainValidationError, match="income cannot be negative"):
            make_calculation(income='-1')

    def test_negative_needs_rejected(self, make_calculation):
        with pytest.raises(ValueError, match="needs cannot be negative"):
            make_calculation(needs='-5')

    def test_support_above_150_percent_of_income_rejected(self, make_calculation):
        with pytest.raises(DomainValidationError, match="reasonable proportion"):
            make_calculation(income='100000', support='150001')

    def test_support_at_150_percent_allowed(self, make_calculation):
        calc = make_calculation(income='100000', needs='200000', support='150000')
        assert calc.support_provided == Decimal('150000')

    def test_configured_ceiling_rejects_support(self, as_of):
        strict = LegalRules(support_income_ceiling_ratio=Decimal('1.0'))
        with pytest.raises(DomainValidationError, match="reasonable proportion"):
            DependencyCalculation.create(
                deceased_monthly_income=Decimal('100000'),
                dependant_monthly_needs=Decimal('200000'),
                support_provided=Decimal('140000'),
                dependency_basis=DependencyBasis.PARENT,
                support_start_date=date(2022, 1, 1),
                assessment_date=as_of,
                rules=strict,
            )

    def test_configured_level_bands(self, as_of):
        rules = LegalRules(full_dependency_pct=Decimal('50'), partial_dependency_pct=Decimal('20'))
        calc = DependencyCalculation.create(
            '100000', '40000', '20000', DependencyBasis.PARENT,
            support_start_date=date(2022, 1, 1), assessment_date=as_of, rules=rules,
        )
        assert calc.dependency_level == DependencyLevel.FULL

    def test_future_start_date_rejected(self, make_calculation):
        with pytest.raises(DomainValidationError, match="start date cannot be in the future"):
            make_calculation(start=today_eat() + timedelta(days=10))

    def test_end_before_start_rejected(self, make_calculation):
        with pytest.raises(DomainValidationError, match="end date cannot be before"):
            make_calculation(start=date(2022, 6, 1), end=date(2022, 1, 1))

    def test_error_names_field(self, make_calculation):
        with pytest.raises(DomainValidationError) as exc:
            make_calculation(income='-1')
        assert exc.value.field == "deceased_monthly_income"


class TestInvariants:
    """Cross-field invariants on direct construction"""

    def base_kwargs(self):
        return dict(
            deceased_monthly_income=Decimal('100000'),
            dependant_monthly_needs=Decimal('40000'),
            support_provided=Decimal('20000'),
            dependency_basis=DependencyBasis.PARENT,
            support_start_date=date(2022, 1, 1),
            assessment_date=date(2024, 1, 1),
        )

    def test_percentage_above_100_rejected(self):
        with pytest.raises(DomainValidationError, match="between 0 and 100"):
            DependencyCalculation(**self.base_kwargs(), dependency_percentage=Decimal('101'))

    def test_court_reference_requires_date(self):
        with pytest.raises(DomainValidationError, match="Court order date is required"):
            DependencyCalculation(**self.base_kwargs(), court_order_reference="HCC 1/2024")

    def test_court_date_requires_reference(self):
        with pytest.raises(DomainValidationError, match="Court order reference is required"):
            DependencyCalculation(**self.base_kwargs(), court_order_date=date(2023, 5, 1))

    def test_verified_requires_timestamp(self):
        with pytest.raises(DomainValidationError, match="Verification date"):
            DependencyCalculation(**self.base_kwargs(), is_verified=True)

    def test_future_assessment_rejected(self):
        kwargs = self.base_kwargs()
        kwargs['assessment_date'] = today_eat() + timedelta(days=10)
        with pytest.raises(DomainValidationError, match="Assessment date"):
            DependencyCalculation(**kwargs)


class TestDerivedFigures:

    def test_weekly_support_normalised(self, make_calculation):
        calc = make_calculation(support='1000', frequency=SupportFrequency.WEEKLY)
        assert calc.monthly_support_amount == Decimal('4330.00')

    def test_yearly_support_normalised(self, make_calculation):
        calc = make_calculation(support='120000', needs='20000', frequency=SupportFrequency.YEARLY)
        assert calc.monthly_support_amount.quantize(Decimal('0.01')) == Decimal('10000.00')

    def test_dependency_ratio(self, make_calculation):
        calc = make_calculation()
        assert calc.dependency_ratio == Decimal('0.2')

    def test_zero_income_ratio_is_zero(self, make_calculation):
        calc = make_calculation(income='0', support='0')
        assert calc.dependency_ratio == Decimal('0')

    def test_coverage_bands(self, make_calculation):
        total = make_calculation(needs='20000', support='20000')
        partial = make_calculation(needs='40000', support='20000')
        minimal = make_calculation(needs='100000', support='10000')

        assert total.is_total_dependency()
        assert partial.is_partial_dependency() and not partial.is_total_dependency()
        assert minimal.is_minimal_dependency() and not minimal.is_partial_dependency()

    def test_coverage_bands_follow_configured_rules(self, make_calculation):
        rules = LegalRules(enhanced_min_coverage_pct=Decimal('40'))
        calc = make_calculation(needs='40000', support='20000')

        assert calc.is_total_dependency(rules)
        assert not calc.is_partial_dependency(rules)

    def test_duration_uses_end_date(self, make_calculation, as_of):
        calc = make_calculation(start=date(2022, 1, 1), end=date(2022, 7, 1))
        assert calc.support_duration_months(as_of) == 6


class TestQualification:

    def test_qualifies_for_s29(self, make_calculation, as_of):
        calc = make_calculation()
        assert calc.qualifies_for_s29(as_of=as_of)
        assert not calc.qualifies_for_enhanced_provision(as_of=as_of)

    def test_short_support_does_not_qualify(self, make_calculation, as_of):
        calc = make_calculation(start=date(2023, 9, 1))
        assert calc.support_duration_months(as_of) == 4
        assert not calc.qualifies_for_s29(as_of=as_of)

    def test_low_coverage_does_not_qualify(self, make_calculation, as_of):
        calc = make_calculation(needs='100000', support='20000')
        assert not calc.qualifies_for_s29(as_of=as_of)

    def test_other_basis_never_qualifies(self, make_calculation, as_of):
        calc = make_calculation(basis=DependencyBasis.OTHER)
        assert not calc.qualifies_for_s29(as_of=as_of)

    def test_enhanced_provision(self, make_calculation, as_of):
        calc = make_calculation(needs='20000', support='20000', start=date(2021, 1, 1))
        assert calc.qualifies_for_enhanced_provision(as_of=as_of)

    def test_recommended_provision_capped_by_needs(self, make_calculation, as_of):
        calc = make_calculation(needs='30000', support='25000')

        assert calc.recommended_monthly_provision(as_of=as_of) == Decimal('18000.00')
        assert calc.recommended_lump_sum_provision(as_of=as_of) == Decimal('432000.00')

    def test_recommended_provision_zero_when_not_qualifying(self, make_calculation, as_of):
        calc = make_calculation(start=date(2023, 12, 1))
        assert calc.recommended_monthly_provision(as_of=as_of) == Decimal('0')


class TestImmutableUpdates:

    def test_add_evidence_returns_new_instance(self, make_calculation):
        calc = make_calculation()
        updated = calc.add_evidence_document("DOC-1")

        assert calc.evidence_documents == ()
        assert updated.evidence_documents == ("DOC-1",)
        assert updated.add_evidence_document("DOC-1") is updated

    def test_remove_evidence(self, make_calculation):
        calc = make_calculation().add_evidence_document("DOC-1").add_evidence_document("DOC-2")
        assert calc.remove_evidence_document("DOC-1").evidence_documents == ("DOC-2",)

    def test_verify_and_unverify(self, make_calculation):
        calc = make_calculation().verify("registrar", datetime(2023, 12, 1, 10, 0))

        assert calc.is_verified
        assert calc.verified_by == "registrar"
        assert not calc.mark_as_unverified().is_verified

    def test_update_revalidates(self, make_calculation):
        calc = make_calculation()
        with pytest.raises(DomainValidationError):
            calc.update_support_details('-1', SupportFrequency.MONTHLY, date(2022, 1, 1))

    def test_update_support_checks_configured_ceiling(self, make_calculation):
        strict = LegalRules(support_income_ceiling_ratio=Decimal('0.5'))
        with pytest.raises(DomainValidationError, match="reasonable proportion"):
            make_calculation().update_support_details(
                '60000', SupportFrequency.MONTHLY, date(2022, 1, 1), rules=strict
            )

    def test_update_assessment(self, make_calculation):
        calc = make_calculation().update_assessment(
            DependencyLevel.FULL, '90', AssessmentMethod.COURT_DETERMINATION, date(2023, 12, 1)
        )

        assert calc.dependency_level == DependencyLevel.FULL
        assert calc.dependency_percentage == Decimal('90')
        assert calc.assessment_method == AssessmentMethod.COURT_DETERMINATION
        assert calc.assessment_date == date(2023, 12, 1)

    def test_update_assessment_revalidates_percentage(self, make_calculation):
        with pytest.raises(DomainValidationError, match="between 0 and 100"):
            make_calculation().update_assessment(
                DependencyLevel.FULL, '120', AssessmentMethod.COURT_DETERMINATION, date(2023, 12, 1)
            )

    def test_add_special_circumstance(self, make_calculation):
        calc = make_calculation()
        updated = calc.add_special_circumstance("Chronic illness").add_special_circumstance("Sole carer")

        assert calc.special_circumstances == ()
        assert updated.special_circumstances == ("Chronic illness", "Sole carer")


class TestJsonProjection:

    def test_round_trip_reproduces_classification(self, make_calculation, as_of):
        calc = make_calculation().add_evidence_document("DOC-9")
        data = calc.to_dict(as_of=as_of)

        rebuilt = DependencyCalculation.from_dict(data)

        assert rebuilt == calc
        assert rebuilt.support_coverage == calc.support_coverage
        assert rebuilt.qualifies_for_s29(as_of=as_of) == calc.qualifies_for_s29(as_of=as_of)

    def test_projection_contains_derived_keys(self, make_calculation, as_of):
        data = make_calculation().to_dict(as_of=as_of)

        assert data['dependency_basis'] == "PARENT"
        assert data['qualifies_for_s29'] is True
        assert data['support_duration_months'] == 24
        assert Decimal(data['support_coverage']) == Decimal('50')
