import pytest
from decimal import Decimal

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models import (
    BeneficiaryShare,
    HouseStructure,
    InterestType,
    KenyanLawSection,
    SuccessionStructure,
)


class TestSuccessionStructure:

    def test_normalises_sequences(self):
        structure = SuccessionStructure(
            surviving_spouses=["S1"],
            living_children=["C1", "C2"],
            deceased_children_with_issue={"C3": ["G1", "G2"]},
        )

        assert structure.surviving_spouses == ("S1",)
        assert structure.deceased_children_with_issue == {"C3": ("G1", "G2")}
        assert structure.descendant_units == 3
        assert structure.has_spouse and structure.has_issue

    def test_deceased_child_without_issue_rejected(self):
        with pytest.raises(DomainValidationError, match="without surviving issue"):
            SuccessionStructure(deceased_children_with_issue={"C3": []})

    def test_deceased_cannot_be_heir(self):
        with pytest.raises(DomainValidationError, match="own estate"):
            SuccessionStructure(deceased_id="X", living_children=("X",))

    def test_polygamous_needs_two_houses(self):
        one = SuccessionStructure(polygamous_houses=(HouseStructure("H1", "W1"),))
        two = SuccessionStructure(polygamous_houses=(HouseStructure("H1", "W1"), HouseStructure("H2", "W2")))

        assert not one.is_polygamous
        assert two.is_polygamous


class TestHouseStructure:

    def test_unit_count(self):
        house = HouseStructure("H1", "W1", ("C1", "C2"), {"C3": ("G1",)})
        assert house.unit_count == 4

    def test_house_scoped_structure_has_no_parents(self):
        house = HouseStructure("H1", "W1", ("C1",))
        structure = house.to_succession_structure("D-001")

        assert structure.surviving_spouses == ("W1",)
        assert structure.living_children == ("C1",)
        assert structure.living_parents == ()
        assert structure.deceased_id == "D-001"

    def test_house_without_wife(self):
        house = HouseStructure("H1", children_ids=("C1",))
        assert house.to_succession_structure().surviving_spouses == ()

    def test_empty_house_id_rejected(self):
        with pytest.raises(DomainValidationError):
            HouseStructure("")


class TestBeneficiaryShare:

    def test_percentage_range_enforced(self):
        with pytest.raises(DomainValidationError, match="between 0 and 100"):
            BeneficiaryShare("B1", Decimal('100.5'), Decimal('1'), InterestType.ABSOLUTE, "x")

    def test_negative_value_rejected(self):
        with pytest.raises(DomainValidationError, match="negative"):
            BeneficiaryShare("B1", Decimal('10'), Decimal('-1'), InterestType.ABSOLUTE, "x")


def test_section_citation():
    assert KenyanLawSection.S40_POLYGAMY.citation == "Section 40 LSA"
