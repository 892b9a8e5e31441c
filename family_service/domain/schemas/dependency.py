from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from family_service.domain.models.legal import (
    AssessmentMethod,
    DependencyBasis,
    DependencyLevel,
    SupportFrequency,
)


class DependencyCalculationSchema(BaseModel):
    """Stored fields of a DependencyCalculation; derived keys are ignored on input"""

    model_config = ConfigDict(extra="ignore")

    deceased_monthly_income: Decimal
    dependant_monthly_needs: Decimal
    support_provided: Decimal
    dependency_basis: DependencyBasis
    support_start_date: date
    assessment_date: date
    assessment_method: AssessmentMethod = AssessmentMethod.INCOME_PERCENTAGE
    support_frequency: SupportFrequency = SupportFrequency.MONTHLY
    support_end_date: Optional[date] = None
    dependency_level: DependencyLevel = DependencyLevel.NONE
    dependency_percentage: Decimal = Field(default=Decimal('0'), ge=0, le=100)
    evidence_documents: List[str] = Field(default_factory=list)
    is_verified: bool = False
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None
    court_order_reference: Optional[str] = None
    court_order_date: Optional[date] = None
    special_circumstances: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, calculation) -> "DependencyCalculationSchema":
        return cls(
            deceased_monthly_income=calculation.deceased_monthly_income,
            dependant_monthly_needs=calculation.dependant_monthly_needs,
            support_provided=calculation.support_provided,
            dependency_basis=calculation.dependency_basis,
            support_start_date=calculation.support_start_date,
            assessment_date=calculation.assessment_date,
            assessment_method=calculation.assessment_method,
            support_frequency=calculation.support_frequency,
            support_end_date=calculation.support_end_date,
            dependency_level=calculation.dependency_level,
            dependency_percentage=calculation.dependency_percentage,
            evidence_documents=list(calculation.evidence_documents),
            is_verified=calculation.is_verified,
            verified_at=calculation.verified_at,
            verified_by=calculation.verified_by,
            court_order_reference=calculation.court_order_reference,
            court_order_date=calculation.court_order_date,
            special_circumstances=list(calculation.special_circumstances),
        )

    def to_domain_kwargs(self) -> Dict[str, Any]:
        data = self.model_dump()
        data['evidence_documents'] = tuple(self.evidence_documents)
        data['special_circumstances'] = tuple(self.special_circumstances)
        return data
