"""
DEPENDENCY STATUS POLICY
Per-dependant compliance findings → overall case status

RESPONSIBILITIES:
- Flag statutory non-compliance per dependant (S.29 / S.26)
- Summarise compliance flags and statistics for the estate
- Suggest next administrative steps

RULES:
❌ Never raises for non-compliance (findings are data)
✅ A court provision order settles the dependant's position
"""

import logging
from typing import List, Optional, Sequence

from family_service.domain.exceptions import DomainValidationError
from family_service.domain.models import (
    DEFAULT_RULES,
    CaseStatus,
    ComplianceFinding,
    DependencyStatusReport,
    KenyanLawSection,
    LegalDependant,
    LegalRules,
    S26ClaimStatus,
    Severity,
)
from family_service.domain.models.legal import COURT_PROVISION_BASES
from family_service.utils.money import HUNDRED

logger = logging.getLogger(__name__)


class DependencyStatusPolicy:
    """
    Dependency Status Policy
    Aggregates dependant records into a compliance report
    """

    def __init__(self, rules: LegalRules = DEFAULT_RULES):
        self.rules = rules

    def evaluate_s29_compliance(self, dependant: LegalDependant) -> List[ComplianceFinding]:
        findings = []

        def add(code: str, message: str, severity: Severity, section=KenyanLawSection.S29_DEPENDANTS):
            findings.append(ComplianceFinding(
                dependant_id=dependant.dependant_id,
                code=code,
                message=message,
                severity=severity,
                section=section,
            ))

        if dependant.provision_order_issued:
            add(
                "COURT_ORDER_IN_FORCE",
                f"Provision fixed by court order {dependant.court_order_number}",
                Severity.INFO,
                KenyanLawSection.S26_DEPENDANT_PROVISION,
            )
            return findings

        if dependant.is_priority_dependant:
            if dependant.dependency_percentage < HUNDRED:
                add(
                    "PRIORITY_NOT_FULL",
                    f"Priority dependant recorded at {dependant.dependency_percentage}%; "
                    "S.29(a) dependants are fully dependent",
                    Severity.VIOLATION,
                )
        else:
            if not dependant.has_evidence:
                add(
                    "MISSING_EVIDENCE",
                    "Non-priority dependant has no supporting evidence of maintenance",
                    Severity.VIOLATION,
                )
            elif dependant.verified_by_court_at is None:
                add(
                    "UNVERIFIED_EVIDENCE",
                    "Evidence of maintenance has not been verified",
                    Severity.WARNING,
                )
            if dependant.dependency_percentage < self.rules.non_priority_min_pct:
                add(
                    "BELOW_DEPENDENCY_THRESHOLD",
                    f"Dependency of {dependant.dependency_percentage}% is below the "
                    f"{self.rules.non_priority_min_pct}% minimum for non-priority dependants",
                    Severity.VIOLATION,
                )

        if dependant.s26_claim_status == S26ClaimStatus.PENDING:
            add(
                "S26_CLAIM_PENDING",
                "S.26 application awaiting court determination",
                Severity.WARNING,
                KenyanLawSection.S26_DEPENDANT_PROVISION,
            )

        if dependant.is_minor and not dependant.custodial_parent_id:
            add(
                "MINOR_WITHOUT_CUSTODIAN",
                "Minor dependant has no custodial parent or guardian recorded",
                Severity.WARNING,
                KenyanLawSection.S71_COURT_GUARDIAN,
            )

        return findings

    def evaluate_status(
        self,
        dependants: Sequence[LegalDependant],
        deceased_id: Optional[str] = None,
    ) -> DependencyStatusReport:
        deceased_ids = {d.deceased_id for d in dependants}
        if deceased_id is not None:
            deceased_ids.add(deceased_id)
        if len(deceased_ids) > 1:
            raise DomainValidationError(
                f"Dependants belong to more than one deceased: {sorted(deceased_ids)}"
            )
        deceased_id = deceased_id or (next(iter(deceased_ids)) if deceased_ids else None)

        if not dependants:
            return DependencyStatusReport(
                deceased_id=deceased_id,
                status=CaseStatus.NO_DEPENDANTS,
                statistics={'total_dependants': 0},
                next_steps=("Confirm with the family that no S.29 dependants exist",),
            )

        findings = []
        for dependant in dependants:
            findings.extend(self.evaluate_s29_compliance(dependant))

        violations = [f for f in findings if f.severity == Severity.VIOLATION]
        warnings = [f for f in findings if f.severity == Severity.WARNING]
        pending_claims = [d for d in dependants if d.s26_claim_status == S26ClaimStatus.PENDING]
        needs_order = [d for d in dependants if d.dependency_basis in COURT_PROVISION_BASES]
        non_priority = [d for d in dependants if not d.is_priority_dependant]

        if pending_claims:
            status = CaseStatus.PENDING_COURT_ORDER
        elif violations:
            status = CaseStatus.NON_COMPLIANT
        elif warnings:
            status = CaseStatus.REQUIRES_REVIEW
        else:
            status = CaseStatus.COMPLIANT

        statistics = {
            'total_dependants': len(dependants),
            'priority_dependants': len(dependants) - len(non_priority),
            'non_priority_dependants': len(non_priority),
            's26_claimants': sum(1 for d in dependants if d.is_claimant),
            'pending_s26_claims': len(pending_claims),
            'court_orders': sum(1 for d in dependants if d.provision_order_issued),
            'minors': sum(1 for d in dependants if d.is_minor),
            'with_disability': sum(1 for d in dependants if d.has_disability),
            'violations': len(violations),
            'warnings': len(warnings),
        }

        report = DependencyStatusReport(
            deceased_id=deceased_id,
            status=status,
            findings=tuple(findings),
            s29_compliant=not violations,
            s26_claims_resolved=not pending_claims,
            court_orders_filed=all(d.provision_order_issued for d in needs_order),
            evidence_complete=all(
                d.has_evidence or d.provision_order_issued for d in non_priority
            ),
            statistics=statistics,
            next_steps=tuple(self._next_steps(findings, pending_claims)),
        )
        logger.info(
            "Dependency status for %s: %s (%d violation(s), %d warning(s))",
            deceased_id,
            status.value,
            len(violations),
            len(warnings),
        )
        return report

    @staticmethod
    def _next_steps(findings: Sequence[ComplianceFinding], pending_claims) -> List[str]:
        codes = {f.code for f in findings}
        steps = []
        if pending_claims:
            steps.append(f"Obtain court determination of {len(pending_claims)} pending S.26 claim(s)")
        if 'MISSING_EVIDENCE' in codes:
            steps.append("Collect evidence of maintenance for non-priority dependants")
        if 'UNVERIFIED_EVIDENCE' in codes:
            steps.append("Have submitted evidence verified")
        if 'PRIORITY_NOT_FULL' in codes:
            steps.append("Correct dependency level of spouses and children to FULL")
        if 'BELOW_DEPENDENCY_THRESHOLD' in codes:
            steps.append("Reassess or withdraw dependants below the dependency threshold")
        if 'MINOR_WITHOUT_CUSTODIAN' in codes:
            steps.append("Record a custodial parent or apply for guardianship of minor dependants")
        if not steps:
            steps.append("Proceed to confirmation of grant")
        return steps
