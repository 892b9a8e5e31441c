"""
Legal dependant repository protocol for type hints.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from family_service.domain.models import LegalDependant


@runtime_checkable
class LegalDependantRepository(Protocol):
    """Keyed by (deceased_id, dependant_id); records are never deleted"""

    def get(self, deceased_id: str, dependant_id: str) -> Optional[LegalDependant]:
        ...

    def list_for_deceased(self, deceased_id: str) -> List[LegalDependant]:
        ...

    def save(self, dependant: LegalDependant, expected_version: Optional[int] = None) -> None:
        """Insert when expected_version is None, else compare-and-swap on version"""
        ...
