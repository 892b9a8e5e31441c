"""
Legal Dependant Repository
In-memory optimistic-concurrency store.
"""

import copy
import logging
from typing import Dict, List, Optional, Tuple

from family_service.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from family_service.domain.models import LegalDependant

logger = logging.getLogger(__name__)


class InMemoryLegalDependantRepository:
    """Repository for legal dependants (process-local)"""

    def __init__(self):
        self._records: Dict[Tuple[str, str], LegalDependant] = {}

    def get(self, deceased_id: str, dependant_id: str) -> Optional[LegalDependant]:
        record = self._records.get((deceased_id, dependant_id))
        return copy.deepcopy(record) if record is not None else None

    def get_or_raise(self, deceased_id: str, dependant_id: str) -> LegalDependant:
        record = self.get(deceased_id, dependant_id)
        if record is None:
            raise EntityNotFoundError(
                f"No dependant {dependant_id} recorded for deceased {deceased_id}"
            )
        return record

    def list_for_deceased(self, deceased_id: str) -> List[LegalDependant]:
        return [
            copy.deepcopy(record)
            for (owner, _), record in self._records.items()
            if owner == deceased_id
        ]

    def save(self, dependant: LegalDependant, expected_version: Optional[int] = None) -> None:
        """
        Store a copy of the dependant.

        expected_version is the version the caller loaded; None means insert.
        A mismatch raises ConcurrencyConflictError and leaves the store untouched.
        """
        key = dependant.key
        current = self._records.get(key)

        if expected_version is None:
            if current is not None:
                raise ConcurrencyConflictError(key, 0, current.version)
        else:
            actual = current.version if current is not None else 0
            if actual != expected_version:
                logger.warning(
                    "Version conflict saving dependant %s: expected v%d, found v%d",
                    key, expected_version, actual,
                )
                raise ConcurrencyConflictError(key, expected_version, actual)

        self._records[key] = copy.deepcopy(dependant)
        logger.debug("Saved dependant %s at v%d", key, dependant.version)

    def __len__(self) -> int:
        return len(self._records)
