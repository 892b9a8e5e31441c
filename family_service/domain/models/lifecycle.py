"""
Domain Models - Lifecycle
Identity + timestamps + optimistic-concurrency version, composed into entities
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import uuid

from family_service.utils.time import now_eat_naive


def new_entity_id() -> str:
    """Generate a fresh entity identifier"""
    return str(uuid.uuid4())


@dataclass
class Lifecycle:
    """Mutable audit stamp owned by a single entity"""
    created_at: datetime
    updated_at: datetime
    version: int = 1

    @classmethod
    def start(cls, now: Optional[datetime] = None) -> "Lifecycle":
        """Stamp for a newly declared record"""
        now = now or now_eat_naive()
        return cls(created_at=now, updated_at=now, version=1)

    def touch(self, now: Optional[datetime] = None) -> int:
        """Record a mutation; returns the new version"""
        self.updated_at = now or now_eat_naive()
        self.version += 1
        return self.version
