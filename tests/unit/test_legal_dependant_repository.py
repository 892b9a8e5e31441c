import pytest
from datetime import datetime

from family_service.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from family_service.domain.models import DependencyBasis
from family_service.infrastructure.repositories.legal_dependant_repository import (
    InMemoryLegalDependantRepository,
)
from family_service.infrastructure.repositories.types import LegalDependantRepository


LATER = datetime(2024, 2, 1, 12, 0)


@pytest.fixture
def repo():
    return InMemoryLegalDependantRepository()


@pytest.mark.unit
def test_insert_and_get_returns_copy(repo, declare):
    dependant = declare()
    repo.save(dependant)

    loaded = repo.get("D-001", "P-001")
    loaded.add_evidence("DOC-1", now=LATER)

    assert repo.get("D-001", "P-001").evidence_documents == []
    assert loaded.version == 2


@pytest.mark.unit
def test_duplicate_insert_conflicts(repo, declare):
    repo.save(declare())

    with pytest.raises(ConcurrencyConflictError):
        repo.save(declare())


@pytest.mark.unit
def test_update_with_matching_version(repo, declare):
    repo.save(declare())

    loaded = repo.get("D-001", "P-001")
    expected = loaded.version
    loaded.add_evidence("DOC-1", now=LATER)
    repo.save(loaded, expected_version=expected)

    assert repo.get("D-001", "P-001").version == 2


@pytest.mark.unit
def test_stale_write_is_rejected_and_retryable(repo, declare):
    repo.save(declare())

    first = repo.get("D-001", "P-001")
    second = repo.get("D-001", "P-001")

    first.add_evidence("DOC-1", now=LATER)
    repo.save(first, expected_version=1)

    second.add_evidence("DOC-2", now=LATER)
    with pytest.raises(ConcurrencyConflictError) as exc:
        repo.save(second, expected_version=1)

    assert exc.value.retryable
    assert exc.value.actual_version == 2
    assert repo.get("D-001", "P-001").evidence_documents == ["DOC-1"]


@pytest.mark.unit
def test_update_of_missing_record_conflicts(repo, declare):
    with pytest.raises(ConcurrencyConflictError):
        repo.save(declare(), expected_version=1)


@pytest.mark.unit
def test_list_for_deceased(repo, declare):
    repo.save(declare("P-001", DependencyBasis.SPOUSE))
    repo.save(declare("P-002", DependencyBasis.CHILD))

    assert {d.dependant_id for d in repo.list_for_deceased("D-001")} == {"P-001", "P-002"}
    assert repo.list_for_deceased("D-999") == []
    assert len(repo) == 2


@pytest.mark.unit
def test_get_or_raise(repo):
    assert repo.get("D-001", "P-404") is None
    with pytest.raises(EntityNotFoundError):
        repo.get_or_raise("D-001", "P-404")


@pytest.mark.unit
def test_satisfies_repository_protocol(repo):
    assert isinstance(repo, LegalDependantRepository)
