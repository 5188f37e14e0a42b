"""Shared fakes for the reconciler, sync and scheduler tests."""

from typing import Dict, List, Optional, Set, Tuple

import pytest

from dyndns_sync.backends import RecordStore
from dyndns_sync.exceptions import ActionFailure, NetworkError, TransportError
from dyndns_sync.models import RecordFields, RemoteRecord

# =============================================================================
# Fake Record Store
# =============================================================================


class FakeRecordStore(RecordStore):
    """In-memory record store with call tracking and injectable failures."""

    def __init__(self, records: Optional[Dict[str, List[RemoteRecord]]] = None):
        self.records: Dict[str, List[RemoteRecord]] = records or {}
        self.failing_zones: Set[str] = set()
        self.failing_names: Set[str] = set()
        self.calls: List[Tuple] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "FakeStore"

    def list(self, zone_id: str) -> List[RemoteRecord]:
        self.calls.append(("list", zone_id))
        if zone_id in self.failing_zones:
            raise TransportError(f"connection refused for {zone_id}")
        return list(self.records.get(zone_id, []))

    def create(self, zone_id: str, fields: RecordFields) -> None:
        self.calls.append(("create", zone_id, fields))
        if fields.name in self.failing_names:
            raise ActionFailure(f"create {fields.name} rejected")

    def patch(self, zone_id: str, record_id: str, fields: RecordFields) -> None:
        self.calls.append(("patch", zone_id, record_id, fields))
        if fields.name in self.failing_names:
            raise ActionFailure(f"patch {fields.name} rejected")

    def close(self) -> None:
        self.closed = True

    def writes(self) -> List[Tuple]:
        return [call for call in self.calls if call[0] != "list"]


# =============================================================================
# Fake Public IP Provider
# =============================================================================


class FakeDetector:
    """Returns queued addresses; a NetworkError instance in the queue is raised."""

    def __init__(self, *answers):
        self.answers = list(answers) or ["203.0.113.9"]
        self.calls = 0

    def current_ipv4(self) -> str:
        answer = self.answers[min(self.calls, len(self.answers) - 1)]
        self.calls += 1
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector("203.0.113.9")


@pytest.fixture
def failing_detector() -> FakeDetector:
    return FakeDetector(NetworkError("no route to host"))
