"""Tests for a full application cycle and the plan preview."""

import pytest
from conftest import FakeDetector, FakeRecordStore

from dyndns_sync.application import Application
from dyndns_sync.backends import Backend
from dyndns_sync.exceptions import NetworkError
from dyndns_sync.models import DesiredRecord, RecordType, RemoteRecord, Zone
from dyndns_sync.reconciler import Plan

IP = "203.0.113.9"


def backend(store: FakeRecordStore, *zone_ids: str) -> Backend:
    zones = tuple(Zone(id=z, desired=(DesiredRecord(name="home", type=RecordType.A),)) for z in zone_ids)
    return Backend(provider="fake", store=store, zones=zones)


# =============================================================================
# Run Cycle
# =============================================================================


def test_cycle_syncs_every_backend(detector: FakeDetector) -> None:
    first, second = FakeRecordStore(), FakeRecordStore()
    app = Application([backend(first, "z1"), backend(second, "z2", "z3")], detector)

    report = app.run_cycle()

    assert report.ok
    assert report.current_ip == IP
    assert [r.zone_id for r in report.results] == ["z1", "z2", "z3"]
    assert len(first.writes()) == 1
    assert len(second.writes()) == 2


def test_ip_failure_aborts_cycle_before_any_provider_call(failing_detector: FakeDetector, store: FakeRecordStore) -> None:
    app = Application([backend(store, "z1")], failing_detector)

    report = app.run_cycle()

    assert not report.ok
    assert report.results == []
    assert "no route to host" in report.error
    assert report.summary().startswith("cycle aborted")
    assert store.calls == []


def test_cycle_report_lists_failed_zones(detector: FakeDetector, store: FakeRecordStore) -> None:
    store.failing_zones = {"z2"}
    app = Application([backend(store, "z1", "z2")], detector)

    report = app.run_cycle()

    assert not report.ok
    assert report.failed_zones == ["z2"]


def test_last_ip_tracks_detected_address(store: FakeRecordStore) -> None:
    app = Application([backend(store, "z1")], FakeDetector("203.0.113.1", "203.0.113.2"))

    app.run_cycle()
    assert app.last_ip == "203.0.113.1"
    app.run_cycle()
    assert app.last_ip == "203.0.113.2"


def test_cycle_rereads_remote_state_every_time(detector: FakeDetector) -> None:
    store = FakeRecordStore({"z1": [RemoteRecord(id="r1", name="home", type=RecordType.A, content=IP)]})
    app = Application([backend(store, "z1")], detector)

    app.run_cycle()
    app.run_cycle()

    assert [call for call in store.calls if call[0] == "list"] == [("list", "z1"), ("list", "z1")]


def test_cleanup_closes_stores(detector: FakeDetector, store: FakeRecordStore) -> None:
    app = Application([backend(store, "z1")], detector)

    app.cleanup()

    assert store.closed


# =============================================================================
# Plan Preview
# =============================================================================


def test_plan_cycle_does_not_write(detector: FakeDetector) -> None:
    store = FakeRecordStore()
    store.failing_zones = {"z2"}
    app = Application([backend(store, "z1", "z2")], detector)

    current_ip, plans = app.plan_cycle()

    assert current_ip == IP
    assert store.writes() == []
    (_, zone1, plan1), (_, zone2, plan2) = plans
    assert zone1.id == "z1" and isinstance(plan1, Plan) and len(plan1.actions) == 1
    assert zone2.id == "z2" and isinstance(plan2, str)


def test_plan_cycle_propagates_ip_failure(failing_detector: FakeDetector, store: FakeRecordStore) -> None:
    app = Application([backend(store, "z1")], failing_detector)

    with pytest.raises(NetworkError):
        app.plan_cycle()

    assert store.calls == []
