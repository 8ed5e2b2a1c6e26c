import logging
import threading
import time
from datetime import datetime, timezone

import pytest

from covid_dashboard.config import DashboardConfig
from covid_dashboard.models import NOT_READY, NotReady, Snapshot
from covid_dashboard.scheduler import SnapshotScheduler


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return False


class CycleBuilder:
    """Stamps every field of the snapshot with the cycle number."""

    def __init__(self, fail_on=(), block=None):
        self.config = DashboardConfig(refresh_interval=0.01)
        self.cycle = 0
        self.fail_on = set(fail_on)
        self.block = block
        self.entered = threading.Event()

    def build(self):
        self.cycle += 1
        cycle = self.cycle
        self.entered.set()
        if self.block is not None:
            self.block.wait(5)
        if cycle in self.fail_on:
            raise ConnectionError(f"upstream unavailable on cycle {cycle}")
        return Snapshot(
            global_stats=None,
            series=(cycle,) * 3,
            countries=(cycle,) * 5,
            forecast=(cycle,) * 2,
            generated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )


def test_not_ready_before_first_publish(builder):
    scheduler = SnapshotScheduler(builder)

    current = scheduler.current_snapshot()
    assert current is NOT_READY
    assert not current
    assert NotReady() is NOT_READY
    assert scheduler.generation == 0


def test_refresh_publishes_whole_snapshot(builder):
    scheduler = SnapshotScheduler(builder)

    assert scheduler.refresh() is True
    snapshot = scheduler.current_snapshot()
    assert isinstance(snapshot, Snapshot)
    assert len(snapshot.series) == 52
    assert len(snapshot.countries) == 15
    assert len(snapshot.forecast) == 30
    assert scheduler.generation == 1


def test_refresh_replaces_rather_than_mutates(builder):
    scheduler = SnapshotScheduler(builder)
    scheduler.refresh()
    first = scheduler.current_snapshot()
    frozen = first.to_dict()

    scheduler.refresh()
    assert scheduler.current_snapshot() is not first
    assert first.to_dict() == frozen


def test_failed_refresh_keeps_last_good_snapshot(caplog):
    builder = CycleBuilder(fail_on={2})
    scheduler = SnapshotScheduler(builder)

    assert scheduler.refresh() is True
    good = scheduler.current_snapshot()

    with caplog.at_level(logging.ERROR, logger="covid_dashboard.scheduler"):
        assert scheduler.refresh() is False

    assert scheduler.current_snapshot() is good
    assert scheduler.generation == 1
    assert "snapshot generation failed" in caplog.text

    assert scheduler.refresh() is True
    assert scheduler.current_snapshot().series == (3, 3, 3)


def test_failure_before_first_publish_stays_not_ready():
    scheduler = SnapshotScheduler(CycleBuilder(fail_on={1}))

    assert scheduler.refresh() is False
    assert scheduler.current_snapshot() is NOT_READY


def test_overlapping_refresh_is_skipped():
    release = threading.Event()
    builder = CycleBuilder(block=release)
    scheduler = SnapshotScheduler(builder)

    worker = threading.Thread(target=scheduler.refresh)
    worker.start()
    assert builder.entered.wait(5)

    assert scheduler.refresh() is False

    release.set()
    worker.join(5)
    assert builder.cycle == 1
    assert scheduler.generation == 1


def test_start_publishes_immediately_and_refreshes_periodically():
    scheduler = SnapshotScheduler(CycleBuilder(), interval=0.01)

    handle = scheduler.start()
    try:
        assert scheduler.current_snapshot() is not NOT_READY
        assert handle.active
        assert scheduler.running
        assert wait_until(lambda: scheduler.generation >= 3)
    finally:
        scheduler.stop()


def test_start_is_idempotent_while_running():
    scheduler = SnapshotScheduler(CycleBuilder(), interval=10)

    first = scheduler.start()
    try:
        assert scheduler.start() is first
        assert scheduler.generation == 1
    finally:
        scheduler.stop()


def test_stop_cancels_further_publishes():
    scheduler = SnapshotScheduler(CycleBuilder(), interval=0.01)
    handle = scheduler.start()
    assert wait_until(lambda: scheduler.generation >= 2)

    scheduler.stop()
    stopped_at = scheduler.generation
    time.sleep(0.1)

    assert scheduler.generation == stopped_at
    assert not handle.active
    assert not scheduler.running


def test_stop_without_start_is_noop(builder):
    scheduler = SnapshotScheduler(builder)
    scheduler.stop()
    assert scheduler.current_snapshot() is NOT_READY


def test_readers_never_see_mixed_cycles():
    scheduler = SnapshotScheduler(CycleBuilder(), interval=0.001)
    mismatches = []
    done = threading.Event()

    def reader():
        while not done.is_set():
            snap = scheduler.current_snapshot()
            if snap is NOT_READY:
                continue
            if {snap.series[0], snap.countries[0], snap.forecast[0]} != {snap.series[0]}:
                mismatches.append(snap)

    readers = [threading.Thread(target=reader) for _ in range(3)]
    for t in readers:
        t.start()
    scheduler.start()
    try:
        assert wait_until(lambda: scheduler.generation >= 20)
    finally:
        scheduler.stop()
        done.set()
        for t in readers:
            t.join(5)

    assert mismatches == []


def test_interval_defaults_to_config(builder):
    assert SnapshotScheduler(builder).interval == 0.01


def test_non_positive_interval_rejected(builder):
    with pytest.raises(ValueError):
        SnapshotScheduler(builder, interval=0)
