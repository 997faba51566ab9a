"""
Tests for the FaultSchedule and FaultInjectingStore
"""

# Third Party
import pytest

# Local
from kubecommit.cache import Indexer
from kubecommit.exceptions import ConflictError, RecordNotFoundError
from kubecommit.store import FaultInjectingStore, FaultSchedule
from kubecommit.test_helpers.helpers import (
    TEST_NAME,
    TEST_NAMESPACE,
    make_conflict,
    make_record,
)

## FaultSchedule ###############################################################


def test_new_schedule_inert():
    schedule = FaultSchedule()
    assert not schedule.armed
    assert not schedule.error_ready()
    assert schedule.calls == 0


def test_schedule_after():
    """Make sure the schedule is ready only once enough calls went through"""
    schedule = FaultSchedule()
    schedule.configure(make_conflict(), after=2)
    assert schedule.armed
    assert not schedule.error_ready()
    schedule.inc()
    assert not schedule.error_ready()
    schedule.inc()
    assert schedule.error_ready()


def test_schedule_disarms_after_times():
    schedule = FaultSchedule()
    error = make_conflict()
    schedule.configure(error, times=2)
    assert schedule.consume() is error
    assert schedule.armed
    assert schedule.consume() is error
    assert not schedule.armed


def test_schedule_forever():
    schedule = FaultSchedule()
    schedule.configure(make_conflict(), times=None)
    for _ in range(10):
        schedule.consume()
    assert schedule.armed


def test_schedule_reset_keeps_calls():
    """Make sure reset disarms without forgetting the call count"""
    schedule = FaultSchedule()
    schedule.inc()
    schedule.configure(make_conflict(), after=5)
    schedule.reset()
    assert not schedule.armed
    assert schedule.after == 0
    assert schedule.calls == 1


def test_schedule_invalid_times():
    with pytest.raises(AssertionError):
        FaultSchedule().configure(make_conflict(), times=0)


## FaultInjectingStore #########################################################


def test_update_writes_into_indexer():
    """Make sure unarmed updates land in the indexer and are counted"""
    indexer = Indexer()
    store = FaultInjectingStore(indexer)
    record = make_record(status={"phase": "Scaling"})
    assert store.update(record) is record
    assert store.calls == 1
    assert indexer.get(TEST_NAMESPACE, TEST_NAME).status == {"phase": "Scaling"}


def test_update_injected_failure_counted():
    """Make sure a failing call is still counted and leaves the indexer alone"""
    indexer = Indexer([make_record(status={"phase": "Idle"})])
    store = FaultInjectingStore(indexer)
    error = make_conflict()
    store.configure(error, after=1)

    store.update(make_record(status={"phase": "Scaling"}))
    with pytest.raises(ConflictError) as exc_info:
        store.update(make_record(status={"phase": "Broken"}))
    assert exc_info.value is error
    assert store.calls == 2
    assert indexer.get(TEST_NAMESPACE, TEST_NAME).status == {"phase": "Scaling"}

    store.update(make_record(status={"phase": "Broken"}))
    assert store.calls == 3


def test_shared_schedule():
    """Make sure a schedule passed in is the one consulted"""
    schedule = FaultSchedule()
    store = FaultInjectingStore(Indexer(), schedule=schedule)
    schedule.configure(make_conflict())
    with pytest.raises(ConflictError):
        store.update(make_record())
    assert schedule.calls == 1


def test_get():
    indexer = Indexer([make_record(status={"phase": "Idle"})])
    store = FaultInjectingStore(indexer)
    fetched = store.get(TEST_NAMESPACE, TEST_NAME)
    assert fetched == indexer.get(TEST_NAMESPACE, TEST_NAME)
    assert fetched is not indexer.get(TEST_NAMESPACE, TEST_NAME)
    with pytest.raises(RecordNotFoundError):
        store.get(TEST_NAMESPACE, "missing")
