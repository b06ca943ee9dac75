# test/test_events.py
import numpy as np
import pytest

from eventseries.core.events import Event, EventRegistry
from eventseries.core.exceptions import DuplicateEventError, InvalidEvent, UnknownEventError


def test_event_sorts_times():
    ev = Event(name="stim", times=[3.0, 1.0, 2.0])
    assert ev.times.tolist() == [1.0, 2.0, 3.0]
    assert ev.n_occurrences == 3


def test_event_allows_zero_occurrences():
    ev = Event(name="none")
    assert len(ev) == 0


def test_event_rejects_bad_inputs():
    with pytest.raises(InvalidEvent):
        Event(name="  ", times=[1.0])
    with pytest.raises(InvalidEvent):
        Event(name="x", times=[1.0, np.nan])
    with pytest.raises(InvalidEvent):
        Event(name="x", times=[[1.0, 2.0]])


def test_registry_add_and_append():
    reg = EventRegistry()
    reg.add("stim", [5.0])
    reg.add("stim", [1.0, 3.0])
    assert reg.get("stim").times.tolist() == [1.0, 3.0, 5.0]
    assert "stim" in reg
    assert len(reg) == 1
    assert reg.names == ["stim"]


def test_registry_unique_rejects_duplicates():
    reg = EventRegistry(unique=True)
    reg.add("stim", [1.0])
    with pytest.raises(DuplicateEventError):
        reg.add("stim", [2.0])


def test_registry_get_missing_raises_keyerror():
    reg = EventRegistry()
    with pytest.raises(UnknownEventError):
        reg.get("missing")
    with pytest.raises(KeyError):
        _ = reg["missing"]


def test_shift_all():
    reg = EventRegistry.from_mapping({"a": [1.0, 2.0], "b": [10.0]})
    reg.shift_all(-1.0)
    assert reg["a"].times.tolist() == [0.0, 1.0]
    assert reg["b"].times.tolist() == [9.0]


def test_copy_is_deep():
    reg = EventRegistry.from_mapping({"a": [1.0]})
    cp = reg.copy()
    assert cp == reg

    cp.shift_all(5.0)
    cp.add("b", [0.0])
    assert reg["a"].times.tolist() == [1.0]
    assert "b" not in reg
    assert cp != reg


def test_add_event_copies_times():
    ev = Event(name="x", times=[1.0])
    reg = EventRegistry([ev])
    reg.shift_all(1.0)
    assert ev.times.tolist() == [1.0]


def test_equality_includes_unique_policy():
    a = EventRegistry.from_mapping({"a": [1.0]})
    b = EventRegistry.from_mapping({"a": [1.0]}, unique=True)
    assert a != b
    assert b.copy() == b
