# eventseries/core/events.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

import numpy as np

from .exceptions import DuplicateEventError, InvalidEvent, UnknownEventError


def _as_times(times: Any) -> np.ndarray:
    try:
        t = np.atleast_1d(np.asarray(times, dtype=float))
    except (TypeError, ValueError) as e:
        raise InvalidEvent(f"Event times must be numeric, got {times!r}") from e
    if t.ndim != 1:
        raise InvalidEvent(f"Event times must be 1D, got shape {t.shape}")
    if not np.isfinite(t).all():
        raise InvalidEvent("Event times contain non-finite values (NaN/Inf).")
    return np.sort(t)


@dataclass(slots=True, eq=False)
class Event:
    """A named marker with zero or more occurrence times (ascending)."""

    name: str
    times: np.ndarray = field(default_factory=lambda: np.array([], dtype=float))

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidEvent("Event.name must be a non-empty string.")
        self.times = _as_times(self.times)

    @property
    def n_occurrences(self) -> int:
        return int(self.times.size)

    def __len__(self) -> int:
        return self.n_occurrences

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.name == other.name and np.array_equal(self.times, other.times)

    def copy(self) -> "Event":
        return Event(name=self.name, times=self.times.copy())


class EventRegistry:
    """
    Mapping from event name to Event, owned by a single DataSeries.

    unique:
      - False: adding an existing name appends occurrences
      - True : adding an existing name raises DuplicateEventError
    """

    __slots__ = ("_events", "unique")

    def __init__(self, events: Iterable[Event] | None = None, *, unique: bool = False) -> None:
        self._events: dict[str, Event] = {}
        self.unique = unique
        for ev in events or ():
            self.add_event(ev)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], *, unique: bool = False) -> "EventRegistry":
        reg = cls(unique=unique)
        for name, times in mapping.items():
            reg.add(name, times)
        return reg

    # ---- dict-like API ----
    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[str]:
        return iter(self._events)

    def __contains__(self, name: object) -> bool:
        return name in self._events

    def __getitem__(self, name: str) -> Event:
        return self.get(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EventRegistry):
            return NotImplemented
        if self.unique != other.unique:
            return False
        return self._events.keys() == other._events.keys() and all(
            self._events[k] == other._events[k] for k in self._events
        )

    def __repr__(self) -> str:
        counts = ", ".join(f"{k}={len(v)}" for k, v in self._events.items())
        return f"EventRegistry({counts})"

    @property
    def names(self) -> list[str]:
        return list(self._events)

    def items(self) -> Iterable[tuple[str, Event]]:
        return self._events.items()

    def get(self, name: str) -> Event:
        try:
            return self._events[name]
        except KeyError as e:
            raise UnknownEventError(name) from e

    # ---- mutation ----
    def add(self, name: str, times: Any) -> Event:
        if name in self._events:
            if self.unique:
                raise DuplicateEventError(f"Event '{name}' already exists (unique=True).")
            existing = self._events[name]
            existing.times = _as_times(np.concatenate([existing.times, _as_times(times)]))
            return existing

        ev = Event(name=name, times=times)
        self._events[name] = ev
        return ev

    def add_event(self, event: Event) -> Event:
        if not isinstance(event, Event):
            raise InvalidEvent("add_event() expects an Event instance.")
        return self.add(event.name, event.times.copy())

    def shift_all(self, delta: float) -> None:
        """Add `delta` to every occurrence of every event."""
        for ev in self._events.values():
            ev.times = ev.times + float(delta)

    def copy(self) -> "EventRegistry":
        reg = EventRegistry(unique=self.unique)
        for name, ev in self._events.items():
            reg._events[name] = ev.copy()
        return reg
