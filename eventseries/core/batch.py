# eventseries/core/batch.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence, overload

import numpy as np

from .events import Event
from .exceptions import InvalidOptions, InvalidSeries, MixedUnitsError
from .filters import SeriesFilter
from .options import DecimateOptions, SubsetOptions
from .series import DataSeries
from .units import DEFAULT_UNITS, UnitTable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SeriesBatch:
    """
    Ordered batch of DataSeries processed together.

    Design goals:
    - list-like access: batch[0], len(batch), iteration
    - fail fast: every series is resolved/validated before any is modified
    - same copy/mutate duality as DataSeries (in_place flag)
    """
    series: list[DataSeries] = field(default_factory=list)

    def __post_init__(self) -> None:
        items = list(self.series)
        for s in items:
            if not isinstance(s, DataSeries):
                raise InvalidSeries("SeriesBatch items must be DataSeries instances.")
        self.series = items

    # ---- list-like API ----
    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> Iterator[DataSeries]:
        return iter(self.series)

    @overload
    def __getitem__(self, index: int) -> DataSeries: ...

    @overload
    def __getitem__(self, index: slice) -> "SeriesBatch": ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return SeriesBatch(self.series[index])
        return self.series[index]

    def append(self, series: DataSeries) -> None:
        if not isinstance(series, DataSeries):
            raise InvalidSeries("append() expects a DataSeries instance.")
        self.series.append(series)

    def copy(self) -> "SeriesBatch":
        return SeriesBatch([s.copy() for s in self.series])

    def _target(self, in_place: bool) -> "SeriesBatch":
        return self if in_place else self.copy()

    # ---- events ----
    def get_event(self, name: str) -> list[Event]:
        """The named event from every series, in batch order."""
        return [s.get_event(name) for s in self.series]

    # ---- time changing ----
    def zero_time_by_event(
        self,
        event_name_or_times: str | float | Sequence[float],
        *,
        in_place: bool = False,
    ) -> "SeriesBatch":
        """
        Zero each series' timeline at a named event (exactly one occurrence per
        series) or at one externally supplied time per series.
        """
        if isinstance(event_name_or_times, str):
            refs: list[Any] = [event_name_or_times] * len(self)
        else:
            times = np.atleast_1d(np.asarray(event_name_or_times, dtype=float))
            if times.size != len(self):
                raise InvalidOptions(
                    f"Expected one zero time per series ({len(self)}), got {times.size}"
                )
            refs = [float(t) for t in times]

        resolved = [s.resolve_zero_time(ref) for s, ref in zip(self.series, refs)]

        target = self._target(in_place)
        for s, (t, entry) in zip(target.series, resolved):
            s._shift_time(-t)
            s.add_history(entry)
        return target

    def remove_time_gaps(self, *, in_place: bool = False) -> "SeriesBatch":
        """Lay the series end to end starting at t=0 (absolute start dropped)."""
        target = self._target(in_place)
        last_time = 0.0
        for s in target.series:
            s._shift_time(last_time - s.time.start_offset)
            s.time.start_datetime = None
            last_time = s.time.start_offset + s.time.duration
        return target

    def get_subset(
        self,
        start_ref: Any,
        start_index: int | None = None,
        stop_ref: Any = None,
        stop_index: int | None = None,
        options: SubsetOptions | None = None,
    ) -> "SeriesBatch | list[SeriesBatch]":
        """
        Subset every series.

        Calling forms:
        - get_subset("start_event", 0, "stop_event", 0)  event + occurrence index
        - get_subset("start_event", None, "stop_event", None)  every occurrence
        - get_subset(start_times, None, stop_times, None)  times (or samples, see
          SubsetOptions.times_are_samples), scalar or one value per series
        """
        from ..subset.processor import EventSubsetProcessor, TimeSubsetProcessor

        if isinstance(start_ref, str):
            if not isinstance(stop_ref, str):
                raise InvalidOptions("stop_ref must be an event name when start_ref is one.")
            processor = EventSubsetProcessor(start_ref, start_index, stop_ref, stop_index, options)
        else:
            if stop_ref is None:
                raise InvalidOptions("stop_ref is required.")
            processor = TimeSubsetProcessor(start_ref, stop_ref, options)
        return processor.get_subset(self)

    # ---- data changing ----
    def decimate(
        self,
        bin_width: float,
        approach: str | None = None,
        *,
        options: DecimateOptions | None = None,
    ) -> "SeriesBatch":
        return SeriesBatch([s.decimate(bin_width, approach, options=options) for s in self.series])

    def filter(
        self,
        filters: SeriesFilter | Sequence[SeriesFilter],
        *,
        subtract_filter_result: bool = False,
        in_place: bool = False,
    ) -> "SeriesBatch":
        results = [
            s.filter(filters, subtract_filter_result=subtract_filter_result)
            for s in self.series
        ]
        if not in_place:
            return SeriesBatch(results)
        for s, r in zip(self.series, results):
            s.samples = r.samples
            s.history = r.history
        return self

    def mean_subtract(self, *, axis: int = 0, in_place: bool = False) -> "SeriesBatch":
        target = self._target(in_place)
        for s in target.series:
            s.mean_subtract(axis=axis, in_place=True)
        return target

    def change_units(
        self,
        new_units: str,
        *,
        in_place: bool = False,
        table: UnitTable | None = None,
    ) -> "SeriesBatch":
        """Convert every series; all series must currently share the same units."""
        if not self.series:
            return self._target(in_place)

        current = self.series[0].units
        mixed = sorted({s.units for s in self.series if s.units != current})
        if mixed:
            raise MixedUnitsError(
                f"Not all units match the first series ('{current}'): also found {mixed}"
            )
        (table or DEFAULT_UNITS).get_converter(current, new_units)

        target = self._target(in_place)
        for s in target.series:
            s.change_units(new_units, in_place=True, table=table)
        logger.debug("change_units: %d series %s -> %s", len(target), current, new_units)
        return target

    # ---- misc ----
    @property
    def units(self) -> list[str]:
        return [s.units for s in self.series]

    def extend(self, series: Iterable[DataSeries]) -> None:
        for s in series:
            self.append(s)
