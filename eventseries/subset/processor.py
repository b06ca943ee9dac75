# eventseries/subset/processor.py
"""
Subset retrieval over a batch of series.

A processor resolves, for every series, arrays of start and stop samples (one
pair per span). The shared `get_subset` then validates, clamps stops, optionally splits,
decides whether the output can be collapsed to one series per input series,
and extracts the spans.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

import numpy as np

from ..core.batch import SeriesBatch
from ..core.exceptions import (
    AmbiguousAggregationError,
    InvalidOptions,
    InvalidRangeError,
    NotSplitEligibleError,
    OutOfRangeError,
)
from ..core.options import SubsetOptions
from ..core.series import DataSeries
from .split import get_split_indices, get_split_indices_by_percentages

logger = logging.getLogger(__name__)

# per series: 1D int array, one entry per span
Samples = list[np.ndarray]


class SubsetProcessor(ABC):
    def __init__(self, options: SubsetOptions | None = None) -> None:
        if options is None:
            options = SubsetOptions()
        if not isinstance(options, SubsetOptions):
            raise InvalidOptions("options must be a SubsetOptions instance.")
        self.options = options

    @abstractmethod
    def get_start_and_stop_samples(self, batch: SeriesBatch) -> tuple[Samples, Samples]:
        """Resolve (start_samples, stop_samples), each a list with one array per series."""

    # ---- resolution helpers ----
    @staticmethod
    def times_to_samples(series: DataSeries, times: Any, *, allow_past_end: bool = False) -> np.ndarray:
        """
        Nearest sample for each time.

        allow_past_end lets times beyond the last sample through (unclamped) so
        that get_subset can clamp and report them.
        """
        t = np.atleast_1d(np.asarray(times, dtype=float))
        if not allow_past_end:
            indices, _ = series.time.nearest_indices(t)
            return indices

        past = t > series.time.end_time
        indices = np.empty(t.shape, dtype=np.int64)
        if np.any(~past):
            indices[~past], _ = series.time.nearest_indices(t[~past])
        indices[past] = np.rint((t[past] - series.time.start_offset) / series.time.dt).astype(np.int64)
        return indices

    @staticmethod
    def check_validity_samples(start_samples: Samples, stop_samples: Samples) -> None:
        for i, (starts, stops) in enumerate(zip(start_samples, stop_samples)):
            if starts.shape != stops.shape:
                raise InvalidRangeError(
                    f"Series #{i}: {starts.size} start(s) but {stops.size} stop(s)"
                )
            if np.any(stops < starts):
                raise InvalidRangeError(f"Invalid range requested for series #{i}")

    @staticmethod
    def clamp_stop_samples(batch: SeriesBatch, start_samples: Samples, stop_samples: Samples) -> Samples:
        """
        Starts must lie inside the data (OutOfRangeError otherwise); stops past
        the last sample are clamped to it, with a warning.
        """
        clamped: Samples = []
        for i, (series, starts, stops) in enumerate(zip(batch, start_samples, stop_samples)):
            last = series.n_samples - 1
            outside = (starts < 0) | (starts > last)
            if np.any(outside):
                raise OutOfRangeError(
                    f"Series #{i}: start sample {int(starts[outside][0])} outside [0, {last}]"
                )
            for stop_i in stops[stops > last].tolist():
                logger.warning("Series #%d: stop sample %d clamped to last sample %d", i, stop_i, last)
            clamped.append(np.minimum(stops, last))
        return clamped

    def process_splits(self, start_samples: Samples, stop_samples: Samples) -> tuple[Samples, Samples]:
        if not self.options.splits_requested:
            return start_samples, stop_samples

        if any(s.size != 1 for s in start_samples):
            raise NotSplitEligibleError(
                "Splitting requires exactly one start/stop pair for each series"
            )

        new_starts: Samples = []
        new_stops: Samples = []
        for starts, stops in zip(start_samples, stop_samples):
            start, stop = int(starts[0]), int(stops[0])
            if self.options.n_parts is not None:
                s, e = get_split_indices(start, stop, self.options.n_parts)
            else:
                s, e = get_split_indices_by_percentages(start, stop, self.options.split_percentages)
            new_starts.append(s)
            new_stops.append(e)
        return new_starts, new_stops

    # ---- extraction ----
    def get_subset(self, batch: SeriesBatch) -> SeriesBatch | list[SeriesBatch]:
        start_samples, stop_samples = self.get_start_and_stop_samples(batch)
        self.check_validity_samples(start_samples, stop_samples)
        stop_samples = self.clamp_stop_samples(batch, start_samples, stop_samples)
        start_samples, stop_samples = self.process_splits(start_samples, stop_samples)

        un_collapsed = self.options.un_collapsed or self.options.splits_requested
        if not un_collapsed:
            counts = [s.size for s in start_samples]
            if any(c != 1 for c in counts):
                if all(c == 0 for c in counts):
                    raise AmbiguousAggregationError("The requested event or epoch returned no times")
                raise AmbiguousAggregationError(
                    f"Multiple spans were found per series (span counts: {counts}); "
                    "pass SubsetOptions(un_collapsed=True) to get one batch per series"
                )

        per_series: list[SeriesBatch] = []
        for series, starts, stops in zip(batch, start_samples, stop_samples):
            spans = SeriesBatch()
            for start_i, stop_i in zip(starts.tolist(), stops.tolist()):
                spans.append(self._extract_span(series, start_i, stop_i))
            per_series.append(spans)

        if un_collapsed:
            return per_series
        return SeriesBatch([spans[0] for spans in per_series])

    def _extract_span(self, series: DataSeries, start_i: int, stop_i: int) -> DataSeries:
        n_new = stop_i - start_i + 1
        new_time = series.time.subset_axis(start_i, n_new)
        new = series._derive(series.samples[start_i:stop_i + 1].copy(), new_time)
        new.add_history(f"Subset of samples {start_i} to {stop_i}")
        if self.options.align_time_to_start:
            new.zero_time_by_event(new_time.start_offset, in_place=True)
        return new


def _pick_occurrences(times: np.ndarray, index: int | None, label: str, i: int) -> np.ndarray:
    if index is None:
        return times
    n = times.size
    if not -n <= index < n:
        raise OutOfRangeError(
            f"Series #{i}: occurrence {index} of '{label}' requested, only {n} available"
        )
    return times[[index]]


class EventSubsetProcessor(SubsetProcessor):
    """
    Spans from named events.

    An occurrence index of None uses every occurrence; start and stop must then
    yield the same number of occurrences.
    """

    def __init__(
        self,
        start_event: str,
        start_index: int | None,
        stop_event: str,
        stop_index: int | None,
        options: SubsetOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.start_event = start_event
        self.start_index = start_index
        self.stop_event = stop_event
        self.stop_index = stop_index

    def get_start_and_stop_samples(self, batch: SeriesBatch) -> tuple[Samples, Samples]:
        starts: Samples = []
        stops: Samples = []
        for i, series in enumerate(batch):
            start_times = _pick_occurrences(
                series.get_event(self.start_event).times, self.start_index, self.start_event, i
            )
            stop_times = _pick_occurrences(
                series.get_event(self.stop_event).times, self.stop_index, self.stop_event, i
            )
            if start_times.size != stop_times.size:
                raise InvalidRangeError(
                    f"Series #{i}: {start_times.size} '{self.start_event}' occurrence(s) "
                    f"but {stop_times.size} '{self.stop_event}' occurrence(s)"
                )
            starts.append(self.times_to_samples(series, start_times))
            stops.append(self.times_to_samples(series, stop_times, allow_past_end=True))
        return starts, stops


def _per_series(values: Any, n_series: int, label: str) -> list[np.ndarray]:
    if np.isscalar(values):
        return [np.array([values], dtype=float) for _ in range(n_series)]
    items = list(values)
    if len(items) != n_series:
        raise InvalidOptions(
            f"{label}: expected a scalar or one value per series ({n_series}), got {len(items)}"
        )
    return [np.atleast_1d(np.asarray(v, dtype=float)) for v in items]


class TimeSubsetProcessor(SubsetProcessor):
    """
    Spans from literal values: times, or 0-based sample indices when
    options.times_are_samples is set.

    Values may be a scalar (used for every series) or a sequence with one entry
    per series; an entry may itself be a sequence to request several spans.
    """

    def __init__(
        self,
        starts: float | Sequence[Any],
        stops: float | Sequence[Any],
        options: SubsetOptions | None = None,
    ) -> None:
        super().__init__(options)
        self.starts = starts
        self.stops = stops

    def get_start_and_stop_samples(self, batch: SeriesBatch) -> tuple[Samples, Samples]:
        start_values = _per_series(self.starts, len(batch), "starts")
        stop_values = _per_series(self.stops, len(batch), "stops")

        starts: Samples = []
        stops: Samples = []
        for series, s_vals, e_vals in zip(batch, start_values, stop_values):
            if self.options.times_are_samples:
                for vals in (s_vals, e_vals):
                    if not np.all(vals == np.round(vals)):
                        raise InvalidOptions("Sample values must be integers (times_are_samples=True).")
                starts.append(s_vals.astype(np.int64))
                stops.append(e_vals.astype(np.int64))
            else:
                starts.append(self.times_to_samples(series, s_vals))
                stops.append(self.times_to_samples(series, e_vals, allow_past_end=True))
        return starts, stops
