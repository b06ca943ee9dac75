# eventseries/core/series.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping, Sequence

import numpy as np

from .events import Event, EventRegistry
from .exceptions import (
    AmbiguousEventError,
    InvalidHistoryEntry,
    InvalidOptions,
    InvalidRangeError,
    InvalidSeries,
    OutOfRangeError,
    UnsupportedShapeError,
)
from .filters import SeriesFilter
from .options import AlignOptions, DecimateOptions, SubsetOptions
from .reductions import get_reduction
from .time_axis import TimeAxis
from .units import DEFAULT_UNITS, UnitTable

if TYPE_CHECKING:
    from .batch import SeriesBatch

logger = logging.getLogger(__name__)

# A single sample spread over this many channels is almost always a transposed input.
MIN_CHANNELS_FOR_WARNING = 50


def _as_samples(samples: Any) -> np.ndarray:
    d = np.asarray(samples)
    if d.ndim == 1:
        return d.reshape(-1, 1, 1)
    if d.ndim == 2:
        return d[:, :, np.newaxis]
    if d.ndim == 3:
        return d
    raise InvalidSeries(f"`samples` must be 1D, 2D or 3D, got shape {d.shape}")


def _as_registry(events: Any) -> EventRegistry:
    if events is None:
        return EventRegistry()
    if isinstance(events, EventRegistry):
        return events.copy()
    if isinstance(events, Mapping):
        return EventRegistry.from_mapping(events)
    if isinstance(events, Event):
        return EventRegistry([events])
    return EventRegistry(events)


@dataclass(slots=True, eq=False)
class DataSeries:
    """
    Samples [n_samples x n_channels x n_reps] bound to a uniform timeline,
    named events and a processing history.

    `time` may be a TimeAxis or a scalar dt (axis starting at 0).

    Every transform takes `in_place`:
      - False (default): work on a deep copy and return it, self is untouched
      - True            : mutate self and return self

    The time axis and the event registry are always shifted together, so event
    times stay expressed on the series' own timeline.
    """

    samples: np.ndarray = field(repr=False)
    time: TimeAxis | float
    units: str = "Unknown"
    events: EventRegistry | Mapping[str, Any] | Iterable[Event] | None = field(default=None, repr=False)
    history: list[str] | None = field(default=None, repr=False)
    channel_labels: list[str] | None = field(default=None, repr=False)
    y_label: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        d = _as_samples(self.samples)
        n_samples = d.shape[0]

        if isinstance(self.time, TimeAxis):
            axis = self.time.copy()
        elif isinstance(self.time, (int, float, np.integer, np.floating)) and not isinstance(self.time, bool):
            axis = TimeAxis(dt=float(self.time), n_samples=n_samples)
        else:
            raise InvalidSeries("`time` must be a TimeAxis or a scalar dt.")

        if axis.n_samples != n_samples:
            raise InvalidSeries(
                f"`samples` has {n_samples} samples but the time axis has {axis.n_samples}"
            )

        if not isinstance(self.units, str):
            raise InvalidSeries("`units` must be a string.")
        if not isinstance(self.y_label, str):
            raise InvalidSeries("`y_label` must be a string.")

        if self.channel_labels is not None:
            labels = [str(x) for x in self.channel_labels]
            if len(labels) != d.shape[1]:
                raise InvalidSeries(
                    f"{len(labels)} channel labels given for {d.shape[1]} channels"
                )
            self.channel_labels = labels

        self.samples = d
        self.time = axis
        self.events = _as_registry(self.events)

        seed = self.history
        self.history = []
        if seed is not None:
            if isinstance(seed, str):
                raise InvalidSeries("`history` must be a sequence of strings, not a string.")
            self.add_history(list(seed))

        if n_samples == 1 and d.shape[1] >= MIN_CHANNELS_FOR_WARNING:
            logger.warning(
                "Series has %d channels with 1 sample each, perhaps the input "
                "should be transposed to %d samples of 1 channel",
                d.shape[1],
                d.shape[1],
            )

    # ---- shape ----
    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[0])

    @property
    def n_channels(self) -> int:
        return int(self.samples.shape[1])

    @property
    def n_reps(self) -> int:
        return int(self.samples.shape[2])

    @property
    def event_names(self) -> list[str]:
        return self.events.names

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataSeries):
            return NotImplemented
        return (
            self.samples.shape == other.samples.shape
            and np.array_equal(self.samples, other.samples)
            and self.time == other.time
            and self.events == other.events
            and self.units == other.units
            and self.history == other.history
            and self.channel_labels == other.channel_labels
            and self.y_label == other.y_label
        )

    # ---- construction related ----
    def copy(self) -> "DataSeries":
        """Deep copy: shares no mutable state with self."""
        return DataSeries(
            samples=self.samples.copy(),
            time=self.time.copy(),
            units=self.units,
            events=self.events.copy(),
            history=list(self.history),
            channel_labels=None if self.channel_labels is None else list(self.channel_labels),
            y_label=self.y_label,
        )

    def export(self) -> dict[str, Any]:
        from ..io.record import series_to_record

        return series_to_record(self)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "DataSeries":
        from ..io.record import series_from_record

        return series_from_record(record)

    def _derive(self, samples: np.ndarray, time: TimeAxis) -> "DataSeries":
        """New series with self's events, history and labels but new samples/time."""
        return DataSeries(
            samples=samples,
            time=time,
            units=self.units,
            events=self.events.copy(),
            history=list(self.history),
            channel_labels=None if self.channel_labels is None else list(self.channel_labels),
            y_label=self.y_label,
        )

    def _target(self, in_place: bool) -> "DataSeries":
        return self if in_place else self.copy()

    # ---- events and history ----
    def add_history(self, entries: str | Sequence[str]) -> None:
        if isinstance(entries, str):
            entries = [entries]
        new_entries = list(entries)
        for entry in new_entries:
            if not isinstance(entry, str) or not entry.strip():
                raise InvalidHistoryEntry(f"History entries must be non-empty strings, got {entry!r}")
        self.history.extend(new_entries)

    def add_events(self, name_or_event: str | Event, times: Any = None) -> Event:
        if isinstance(name_or_event, Event):
            return self.events.add_event(name_or_event)
        return self.events.add(name_or_event, times)

    def get_event(self, name: str) -> Event:
        return self.events.get(name)

    # ---- time changing ----
    def _shift_time(self, delta: float) -> None:
        # Axis and events move together, never one without the other.
        self.time.shift_start(delta)
        self.events.shift_all(delta)

    def resolve_zero_time(self, event_name_or_time: str | float) -> tuple[float, str]:
        """Time that zero_time_by_event() would move to t=0, plus its history entry."""
        if isinstance(event_name_or_time, str):
            ev = self.events.get(event_name_or_time)
            if ev.n_occurrences != 1:
                raise AmbiguousEventError(
                    f"Event '{ev.name}' has {ev.n_occurrences} occurrences, exactly 1 is required"
                )
            return float(ev.times[0]), f"Timeline zeroed by {ev.name}"

        t = float(event_name_or_time)
        if not np.isfinite(t):
            raise OutOfRangeError("Zero time must be finite.")
        return t, f"Timeline zeroed by time {t:g}"

    def zero_time_by_event(self, event_name_or_time: str | float, *, in_place: bool = False) -> "DataSeries":
        """Redefine time so that the event (or given time) is at t=0."""
        t, entry = self.resolve_zero_time(event_name_or_time)
        target = self._target(in_place)
        target._shift_time(-t)
        target.add_history(entry)
        logger.debug("zero_time_by_event: shifted by %g (in_place=%s)", -t, in_place)
        return target

    def get_subset(
        self,
        start_ref: Any,
        start_index: int | None = None,
        stop_ref: Any = None,
        stop_index: int | None = None,
        options: SubsetOptions | None = None,
    ) -> "DataSeries | list[DataSeries]":
        """
        Subset by event name + occurrence index, or by time (or sample) values.

        Returns a list when options.un_collapsed is set or splitting is requested.
        """
        from .batch import SeriesBatch

        result = SeriesBatch([self]).get_subset(start_ref, start_index, stop_ref, stop_index, options)
        if isinstance(result, list):
            return list(result[0])
        return result[0]

    def get_data_aligned_to_event(
        self,
        event_times: Any,
        time_window: Sequence[float],
        options: AlignOptions | None = None,
    ) -> "DataSeries":
        """
        Cut a fixed window around each event time and stack along repetitions.

        The window length (in samples) is derived from the first event and reused
        for the others. Time 0 of the result is the event sample.
        """
        options = options or AlignOptions()
        if self.n_reps != 1:
            raise UnsupportedShapeError(
                f"Aligned windows need a single repetition, series has {self.n_reps}"
            )

        times = np.atleast_1d(np.asarray(event_times, dtype=float))
        if times.size == 0:
            raise OutOfRangeError("No event times given.")
        if len(time_window) != 2:
            raise InvalidOptions("time_window must be a (min, max) pair.")
        w_min, w_max = float(time_window[0]), float(time_window[1])
        if w_max < w_min:
            raise InvalidRangeError(f"time_window max {w_max} is before min {w_min}")

        indices, _ = self.time.nearest_indices(times)
        first_start, _ = self.time.nearest_index(times[0] + w_min)
        first_end, _ = self.time.nearest_index(times[0] + w_max)
        d_start = int(indices[0] - first_start)
        d_end = int(first_end - indices[0])
        n_new = d_start + d_end + 1

        starts = indices - d_start
        ends = indices + d_end
        if np.any(starts < 0) or np.any(ends > self.n_samples - 1):
            raise OutOfRangeError("At least one event window extends beyond the data.")

        if not options.allow_overlap and times.size > 1:
            order = np.argsort(starts)
            if np.any(starts[order][1:] <= ends[order][:-1]):
                raise InvalidRangeError("Event windows overlap (allow_overlap=False).")

        new_data = np.empty((n_new, self.n_channels, times.size), dtype=self.samples.dtype)
        for i, (s, e) in enumerate(zip(starts, ends)):
            new_data[:, :, i] = self.samples[s:e + 1, :, 0]

        new_time = TimeAxis(
            dt=self.time.dt,
            n_samples=n_new,
            start_offset=-d_start * self.time.dt,
        )
        out = DataSeries(
            samples=new_data,
            time=new_time,
            units=self.units,
            history=list(self.history),
            channel_labels=None if self.channel_labels is None else list(self.channel_labels),
            y_label=self.y_label,
        )
        out.add_history(
            f"Data aligned to {times.size} event(s) with window [{w_min:g}, {w_max:g}]s"
        )
        return out

    # ---- data changing ----
    def decimate(
        self,
        bin_width: float,
        approach: str | None = None,
        *,
        options: DecimateOptions | None = None,
    ) -> "DataSeries":
        """
        Reduce fixed-width, non-overlapping bins to one sample each.

        The bin width is rounded to a whole number of samples; the new timeline
        is shifted by half a bin so that samples sit at bin centers.
        """
        if options is not None and approach is not None:
            raise InvalidOptions("Pass the approach either directly or through options, not both.")
        options = options or DecimateOptions(approach=approach or "mean_absolute")
        reduce = get_reduction(options.approach)
        if not bin_width > 0:
            raise InvalidOptions(f"bin_width must be > 0, got {bin_width}")

        width = max(1, int(round(bin_width / self.time.dt)))
        n_bins = self.n_samples // width
        if options.allow_last_bin and self.n_samples % width:
            n_bins += 1

        new_data = np.empty((n_bins, self.n_channels, self.n_reps), dtype=float)
        for i in range(n_bins):
            new_data[i] = reduce(self.samples[i * width:(i + 1) * width])

        new_dt = width * self.time.dt
        new_time = TimeAxis(
            dt=new_dt,
            n_samples=n_bins,
            start_offset=self.time.start_offset + new_dt / 2,
            start_datetime=self.time.start_datetime,
        )
        out = self._derive(new_data, new_time)
        out.add_history(f"Data decimated via decimate() with {bin_width:g}s width ({options.approach})")
        logger.debug("decimate: %d samples -> %d bins of %d", self.n_samples, n_bins, width)
        return out

    def filter(
        self,
        filters: SeriesFilter | Sequence[SeriesFilter],
        *,
        subtract_filter_result: bool = False,
        in_place: bool = False,
    ) -> "DataSeries":
        """
        Apply filters along the sample axis, using this series' sampling rate.

        subtract_filter_result: keep data - filter(data) instead of filter(data).
        """
        if isinstance(filters, SeriesFilter):
            filters = [filters]
        filters = list(filters)
        for f in filters:
            if not isinstance(f, SeriesFilter):
                raise InvalidOptions(f"Not a filter object: {f!r}")

        fs = self.time.fs
        target = self._target(in_place)
        original = target.samples
        filtered = original
        for f in filters:
            filtered = f.apply(filtered, fs)
        target.samples = original - filtered if subtract_filter_result else filtered
        target.add_history([f.summary(fs) for f in filters])
        return target

    def mean_subtract(self, *, axis: int = 0, in_place: bool = False) -> "DataSeries":
        target = self._target(in_place)
        target.samples = target.samples - np.mean(target.samples, axis=axis, keepdims=True)
        return target

    def change_units(
        self,
        new_units: str,
        *,
        in_place: bool = False,
        table: UnitTable | None = None,
    ) -> "DataSeries":
        table = table or DEFAULT_UNITS
        convert = table.get_converter(self.units, new_units)
        target = self._target(in_place)
        if new_units == self.units:
            return target

        old_units = target.units
        target.samples = convert(target.samples)
        target.units = new_units
        target.add_history(f"Units changed from {old_units} to {new_units}, data scaled appropriately")
        return target

    # ---- elementwise math ----
    def run_functions_on_data(
        self,
        functions: Callable[[np.ndarray], np.ndarray] | Sequence[Callable[[np.ndarray], np.ndarray]],
        *,
        in_place: bool = False,
    ) -> "DataSeries":
        if callable(functions):
            functions = [functions]
        result = self.samples if in_place else self.samples.copy()
        for fn in functions:
            result = _as_samples(fn(result))
            if result.shape[0] != self.n_samples:
                raise UnsupportedShapeError("Functions applied to the data must preserve the sample count.")
        target = self._target(in_place)
        target.samples = result
        return target

    def _operand(self, other: Any) -> Any:
        if isinstance(other, DataSeries):
            if other.samples.shape != self.samples.shape:
                raise UnsupportedShapeError(
                    f"Shape mismatch: {self.samples.shape} vs {other.samples.shape}"
                )
            return other.samples
        return other

    def add(self, other: Any, *, in_place: bool = False) -> "DataSeries":
        b = self._operand(other)
        return self.run_functions_on_data(lambda x: x + b, in_place=in_place)

    def minus(self, other: Any, *, in_place: bool = False) -> "DataSeries":
        b = self._operand(other)
        return self.run_functions_on_data(lambda x: x - b, in_place=in_place)

    def divide(self, divisor: Any, *, in_place: bool = False) -> "DataSeries":
        b = self._operand(divisor)
        return self.run_functions_on_data(lambda x: x / b, in_place=in_place)

    def power(self, exponent: float, *, in_place: bool = False) -> "DataSeries":
        return self.run_functions_on_data(lambda x: np.power(x, exponent), in_place=in_place)

    def abs(self, *, in_place: bool = False) -> "DataSeries":
        return self.run_functions_on_data(np.abs, in_place=in_place)

    def __add__(self, other: Any) -> "DataSeries":
        return self.add(other)

    def __radd__(self, other: Any) -> "DataSeries":
        return self.add(other)

    def __sub__(self, other: Any) -> "DataSeries":
        return self.minus(other)

    def __rsub__(self, other: Any) -> "DataSeries":
        b = self._operand(other)
        return self.run_functions_on_data(lambda x: b - x)

    def __truediv__(self, other: Any) -> "DataSeries":
        return self.divide(other)

    def __pow__(self, exponent: float) -> "DataSeries":
        return self.power(exponent)

    def __abs__(self) -> "DataSeries":
        return self.abs()

    # ---- misc ----
    def get_raw_data_and_time(self) -> tuple[np.ndarray, np.ndarray]:
        return self.samples, self.time.get_time_array()

    def to_batch(self) -> "SeriesBatch":
        from .batch import SeriesBatch

        return SeriesBatch([self])
