# eventseries/core/time_axis.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import numpy as np

from .exceptions import InvalidTimeAxis, OutOfRangeError


@dataclass(slots=True)
class TimeAxis:
    """
    Uniformly sampled timeline: maps 0-based sample index <-> time.

    time_of(i) = start_offset + i * dt

    start_datetime optionally anchors start_offset to an absolute clock; it is
    carried along but never used for index arithmetic.
    """

    dt: float
    n_samples: int
    start_offset: float = 0.0
    start_datetime: datetime | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        try:
            dt = float(self.dt)
        except (TypeError, ValueError) as e:
            raise InvalidTimeAxis(f"`dt` must be a number, got {self.dt!r}") from e
        if not math.isfinite(dt) or dt <= 0:
            raise InvalidTimeAxis(f"`dt` must be finite and > 0, got {dt}")

        if isinstance(self.n_samples, bool) or not isinstance(self.n_samples, (int, np.integer)):
            raise InvalidTimeAxis(f"`n_samples` must be an integer, got {self.n_samples!r}")
        if self.n_samples < 0:
            raise InvalidTimeAxis(f"`n_samples` must be >= 0, got {self.n_samples}")

        start = float(self.start_offset)
        if not math.isfinite(start):
            raise InvalidTimeAxis("`start_offset` must be finite.")

        if self.start_datetime is not None and not isinstance(self.start_datetime, datetime):
            raise InvalidTimeAxis("`start_datetime` must be a datetime or None.")

        self.dt = dt
        self.n_samples = int(self.n_samples)
        self.start_offset = start

    @classmethod
    def from_fs(cls, fs: float, n_samples: int, start_offset: float = 0.0) -> "TimeAxis":
        if fs <= 0:
            raise InvalidTimeAxis(f"`fs` must be > 0, got {fs}")
        return cls(dt=1.0 / fs, n_samples=n_samples, start_offset=start_offset)

    # ---- derived ----
    @property
    def fs(self) -> float:
        return 1.0 / self.dt

    @property
    def end_time(self) -> float:
        return self.start_offset + (self.n_samples - 1) * self.dt

    @property
    def duration(self) -> float:
        return self.n_samples * self.dt

    def time_of(self, index: int) -> float:
        return self.start_offset + index * self.dt

    def get_time_array(self) -> np.ndarray:
        return self.start_offset + np.arange(self.n_samples) * self.dt

    # ---- index lookup ----
    def nearest_indices(
        self,
        times: Any,
        *,
        clamp: bool = False,
    ) -> tuple[np.ndarray, np.ndarray]:
        """
        Vectorised nearest-sample lookup.

        Returns (indices, errors) where errors = times - time_of(indices).

        clamp:
          - False: raise OutOfRangeError for any time more than half a sample
            outside [start_offset, end_time]
          - True : clamp indices to [0, n_samples - 1]
        """
        t = np.atleast_1d(np.asarray(times, dtype=float))
        if self.n_samples == 0:
            raise OutOfRangeError("Cannot look up sample indices on an empty time axis.")
        if not np.isfinite(t).all():
            raise OutOfRangeError("Requested times contain non-finite values (NaN/Inf).")

        pos = (t - self.start_offset) / self.dt
        # symmetric half-sample margin on both ends, decided before rounding
        bad = (pos < -0.5) | (pos > self.n_samples - 0.5)
        if np.any(bad) and not clamp:
            first_bad = float(t[bad][0])
            raise OutOfRangeError(
                f"Time {first_bad} is outside the axis range "
                f"[{self.start_offset}, {self.end_time}] (dt={self.dt})."
            )
        raw = np.clip(np.rint(pos), 0, self.n_samples - 1).astype(np.int64)

        errors = t - (self.start_offset + raw * self.dt)
        return raw, errors

    def nearest_index(self, t: float, *, clamp: bool = False) -> tuple[int, float]:
        indices, errors = self.nearest_indices([t], clamp=clamp)
        return int(indices[0]), float(errors[0])

    # ---- mutation / derivation ----
    def shift_start(self, delta: float) -> None:
        self.start_offset = self.start_offset + float(delta)

    def subset_axis(
        self,
        first_sample: int,
        n_samples: int,
        first_sample_time: float | None = None,
    ) -> "TimeAxis":
        """
        New axis covering samples [first_sample, first_sample + n_samples).

        If first_sample_time is None the window keeps its absolute alignment
        with this axis; otherwise the first sample is placed at that time.
        """
        if first_sample < 0 or n_samples < 0 or first_sample + n_samples > self.n_samples:
            raise OutOfRangeError(
                f"Window [{first_sample}, {first_sample + n_samples}) does not fit in "
                f"{self.n_samples} samples."
            )
        if first_sample_time is None:
            start = self.time_of(first_sample)
        else:
            start = float(first_sample_time)
        return TimeAxis(
            dt=self.dt,
            n_samples=n_samples,
            start_offset=start,
            start_datetime=self.start_datetime,
        )

    def copy(self) -> "TimeAxis":
        return TimeAxis(
            dt=self.dt,
            n_samples=self.n_samples,
            start_offset=self.start_offset,
            start_datetime=self.start_datetime,
        )
