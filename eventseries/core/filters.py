# eventseries/core/filters.py
"""Filter objects consumed by DataSeries.filter()."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

import numpy as np
from scipy import ndimage, signal

from .exceptions import InvalidOptions


@runtime_checkable
class SeriesFilter(Protocol):
    """Anything that filters [n_samples, ...] data given a sampling rate."""

    def apply(self, data: np.ndarray, fs: float) -> np.ndarray: ...

    def summary(self, fs: float) -> str: ...


_BUTTER_KINDS = {"low", "high", "band", "stop"}


@dataclass(frozen=True, slots=True)
class ButterworthFilter:
    """
    Zero-phase Butterworth filter (scipy.signal.butter + filtfilt).

    cutoff is in Hz: a scalar for low/high, a (low, high) pair for band/stop.
    """
    order: int
    cutoff: float | Sequence[float]
    kind: str = "low"

    def __post_init__(self) -> None:
        if self.kind not in _BUTTER_KINDS:
            raise InvalidOptions(f"kind must be one of {sorted(_BUTTER_KINDS)}, got {self.kind!r}")
        if self.order < 1:
            raise InvalidOptions(f"order must be >= 1, got {self.order}")

        cut = np.atleast_1d(np.asarray(self.cutoff, dtype=float))
        expected = 2 if self.kind in {"band", "stop"} else 1
        if cut.size != expected:
            raise InvalidOptions(f"'{self.kind}' filter needs {expected} cutoff value(s), got {cut.size}")
        if np.any(cut <= 0):
            raise InvalidOptions("cutoff frequencies must be > 0")
        object.__setattr__(self, "cutoff", float(cut[0]) if expected == 1 else tuple(float(c) for c in cut))

    def apply(self, data: np.ndarray, fs: float) -> np.ndarray:
        nyquist = 0.5 * float(fs)
        cut = np.atleast_1d(np.asarray(self.cutoff, dtype=float))
        if np.any(cut >= nyquist):
            raise InvalidOptions(
                f"cutoff must be < Nyquist ({nyquist:.3f} Hz), got {self.cutoff}"
            )
        wn = cut / nyquist
        b, a = signal.butter(self.order, wn if wn.size > 1 else wn[0], btype=self.kind)
        return signal.filtfilt(b, a, np.asarray(data, dtype=float), axis=0)

    def summary(self, fs: float) -> str:
        return f"Butterworth {self.kind}-pass filter, order {self.order}, cutoff {self.cutoff} Hz (fs={fs:g} Hz)"


@dataclass(frozen=True, slots=True)
class SmoothingFilter:
    """Centered boxcar smoothing over `width` seconds."""
    width: float

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise InvalidOptions(f"width must be > 0, got {self.width}")

    def n_points(self, fs: float) -> int:
        return max(1, int(round(self.width * fs)))

    def apply(self, data: np.ndarray, fs: float) -> np.ndarray:
        return ndimage.uniform_filter1d(
            np.asarray(data, dtype=float),
            size=self.n_points(fs),
            axis=0,
            mode="nearest",
        )

    def summary(self, fs: float) -> str:
        return f"Smoothing filter, {self.width:g}s boxcar ({self.n_points(fs)} samples)"
