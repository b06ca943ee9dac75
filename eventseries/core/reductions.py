# eventseries/core/reductions.py
"""
Per-bin reductions used by DataSeries.decimate().

A reduction receives one bin shaped [bin_samples, n_channels, n_reps] and
returns [n_channels, n_reps].
"""
from __future__ import annotations

from typing import Callable

import numpy as np

from .exceptions import InvalidOptions

Reduction = Callable[[np.ndarray], np.ndarray]


def mean_absolute(bin_data: np.ndarray) -> np.ndarray:
    return np.mean(np.abs(bin_data), axis=0)


_REDUCTIONS: dict[str, Reduction] = {
    "mean_absolute": mean_absolute,
}


def register_reduction(name: str, fn: Reduction, *, overwrite: bool = False) -> None:
    if not callable(fn):
        raise InvalidOptions("Reduction must be callable.")
    if name in _REDUCTIONS and not overwrite:
        raise InvalidOptions(f"Reduction '{name}' already registered (overwrite=False).")
    _REDUCTIONS[name] = fn


def get_reduction(name: str) -> Reduction:
    try:
        return _REDUCTIONS[name]
    except KeyError as e:
        known = ", ".join(sorted(_REDUCTIONS))
        raise InvalidOptions(f"Unknown decimation approach '{name}' (known: {known}).") from e


def available_reductions() -> list[str]:
    return sorted(_REDUCTIONS)
