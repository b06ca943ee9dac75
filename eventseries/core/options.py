# eventseries/core/options.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .exceptions import InvalidOptions


@dataclass(frozen=True, slots=True)
class SubsetOptions:
    """
    Options for subset retrieval.

    - align_time_to_start: zero each subset's timeline at its first sample
    - times_are_samples: start/stop values are 0-based sample indices, not times
    - un_collapsed: return one batch per input series instead of one series each
    - n_parts: split each span into this many equal parts
    - split_percentages: split each span into parts weighted by these values
    """
    align_time_to_start: bool = False
    times_are_samples: bool = False
    un_collapsed: bool = False
    n_parts: int | None = None
    split_percentages: Sequence[float] | None = None

    def __post_init__(self) -> None:
        if self.n_parts is not None and self.split_percentages is not None:
            raise InvalidOptions("n_parts and split_percentages are mutually exclusive.")

        if self.n_parts is not None:
            if isinstance(self.n_parts, bool) or not isinstance(self.n_parts, (int, np.integer)):
                raise InvalidOptions("SubsetOptions.n_parts must be an integer.")
            if self.n_parts < 1:
                raise InvalidOptions(f"SubsetOptions.n_parts must be >= 1, got {self.n_parts}.")

        if self.split_percentages is not None:
            pct = np.asarray(self.split_percentages, dtype=float)
            if pct.ndim != 1 or pct.size == 0:
                raise InvalidOptions("SubsetOptions.split_percentages must be a non-empty 1D sequence.")
            if not np.isfinite(pct).all() or np.any(pct <= 0):
                raise InvalidOptions("SubsetOptions.split_percentages must be finite and > 0.")
            object.__setattr__(self, "split_percentages", tuple(float(p) for p in pct))

    @property
    def splits_requested(self) -> bool:
        return self.n_parts is not None or self.split_percentages is not None


@dataclass(frozen=True, slots=True)
class AlignOptions:
    """Options for event-aligned windowing."""
    allow_overlap: bool = True


@dataclass(frozen=True, slots=True)
class DecimateOptions:
    """
    Options for decimation.

    allow_last_bin:
      - False: a trailing partial bin is dropped
      - True : a trailing partial bin is reduced like the others
    """
    approach: str = "mean_absolute"
    allow_last_bin: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.approach, str) or not self.approach.strip():
            raise InvalidOptions("DecimateOptions.approach must be a non-empty string.")
