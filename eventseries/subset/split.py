# eventseries/subset/split.py
"""Splitting one inclusive sample span [start, stop] into contiguous parts."""
from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.exceptions import InvalidRangeError


def _split_at_edges(start: int, stop: int, edges: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    starts = start + edges[:-1]
    stops = start + edges[1:] - 1
    if np.any(stops < starts):
        raise InvalidRangeError(
            f"Span [{start}, {stop}] is too short to split into {edges.size - 1} non-empty parts"
        )
    return starts.astype(np.int64), stops.astype(np.int64)


def get_split_indices(start: int, stop: int, n_parts: int) -> tuple[np.ndarray, np.ndarray]:
    """
    Equal-width parts.

    get_split_indices(0, 9, 2) -> ([0, 5], [4, 9])
    """
    n_total = stop - start + 1
    edges = np.rint(np.linspace(0, n_total, n_parts + 1)).astype(np.int64)
    return _split_at_edges(start, stop, edges)


def get_split_indices_by_percentages(
    start: int,
    stop: int,
    percentages: Sequence[float],
) -> tuple[np.ndarray, np.ndarray]:
    """
    Parts weighted by `percentages` (normalized, so [25, 75] == [1, 3]).

    get_split_indices_by_percentages(0, 99, [25, 75]) -> ([0, 25], [24, 99])
    """
    n_total = stop - start + 1
    weights = np.asarray(percentages, dtype=float)
    cumulative = np.concatenate([[0.0], np.cumsum(weights) / weights.sum()])
    edges = np.rint(cumulative * n_total).astype(np.int64)
    edges[-1] = n_total
    return _split_at_edges(start, stop, edges)
