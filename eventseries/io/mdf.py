# eventseries/io/mdf.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import numpy as np
from asammdf import MDF, Signal  # pivotal dependency for MDF file handling

from eventseries.core import DataSeries, SeriesBatch, TimeAxis
from eventseries.core.exceptions import ChannelNotFound, InvalidSeries

logger = logging.getLogger(__name__)


def _uniform_axis(timestamps: np.ndarray, dt: float | None) -> TimeAxis:
    """Uniform axis spanning the timestamps; dt defaults to the median spacing."""
    t = np.asarray(timestamps, dtype=float)
    if t.size == 0:
        raise InvalidSeries("Channel has no samples.")
    if dt is None:
        if t.size < 2:
            raise InvalidSeries("Cannot infer dt from a single sample, pass dt explicitly.")
        dt = float(np.median(np.diff(t)))
    n = int(np.floor((t[-1] - t[0]) / dt + 1e-6)) + 1
    return TimeAxis(dt=dt, n_samples=n, start_offset=float(t[0]))


def signal_to_series(sig: Signal, *, dt: float | None = None, source: str = "") -> DataSeries:
    """Resample one asammdf Signal onto a uniform grid."""
    if not np.issubdtype(np.asarray(sig.samples).dtype, np.number):
        raise InvalidSeries(f"Channel '{sig.name}' is not numeric ({sig.samples.dtype}).")

    axis = _uniform_axis(sig.timestamps, dt)
    resampled = sig.interp(axis.get_time_array())

    history = [f"Loaded from MDF {source} (channel {sig.name})"] if source else []
    return DataSeries(
        samples=np.asarray(resampled.samples, dtype=float),
        time=axis,
        units=sig.unit or "Unknown",
        history=history,
        channel_labels=[sig.name],
        y_label=sig.name,
    )


def load_mdf(
    path: str | Path,
    channel_names: Iterable[str] | None = None,
    *,
    dt: float | None = None,
) -> SeriesBatch:
    """
    Load MDF channels as a batch of uniformly sampled series.

    channel_names:
      - None: every numeric, non-master channel in file order
      - names: exactly those channels, in that order (ChannelNotFound if missing)
    """
    path = str(path)
    mdf = MDF(path)
    try:
        if channel_names is None:
            signals = []
            for sig in mdf.iter_channels(skip_master=True):
                if not np.issubdtype(np.asarray(sig.samples).dtype, np.number):
                    logger.debug("Skipping non-numeric channel %s", sig.name)
                    continue
                signals.append(sig)
        else:
            signals = []
            for name in channel_names:
                if name not in mdf.channels_db:
                    raise ChannelNotFound(f"Channel '{name}' not found in MDF")
                signals.append(mdf.get(name))

        batch = SeriesBatch([signal_to_series(sig, dt=dt, source=path) for sig in signals])
    finally:
        mdf.close()

    logger.debug("load_mdf: %d channel(s) from %s", len(batch), path)
    return batch
