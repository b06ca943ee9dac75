# eventseries/io/record.py
"""
Plain nested-record boundary for DataSeries.

Record layout:

    {
        "samples": ndarray [n_samples, n_channels, n_reps],
        "time": {"dt", "n_samples", "start_offset", "start_datetime"},
        "events": {name: [times...]},
        "events_unique": bool,
        "units": str,
        "history": [str, ...],
        "channel_labels": [str, ...] | None,
        "y_label": str,
    }

start_datetime is stored as an ISO-8601 string (or None).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

import numpy as np

from eventseries.core import DataSeries, EventRegistry, TimeAxis
from eventseries.core.exceptions import CoreError, InvalidRecord

_REQUIRED_KEYS = ("samples", "time", "events", "units", "history")
_TIME_KEYS = ("dt", "n_samples", "start_offset")


def time_axis_to_record(axis: TimeAxis) -> dict[str, Any]:
    return {
        "dt": axis.dt,
        "n_samples": axis.n_samples,
        "start_offset": axis.start_offset,
        "start_datetime": None if axis.start_datetime is None else axis.start_datetime.isoformat(),
    }


def time_axis_from_record(record: Mapping[str, Any]) -> TimeAxis:
    missing = [k for k in _TIME_KEYS if k not in record]
    if missing:
        raise InvalidRecord(f"Time record is missing keys: {missing}")

    raw_dt = record.get("start_datetime")
    try:
        start_datetime = None if raw_dt is None else datetime.fromisoformat(raw_dt)
    except (TypeError, ValueError) as e:
        raise InvalidRecord(f"Invalid start_datetime: {raw_dt!r}") from e

    return TimeAxis(
        dt=record["dt"],
        n_samples=record["n_samples"],
        start_offset=record["start_offset"],
        start_datetime=start_datetime,
    )


def series_to_record(series: DataSeries) -> dict[str, Any]:
    return {
        "samples": series.samples.copy(),
        "time": time_axis_to_record(series.time),
        "events": {name: ev.times.tolist() for name, ev in series.events.items()},
        "events_unique": series.events.unique,
        "units": series.units,
        "history": list(series.history),
        "channel_labels": None if series.channel_labels is None else list(series.channel_labels),
        "y_label": series.y_label,
    }


def series_from_record(record: Mapping[str, Any]) -> DataSeries:
    if not isinstance(record, Mapping):
        raise InvalidRecord("A series record must be a mapping.")
    missing = [k for k in _REQUIRED_KEYS if k not in record]
    if missing:
        raise InvalidRecord(f"Series record is missing keys: {missing}")
    if not isinstance(record["time"], Mapping) or not isinstance(record["events"], Mapping):
        raise InvalidRecord("'time' and 'events' must be mappings.")
    if not isinstance(record["history"], (list, tuple)):
        raise InvalidRecord("'history' must be a list of strings.")

    try:
        return DataSeries(
            samples=np.array(record["samples"], copy=True),
            time=time_axis_from_record(record["time"]),
            units=record["units"],
            events=EventRegistry.from_mapping(
                record["events"], unique=bool(record.get("events_unique", False))
            ),
            history=list(record["history"]),
            channel_labels=record.get("channel_labels"),
            y_label=record.get("y_label", ""),
        )
    except InvalidRecord:
        raise
    except CoreError as e:
        raise InvalidRecord(f"Record does not describe a valid series: {e}") from e
