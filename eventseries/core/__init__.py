# eventseries/core/__init__.py
"""
Core domain objects for eventseries.

This module defines the time-series data model:
- TimeAxis: uniform sample index <-> time mapping
- Event / EventRegistry: named, repeatable time markers
- DataSeries: samples + TimeAxis + events + history
- SeriesBatch: ordered batch of series processed together

The core layer is independent from I/O and file formats.
"""

from .time_axis import TimeAxis
from .events import Event, EventRegistry
from .series import DataSeries
from .batch import SeriesBatch
from .options import SubsetOptions, AlignOptions, DecimateOptions
from .filters import SeriesFilter, ButterworthFilter, SmoothingFilter
from .units import UnitTable, DEFAULT_UNITS
from .reductions import register_reduction, get_reduction, available_reductions
from .exceptions import (
    CoreError,
    InvalidTimeAxis,
    InvalidEvent,
    InvalidSeries,
    InvalidHistoryEntry,
    InvalidRecord,
    InvalidOptions,
    OutOfRangeError,
    UnknownEventError,
    ChannelNotFound,
    AmbiguousEventError,
    InvalidRangeError,
    UnsupportedShapeError,
    IncompatibleUnitsError,
    MixedUnitsError,
    AmbiguousAggregationError,
    NotSplitEligibleError,
    DuplicateEventError,
)


__all__ = [
    # time / events
    "TimeAxis",
    "Event",
    "EventRegistry",

    # series
    "DataSeries",
    "SeriesBatch",

    # options
    "SubsetOptions",
    "AlignOptions",
    "DecimateOptions",

    # processing plug-ins
    "SeriesFilter",
    "ButterworthFilter",
    "SmoothingFilter",
    "UnitTable",
    "DEFAULT_UNITS",
    "register_reduction",
    "get_reduction",
    "available_reductions",

    # exceptions
    "CoreError",
    "InvalidTimeAxis",
    "InvalidEvent",
    "InvalidSeries",
    "InvalidHistoryEntry",
    "InvalidRecord",
    "InvalidOptions",
    "OutOfRangeError",
    "UnknownEventError",
    "ChannelNotFound",
    "AmbiguousEventError",
    "InvalidRangeError",
    "UnsupportedShapeError",
    "IncompatibleUnitsError",
    "MixedUnitsError",
    "AmbiguousAggregationError",
    "NotSplitEligibleError",
    "DuplicateEventError",
]
