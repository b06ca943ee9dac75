# eventseries/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all core-domain exceptions."""


# ---- Validation / construction errors ----
class InvalidTimeAxis(CoreError):
    """Raised when a TimeAxis is constructed with invalid inputs."""


class InvalidSeries(CoreError):
    """Raised when a DataSeries is constructed with invalid inputs."""


class InvalidEvent(CoreError):
    """Raised when an Event is constructed with invalid inputs."""


class InvalidHistoryEntry(CoreError):
    """Raised when a history entry is not a non-empty string."""


class InvalidRecord(CoreError):
    """Raised when an exported record cannot be turned back into a DataSeries."""


class InvalidOptions(CoreError, ValueError):
    """Raised when an option record holds unrecognized or inconsistent values."""


# ---- Lookup errors ----
class UnknownEventError(CoreError, KeyError):
    """Raised when a requested event name is not present."""


class OutOfRangeError(CoreError, IndexError):
    """Raised when a time, sample or occurrence index falls outside the data."""


class ChannelNotFound(CoreError, KeyError):
    """Raised when a requested channel is not present in a measurement file."""


# ---- Event errors ----
class DuplicateEventError(CoreError):
    """Raised when adding an existing event name to a registry that requires uniqueness."""


class AmbiguousEventError(CoreError):
    """Raised when an event is required to have exactly one occurrence and does not."""


# ---- Subset / alignment errors ----
class InvalidRangeError(CoreError):
    """Raised when a resolved stop sample comes before its start sample."""


class UnsupportedShapeError(CoreError):
    """Raised when an operation does not support the series' sample array shape."""


class AmbiguousAggregationError(CoreError):
    """Raised when spans cannot be collapsed to one result per series."""


class NotSplitEligibleError(CoreError):
    """Raised when splitting is requested but a series resolved to several spans."""


# ---- Unit errors ----
class IncompatibleUnitsError(CoreError):
    """Raised when no conversion is defined between two units."""


class MixedUnitsError(CoreError):
    """Raised when the series of a batch do not share the same units."""
