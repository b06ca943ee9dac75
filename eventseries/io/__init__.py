# eventseries/io/__init__.py
"""
I/O boundary for eventseries.

- record: plain nested-record export / import of a DataSeries
- mdf: MDF file import via asammdf (imported on demand, not re-exported here)
"""
