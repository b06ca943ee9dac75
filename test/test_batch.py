# test/test_batch.py
import numpy as np
import pytest

from eventseries.core import ButterworthFilter, DataSeries, DecimateOptions, SeriesBatch, SubsetOptions, TimeAxis
from eventseries.core.exceptions import (
    AmbiguousAggregationError,
    AmbiguousEventError,
    IncompatibleUnitsError,
    InvalidOptions,
    InvalidRangeError,
    InvalidSeries,
    MixedUnitsError,
    NotSplitEligibleError,
)


def _s(events, n=100, dt=0.1, units="V", start=0.0):
    return DataSeries(
        samples=np.arange(n, dtype=float),
        time=TimeAxis(dt=dt, n_samples=n, start_offset=start),
        units=units,
        events=events,
    )


def _batch():
    return SeriesBatch(
        [
            _s({"a": [1.0], "b": [2.0]}),
            _s({"a": [3.0, 6.0], "b": [4.0, 7.0]}),
            _s({"a": [5.0], "b": [8.0]}),
        ]
    )


def test_batch_list_api():
    batch = _batch()
    assert len(batch) == 3
    assert isinstance(batch[0], DataSeries)
    assert isinstance(batch[1:], SeriesBatch)
    assert len(batch[1:]) == 2
    assert [len(ev) for ev in batch.get_event("a")] == [1, 2, 1]


def test_batch_rejects_non_series():
    with pytest.raises(InvalidSeries):
        SeriesBatch([1, 2])


def test_copy_is_deep():
    batch = _batch()
    cp = batch.copy()
    cp[0].samples[:] = 0.0
    assert batch[0].samples[5, 0, 0] == 5.0


# ---- zero_time_by_event ----
def test_zero_time_by_event_with_times():
    batch = SeriesBatch([_s({"a": [1.0]}), _s({"a": [2.0]})])
    out = batch.zero_time_by_event([1.0, 2.0])
    assert [s.time.start_offset for s in out] == pytest.approx([-1.0, -2.0])
    assert [s.get_event("a").times[0] for s in out] == pytest.approx([0.0, 0.0])
    assert [s.time.start_offset for s in batch] == [0.0, 0.0]


def test_zero_time_by_event_by_name_in_place():
    batch = SeriesBatch([_s({"a": [1.0]}), _s({"a": [2.0]})])
    out = batch.zero_time_by_event("a", in_place=True)
    assert out is batch
    assert [s.time.start_offset for s in batch] == pytest.approx([-1.0, -2.0])


def test_zero_time_by_event_fails_fast_without_partial_application():
    batch = _batch()
    with pytest.raises(AmbiguousEventError):
        batch.zero_time_by_event("a", in_place=True)
    assert [s.time.start_offset for s in batch] == [0.0, 0.0, 0.0]
    assert all(len(s.history) == 0 for s in batch)


def test_zero_time_by_event_wrong_number_of_times():
    with pytest.raises(InvalidOptions):
        _batch().zero_time_by_event([1.0, 2.0])


# ---- get_subset aggregation ----
def test_get_subset_multiple_spans_requires_un_collapsed():
    with pytest.raises(AmbiguousAggregationError):
        _batch().get_subset("a", None, "b", None)


def test_get_subset_un_collapsed():
    out = _batch().get_subset("a", None, "b", None, SubsetOptions(un_collapsed=True))
    assert isinstance(out, list)
    assert [len(spans) for spans in out] == [1, 2, 1]
    assert out[1][1].time.start_offset == pytest.approx(6.0)
    assert out[1][1].n_samples == 11


def test_get_subset_occurrence_index_collapses():
    out = _batch().get_subset("a", 0, "b", 0)
    assert isinstance(out, SeriesBatch)
    assert [s.n_samples for s in out] == [11, 11, 31]


def test_get_subset_times_per_series():
    out = _batch().get_subset([1.0, 2.0, 3.0], None, [1.5, 2.5, 3.5])
    assert [s.time.start_offset for s in out] == pytest.approx([1.0, 2.0, 3.0])
    assert [s.n_samples for s in out] == [6, 6, 6]


def test_get_subset_times_wrong_length():
    with pytest.raises(InvalidOptions):
        _batch().get_subset([1.0, 2.0], None, 3.0)


def test_get_subset_mismatched_occurrence_counts():
    batch = SeriesBatch([_s({"a": [1.0, 2.0], "b": [3.0]})])
    with pytest.raises(InvalidRangeError):
        batch.get_subset("a", None, "b", None, SubsetOptions(un_collapsed=True))


def test_get_subset_no_times_at_all():
    batch = SeriesBatch([_s({"a": [], "b": []})])
    with pytest.raises(AmbiguousAggregationError):
        batch.get_subset("a", None, "b", None)


# ---- splitting ----
def test_get_subset_n_parts():
    batch = SeriesBatch([_s({"a": [1.0], "b": [2.9]}), _s({"a": [5.0], "b": [6.9]})])
    out = batch.get_subset("a", 0, "b", 0, SubsetOptions(n_parts=2))

    assert isinstance(out, list)
    assert [len(spans) for spans in out] == [2, 2]
    first, second = out[0]
    assert (first.n_samples, second.n_samples) == (10, 10)
    assert first.samples[0, 0, 0] == 10.0
    assert second.samples[0, 0, 0] == 20.0


def test_get_subset_split_percentages():
    batch = SeriesBatch([_s({"a": [0.0], "b": [9.9]})])
    out = batch.get_subset("a", 0, "b", 0, SubsetOptions(split_percentages=[25, 75]))
    assert [s.n_samples for s in out[0]] == [25, 75]


def test_get_subset_split_requires_single_span():
    with pytest.raises(NotSplitEligibleError):
        _batch().get_subset("a", None, "b", None, SubsetOptions(n_parts=2))


# ---- units ----
def test_change_units_batch():
    batch = SeriesBatch([_s({}), _s({})])
    out = batch.change_units("mV")
    assert out.units == ["mV", "mV"]
    assert batch.units == ["V", "V"]


def test_change_units_mixed():
    batch = SeriesBatch([_s({}), _s({}, units="mV")])
    with pytest.raises(MixedUnitsError):
        batch.change_units("uV", in_place=True)
    assert batch.units == ["V", "mV"]


def test_change_units_incompatible_batch():
    batch = SeriesBatch([_s({}), _s({})])
    with pytest.raises(IncompatibleUnitsError):
        batch.change_units("Pa", in_place=True)
    assert batch.units == ["V", "V"]


# ---- other batch transforms ----
def test_remove_time_gaps():
    batch = SeriesBatch([_s({"a": [6.0]}, n=10, start=5.0), _s({}, n=10, start=20.0)])
    out = batch.remove_time_gaps()
    assert [s.time.start_offset for s in out] == pytest.approx([0.0, 1.0])
    assert out[0].get_event("a").times == pytest.approx([1.0])
    assert [s.time.start_offset for s in batch] == pytest.approx([5.0, 20.0])


def test_filter_batch_is_all_or_nothing():
    fast = DataSeries(samples=np.random.default_rng(1).normal(size=400), time=0.01)
    slow = DataSeries(samples=np.random.default_rng(2).normal(size=400), time=0.02)
    batch = SeriesBatch([fast, slow])
    before = fast.samples.copy()

    with pytest.raises(InvalidOptions):
        batch.filter(ButterworthFilter(order=2, cutoff=30.0), in_place=True)
    assert np.array_equal(fast.samples, before)


def test_decimate_and_mean_subtract_batch():
    batch = SeriesBatch([_s({}), _s({})])
    dec = batch.decimate(1.0)
    assert [s.n_samples for s in dec] == [10, 10]

    out = batch.mean_subtract(in_place=True)
    assert out is batch
    assert np.allclose(batch[0].samples.mean(), 0.0)


def test_decimate_batch_forwards_options():
    batch = SeriesBatch([_s({}, n=105), _s({}, n=105)])
    dec = batch.decimate(1.0, options=DecimateOptions(allow_last_bin=True))
    assert [s.n_samples for s in dec] == [11, 11]
