# test/test_options.py
import pytest

from eventseries.core import DecimateOptions, SubsetOptions
from eventseries.core.exceptions import InvalidOptions


def test_subset_options_defaults():
    opts = SubsetOptions()
    assert not opts.align_time_to_start
    assert not opts.un_collapsed
    assert not opts.splits_requested


def test_subset_options_split_settings_are_exclusive():
    with pytest.raises(InvalidOptions):
        SubsetOptions(n_parts=2, split_percentages=[50, 50])


@pytest.mark.parametrize("n_parts", [0, -1, 2.5, True])
def test_subset_options_bad_n_parts(n_parts):
    with pytest.raises(InvalidOptions):
        SubsetOptions(n_parts=n_parts)


@pytest.mark.parametrize("pct", [[], [10, 0], [10, float("nan")], [[1, 2]]])
def test_subset_options_bad_percentages(pct):
    with pytest.raises(InvalidOptions):
        SubsetOptions(split_percentages=pct)


def test_subset_options_percentages_stored_as_tuple():
    opts = SubsetOptions(split_percentages=[25, 75])
    assert opts.split_percentages == (25.0, 75.0)
    assert opts.splits_requested


def test_decimate_options_rejects_blank_approach():
    with pytest.raises(InvalidOptions):
        DecimateOptions(approach="  ")
