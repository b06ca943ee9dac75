# test/test_units.py
import numpy as np
import pytest

from eventseries.core import DEFAULT_UNITS, UnitTable
from eventseries.core.exceptions import IncompatibleUnitsError


def test_scale_family_conversion():
    assert DEFAULT_UNITS.convert(np.array([1.0]), "V", "mV") == pytest.approx([1000.0])
    assert DEFAULT_UNITS.convert(np.array([2.0]), "mmHg", "Pa") == pytest.approx([266.644])
    assert DEFAULT_UNITS.convert(np.array([90.0]), "min", "h") == pytest.approx([1.5])


def test_same_units_is_identity():
    x = np.array([1.0, 2.0])
    assert DEFAULT_UNITS.convert(x, "Unknown", "Unknown") is x


def test_incompatible_units():
    assert not DEFAULT_UNITS.can_convert("V", "Pa")
    with pytest.raises(IncompatibleUnitsError):
        DEFAULT_UNITS.get_converter("V", "Pa")


def test_custom_converter_with_inverse():
    table = UnitTable()
    table.register("degC", "K", lambda x: x + 273.15, inverse=lambda x: x - 273.15)
    assert table.convert(np.array([0.0]), "degC", "K") == pytest.approx([273.15])
    assert table.convert(np.array([273.15]), "K", "degC") == pytest.approx([0.0])
    assert not table.can_convert("degC", "degF")
