# eventseries/core/units.py
from __future__ import annotations

from typing import Callable, Mapping

import numpy as np

from .exceptions import IncompatibleUnitsError

Converter = Callable[[np.ndarray], np.ndarray]


class UnitTable:
    """
    Pluggable unit-conversion table.

    Two kinds of entries:
    - explicit converters: (from, to) -> callable, for anything non-linear
    - scale families: units that differ only by a constant factor
      (e.g. {"V": 1.0, "mV": 1e-3}); any pair inside one family converts
    """

    def __init__(self) -> None:
        self._converters: dict[tuple[str, str], Converter] = {}
        self._families: list[dict[str, float]] = []

    def register(
        self,
        from_units: str,
        to_units: str,
        fn: Converter,
        inverse: Converter | None = None,
    ) -> None:
        self._converters[(from_units, to_units)] = fn
        if inverse is not None:
            self._converters[(to_units, from_units)] = inverse

    def register_scale_family(self, factors: Mapping[str, float]) -> None:
        """`factors` gives the size of each unit in a shared base unit."""
        self._families.append({k: float(v) for k, v in factors.items()})

    def can_convert(self, from_units: str, to_units: str) -> bool:
        try:
            self.get_converter(from_units, to_units)
        except IncompatibleUnitsError:
            return False
        return True

    def get_converter(self, from_units: str, to_units: str) -> Converter:
        if from_units == to_units:
            return lambda x: x

        fn = self._converters.get((from_units, to_units))
        if fn is not None:
            return fn

        for family in self._families:
            if from_units in family and to_units in family:
                factor = family[from_units] / family[to_units]
                return lambda x, _f=factor: x * _f

        raise IncompatibleUnitsError(
            f"No conversion defined from '{from_units}' to '{to_units}'."
        )

    def convert(self, values: np.ndarray, from_units: str, to_units: str) -> np.ndarray:
        return self.get_converter(from_units, to_units)(values)


def _build_default_table() -> UnitTable:
    table = UnitTable()
    table.register_scale_family({"V": 1.0, "mV": 1e-3, "uV": 1e-6})
    table.register_scale_family({"A": 1.0, "mA": 1e-3, "uA": 1e-6})
    table.register_scale_family({"Pa": 1.0, "kPa": 1e3, "mmHg": 133.322, "cmH2O": 98.0665})
    table.register_scale_family({"s": 1.0, "ms": 1e-3, "min": 60.0, "h": 3600.0})
    return table


DEFAULT_UNITS = _build_default_table()
