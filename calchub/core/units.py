# calchub/core/units.py
"""
Unit conversion helpers.

Every unit type has a base unit (kg, cm, C, bytes, bits per second). Values are
converted to the base unit first and then to the target unit. The dual
``ft_in`` height unit is always carried in centimeters, so converting from it
is a no-op.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple


class UnitConversionError(ValueError):
    """Raised for unknown unit types or unit ids."""


@dataclass(frozen=True)
class UnitDefinition:
    id: str
    factor: float = 1.0
    decimals: int = 2
    to_base_fn: Optional[Callable[[float], float]] = None
    from_base_fn: Optional[Callable[[float], float]] = None
    is_dual: bool = False

    def to_base(self, value: float) -> float:
        if self.to_base_fn is not None:
            return self.to_base_fn(value)
        return value * self.factor

    def from_base(self, value: float) -> float:
        if self.from_base_fn is not None:
            return self.from_base_fn(value)
        return value / self.factor


def _group(*units: UnitDefinition) -> Dict[str, UnitDefinition]:
    return {unit.id: unit for unit in units}


WEIGHT_UNITS = _group(
    UnitDefinition("kg", 1.0, 1),
    UnitDefinition("g", 0.001, 0),
    UnitDefinition("lbs", 0.453592, 1),
    UnitDefinition("oz", 0.0283495, 1),
    UnitDefinition("st", 6.35029, 2),
)

LENGTH_UNITS = _group(
    UnitDefinition("cm", 1.0, 1),
    UnitDefinition("m", 100.0, 2),
    UnitDefinition("mm", 0.1, 0),
    UnitDefinition("in", 2.54, 1),
    UnitDefinition("ft", 30.48, 2),
    UnitDefinition("ft_in", 1.0, 1, is_dual=True),
)

TEMPERATURE_UNITS = _group(
    UnitDefinition("C", decimals=1),
    UnitDefinition(
        "F",
        decimals=1,
        to_base_fn=lambda f: (f - 32) * 5 / 9,
        from_base_fn=lambda c: c * 9 / 5 + 32,
    ),
    UnitDefinition(
        "K",
        decimals=2,
        to_base_fn=lambda k: k - 273.15,
        from_base_fn=lambda c: c + 273.15,
    ),
)

# Decimal (SI) multiples, as storage vendors and network speeds are quoted
DATA_SIZE_UNITS = _group(
    UnitDefinition("b", 1.0, 0),
    UnitDefinition("kb", 1e3, 2),
    UnitDefinition("mb", 1e6, 2),
    UnitDefinition("gb", 1e9, 2),
    UnitDefinition("tb", 1e12, 3),
)

DATA_RATE_UNITS = _group(
    UnitDefinition("bps", 1.0, 0),
    UnitDefinition("kbps", 1e3, 2),
    UnitDefinition("mbps", 1e6, 2),
    UnitDefinition("gbps", 1e9, 3),
)

UNIT_REGISTRY: Dict[str, Dict[str, UnitDefinition]] = {
    "weight": WEIGHT_UNITS,
    "height": LENGTH_UNITS,
    "length": LENGTH_UNITS,
    "temperature": TEMPERATURE_UNITS,
    "data_size": DATA_SIZE_UNITS,
    "data_rate": DATA_RATE_UNITS,
}

BASE_UNITS = {
    "weight": "kg",
    "height": "cm",
    "length": "cm",
    "temperature": "C",
    "data_size": "b",
    "data_rate": "bps",
}


def get_unit(unit_id: str, unit_type: str) -> UnitDefinition:
    group = UNIT_REGISTRY.get(unit_type)
    if group is None:
        raise UnitConversionError(f"Unknown unit type: {unit_type}")
    unit = group.get(unit_id)
    if unit is None:
        raise UnitConversionError(f"Unknown {unit_type} unit: {unit_id}")
    return unit


def convert_to_base(value: float, unit_id: str, unit_type: str) -> float:
    """Convert ``value`` expressed in ``unit_id`` to the base unit of ``unit_type``."""
    return get_unit(unit_id, unit_type).to_base(float(value))


def convert_from_base(value: float, unit_id: str, unit_type: str) -> float:
    return get_unit(unit_id, unit_type).from_base(float(value))


def convert(value: float, from_unit: str, to_unit: str, unit_type: str) -> float:
    """
    Convert between two units of the same type.

    The result is rounded to the target unit's display precision.

    Example:
        convert(180, "lbs", "kg", "weight")  # 81.6
    """
    if from_unit == to_unit:
        return value
    target = get_unit(to_unit, unit_type)
    base_value = convert_to_base(value, from_unit, unit_type)
    return round(target.from_base(base_value), target.decimals)


def ft_in_to_cm(feet: float, inches: float = 0.0) -> float:
    return (float(feet) * 12 + float(inches)) * 2.54


def cm_to_ft_in(cm: float) -> Tuple[int, float]:
    """Split a height in centimeters into whole feet and remaining inches."""
    total_inches = float(cm) / 2.54
    feet = int(total_inches // 12)
    inches = round(total_inches - feet * 12, 1)
    if inches >= 12:
        feet += 1
        inches = 0.0
    return feet, inches
