# paintwall/estimating/measurement.py

import re
from enum import Enum
from typing import Optional, Tuple


class MeasurementUnit(str, Enum):
    ft = "ft"
    m = "m"
    inch = "in"


METERS_TO_FEET = 3.28084
FEET_TO_INCHES = 12

_DIMENSION_SPLIT = re.compile(r"\s*[xX×]\s*")


def _unit(value) -> MeasurementUnit:
    try:
        return MeasurementUnit(value)
    except ValueError:
        raise ValueError(f"Unsupported measurement unit: {value!r}") from None


def _feet_factor(unit) -> float:
    unit = _unit(unit)
    if unit is MeasurementUnit.ft:
        return 1.0
    if unit is MeasurementUnit.m:
        return METERS_TO_FEET
    return 1.0 / FEET_TO_INCHES


def convert_to_feet(value: float, from_unit, is_area: bool = False) -> float:
    """
    Convert a length (or, with ``is_area``, a square measure) to feet.
    """
    factor = _feet_factor(from_unit)
    if value == 0:
        return 0.0
    return value * (factor ** 2 if is_area else factor)


def convert_from_feet(value: float, to_unit, is_area: bool = False) -> float:
    factor = _feet_factor(to_unit)
    if value == 0:
        return 0.0
    return value / (factor ** 2 if is_area else factor)


def convert_measurement(value: float, from_unit, to_unit, is_area: bool = False) -> float:
    if _unit(from_unit) is _unit(to_unit):
        return value
    return convert_from_feet(convert_to_feet(value, from_unit, is_area), to_unit, is_area)


def format_measurement(value: float, unit, decimals: int = 1) -> str:
    return f"{value:.{decimals}f} {_unit(unit).value}"


def parse_dimensions(dimensions: str) -> Optional[Tuple[float, float]]:
    """
    ``"12 x 14"`` -> ``(12.0, 14.0)``. Anything that is not exactly two
    numbers returns ``None``.
    """
    if not dimensions:
        return None
    parts = _DIMENSION_SPLIT.split(dimensions.strip())
    if len(parts) != 2:
        return None
    try:
        length, width = (float(p) for p in parts)
    except ValueError:
        return None
    return length, width


def calculate_area(dimensions: str) -> float:
    dims = parse_dimensions(dimensions)
    if dims is None:
        return 0.0
    return dims[0] * dims[1]


def calculate_perimeter(dimensions: str, room_height: float) -> float:
    """
    Wall surface of a rectangular room: perimeter of ``dimensions`` times the
    room height.
    """
    dims = parse_dimensions(dimensions)
    if dims is None:
        return 0.0
    length, width = dims
    return 2 * (length + width) * room_height
