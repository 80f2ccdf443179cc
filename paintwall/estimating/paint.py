# paintwall/estimating/paint.py

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from paintwall.estimating.measurement import MeasurementUnit, convert_to_feet

COVERAGE_SQFT_PER_GALLON = 400

WALL_SQFT_PER_HOUR = 150
CEILING_SQFT_PER_HOUR = 120
TRIM_LINEAR_FT_PER_HOUR = 50
HOURS_PER_DAY = 8

# Sections measured as a floor-plan area rather than a wall run.
AREA_SECTIONS = ("ceiling", "floor")
TRIM_SECTIONS = ("crown_molding", "chair_rail", "baseboard", "wainscoting")
SECTIONS = ("walls",) + TRIM_SECTIONS + AREA_SECTIONS

SECTION_NAMES = {
    "walls": "Walls",
    "crown_molding": "Crown Molding",
    "chair_rail": "Chair Rail",
    "baseboard": "Baseboard",
    "wainscoting": "Wainscoting",
    "ceiling": "Ceiling",
    "floor": "Floor",
}


@dataclass
class PaintSurface:
    """One painted surface in a room: its measured size and paint choice."""

    surface: float
    coats: int = 2
    paint_base: Optional[str] = None


@dataclass
class GallonsSummary:
    total_gallons: int
    gallons_by_section: Dict[str, int]
    surface_by_paint_base: Dict[str, List[Tuple[Optional[str], float]]]
    total_hours: float
    total_days: int
    section_names: Dict[str, str] = field(default_factory=lambda: dict(SECTION_NAMES))


def number_of_paint_gallons(area_sqft: float) -> int:
    if area_sqft <= 0:
        return 0
    return math.ceil(area_sqft / COVERAGE_SQFT_PER_GALLON)


def calculate_paint_gallons(
    surface: float,
    coats: int = 1,
    unit=MeasurementUnit.ft,
    is_area: bool = False,
) -> int:
    """
    Gallons needed to cover ``surface`` (in ``unit``) with ``coats`` coats.
    """
    sqft = convert_to_feet(abs(surface), unit, is_area=is_area)
    return number_of_paint_gallons(sqft) * coats


def estimate_painting_hours(
    wall_sqft: float = 0,
    ceiling_sqft: float = 0,
    trim_linear_ft: float = 0,
    wall_coats: int = 2,
    ceiling_coats: int = 1,
    trim_coats: int = 1,
    wall_speed: float = WALL_SQFT_PER_HOUR,
    ceiling_speed: float = CEILING_SQFT_PER_HOUR,
    trim_speed: float = TRIM_LINEAR_FT_PER_HOUR,
    efficiency: float = 1,
) -> float:
    """
    Crew hours for a paint job. ``efficiency`` below 1 means a faster crew,
    above 1 a slower one. Speeds are per coat.
    """
    if min(wall_speed, ceiling_speed, trim_speed) <= 0:
        raise ValueError("painting speeds must be positive")
    wall_hours = wall_sqft / wall_speed * wall_coats
    ceiling_hours = ceiling_sqft / ceiling_speed * ceiling_coats
    trim_hours = trim_linear_ft / trim_speed * trim_coats
    return round((wall_hours + ceiling_hours + trim_hours) * efficiency, 2)


def convert_hours_to_days(hours: float, hours_per_day: float = HOURS_PER_DAY) -> int:
    if hours_per_day <= 0:
        raise ValueError("hours_per_day must be positive")
    return math.ceil(hours / hours_per_day)


def aggregate_by_paint_base(surfaces: Iterable[PaintSurface]) -> List[Tuple[Optional[str], float]]:
    totals: Dict[Optional[str], float] = {}
    for item in surfaces:
        totals[item.paint_base] = totals.get(item.paint_base, 0.0) + (item.surface or 0.0)
    return list(totals.items())


def _coated(surfaces: Iterable[PaintSurface]) -> float:
    return sum(s.surface * s.coats for s in surfaces if s.surface and s.coats)


def gallons_summary(
    sections: Dict[str, List[PaintSurface]],
    unit=MeasurementUnit.ft,
) -> GallonsSummary:
    """
    Project-wide paint quantities across every room section.

    ``sections`` maps a section key (see ``SECTIONS``) to the surfaces of
    that kind collected from all rooms. Coats are folded into the surface
    before rounding up to whole gallons.
    """
    unknown = set(sections) - set(SECTIONS)
    if unknown:
        raise ValueError(f"Unknown paint sections: {sorted(unknown)}")

    coated = {key: _coated(sections.get(key, [])) for key in SECTIONS}

    by_section = {
        key: calculate_paint_gallons(coated[key], 1, unit, is_area=key in AREA_SECTIONS)
        for key in SECTIONS
    }

    run_surface = sum(coated[key] for key in SECTIONS if key not in AREA_SECTIONS)
    area_surface = sum(coated[key] for key in AREA_SECTIONS)
    total_gallons = calculate_paint_gallons(run_surface, 1, unit) + calculate_paint_gallons(
        area_surface, 1, unit, is_area=True
    )

    hours = estimate_painting_hours(
        wall_sqft=convert_to_feet(coated["walls"], unit),
        ceiling_sqft=convert_to_feet(coated["ceiling"], unit, is_area=True),
        trim_linear_ft=sum(convert_to_feet(coated[key], unit) for key in TRIM_SECTIONS),
        wall_coats=1,
        ceiling_coats=1,
        trim_coats=1,
    )

    return GallonsSummary(
        total_gallons=total_gallons,
        gallons_by_section=by_section,
        surface_by_paint_base={
            key: aggregate_by_paint_base(sections.get(key, [])) for key in SECTIONS
        },
        total_hours=hours,
        total_days=convert_hours_to_days(hours),
    )
