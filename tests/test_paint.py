# tests/test_paint.py

import pytest

from paintwall.estimating.paint import (
    PaintSurface,
    aggregate_by_paint_base,
    calculate_paint_gallons,
    convert_hours_to_days,
    estimate_painting_hours,
    gallons_summary,
    number_of_paint_gallons,
)


def test_gallons_round_up_per_400_sqft():
    assert number_of_paint_gallons(0) == 0
    assert number_of_paint_gallons(-5) == 0
    assert number_of_paint_gallons(400) == 1
    assert number_of_paint_gallons(401) == 2


def test_calculate_paint_gallons_multiplies_coats():
    assert calculate_paint_gallons(800, 2) == 4
    # 100 m² is ~1076 sq ft
    assert calculate_paint_gallons(100, 1, "m", is_area=True) == 3


def test_estimate_painting_hours_defaults():
    # walls: 300/150 * 2 coats, ceiling: 120/120, trim: 50/50
    assert estimate_painting_hours(wall_sqft=300, ceiling_sqft=120, trim_linear_ft=50) == 6.0
    assert estimate_painting_hours(wall_sqft=300, efficiency=1.5) == 6.0


def test_estimate_painting_hours_rejects_zero_speed():
    with pytest.raises(ValueError):
        estimate_painting_hours(wall_sqft=100, wall_speed=0)


def test_hours_to_days():
    assert convert_hours_to_days(6) == 1
    assert convert_hours_to_days(16) == 2
    assert convert_hours_to_days(17) == 3


def test_aggregate_by_paint_base_keeps_first_seen_order():
    surfaces = [PaintSurface(100, 2, "A"), PaintSurface(50, 1, "B"), PaintSurface(25, 1, "A")]
    assert aggregate_by_paint_base(surfaces) == [("A", 125.0), ("B", 50.0)]


def test_gallons_summary():
    summary = gallons_summary(
        {
            "walls": [PaintSurface(400, 2, "Eggshell")],
            "ceiling": [PaintSurface(200, 1, "Flat")],
        }
    )
    assert summary.gallons_by_section["walls"] == 2
    assert summary.gallons_by_section["ceiling"] == 1
    assert summary.gallons_by_section["baseboard"] == 0
    assert summary.total_gallons == 3
    # 800 coated sq ft of wall at 150/h + 200 sq ft of ceiling at 120/h
    assert summary.total_hours == 7.0
    assert summary.total_days == 1
    assert summary.surface_by_paint_base["walls"] == [("Eggshell", 400.0)]


def test_gallons_summary_rejects_unknown_section():
    with pytest.raises(ValueError):
        gallons_summary({"roof": [PaintSurface(100)]})
