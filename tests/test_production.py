# tests/test_production.py

import pytest

from paintwall.estimating.production import (
    FinancialProfile,
    LinePrice,
    RoomGeometry,
    estimate_line,
    estimate_totals,
    lines_from_rooms,
    pick_rate,
    project_cost,
    recalc_financial_profile,
    wall_area,
)
from paintwall.models.enums import ServiceType, UnitType


def _profile(**overrides):
    values = dict(
        annual_overhead_cents=9_600_000,
        field_employee_count=2,
        weeks_per_year=50,
        hours_per_week=40,
        avg_wage_cents=2500,
        labor_burden_bps=2000,
        target_profit_margin_bps=2500,
    )
    values.update(overrides)
    return FinancialProfile(**values)


def test_recalc_financial_profile():
    rates = recalc_financial_profile(_profile())
    assert rates.sellable_man_hours == 4000
    assert rates.overhead_per_hour_cents == 2400
    assert rates.direct_labor_cost_per_hour_cents == 3000
    assert rates.true_cost_per_hour_cents == 5400
    assert rates.billable_rate_per_hour_cents == 6750


def test_no_sellable_hours_means_no_overhead_rate():
    rates = recalc_financial_profile(_profile(field_employee_count=0))
    assert rates.overhead_per_hour_cents == 0
    assert rates.true_cost_per_hour_cents == 3000


def test_estimate_line():
    line = estimate_line(300, 150, 6750)
    assert line.man_hours == 2.0
    assert line.labor_price_cents == 13500

    with pytest.raises(ValueError):
        estimate_line(100, 0, 6750)
    with pytest.raises(ValueError):
        estimate_line(-1, 150, 6750)


def test_estimate_totals_tax_materials_only():
    totals = estimate_totals(
        [LinePrice(2.0, 13500), LinePrice(0.5, 3375)],
        material_cost_cents=10000,
        material_margin_bps=1500,
        tax_rate_bps=825,
    )
    assert totals.estimated_man_hours == 2.5
    assert totals.labor_price_cents == 16875
    assert totals.material_price_cents == 11500
    assert totals.tax_cents == 949
    assert totals.total_cents == 16875 + 11500 + 949


def test_wall_area():
    assert wall_area(RoomGeometry(1, wall_area_sqft=400, openings_area_sqft=40)) == 360
    assert wall_area(RoomGeometry(1, wall_perimeter_ft=52, room_height_ft=8)) == 416
    assert wall_area(RoomGeometry(1)) == 0
    assert wall_area(RoomGeometry(1, wall_area_sqft=10, openings_area_sqft=40)) == 0


def test_lines_from_rooms():
    room = RoomGeometry(
        7,
        wall_perimeter_ft=52,
        room_height_ft=8,
        floor_area_sqft=168,
        paint_ceiling=True,
        paint_trim=True,
        paint_doors=True,
    )
    lines = lines_from_rooms([room, RoomGeometry(8, paint_walls=False)])
    assert [(l.service, l.unit, l.quantity) for l in lines] == [
        (ServiceType.interior_paint, UnitType.sqft_wall, 416),
        (ServiceType.interior_paint, UnitType.sqft_ceiling, 168),
        (ServiceType.trim_paint, UnitType.linear_ft_trim, 52),
        (ServiceType.door_paint, UnitType.each_door, 1),
    ]
    assert {l.room_id for l in lines} == {7}


def test_company_rate_wins_over_template():
    key = ("interior_paint", "sqft_wall")
    assert pick_rate(*key, {key: 180}, {key: 150}) == 180
    assert pick_rate(*key, {}, {key: 150}) == 150
    assert pick_rate(*key, {}, {}) is None


def test_project_cost_taxes_whole_subtotal():
    cost = project_cost(40000, 10000, 20000, markup_bps=2000, tax_rate_bps=825)
    assert cost.company_profit_cents == 10000
    assert cost.subtotal_cents == 80000
    assert cost.tax_cents == 6600
    assert cost.total_cents == 86600


def test_project_cost_rounds_half_up():
    cost = project_cost(12345, 0, 0, markup_bps=2000, tax_rate_bps=825)
    # 2469 profit; 14814 * 8.25% = 1222.155
    assert (cost.company_profit_cents, cost.tax_cents, cost.total_cents) == (2469, 1222, 16036)
