# paintwall/estimating/production.py
"""
Production-rate pricing ("GPP").

A company's financial profile turns overhead, wages and target margins into
an hourly billable rate. Estimate lines are quantities of work (square feet
of wall, linear feet of trim, doors ...) divided by a production rate to get
man hours, priced at that billable rate.
"""

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional

from paintwall.core.money import BPS_DENOMINATOR, add_bps, apply_bps, round_half_up
from paintwall.models.enums import ServiceType, UnitType


@dataclass
class FinancialProfile:
    annual_overhead_cents: int = 0
    field_employee_count: int = 1
    weeks_per_year: int = 48
    hours_per_week: float = 40
    avg_wage_cents: int = 2500
    labor_burden_bps: int = 2000
    target_profit_margin_bps: int = 2000
    material_profit_margin_bps: int = 1500


@dataclass
class ProfileRates:
    sellable_man_hours: float
    overhead_per_hour_cents: int
    direct_labor_cost_per_hour_cents: int
    true_cost_per_hour_cents: int
    billable_rate_per_hour_cents: int


@dataclass
class LinePrice:
    man_hours: float
    labor_price_cents: int


@dataclass
class EstimateTotals:
    estimated_man_hours: float
    labor_price_cents: int
    material_cost_cents: int
    material_price_cents: int
    tax_cents: int
    total_cents: int


@dataclass
class ProjectCost:
    labor_cost_cents: int
    material_cost_cents: int
    company_fee_cents: int
    company_profit_cents: int
    subtotal_cents: int
    tax_cents: int
    total_cents: int


@dataclass
class RoomGeometry:
    """The parts of a stored room that drive estimate lines."""

    id: Optional[int]
    wall_area_sqft: Optional[float] = None
    wall_perimeter_ft: Optional[float] = None
    room_height_ft: Optional[float] = None
    openings_area_sqft: Optional[float] = None
    ceiling_area_sqft: Optional[float] = None
    floor_area_sqft: Optional[float] = None
    paint_walls: bool = True
    paint_ceiling: bool = False
    paint_trim: bool = False
    paint_doors: bool = False


@dataclass
class LineSpec:
    service: ServiceType
    unit: UnitType
    quantity: float
    room_id: Optional[int] = None


def recalc_financial_profile(profile: FinancialProfile) -> ProfileRates:
    sellable = profile.field_employee_count * profile.weeks_per_year * profile.hours_per_week
    overhead = round_half_up(profile.annual_overhead_cents / sellable) if sellable > 0 else 0
    direct = add_bps(profile.avg_wage_cents, profile.labor_burden_bps)
    true_cost = direct + overhead
    return ProfileRates(
        sellable_man_hours=float(sellable),
        overhead_per_hour_cents=overhead,
        direct_labor_cost_per_hour_cents=direct,
        true_cost_per_hour_cents=true_cost,
        billable_rate_per_hour_cents=add_bps(true_cost, profile.target_profit_margin_bps),
    )


def estimate_line(quantity: float, units_per_hour: float, billable_rate_cents: int) -> LinePrice:
    if units_per_hour <= 0:
        raise ValueError("units_per_hour must be positive")
    if quantity < 0:
        raise ValueError("quantity must not be negative")
    man_hours = quantity / units_per_hour
    return LinePrice(
        man_hours=round(man_hours, 4),
        labor_price_cents=round_half_up(man_hours * billable_rate_cents),
    )


def estimate_totals(
    lines: Iterable[LinePrice],
    material_cost_cents: int,
    material_margin_bps: int,
    tax_rate_bps: int,
) -> EstimateTotals:
    """
    Roll estimate lines up into a project price. Sales tax applies to the
    material price only; labor is not taxed.
    """
    lines = list(lines)
    labor = sum(line.labor_price_cents for line in lines)
    material_price = add_bps(material_cost_cents, material_margin_bps)
    tax = round_half_up(material_price * tax_rate_bps / BPS_DENOMINATOR)
    return EstimateTotals(
        estimated_man_hours=round(sum(line.man_hours for line in lines), 4),
        labor_price_cents=labor,
        material_cost_cents=material_cost_cents,
        material_price_cents=material_price,
        tax_cents=tax,
        total_cents=labor + material_price + tax,
    )


def project_cost(
    labor_cost_cents: int,
    material_cost_cents: int,
    company_fee_cents: int,
    markup_bps: int,
    tax_rate_bps: int,
) -> ProjectCost:
    """
    Whole-project price. Profit is ``markup_bps`` of labor plus material;
    sales tax applies to the subtotal including the flat company fee.
    """
    profit = apply_bps(labor_cost_cents + material_cost_cents, markup_bps)
    subtotal = labor_cost_cents + material_cost_cents + company_fee_cents + profit
    tax = apply_bps(subtotal, tax_rate_bps)
    return ProjectCost(
        labor_cost_cents=labor_cost_cents,
        material_cost_cents=material_cost_cents,
        company_fee_cents=company_fee_cents,
        company_profit_cents=profit,
        subtotal_cents=subtotal,
        tax_cents=tax,
        total_cents=subtotal + tax,
    )


def wall_area(room: RoomGeometry) -> float:
    if room.wall_area_sqft:
        area = room.wall_area_sqft
    elif room.wall_perimeter_ft and room.room_height_ft:
        area = room.wall_perimeter_ft * room.room_height_ft
    else:
        return 0.0
    return max(0.0, area - (room.openings_area_sqft or 0.0))


def lines_from_rooms(rooms: Iterable[RoomGeometry]) -> List[LineSpec]:
    lines = []
    for room in rooms:
        if room.paint_walls:
            area = wall_area(room)
            if area > 0:
                lines.append(LineSpec(ServiceType.interior_paint, UnitType.sqft_wall, round(area, 2), room.id))
        if room.paint_ceiling:
            area = room.ceiling_area_sqft or room.floor_area_sqft or 0.0
            if area > 0:
                lines.append(LineSpec(ServiceType.interior_paint, UnitType.sqft_ceiling, round(area, 2), room.id))
        if room.paint_trim and room.wall_perimeter_ft:
            lines.append(
                LineSpec(ServiceType.trim_paint, UnitType.linear_ft_trim, round(room.wall_perimeter_ft, 2), room.id)
            )
        if room.paint_doors:
            lines.append(LineSpec(ServiceType.door_paint, UnitType.each_door, 1, room.id))
    return lines


def pick_rate(
    service: str,
    unit: str,
    company_rates: Mapping[tuple, float],
    template_rates: Mapping[tuple, float],
) -> Optional[float]:
    """A company's own rate wins over the shared template rate."""
    key = (service, unit)
    if key in company_rates:
        return company_rates[key]
    return template_rates.get(key)
