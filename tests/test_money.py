# tests/test_money.py

from decimal import Decimal

from paintwall.core.money import (
    add_bps,
    apply_bps,
    format_bps,
    format_cents,
    from_cents,
    round_half_up,
    to_cents,
)


def test_round_half_up_goes_away_from_zero():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -3
    assert round_half_up("164.4999") == 164


def test_apply_bps():
    assert apply_bps(10000, 825) == 825
    assert apply_bps(1999, 825) == 165
    assert apply_bps(0, 825) == 0


def test_add_bps_is_markup():
    assert add_bps(2500, 2000) == 3000
    assert add_bps(10000, 1500) == 11500


def test_to_cents_and_back():
    assert to_cents("12.345") == 1235
    assert to_cents(0.1) == 10
    assert to_cents(Decimal("-4.50")) == -450
    assert from_cents(1235) == Decimal("12.35")


def test_formatting():
    assert format_cents(123456) == "$1,234.56"
    assert format_cents(-100) == "-$1.00"
    assert format_cents(500, "EUR") == "EUR 5.00"
    assert format_bps(825) == "8.25%"
