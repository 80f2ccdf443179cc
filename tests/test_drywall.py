# tests/test_drywall.py

import pytest

from paintwall.estimating.drywall import (
    DrywallSelection,
    build_sku,
    catalog,
    compute_estimate,
    sku_labels,
)


def test_simple_repair():
    estimate = compute_estimate(
        DrywallSelection(
            repair_type="T2",
            size="S1",
            orientation="O1",
            access="A1",
            finish="F1",
            paint_scope="P0",
            protection="H1",
        )
    )
    assert estimate.sku == "T2 S1 O1 A1 F1 P0 H1"
    assert estimate.labor_subtotal == 120
    assert estimate.modifiers_total == 0
    assert estimate.tax == 10
    assert estimate.total == 130
    assert estimate.bundle_id == "S2"


def test_multipliers_modifiers_and_quantity():
    estimate = compute_estimate(
        DrywallSelection(
            repair_type="T8",
            size="S2",
            orientation="O2",
            paint_scope="P1",
            modifiers=["W1", "C1"],
            quantity=2,
        )
    )
    # (220 base + 60 water-damage adder) * 1.25 ceiling * 1.1 prime * 2 patches
    assert estimate.labor_subtotal == 770
    assert estimate.modifiers_total == (30 + 35) * 2
    assert estimate.subtotal == 900
    assert estimate.tax == 74
    assert estimate.total == 974
    assert estimate.bundle_id == "S3"
    assert estimate.sku == "T8 S2 O2 A? F? P1 (C1,W1) H?"
    assert (estimate.items[-1].title, estimate.items[-1].description) == ("Estimated tax", "Tax rate 8.25%")


def test_empty_selection_prices_to_zero():
    estimate = compute_estimate(DrywallSelection(quantity=0))
    assert estimate.total == 0
    assert estimate.bundle_id == "S2"
    assert build_sku(DrywallSelection()) == "T? S? O? A? F? P? H?"


def test_unknown_code():
    with pytest.raises(ValueError):
        compute_estimate(DrywallSelection(size="S9"))


def test_sku_labels_pass_unknown_codes_through():
    assert sku_labels("T2 S1 XX") == 'Small holes (nails/anchors) • Small (2-6") • XX'


def test_catalog_lists_every_dimension():
    data = catalog()
    assert len(data["repair_types"]) == 20
    assert {s["id"] for s in data["sizes"]} == {f"S{i}" for i in range(8)}
    assert data["bundles"][0]["title"] == "Patch & Prep"
