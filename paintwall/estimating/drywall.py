# paintwall/estimating/drywall.py
"""
Drywall repair pricing by SKU.

A repair is described by one code per dimension (repair type, size band,
orientation, access, finish, paint scope, protection) plus condition
modifiers. The base price comes from the size band; the other dimensions
multiply it and modifiers add flat amounts per patch.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from paintwall.core.money import apply_bps, format_bps, round_half_up

DEFAULT_BUNDLE = "S2"

REPAIR_TYPES = {
    "T1": "Nail pops / screw pops",
    "T2": "Small holes (nails/anchors)",
    "T3": "Medium hole (door knob / impact)",
    "T4": "Large hole / missing drywall",
    "T5": "Crack repair (straight crack)",
    "T6": "Crack repair (settlement / recurring risk)",
    "T7": "Seam / tape failure (bubble / peeling tape)",
    "T8": "Water damage (stain + softened board)",
    "T9": "Water damage (active leak evidence)",
    "T10": "Corner bead damage (outside corner)",
    "T11": "Inside corner damage",
    "T12": "Popcorn ceiling patch",
    "T13": "Knockdown / orange peel texture patch",
    "T14": "Smooth wall level-5 style patch",
    "T15": "Partial panel replacement (between studs)",
    "T16": "Full sheet replacement (4x8 / 4x12)",
    "T17": "Ceiling sag / fastener failure (re-screw + patch)",
    "T18": "Patch after electrical/plumbing access cut",
    "T19": "Patch after cabinet/backsplash/demo",
    "T20": "Patch after mold remediation / removed material",
}

REPAIR_TYPE_ADDERS = {"T8": 60, "T9": 0, "T10": 45, "T12": 55, "T14": 80, "T16": 120}

SIZE_BANDS = {
    "S0": ('Micro (<= 2")', 75),
    "S1": ('Small (2-6")', 120),
    "S2": ('Medium (6-18")', 220),
    "S3": ('Large (18-36")', 360),
    "S4": ('X-Large (36"+ / between studs)', 520),
    "S5": ("Full sheet (>= 32 sq ft)", 880),
    "S6": ("Multi-area (2-5 patches)", 420),
    "S7": ("Whole-room set (6+ patches)", 650),
}

ORIENTATIONS = {
    "O1": ("Wall", 1.0),
    "O2": ("Ceiling", 1.25),
    "O3": ("Wall + Ceiling (same room)", 1.45),
}

ACCESS_OPTIONS = {
    "A1": ("0-8 ft (standard)", 1.0),
    "A2": ("9-12 ft (ladder)", 1.15),
    "A3": ("13-18 ft (tall ladder/scaffold)", 1.35),
    "A4": ("Stairwell / difficult angle", 1.45),
    "A5": ("Tight space", 1.2),
    "A6": ("Obstructions not moved", 1.25),
}

FINISH_TYPES = {
    "F1": ("Smooth (Level 4)", 1.0),
    "F2": ("Smooth (Level 5)", 1.35),
    "F3": ("Orange peel", 1.1),
    "F4": ("Knockdown", 1.15),
    "F5": ("Popcorn", 1.25),
    "F6": ("Skip trowel / custom", 1.45),
    "F7": ("Unknown / mixed", 1.15),
}

# code -> (label, step bundle, multiplier)
PAINT_SCOPES = {
    "P0": ("No paint (drywall only)", "S2", 1.0),
    "P1": ("Prime only", "S3", 1.1),
    "P2": ("Spot paint (no blend guarantee)", "S4", 1.2),
    "P3": ("Spot blend (best-effort)", "S4", 1.3),
    "P4": ("Paint 1 wall", "S5", 1.6),
    "P5": ("Paint all walls in room", "S5", 2.2),
    "P6": ("Paint full ceiling", "S5", 1.9),
    "P7": ("Paint wall + ceiling", "S5", 2.6),
}

PROTECTION_OPTIONS = {
    "H1": ("Empty room", 1.0),
    "H2": ("Furnished room", 1.1),
    "H3": ("Occupied / living household", 1.2),
    "H4": ("Dust-sensitive environment", 1.3),
}

MODIFIERS = {
    "C1": ("Stud/backing required", 35),
    "C2": ("Insulation replacement", 45),
    "C3": ("Vapor barrier present", 25),
    "C5": ("Metal framing", 40),
    "W1": ("Stain-block primer required", 30),
    "W2": ("Soft board removal required", 60),
    "W3": ("Suspected mold (scope limits)", 0),
    "W4": ("Smoke/grease contamination prep", 50),
    "R1": ("Known settling crack (no guarantee)", 0),
    "R2": ("Remove prior bad repair", 55),
    "TEX1": ("Heavy texture (multiple passes)", 45),
    "TEX2": ("High-visibility match", 35),
}

STEP_BUNDLES = {
    "S1": (
        "Patch & Prep",
        [
            "Protect area",
            "Cut/clean damaged gypsum",
            "Backing (as needed)",
            "Install drywall piece",
            "Tape + coats",
            "Sand flat",
        ],
    ),
    "S2": (
        "Finish match",
        ["Everything in Patch & Prep", "Feather edges", "Texture/smooth match", "Final sand / touch-up"],
    ),
    "S3": ("Paint-ready", ["Everything in Finish match", "Prime repaired area (appropriate primer)"]),
    "S4": ("Blend paint", ["Everything in Paint-ready", "Paint spot blend (best-effort)"]),
    "S5": ("Repaint section", ["Everything in Paint-ready", "Repaint full wall/ceiling for uniform finish"]),
}


@dataclass
class DrywallSelection:
    repair_type: Optional[str] = None
    size: Optional[str] = None
    orientation: Optional[str] = None
    access: Optional[str] = None
    finish: Optional[str] = None
    paint_scope: Optional[str] = None
    protection: Optional[str] = None
    modifiers: List[str] = field(default_factory=list)
    quantity: int = 1


@dataclass
class LineItem:
    title: str
    description: str
    amount: int


@dataclass
class DrywallEstimate:
    sku: str
    bundle_id: str
    labor_subtotal: int
    modifiers_total: int
    subtotal: int
    tax: int
    total: int
    items: List[LineItem]


def _check(code: Optional[str], table: Dict, what: str) -> None:
    if code is not None and code not in table:
        raise ValueError(f"Unknown {what} code: {code!r}")


def validate_selection(selection: DrywallSelection) -> None:
    _check(selection.repair_type, REPAIR_TYPES, "repair type")
    _check(selection.size, SIZE_BANDS, "size")
    _check(selection.orientation, ORIENTATIONS, "orientation")
    _check(selection.access, ACCESS_OPTIONS, "access")
    _check(selection.finish, FINISH_TYPES, "finish")
    _check(selection.paint_scope, PAINT_SCOPES, "paint scope")
    _check(selection.protection, PROTECTION_OPTIONS, "protection")
    for code in selection.modifiers:
        _check(code, MODIFIERS, "modifier")


def build_sku(selection: DrywallSelection) -> str:
    mods = ",".join(sorted(selection.modifiers))
    parts = [
        selection.repair_type or "T?",
        selection.size or "S?",
        selection.orientation or "O?",
        selection.access or "A?",
        selection.finish or "F?",
        selection.paint_scope or "P?",
        f"({mods})" if mods else "",
        selection.protection or "H?",
    ]
    return " ".join(p for p in parts if p)


def _multiplier(code: Optional[str], table: Dict, index: int = 1) -> float:
    if code is None:
        return 1.0
    return table[code][index]


def compute_estimate(selection: DrywallSelection, tax_rate_bps: int = 825) -> DrywallEstimate:
    """
    Price a drywall repair selection in whole dollars.

    Missing selections fall back to neutral values (base 0, multiplier 1) so
    a half-filled form still prices. Quantity below one counts as one.
    """
    validate_selection(selection)
    qty = max(1, selection.quantity or 1)

    base = SIZE_BANDS[selection.size][1] if selection.size else 0
    adder = REPAIR_TYPE_ADDERS.get(selection.repair_type, 0) if selection.repair_type else 0

    multiplier = (
        _multiplier(selection.orientation, ORIENTATIONS)
        * _multiplier(selection.access, ACCESS_OPTIONS)
        * _multiplier(selection.finish, FINISH_TYPES)
        * _multiplier(selection.paint_scope, PAINT_SCOPES, index=2)
        * _multiplier(selection.protection, PROTECTION_OPTIONS)
    )

    labor_subtotal = round_half_up((base + adder) * multiplier * qty)
    picked = [(code, MODIFIERS[code]) for code in selection.modifiers]
    modifiers_total = sum(amount for _, (_, amount) in picked) * qty
    subtotal = labor_subtotal + modifiers_total
    tax = apply_bps(subtotal, tax_rate_bps)

    bundle = PAINT_SCOPES[selection.paint_scope][1] if selection.paint_scope else DEFAULT_BUNDLE

    items = [
        LineItem(
            title=f"Drywall repair ({qty}x)",
            description=f"Base {selection.size or ''} + {selection.repair_type or ''} with multipliers",
            amount=labor_subtotal,
        )
    ]
    items.extend(
        LineItem(title=label, description="Condition modifier / adder", amount=amount * qty)
        for _, (label, amount) in picked
    )
    items.append(
        LineItem(title="Estimated tax", description=f"Tax rate {format_bps(tax_rate_bps)}", amount=tax)
    )

    return DrywallEstimate(
        sku=build_sku(selection),
        bundle_id=bundle,
        labor_subtotal=labor_subtotal,
        modifiers_total=modifiers_total,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        items=items,
    )


def _all_labels() -> Dict[str, str]:
    labels = dict(REPAIR_TYPES)
    for table in (SIZE_BANDS, ORIENTATIONS, ACCESS_OPTIONS, FINISH_TYPES, PAINT_SCOPES, PROTECTION_OPTIONS, MODIFIERS):
        labels.update({code: entry[0] for code, entry in table.items()})
    return labels


def sku_labels(sku: str) -> str:
    """``"T2 S1 O1"`` -> labels joined with ``" • "``; unknown codes pass through."""
    labels = _all_labels()
    return " • ".join(labels.get(code, code) for code in sku.split())


def catalog() -> Dict[str, object]:
    return {
        "repair_types": [{"id": k, "label": v, "adder": REPAIR_TYPE_ADDERS.get(k, 0)} for k, v in REPAIR_TYPES.items()],
        "sizes": [{"id": k, "label": v[0], "base": v[1]} for k, v in SIZE_BANDS.items()],
        "orientations": [{"id": k, "label": v[0], "multiplier": v[1]} for k, v in ORIENTATIONS.items()],
        "access": [{"id": k, "label": v[0], "multiplier": v[1]} for k, v in ACCESS_OPTIONS.items()],
        "finishes": [{"id": k, "label": v[0], "multiplier": v[1]} for k, v in FINISH_TYPES.items()],
        "paint_scopes": [
            {"id": k, "label": v[0], "bundle": v[1], "multiplier": v[2]} for k, v in PAINT_SCOPES.items()
        ],
        "protection": [{"id": k, "label": v[0], "multiplier": v[1]} for k, v in PROTECTION_OPTIONS.items()],
        "modifiers": [{"id": k, "label": v[0], "amount": v[1]} for k, v in MODIFIERS.items()],
        "bundles": [{"id": k, "title": v[0], "steps": v[1]} for k, v in STEP_BUNDLES.items()],
    }
