"""
Pricing engine regression tests.

Known quotes for the bundled pricing table plus the arithmetic identities
every breakdown must satisfy. These should fail if pricing logic changes
unexpectedly.
"""
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from print_quote.config.settings import Settings
from print_quote.engine import (
    PricingEngine,
    PrintRequest,
    Material,
    LayerHeight,
    DiscountTier,
    compute_breakdown,
    UnknownMaterial,
    UnknownLayerHeight,
    InvalidDimensions,
    InvalidInfill,
    InvalidQuantity,
)
from print_quote.engine.pricing_table import load_pricing_table


@pytest.fixture(scope="module")
def table():
    """The pricing table bundled with the package."""
    return load_pricing_table(Settings.load().pricing_table)


@pytest.fixture(scope="module")
def engine(table):
    return PricingEngine(table)


def make_request(**overrides) -> PrintRequest:
    values = dict(
        length_mm=100,
        width_mm=100,
        height_mm=100,
        material=Material.ABS_M30,
        infill_percent=50,
        layer_height=LayerHeight.STANDARD,
        quantity=1,
    )
    values.update(overrides)
    return PrintRequest(**values)


def test_single_abs_part(engine):
    """100 mm ABS-M30 cube, 50% infill, standard layers, one part."""
    b = engine.compute_breakdown(make_request())

    assert b.volume_cm3 == 1000.00
    assert b.weight_kg == 1.040
    assert b.material_cost == 260.00
    assert b.print_time_hours == 40.0
    assert b.machine_cost == 2000.00
    assert b.setup_fee == 100.00
    assert b.per_part_subtotal == 2360.00
    assert b.quantity == 1
    assert b.total_before_discount == 2360.00
    assert b.discount_percent == 0
    assert b.discount_amount == 0
    assert b.total == 2360.00
    assert b.currency == "PLN"


def test_ten_parts_get_ten_percent(engine):
    b = engine.compute_breakdown(make_request(quantity=10))

    assert b.total_before_discount == 23600.00
    assert b.discount_percent == 10.0
    assert b.discount_amount == 2360.00
    assert b.total == 21240.00


def test_nylon_full_infill(engine):
    b = engine.compute_breakdown(make_request(material=Material.NYLON_12, infill_percent=100))

    assert b.weight_kg == 1.010
    assert b.material_cost == 808.00


def test_module_function_matches_engine(engine, table):
    request = make_request(material=Material.PC_ABS, quantity=7)
    assert compute_breakdown(request, table) == engine.compute_breakdown(request)


def test_quote_accepts_raw_identifiers(engine):
    b = engine.quote(100, 100, 100, "ABS-M30", 50, "standard", 1)
    assert b.total == 2360.00


def test_layer_height_changes_machine_time(engine):
    fine = engine.compute_breakdown(make_request(layer_height=LayerHeight.FINE))
    draft = engine.compute_breakdown(make_request(layer_height=LayerHeight.DRAFT))

    assert fine.print_time_hours == pytest.approx(66.7)
    assert draft.print_time_hours == pytest.approx(28.6)
    assert fine.machine_cost > draft.machine_cost


def test_zero_infill_costs_no_material(engine):
    b = engine.compute_breakdown(make_request(infill_percent=0))
    assert b.material_cost == 0
    assert b.total == 2100.00


@pytest.mark.parametrize("quantity", [1, 3, 7, 13, 29, 77, 999, 1500])
@pytest.mark.parametrize("material", list(Material))
def test_total_identities(engine, material, quantity):
    """total = before − discount and before = subtotal × qty."""
    request = make_request(length_mm=37.3, width_mm=81.9, height_mm=12.7, material=material,
                           infill_percent=33, quantity=quantity)

    c = engine.compute_components(request)
    assert c.total == c.total_before_discount - c.discount_amount
    assert c.total_before_discount == c.per_part_subtotal * c.quantity

    # Each presented field is rounded on its own, so the identity holds to the cent
    b = engine.compute_breakdown(request)
    assert abs(b.total - (b.total_before_discount - b.discount_amount)) <= 0.01 + 1e-9
    assert b.total_before_discount == pytest.approx(c.per_part_subtotal * quantity, abs=0.0051)


@pytest.mark.parametrize("axis", ["length_mm", "width_mm", "height_mm"])
def test_growing_a_dimension_never_lowers_cost(engine, axis):
    previous = None
    for size in (10, 25, 50, 100, 180, 254):
        b = engine.compute_breakdown(make_request(**{axis: size}))
        if previous:
            assert b.volume_cm3 >= previous.volume_cm3
            assert b.weight_kg >= previous.weight_kg
            assert b.material_cost >= previous.material_cost
            assert b.total >= previous.total
        previous = b


def test_discount_never_drops_as_quantity_rises(engine):
    discounts = [
        engine.compute_breakdown(make_request(quantity=q)).discount_percent
        for q in range(1, 1200, 7)
    ]
    assert discounts == sorted(discounts)


@pytest.mark.parametrize("quantity,expected", [
    (5, 0), (6, 10), (20, 10), (21, 20), (50, 20), (51, 30), (999, 30),
])
def test_tier_boundaries(engine, quantity, expected):
    b = engine.compute_breakdown(make_request(quantity=quantity))
    assert b.discount_percent == expected, \
        f"Quantity {quantity}: expected {expected}% discount, got {b.discount_percent}%"


def test_quantity_above_highest_tier_keeps_top_discount(engine):
    b = engine.compute_breakdown(make_request(quantity=1000))
    assert b.discount_percent == 30


def test_quantity_below_every_tier_gets_no_discount(table):
    shifted = PricingEngine(table.__class__(
        material_cost_per_kg=table.material_cost_per_kg,
        machine_hourly_rate=table.machine_hourly_rate,
        setup_fee=table.setup_fee,
        material_densities=table.material_densities,
        material_multipliers=table.material_multipliers,
        print_speed=table.print_speed,
        quantity_discounts=(DiscountTier(10, 20, 0.1),),
    ))
    assert shifted.compute_breakdown(make_request(quantity=3)).discount_percent == 0


def test_same_input_same_output(engine):
    request = make_request(material=Material.ASA, quantity=21)
    assert engine.compute_breakdown(request) == engine.compute_breakdown(request)


def test_trace_records_each_step(engine):
    b = engine.compute_breakdown(make_request(quantity=10))
    steps = [t.step for t in b.trace]

    assert steps == ["Volume", "Weight", "Material Cost", "Machine Time", "Extension", "Discount Tier", "Total"]
    assert "qty 10 in [6, 20]" in b.get_trace_text()


@pytest.mark.parametrize("field,value", [
    ("length_mm", 0),
    ("width_mm", -5),
    ("height_mm", float("nan")),
    ("height_mm", float("inf")),
    ("length_mm", "100"),
])
def test_rejects_bad_dimensions(engine, field, value):
    with pytest.raises(InvalidDimensions) as exc:
        engine.compute_breakdown(make_request(**{field: value}))
    assert exc.value.field == field


@pytest.mark.parametrize("infill", [-1, 100.5, float("nan")])
def test_rejects_bad_infill(engine, infill):
    with pytest.raises(InvalidInfill):
        engine.compute_breakdown(make_request(infill_percent=infill))


@pytest.mark.parametrize("quantity", [0, -3, 2.5, True, "4"])
def test_rejects_bad_quantity(engine, quantity):
    with pytest.raises(InvalidQuantity):
        engine.compute_breakdown(make_request(quantity=quantity))


def test_rejects_unknown_material(engine):
    with pytest.raises(UnknownMaterial) as exc:
        engine.quote(100, 100, 100, "PLA", 50, "standard", 1)
    assert exc.value.to_dict()["error"] == "unknown_material"
    assert exc.value.field == "material"


def test_rejects_unknown_layer_height(engine):
    with pytest.raises(UnknownLayerHeight):
        engine.quote(100, 100, 100, "ASA", 50, "ultra", 1)


def test_rejects_material_missing_from_table(table):
    partial = table.__class__(
        material_cost_per_kg=table.material_cost_per_kg,
        machine_hourly_rate=table.machine_hourly_rate,
        setup_fee=table.setup_fee,
        material_densities={Material.ABS_M30: 1.04},
        material_multipliers={Material.ABS_M30: 1.0},
        print_speed={LayerHeight.STANDARD: 25},
        quantity_discounts=table.quantity_discounts,
    )
    engine = PricingEngine(partial)

    with pytest.raises(UnknownMaterial):
        engine.compute_breakdown(make_request(material=Material.ASA))
    with pytest.raises(UnknownLayerHeight):
        engine.compute_breakdown(make_request(layer_height=LayerHeight.FINE))


def test_huge_quantity_is_priced_at_the_top_tier(engine):
    b = engine.quote(100, 100, 100, "ABS-M30", 50, "standard", 10**25)

    assert b.total_before_discount == pytest.approx(2360 * 1e25)
    assert b.discount_percent == 30
    assert b.total == pytest.approx(2360 * 1e25 * 0.7)


def test_quantity_beyond_float_range_is_rejected(engine):
    with pytest.raises(InvalidQuantity):
        engine.quote(100, 100, 100, "ABS-M30", 50, "standard", 10**400)


def test_order_total_overflowing_is_rejected(engine):
    with pytest.raises(InvalidQuantity):
        engine.quote(254, 254, 254, "Nylon-12", 100, "fine", 10**306)


@pytest.mark.parametrize("dims", [(1e200, 1e200, 1e200), (1e300, 1e10, 1)])
def test_dimensions_too_large_to_price_are_rejected(engine, dims):
    with pytest.raises(InvalidDimensions):
        engine.quote(*dims, "ABS-M30", 50, "standard", 1)


def test_small_part_print_time_keeps_its_minutes(engine):
    """A 1 cm³ draft part prints in 1.7 minutes, shown as '2 min' not '0 min'."""
    b = engine.quote(10, 10, 10, "ABS-M30", 50, "draft", 1)

    assert b.print_time_hours == 0.0
    assert b.print_time == "2 min"


def test_print_time_matches_reference_part(engine):
    assert engine.compute_breakdown(make_request()).print_time == "1d 16.0h"
