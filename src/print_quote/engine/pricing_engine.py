"""
Pricing Engine - Core quote calculation with traceability.

Converts a part configuration into a cost breakdown:
- Volume and weight from dimensions and material density
- Material cost scaled by infill and material multiplier
- Machine time from the layer-height print speed
- Flat setup fee per part
- Quantity discount from the pricing table tiers

Pure computation: the engine holds only its immutable pricing table.
"""
import math
from typing import Optional, Union

from ..config.settings import get_settings, Settings
from .discounts import DiscountMatcher
from .errors import (
    InvalidDimensions,
    InvalidInfill,
    InvalidQuantity,
    UnknownLayerHeight,
    UnknownMaterial,
)
from .formatting import format_currency, format_duration
from .models import (
    CostComponents,
    LayerHeight,
    Material,
    PriceBreakdown,
    PricingTable,
    PrintRequest,
    TraceStep,
)
from .pricing_table import load_pricing_table


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_request(request: PrintRequest, table: PricingTable) -> tuple[Material, LayerHeight]:
    """
    Reject out-of-domain input before any arithmetic runs.

    Returns the resolved (material, layer_height) pair.
    """
    for name in ('length_mm', 'width_mm', 'height_mm'):
        value = getattr(request, name)
        if not _is_number(value) or not math.isfinite(value) or value <= 0:
            raise InvalidDimensions(f"{name} must be a positive number of millimetres, got {value!r}", field=name)
    if not math.isfinite(request.length_mm * request.width_mm * request.height_mm):
        raise InvalidDimensions("Part dimensions are too large to price")

    material = Material.parse(request.material)
    if material not in table.material_densities or material not in table.material_multipliers:
        raise UnknownMaterial(f"Material '{material.value}' is not priced in the pricing table")

    infill = request.infill_percent
    if not _is_number(infill) or not math.isfinite(infill) or not 0 <= infill <= 100:
        raise InvalidInfill(f"infill_percent must be between 0 and 100, got {infill!r}")

    layer_height = LayerHeight.parse(request.layer_height)
    if layer_height not in table.print_speed:
        raise UnknownLayerHeight(f"Layer height '{layer_height.value}' has no print speed in the pricing table")

    quantity = request.quantity
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise InvalidQuantity(f"quantity must be a positive integer, got {quantity!r}")
    try:
        float(quantity)
    except OverflowError:
        raise InvalidQuantity("quantity is too large to price") from None

    return material, layer_height


class PricingEngine:
    """
    Core pricing engine that turns a print request into a price breakdown.

    Resolution order:
    1. Validate dimensions, material, infill, layer height and quantity
    2. Volume (mm → cm³) and weight (density, g → kg)
    3. Material cost = weight × cost/kg × multiplier × infill fraction
    4. Print time from layer-height speed, machine cost from hourly rate
    5. Per-part subtotal × quantity, then the quantity discount tier
    """

    def __init__(self, table: Optional[PricingTable] = None, settings: Optional[Settings] = None):
        """Initialize engine with a pricing table, loading the configured one if none is given."""
        if table is None:
            self.settings = settings or get_settings()
            table = load_pricing_table(self.settings.pricing_table)
        else:
            self.settings = settings
        self.table = table
        self.discount_matcher = DiscountMatcher(table.quantity_discounts)

    def compute_components(self, request: PrintRequest) -> CostComponents:
        """Compute the unrounded cost components for a request."""
        components, _ = self._compute(request)
        return components

    def compute_breakdown(self, request: PrintRequest) -> PriceBreakdown:
        """
        Calculate a price breakdown with full traceability.

        Args:
            request: PrintRequest with dimensions, material and quantity

        Returns:
            PriceBreakdown with every presented field rounded once
        """
        components, trace = self._compute(request)
        return PriceBreakdown.from_components(components, currency=self.table.currency, trace=tuple(trace))

    def quote(
        self,
        length_mm: float,
        width_mm: float,
        height_mm: float,
        material: Union[str, Material],
        infill_percent: float,
        layer_height: Union[str, LayerHeight],
        quantity: int,
    ) -> PriceBreakdown:
        """Price a part from raw calculator inputs."""
        request = PrintRequest.create(
            length_mm=length_mm,
            width_mm=width_mm,
            height_mm=height_mm,
            material=material,
            infill_percent=infill_percent,
            layer_height=layer_height,
            quantity=quantity,
        )
        return self.compute_breakdown(request)

    def _compute(self, request: PrintRequest) -> tuple[CostComponents, list[TraceStep]]:
        table = self.table
        currency = table.currency
        material, layer_height = validate_request(request, table)
        trace = []

        volume_cm3 = (request.length_mm / 10) * (request.width_mm / 10) * (request.height_mm / 10)
        trace.append(TraceStep(
            "Volume",
            f"{request.length_mm} × {request.width_mm} × {request.height_mm} mm",
            f"{volume_cm3:.2f} cm³",
        ))

        density = table.material_densities[material]
        weight_kg = volume_cm3 * density / 1000
        trace.append(TraceStep("Weight", f"{material.value} at {density} g/cm³", f"{weight_kg:.3f} kg"))

        multiplier = table.material_multipliers[material]
        infill_factor = request.infill_percent / 100
        material_cost = weight_kg * table.material_cost_per_kg * multiplier * infill_factor
        trace.append(TraceStep(
            "Material Cost",
            f"{table.material_cost_per_kg}/kg × {multiplier} multiplier × {request.infill_percent}% infill",
            format_currency(material_cost, currency),
        ))

        speed = table.print_speed[layer_height]
        print_time_hours = volume_cm3 / speed
        machine_cost = print_time_hours * table.machine_hourly_rate
        trace.append(TraceStep(
            "Machine Time",
            f"{layer_height.value} layers at {speed} cm³/h, {table.machine_hourly_rate}/h",
            f"{format_duration(print_time_hours)} = {format_currency(machine_cost, currency)}",
        ))

        per_part_subtotal = material_cost + machine_cost + table.setup_fee
        if not math.isfinite(per_part_subtotal):
            raise InvalidDimensions("Part dimensions are too large to price")
        total_before_discount = per_part_subtotal * request.quantity
        if not math.isfinite(total_before_discount):
            raise InvalidQuantity(f"Order of {request.quantity} parts is too large to price")
        trace.append(TraceStep(
            "Extension",
            f"Quantity {request.quantity} × {format_currency(per_part_subtotal, currency)}",
            format_currency(total_before_discount, currency),
        ))

        matched = self.discount_matcher.find_tier(request.quantity)
        if matched:
            discount = matched.tier.discount
            trace.append(TraceStep("Discount Tier", matched.match_reason, f"{discount * 100:g}%"))
        else:
            discount = 0.0
            trace.append(TraceStep("Discount Tier", f"No tier matches qty {request.quantity}", "0%"))

        discount_amount = total_before_discount * discount
        total = total_before_discount - discount_amount
        trace.append(TraceStep("Total", "Total before discount − discount", format_currency(total, currency)))

        components = CostComponents(
            volume_cm3=volume_cm3,
            weight_kg=weight_kg,
            material_cost=material_cost,
            print_time_hours=print_time_hours,
            machine_cost=machine_cost,
            setup_fee=table.setup_fee,
            per_part_subtotal=per_part_subtotal,
            quantity=request.quantity,
            total_before_discount=total_before_discount,
            discount=discount,
            discount_amount=discount_amount,
            total=total,
            tier=matched.tier if matched else None,
        )
        return components, trace


def compute_breakdown(request: PrintRequest, table: PricingTable) -> PriceBreakdown:
    """Compute a price breakdown for `request` against `table`."""
    return PricingEngine(table).compute_breakdown(request)
