"""
Data models for the pricing engine.

Uses frozen dataclasses: a breakdown is a snapshot recomputed on every
input change, never mutated.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .errors import UnknownMaterial, UnknownLayerHeight
from .formatting import format_duration, round_half_up


class Material(str, Enum):
    """Printable materials offered by the service."""
    ABS_M30 = "ABS-M30"
    ASA = "ASA"
    PC_ABS = "PC-ABS"
    NYLON_12 = "Nylon-12"

    @classmethod
    def parse(cls, value: Union[str, "Material"]) -> "Material":
        """Resolve an identifier such as 'ABS-M30' or raise UnknownMaterial."""
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise UnknownMaterial(f"Unknown material '{value}', must be one of: {valid}") from None


class LayerHeight(str, Enum):
    """Layer height presets; each maps to a print speed in the pricing table."""
    FINE = "fine"
    STANDARD = "standard"
    DRAFT = "draft"

    @classmethod
    def parse(cls, value: Union[str, "LayerHeight"]) -> "LayerHeight":
        """Resolve a preset name such as 'standard' or raise UnknownLayerHeight."""
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(lh.value for lh in cls)
            raise UnknownLayerHeight(f"Unknown layer height '{value}', must be one of: {valid}") from None


@dataclass(frozen=True)
class DiscountTier:
    """Inclusive quantity range [min_qty, max_qty] mapped to a discount fraction."""
    min_qty: int
    max_qty: int
    discount: float

    def contains(self, quantity: int) -> bool:
        return self.min_qty <= quantity <= self.max_qty


@dataclass(frozen=True)
class PricingTable:
    """Static pricing configuration. Loaded once, read-only afterwards."""
    material_cost_per_kg: float
    machine_hourly_rate: float
    setup_fee: float
    material_densities: Mapping[Material, float]
    material_multipliers: Mapping[Material, float]
    print_speed: Mapping[LayerHeight, float]
    quantity_discounts: tuple[DiscountTier, ...]
    currency: str = "PLN"
    # Nominal layer thickness per preset, display only
    layer_mm: Mapping[LayerHeight, float] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mappings so a shared table can't be edited in place
        object.__setattr__(self, 'material_densities', MappingProxyType(dict(self.material_densities)))
        object.__setattr__(self, 'material_multipliers', MappingProxyType(dict(self.material_multipliers)))
        object.__setattr__(self, 'print_speed', MappingProxyType(dict(self.print_speed)))
        object.__setattr__(self, 'layer_mm', MappingProxyType(dict(self.layer_mm)))
        object.__setattr__(self, 'quantity_discounts', tuple(self.quantity_discounts))

    @property
    def materials(self) -> list[Material]:
        """Materials priced by this table, in enum order."""
        return [m for m in Material if m in self.material_densities and m in self.material_multipliers]

    @property
    def layer_heights(self) -> list[LayerHeight]:
        return [lh for lh in LayerHeight if lh in self.print_speed]


@dataclass(frozen=True)
class PrintRequest:
    """A part configuration to be priced."""
    length_mm: float
    width_mm: float
    height_mm: float
    material: Material
    infill_percent: float
    layer_height: LayerHeight
    quantity: int

    @classmethod
    def create(
        cls,
        length_mm: float,
        width_mm: float,
        height_mm: float,
        material: Union[str, Material],
        infill_percent: float,
        layer_height: Union[str, LayerHeight],
        quantity: int,
    ) -> 'PrintRequest':
        """Build a request from raw identifiers, rejecting unknown material/layer names."""
        return cls(
            length_mm=length_mm,
            width_mm=width_mm,
            height_mm=height_mm,
            material=Material.parse(material),
            infill_percent=infill_percent,
            layer_height=LayerHeight.parse(layer_height),
            quantity=quantity,
        )


@dataclass(frozen=True)
class TraceStep:
    """A single step in the price resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class CostComponents:
    """Unrounded intermediate values of a price calculation."""
    volume_cm3: float
    weight_kg: float
    material_cost: float
    print_time_hours: float
    machine_cost: float
    setup_fee: float
    per_part_subtotal: float
    quantity: int
    total_before_discount: float
    discount: float
    discount_amount: float
    total: float
    tier: Optional[DiscountTier] = None


@dataclass(frozen=True)
class PriceBreakdown:
    """Complete, presentation-rounded result of a pricing calculation."""
    volume_cm3: float
    weight_kg: float
    material_cost: float
    print_time_hours: float
    print_time: str
    machine_cost: float
    setup_fee: float
    per_part_subtotal: float
    quantity: int
    total_before_discount: float
    discount_percent: float
    discount_amount: float
    total: float
    currency: str = "PLN"
    trace: tuple[TraceStep, ...] = field(default_factory=tuple)

    @classmethod
    def from_components(
        cls,
        components: CostComponents,
        currency: str = "PLN",
        trace: tuple[TraceStep, ...] = (),
    ) -> 'PriceBreakdown':
        """Round each presented field once, straight from the unrounded values."""
        return cls(
            volume_cm3=round_half_up(components.volume_cm3, 2),
            weight_kg=round_half_up(components.weight_kg, 3),
            material_cost=round_half_up(components.material_cost, 2),
            print_time_hours=round_half_up(components.print_time_hours, 1),
            # Formatted from the unrounded hours; rounding to 1 dp first would lose minutes
            print_time=format_duration(components.print_time_hours),
            machine_cost=round_half_up(components.machine_cost, 2),
            setup_fee=round_half_up(components.setup_fee, 2),
            per_part_subtotal=round_half_up(components.per_part_subtotal, 2),
            quantity=components.quantity,
            total_before_discount=round_half_up(components.total_before_discount, 2),
            discount_percent=round_half_up(components.discount * 100, 2),
            discount_amount=round_half_up(components.discount_amount, 2),
            total=round_half_up(components.total, 2),
            currency=currency,
            trace=tuple(trace),
        )

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['trace'] = [asdict(t) for t in self.trace]
        return data
