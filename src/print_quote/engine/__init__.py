"""Engine subpackage - core pricing logic and formatting."""
from .pricing_engine import PricingEngine, compute_breakdown
from .models import Material, LayerHeight, PrintRequest, PriceBreakdown, PricingTable, DiscountTier
from .errors import (
    PricingError,
    UnknownMaterial,
    UnknownLayerHeight,
    InvalidDimensions,
    InvalidInfill,
    InvalidQuantity,
    PricingTableError,
)
from .formatting import format_currency, format_duration

__all__ = [
    'PricingEngine', 'compute_breakdown',
    'Material', 'LayerHeight', 'PrintRequest', 'PriceBreakdown', 'PricingTable', 'DiscountTier',
    'PricingError', 'UnknownMaterial', 'UnknownLayerHeight', 'InvalidDimensions',
    'InvalidInfill', 'InvalidQuantity', 'PricingTableError',
    'format_currency', 'format_duration',
]
