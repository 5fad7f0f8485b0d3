"""
Error types raised by the pricing engine.

Every input failure is detected before any arithmetic runs and carries
the offending field so a caller can show a field-level message.
"""
from typing import Optional


class PricingError(ValueError):
    """Base class for rejected pricing input."""

    code = "pricing_error"
    field: Optional[str] = None

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if field is not None:
            self.field = field

    def to_dict(self) -> dict:
        return {"error": self.code, "field": self.field, "message": self.message}


class UnknownMaterial(PricingError):
    code = "unknown_material"
    field = "material"


class UnknownLayerHeight(PricingError):
    code = "unknown_layer_height"
    field = "layer_height"


class InvalidDimensions(PricingError):
    code = "invalid_dimensions"


class InvalidInfill(PricingError):
    code = "invalid_infill"
    field = "infill_percent"


class InvalidQuantity(PricingError):
    code = "invalid_quantity"
    field = "quantity"


class PricingTableError(ValueError):
    """The pricing table data file is malformed."""
