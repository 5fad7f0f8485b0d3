"""
Pricing table loading.

The table is a JSON data file so pricing can change without touching
calculation code. Keys follow the data file's camelCase names.
"""
import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from .discounts import check_tiers
from .errors import PricingTableError
from .models import DiscountTier, LayerHeight, Material, PricingTable

logger = logging.getLogger(__name__)

REQUIRED_KEYS = (
    'materialCostPerKg',
    'machineHourlyRate',
    'setupFee',
    'materialDensities',
    'materialMultipliers',
    'printSpeed',
    'quantityDiscounts',
)


def _number(data: dict, key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PricingTableError(f"{key} must be a number, got {value!r}")
    return float(value)


def _keyed(data: dict, key: str, enum_cls) -> dict:
    raw = data[key]
    if not isinstance(raw, dict):
        raise PricingTableError(f"{key} must be an object")
    parsed = {}
    for name, value in raw.items():
        try:
            member = enum_cls(name)
        except ValueError:
            raise PricingTableError(f"{key}: unknown key '{name}'") from None
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise PricingTableError(f"{key}.{name} must be a positive number, got {value!r}")
        parsed[member] = float(value)
    return parsed


def table_from_dict(data: dict[str, Any]) -> PricingTable:
    """Build a PricingTable from data-file form, raising PricingTableError on bad structure."""
    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise PricingTableError(f"Pricing table missing keys: {', '.join(missing)}")

    if not isinstance(data['quantityDiscounts'], list):
        raise PricingTableError("quantityDiscounts must be a list")

    tiers = []
    for i, raw in enumerate(data['quantityDiscounts'], start=1):
        try:
            tiers.append(DiscountTier(
                min_qty=int(raw['min']),
                max_qty=int(raw['max']),
                discount=float(raw['discount']),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise PricingTableError(f"quantityDiscounts[{i}] is malformed: {e}") from e

    table = PricingTable(
        material_cost_per_kg=_number(data, 'materialCostPerKg'),
        machine_hourly_rate=_number(data, 'machineHourlyRate'),
        setup_fee=_number(data, 'setupFee'),
        material_densities=_keyed(data, 'materialDensities', Material),
        material_multipliers=_keyed(data, 'materialMultipliers', Material),
        print_speed=_keyed(data, 'printSpeed', LayerHeight),
        quantity_discounts=tuple(tiers),
        currency=str(data.get('currency', 'PLN')),
        layer_mm=_keyed(data, 'layerHeightsMm', LayerHeight) if 'layerHeightsMm' in data else {},
    )

    # Tier shape is a configuration invariant, not enforced at quote time
    for problem in check_tiers(table.quantity_discounts):
        logger.warning("Pricing table: %s", problem)

    return table


def table_to_dict(table: PricingTable) -> dict[str, Any]:
    """Convert a PricingTable back to data-file form."""
    data = {
        "currency": table.currency,
        "materialCostPerKg": table.material_cost_per_kg,
        "machineHourlyRate": table.machine_hourly_rate,
        "setupFee": table.setup_fee,
        "materialDensities": {m.value: v for m, v in table.material_densities.items()},
        "materialMultipliers": {m.value: v for m, v in table.material_multipliers.items()},
        "printSpeed": {lh.value: v for lh, v in table.print_speed.items()},
        "quantityDiscounts": [
            {"min": t.min_qty, "max": t.max_qty, "discount": t.discount}
            for t in table.quantity_discounts
        ],
    }
    if table.layer_mm:
        data["layerHeightsMm"] = {lh.value: v for lh, v in table.layer_mm.items()}
    return data


def load_pricing_table(path: Path) -> PricingTable:
    """Load the pricing table from a JSON data file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Pricing table not found at {path}. "
            "Execute scripts/build_all.py to compile it from the pricing sheets."
        )

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PricingTableError(f"{path} is not valid JSON: {e}") from e

    table = table_from_dict(data)
    logger.info(
        "Loaded pricing table from %s (%d materials, %d tiers)",
        path, len(table.materials), len(table.quantity_discounts),
    )
    return table


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    path = Path(path)
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]
