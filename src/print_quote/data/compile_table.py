"""
Pricing Table Compiler - Validates and compiles pricing sheets from CSV to JSON.

Reads rates.csv, materials.csv, layer_heights.csv and discount_tiers.csv,
validates every row, and outputs the pricing_table.json the engine loads.
"""
import csv
import json
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

from ..engine.discounts import check_tiers
from ..engine.models import DiscountTier, LayerHeight, Material
from ..engine.pricing_table import table_from_dict


SHEETS = ('rates.csv', 'materials.csv', 'layer_heights.csv', 'discount_tiers.csv')

REQUIRED_RATES = ('material_cost_per_kg', 'machine_hourly_rate', 'setup_fee')


def parse_optional_float(value: Optional[str]) -> Optional[float]:
    """Parse optional float."""
    if not value or value.strip() == '':
        return None
    return float(value)


def parse_optional_str(value: Optional[str]) -> Optional[str]:
    """Parse optional string (empty = None)."""
    if not value or value.strip() == '':
        return None
    return value.strip()


def read_sheet(path: Path) -> list[tuple[int, dict]]:
    """Read a CSV sheet as (line_num, row) pairs."""
    with open(path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        return [(line_num, row) for line_num, row in enumerate(reader, start=2)]  # +2 for 1-indexed header row


def _positive(row: dict, column: str, sheet: str, line_num: int, errors: list[str]) -> Optional[float]:
    try:
        value = parse_optional_float(row.get(column))
    except ValueError:
        errors.append(f"{sheet} line {line_num}: {column} must be numeric")
        return None
    if value is None:
        errors.append(f"{sheet} line {line_num}: {column} is required")
        return None
    if value <= 0:
        errors.append(f"{sheet} line {line_num}: {column} must be positive, got {value}")
        return None
    return value


def validate_rates(rows: list[tuple[int, dict]]) -> tuple[dict, list[str]]:
    """Validate rates.csv (setting,value rows)."""
    errors = []
    rates = {}
    seen = set()
    currency = "PLN"

    for line_num, row in rows:
        setting = parse_optional_str(row.get('setting'))
        if not setting:
            errors.append(f"rates.csv line {line_num}: setting is required")
            continue
        if setting == 'currency':
            currency = parse_optional_str(row.get('value')) or currency
            continue
        if setting not in REQUIRED_RATES:
            errors.append(f"rates.csv line {line_num}: unknown setting '{setting}'")
            continue
        seen.add(setting)
        try:
            value = parse_optional_float(row.get('value'))
        except ValueError:
            errors.append(f"rates.csv line {line_num}: {setting} must be numeric")
            continue
        if value is None or value < 0:
            errors.append(f"rates.csv line {line_num}: {setting} must be a non-negative number")
            continue
        rates[setting] = value

    for setting in REQUIRED_RATES:
        if setting not in seen:
            errors.append(f"rates.csv: {setting} is required")

    rates['currency'] = currency
    return rates, errors


def validate_materials(rows: list[tuple[int, dict]]) -> tuple[dict, dict, list[str]]:
    """Validate materials.csv, returning (densities, multipliers, errors)."""
    errors = []
    densities = {}
    multipliers = {}
    valid = ", ".join(m.value for m in Material)

    for line_num, row in rows:
        name = parse_optional_str(row.get('material'))
        if not name:
            errors.append(f"materials.csv line {line_num}: material is required")
            continue
        try:
            material = Material(name)
        except ValueError:
            errors.append(f"materials.csv line {line_num}: invalid material '{name}', must be one of: {valid}")
            continue
        if material.value in densities:
            errors.append(f"materials.csv line {line_num}: duplicate material '{name}'")
            continue

        density = _positive(row, 'density', 'materials.csv', line_num, errors)
        multiplier = _positive(row, 'multiplier', 'materials.csv', line_num, errors)
        if density is None or multiplier is None:
            continue
        densities[material.value] = density
        multipliers[material.value] = multiplier

    return densities, multipliers, errors


def validate_layer_heights(rows: list[tuple[int, dict]]) -> tuple[dict, dict, list[str]]:
    """Validate layer_heights.csv, returning (print_speed, layer_mm, errors)."""
    errors = []
    speeds = {}
    thickness = {}
    valid = ", ".join(lh.value for lh in LayerHeight)

    for line_num, row in rows:
        name = parse_optional_str(row.get('layer_height'))
        try:
            layer_height = LayerHeight(name)
        except ValueError:
            errors.append(f"layer_heights.csv line {line_num}: invalid layer_height '{name}', must be one of: {valid}")
            continue
        if layer_height.value in speeds:
            errors.append(f"layer_heights.csv line {line_num}: duplicate layer_height '{name}'")
            continue

        layer_mm = _positive(row, 'layer_mm', 'layer_heights.csv', line_num, errors)
        speed = _positive(row, 'speed_cm3_per_hour', 'layer_heights.csv', line_num, errors)
        if layer_mm is None or speed is None:
            continue
        speeds[layer_height.value] = speed
        thickness[layer_height.value] = layer_mm

    return speeds, thickness, errors


def validate_discount_tiers(rows: list[tuple[int, dict]]) -> tuple[list[DiscountTier], list[str]]:
    """Validate discount_tiers.csv, then check tier contiguity and ordering."""
    errors = []
    tiers = []

    for line_num, row in rows:
        try:
            tier = DiscountTier(
                min_qty=int(row.get('min_qty', '')),
                max_qty=int(row.get('max_qty', '')),
                discount=float(row.get('discount', '')),
            )
        except (TypeError, ValueError):
            errors.append(f"discount_tiers.csv line {line_num}: min_qty, max_qty must be integers and discount numeric")
            continue
        tiers.append(tier)

    if not errors:
        errors.extend(f"discount_tiers.csv: {problem}" for problem in check_tiers(tiers))

    return sorted(tiers, key=lambda t: t.min_qty), errors


def compile_pricing_table(
    sheets_dir: Path,
    output_json: Path,
    verbose: bool = True
) -> tuple[bool, dict, list[str]]:
    """
    Compile pricing sheets from CSV to JSON.

    Returns (success, table_data, errors).
    """
    sheets_dir = Path(sheets_dir)
    output_json = Path(output_json)

    missing = [name for name in SHEETS if not (sheets_dir / name).exists()]
    if missing:
        return False, {}, [f"Pricing sheet not found: {sheets_dir / name}" for name in missing]

    rates, all_errors = validate_rates(read_sheet(sheets_dir / 'rates.csv'))
    densities, multipliers, errors = validate_materials(read_sheet(sheets_dir / 'materials.csv'))
    all_errors.extend(errors)
    speeds, thickness, errors = validate_layer_heights(read_sheet(sheets_dir / 'layer_heights.csv'))
    all_errors.extend(errors)
    tiers, errors = validate_discount_tiers(read_sheet(sheets_dir / 'discount_tiers.csv'))
    all_errors.extend(errors)

    if all_errors:
        if verbose:
            print("Validation errors:")
            for err in all_errors:
                print(f"  ❌ {err}")
        return False, {}, all_errors

    output_data = {
        "compiled_at": datetime.now().isoformat(),
        "source_dir": str(sheets_dir),
        "currency": rates['currency'],
        "materialCostPerKg": rates['material_cost_per_kg'],
        "machineHourlyRate": rates['machine_hourly_rate'],
        "setupFee": rates['setup_fee'],
        "materialDensities": densities,
        "materialMultipliers": multipliers,
        "printSpeed": speeds,
        "quantityDiscounts": [
            {"min": t.min_qty, "max": t.max_qty, "discount": t.discount}
            for t in tiers
        ],
        "layerHeightsMm": thickness,
    }

    # Round-trip through the loader so the engine is guaranteed to accept it
    table_from_dict(output_data)

    output_json.parent.mkdir(parents=True, exist_ok=True)
    with open(output_json, 'w', encoding='utf-8') as f:
        json.dump(output_data, f, indent=2)

    if verbose:
        print(f"✅ Compiled {len(densities)} materials, {len(speeds)} layer heights, {len(tiers)} discount tiers")
        print(f"   Output: {output_json}")

    return True, output_data, []


def main():
    """CLI entry point."""
    from ..config.settings import get_settings

    settings = get_settings()

    print("Compiling pricing table...")
    success, _, errors = compile_pricing_table(settings.pricing_sheets, settings.pricing_table)

    if not success:
        print(f"\n❌ Compilation failed with {len(errors)} errors")
        sys.exit(1)


if __name__ == "__main__":
    main()
