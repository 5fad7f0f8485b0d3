#!/usr/bin/env python
"""
Build pipeline - compiles the pricing table and runs the test suite.

Usage:
    python scripts/build_all.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from print_quote.config.settings import get_settings
from print_quote.data.compile_table import compile_pricing_table


def main():
    print("=" * 60)
    print("PRINT QUOTE BUILD PIPELINE")
    print("=" * 60)
    print()

    settings = get_settings()

    # Compile pricing table
    print("[1/2] Compiling pricing table...")
    success, table_data, errors = compile_pricing_table(settings.pricing_sheets, settings.pricing_table)

    if not success:
        print("\n❌ BUILD FAILED")
        for error in errors:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running tests...")

    # Run tests
    import subprocess
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Currency: {table_data['currency']}")
    print(f"  Materials: {', '.join(table_data['materialDensities'])}")
    print(f"  Layer heights: {', '.join(table_data['printSpeed'])}")
    print()
    print("Quantity Discounts:")
    for tier in table_data['quantityDiscounts']:
        print(f"  {tier['min']}-{tier['max']}: {tier['discount'] * 100:g}%")


if __name__ == "__main__":
    main()
