#!/usr/bin/env python
"""
Run the Streamlit instant-quote page.

Usage:
    python scripts/run_app.py [--port 8501] [--pricing-table path/to/pricing_table.json]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Start the instant-quote page")
    parser.add_argument("--port", type=int, default=8501)
    parser.add_argument("--pricing-table", help="Quote from this pricing_table.json instead of the bundled one")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'print_quote' / 'ui' / 'app_streamlit.py'

    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    env = os.environ.copy()
    if args.pricing_table:
        env['PRINT_QUOTE_PRICING_TABLE'] = str(Path(args.pricing_table).resolve())

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path), '--server.port', str(args.port)]
    print(f"Starting Streamlit: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nApplication stopped.")


if __name__ == "__main__":
    main()
