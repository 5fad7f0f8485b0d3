#!/usr/bin/env python
"""
Run the quote API with uvicorn.

Usage:
    python scripts/run_api.py [--host 0.0.0.0] [--port 8000] [--no-reload]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Start the Print Quote API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload on code changes")
    parser.add_argument("--pricing-table", help="Serve quotes from this pricing_table.json instead of the bundled one")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    # Ensure src is on the import path of the uvicorn process
    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [src_path, env.get("PYTHONPATH")]))
    if args.pricing_table:
        env["PRINT_QUOTE_PRICING_TABLE"] = str(Path(args.pricing_table).resolve())

    cmd = [
        sys.executable, "-m", "uvicorn",
        "print_quote.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")

    print(f"Starting Print Quote API on {args.host}:{args.port}...")
    try:
        subprocess.run(cmd, env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
