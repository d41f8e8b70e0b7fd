#!/usr/bin/env python3
"""Main entry point for project management - CLI driven."""

import argparse
import os
import subprocess
import sys
import time
import webbrowser
from pathlib import Path

# Ensure src directory is in python path
sys.path.append(str(Path(__file__).parent / "src"))

from utils import runners  # noqa: E402
from utils.config import clean_all  # noqa: E402
from utils.mlflow.io import local_tracking_uri  # noqa: E402


def start_mlflow_ui(port: int = 5000) -> bool:
    """Start the MLflow UI in the background and open it in a browser."""
    print("\nStarting MLflow UI...")
    try:
        with open("mlflow_ui.log", "w") as log_file:
            proc = subprocess.Popen(
                ["uv", "run", "mlflow", "ui", "--port", str(port),
                 "--backend-store-uri", local_tracking_uri()],
                stdout=log_file,
                stderr=subprocess.STDOUT,
                start_new_session=True,  # Detach so it outlives this CLI
            )
    except FileNotFoundError:
        print("  ✗ 'uv' command not found. Ensure uv is installed and in PATH.")
        return False

    print(f"  ✓ MLflow UI started in background with PID: {proc.pid}")
    print("  → Logs redirected to: mlflow_ui.log")

    # Give MLflow UI some time to start up
    time.sleep(3)
    url = f"http://localhost:{port}"
    webbrowser.open_new_tab(url)
    print(f"  → Open: {url}")
    return True


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Project management for the numerical micro-benchmarks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    actions = parser.add_argument_group("Actions")
    actions.add_argument("--compute", action="store_true", help="Run all compute scripts (sequentially)")
    actions.add_argument("--plot", action="store_true", help="Run all plotting scripts (in parallel)")
    actions.add_argument("--clean", action="store_true", help="Clean all generated files and caches")
    actions.add_argument("--mlflow-ui", action="store_true", help="Start MLflow UI and open in browser")
    parser.add_argument("--port", type=int, default=5000, help="Port for the MLflow UI (default: 5000)")

    if len(sys.argv) == 1:
        parser.print_help()
        sys.exit(1)

    args = parser.parse_args()

    # Execute commands in logical order
    if args.clean:
        clean_all()

    failed = 0
    if args.compute:
        _, failed_compute = runners.run_compute_scripts()
        failed += failed_compute

    if args.plot:
        _, failed_plot = runners.run_plot_scripts()
        failed += failed_plot

    if args.mlflow_ui and not start_mlflow_ui(args.port):
        failed += 1

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    os.chdir(Path(__file__).parent)
    main()
