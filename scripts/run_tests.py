#!/usr/bin/env python3
"""
Test runner for the asset validator.
Provides a simple way to run tests without remembering pytest paths.
"""

import sys
import subprocess
from pathlib import Path


def run_tests(test_type="all", verbose=False):
    """Run asset validator tests."""

    project_root = Path(__file__).parent.parent

    cmd = [sys.executable, "-m", "pytest"]

    if verbose:
        cmd.append("-v")

    test_dir = project_root / "scripts" / "asset_validator" / "tests"

    if test_type == "integration":
        cmd.append(str(test_dir / "test_cli_integration.py"))
    elif test_type == "unit":
        cmd.append(str(test_dir))
        cmd.append("--ignore=" + str(test_dir / "test_cli_integration.py"))
    else:  # all
        cmd.append(str(test_dir))

    print(f"Running: {' '.join(cmd)}")
    print(f"Working directory: {project_root}")

    try:
        result = subprocess.run(cmd, cwd=project_root)
        return result.returncode
    except FileNotFoundError:
        print("Error: pytest not found. Install it with: pip install pytest")
        return 1


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Run asset validator tests")
    parser.add_argument("--type", choices=["all", "unit", "integration"],
                        default="all", help="Type of tests to run")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose output")

    args = parser.parse_args()

    sys.exit(run_tests(args.type, args.verbose))
