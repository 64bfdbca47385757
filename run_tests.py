#!/usr/bin/env python3
"""Test runner script for dupefinder."""

import sys
import subprocess
from pathlib import Path

_MARKERS = ("unit", "config", "detection", "integration")


def main():
    """Run tests with pytest."""
    project_root = Path(__file__).parent

    # Check if pytest is available
    try:
        import pytest  # noqa: F401
    except ImportError:
        print("❌ pytest is not installed. Please install it with:")
        print("   pip install -e '.[test]'")
        sys.exit(1)

    cmd = [
        sys.executable,
        "-m",
        "pytest",
        str(project_root / "tests"),
        "-v",
        "--tb=short",
        "--color=yes",
    ]

    # Add specific test markers if requested
    if len(sys.argv) > 1 and sys.argv[1] in _MARKERS:
        cmd.extend(["-m", sys.argv[1]])

    print(f"🧪 Running tests: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, cwd=project_root)
        sys.exit(result.returncode)
    except KeyboardInterrupt:
        print("\n⏹️  Tests interrupted by user")
        sys.exit(1)
