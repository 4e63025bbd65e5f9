#!/usr/bin/env python
"""Test runner script for the docdesigner test suite."""

import os
import sys
import subprocess


def main():
    """Run pytest with coverage on the offscreen Qt platform."""
    cmd = [
        sys.executable,
        "-m",
        "pytest",
        "--cov=docdesigner",
        "--cov-report=term-missing",
        "--cov-report=html",
        "-v",
        *sys.argv[1:],
    ]
    env = dict(os.environ)
    env.setdefault("QT_QPA_PLATFORM", "offscreen")

    print("Running designer tests with coverage...\n")
    result = subprocess.run(cmd, env=env)

    if result.returncode == 0:
        print("\n✓ All tests passed!")
        print("Coverage report: htmlcov/index.html")
    else:
        print("\n✗ Tests failed!")

    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
