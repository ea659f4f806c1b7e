"""
Coverage runner script for nodeify.
Run tests with coverage reporting.
"""

import subprocess
import sys
from pathlib import Path


def run_coverage():
    """Run tests with coverage and generate reports."""
    cmd = [
        sys.executable,
        "-m",
        "pytest",
        "tests",
        "--cov=nodeify",
        "--cov-report=term-missing",
        "--cov-report=xml",
    ]

    project_dir = Path(__file__).resolve().parent
    result = subprocess.run(cmd, check=False, cwd=str(project_dir))
    sys.exit(result.returncode)


if __name__ == "__main__":
    run_coverage()
