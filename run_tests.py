#!/usr/bin/env python3
"""Test runner script for resistorvision.

Wraps pytest with the usual selections for development and CI.
"""
import os
import sys
import subprocess
import argparse
import time
from pathlib import Path
from typing import List, Optional

PACKAGE = "resistorvision"


def run_command(cmd: List[str], cwd: Optional[Path] = None) -> int:
    """Run a command and return the exit code."""
    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=cwd)
    return result.returncode


def run_unit_tests(coverage: bool = True, verbose: bool = True) -> int:
    """Run unit tests."""
    cmd = [sys.executable, "-m", "pytest", "tests/unit/"]

    if verbose:
        cmd.append("-v")

    if coverage:
        cmd.extend([f"--cov={PACKAGE}", "--cov-report=term-missing"])

    print("Running unit tests...")
    return run_command(cmd)


def run_integration_tests(verbose: bool = True) -> int:
    """Run integration tests."""
    cmd = [sys.executable, "-m", "pytest", "tests/integration/", "-m", "integration"]

    if verbose:
        cmd.append("-v")

    print("Running integration tests...")
    return run_command(cmd)


def run_performance_tests(verbose: bool = True) -> int:
    """Run performance tests."""
    cmd = [sys.executable, "-m", "pytest", "tests/performance/", "-m", "performance"]

    if verbose:
        cmd.append("-v")

    print("Running performance tests...")
    return run_command(cmd)


def run_all_tests(coverage: bool = True, verbose: bool = True) -> int:
    """Run all tests."""
    cmd = [sys.executable, "-m", "pytest"]

    if verbose:
        cmd.append("-v")

    if coverage:
        cmd.extend([
            f"--cov={PACKAGE}",
            "--cov-report=html:htmlcov",
            "--cov-report=term-missing",
            "--cov-fail-under=80"
        ])

    print("Running all tests...")
    return run_command(cmd)


def run_quick_tests() -> int:
    """Run a quick subset of tests for development."""
    print("Running quick test suite...")

    cmd = [
        sys.executable, "-m", "pytest",
        "tests/unit/",
        "-x",  # Stop on first failure
        "--tb=short",
        "-q"
    ]

    return run_command(cmd)


def run_ci_tests() -> int:
    """Run tests suitable for CI/CD pipeline."""
    print("Running CI test suite...")

    os.environ["CI"] = "true"

    cmd = [
        sys.executable, "-m", "pytest",
        f"--cov={PACKAGE}",
        "--cov-report=xml:coverage.xml",
        "--cov-report=term",
        "--cov-fail-under=80",
        "--junit-xml=test-results.xml",
        "--tb=short"
    ]

    return run_command(cmd)


def check_test_environment() -> bool:
    """Check if the test environment is properly set up."""
    print("Checking test environment...")

    # import name -> distribution name
    required_packages = {
        "pytest": "pytest",
        "pytest_asyncio": "pytest-asyncio",
        "pytest_cov": "pytest-cov",
        "numpy": "numpy",
        "cv2": "opencv-python",
    }

    missing_packages = []
    for module, distribution in required_packages.items():
        try:
            __import__(module)
            print(f"✓ {distribution} available")
        except ImportError:
            print(f"✗ {distribution} not available")
            missing_packages.append(distribution)

    if missing_packages:
        print(f"\nMissing packages: {', '.join(missing_packages)}")
        print("Install with: pip install -e .[test]")
        return False

    project_root = Path(__file__).parent
    for dir_path in ("tests/unit", "tests/integration", "tests/performance"):
        if (project_root / dir_path).exists():
            print(f"✓ {dir_path} directory exists")
        else:
            print(f"✗ {dir_path} directory missing")
            return False

    print("✓ Test environment ready")
    return True


def main():
    """Main test runner function."""
    parser = argparse.ArgumentParser(description="Test runner for resistorvision")

    parser.add_argument(
        "test_type",
        choices=["unit", "integration", "performance", "all", "quick", "ci", "check"],
        help="Type of tests to run"
    )
    parser.add_argument("--no-coverage", action="store_true", help="Disable coverage reporting")
    parser.add_argument("--quiet", action="store_true", help="Quiet output")
    parser.add_argument("--check-env", action="store_true", help="Check test environment setup")

    args = parser.parse_args()

    if args.check_env or args.test_type == "check":
        if not check_test_environment():
            return 1
        if args.test_type == "check":
            return 0

    project_root = Path(__file__).parent
    os.chdir(project_root)

    start_time = time.time()

    try:
        if args.test_type == "unit":
            result = run_unit_tests(coverage=not args.no_coverage, verbose=not args.quiet)
        elif args.test_type == "integration":
            result = run_integration_tests(verbose=not args.quiet)
        elif args.test_type == "performance":
            result = run_performance_tests(verbose=not args.quiet)
        elif args.test_type == "all":
            result = run_all_tests(coverage=not args.no_coverage, verbose=not args.quiet)
        elif args.test_type == "quick":
            result = run_quick_tests()
        else:
            result = run_ci_tests()

        duration = time.time() - start_time
        print(f"\nTest execution completed in {duration:.2f} seconds")

        if result == 0:
            print("✓ All tests passed")
        else:
            print("✗ Some tests failed")

        return result

    except KeyboardInterrupt:
        print("\n\nTest execution interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
