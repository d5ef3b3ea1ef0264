#!/usr/bin/env python3
"""
Test runner for the GraphQL batching gateway.

Usage:
    python run_tests.py              # unit and integration tests
    python run_tests.py unit         # unit tests only
    python run_tests.py integration  # HTTP-level tests only
"""
import os
import subprocess
import sys

SUITES = {
    "all": ["tests"],
    "unit": ["tests/unit"],
    "integration": ["tests/integration", "-m", "integration"],
}


def run_tests(suite="all"):
    """Run one test suite with metrics and tracing switched off."""
    print(f"GraphQL Batching Gateway - {suite} tests")
    print("=" * 40)

    env = os.environ.copy()
    env["PYTHONPATH"] = "."
    env["GRAPHQL_BATCH_METRICS_ENABLED"] = "false"
    env["GRAPHQL_BATCH_OBSERVABILITY_ENABLED"] = "false"

    result = subprocess.run([sys.executable, "-m", "pytest", *SUITES[suite], "-v", "--tb=short"], env=env)

    print("\n" + "=" * 40)
    if result.returncode == 0:
        print("All tests passed!")
    else:
        print("Some tests failed.")
    return result.returncode


if __name__ == "__main__":
    suite = sys.argv[1] if len(sys.argv) > 1 else "all"
    if suite not in SUITES:
        print(f"Unknown suite '{suite}', expected one of: {', '.join(SUITES)}")
        sys.exit(2)
    sys.exit(run_tests(suite))
