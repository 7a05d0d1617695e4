#!/usr/bin/env python3
"""
Run the URL shortener test suite in-process.

    python run_tests.py                 # everything
    python run_tests.py -k redis        # extra arguments go to pytest

Tests build their own settings, so no TOKEN or Redis server is needed.
"""

import os
import sys

import pytest

PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_ARGS = ["tests/", "-v", "--tb=short"]


def run_tests(extra_args) -> int:
    os.chdir(PROJECT_DIR)
    return int(pytest.main([*DEFAULT_ARGS, *extra_args]))


if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
