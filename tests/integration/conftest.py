"""Pytest configuration and fixtures for pipeline scenario tests.

Scenario tests run the full pipeline in-process against small hand-built
catalogs and the bundled sample catalog. No external services are needed.
"""

import os
import random

import pytest


def pytest_configure(config):
    """Pin the catalog source so a local .env cannot point tests elsewhere."""
    os.environ["CATALOG_SOURCE"] = "builtin"
    os.environ.pop("RANDOM_SEED", None)
    os.environ["SIMULATED_LATENCY_MS"] = "0"


@pytest.fixture
def rng():
    """Seeded random source so scenario output is reproducible."""
    return random.Random(1234)
