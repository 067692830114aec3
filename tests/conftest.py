# tests/conftest.py

from datetime import date
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from salahtime.models import GeoCoordinate  # noqa: E402

DATA_DIR = Path(__file__).parent / "data"

# Kitchener, ON
KITCHENER = GeoCoordinate(lat=43.4296, lng=-80.4214)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep SALAHTIME_* variables from the developer's shell or .env out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("SALAHTIME_"):
            monkeypatch.delenv(name)


@pytest.fixture
def kitchener():
    return KITCHENER


@pytest.fixture
def winter_day():
    return date(2026, 2, 15)


@pytest.fixture
def ramadan_table_path():
    return DATA_DIR / "kitchener_ramadan_1447.json"
