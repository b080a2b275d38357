import os

import pytest

from splitstats.config import get_settings
from splitstats.experiments.types import VariantObservation


@pytest.fixture
def clean_settings(monkeypatch):
    """Settings built from defaults, ignoring any SPLITSTATS_* variables in the environment."""
    for key in list(os.environ):
        if key.startswith("SPLITSTATS_"):
            monkeypatch.delenv(key, raising=False)

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def control():
    return VariantObservation("control", views=1000, conversions=50)


@pytest.fixture
def strong_treatment():
    return VariantObservation("treatment", views=1000, conversions=80)
