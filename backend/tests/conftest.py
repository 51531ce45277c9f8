"""Shared test fixtures."""

from __future__ import annotations

import pytest

from circumplex.engine.attributes import compute_layout_attributes
from circumplex.engine.catalog import EMOTIONS

# Small rasters keep the pixel loops fast; geometry is resolution-relative.
SMALL_RESOLUTION = 64

# Distinct opaque colours for compositing tests
RED = (200, 40, 40)
GREEN = (40, 200, 40)
BLUE = (40, 40, 200)


@pytest.fixture
def joy():
    return EMOTIONS.get("joy")


@pytest.fixture
def joy_attrs(joy):
    return compute_layout_attributes([joy])[0]


@pytest.fixture
def default_categories():
    return [EMOTIONS.get(i) for i in ("joy", "sadness", "anger", "love")]


@pytest.fixture
def default_attrs(default_categories):
    return compute_layout_attributes(default_categories)
