"""Deterministic per-category attributes.

Intensity and influence come from a linear-congruential transform of the sum
of the id's character codes, so the same id always yields the same pair,
across runs and processes. Slot angle and base position come from the
category's index in the arranged active list.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from circumplex.engine.catalog import Category
from circumplex.engine.errors import InvalidInput

# LCG constants (Numerical Recipes "quick and dirty" generator)
_LCG_MULTIPLIER = 9301
_LCG_INCREMENT = 49297
_LCG_MODULUS = 233280

# Second, coarser generator for the influence radius
_INFLUENCE_MULTIPLIER = 17
_INFLUENCE_INCREMENT = 23
_INFLUENCE_MODULUS = 100

INTENSITY_MIN = 0.3
INTENSITY_SPAN = 0.4
INFLUENCE_MIN = 80.0
INFLUENCE_SPAN = 120.0

# Blob center placement: boost = intensity^0.7 pushes strong categories outward
_BOOST_EXPONENT = 0.7
_EXPANSION_BASE = 0.6
_EXPANSION_GAIN = 0.8
_CENTER_PULL_GAIN = 0.3


def category_seed(category_id: str) -> int:
    return sum(ord(ch) for ch in category_id)


def generate(category_id: str) -> tuple[float, float]:
    """(intensity, influence) for a category id.

    intensity is in [0.3, 0.7), influence in [80, 200). The empty id maps to
    seed 0 and is valid.
    """
    s = category_seed(category_id)
    r1 = ((s * _LCG_MULTIPLIER + _LCG_INCREMENT) % _LCG_MODULUS) / _LCG_MODULUS
    r2 = ((s * _INFLUENCE_MULTIPLIER + _INFLUENCE_INCREMENT) % _INFLUENCE_MODULUS) / _INFLUENCE_MODULUS
    return INTENSITY_MIN + r1 * INTENSITY_SPAN, INFLUENCE_MIN + r2 * INFLUENCE_SPAN


def intensity_boost(intensity: float) -> float:
    return intensity ** _BOOST_EXPONENT


@dataclass(frozen=True)
class CategoryLayoutAttributes:
    """Derived layout inputs for one category in one active-set evaluation."""

    category: Category
    index: int
    base_position: tuple[float, float]
    angle_degrees: float
    intensity: float
    influence: float

    @property
    def id(self) -> str:
        return self.category.id

    @property
    def boost(self) -> float:
        return intensity_boost(self.intensity)

    @property
    def effective_radius(self) -> float:
        """Base radius handed to the organic shape function (pixels)."""
        return self.influence * self.boost * 1.2

    def blob_center(self, scale: float, orbit_fraction: float = 0.3) -> tuple[float, float]:
        """Organic blob center relative to the shared center.

        `scale` is the raster resolution during synthesis and the base radius
        during label placement. Low-intensity categories are pulled inward.
        """
        boost = self.boost
        expansion = _EXPANSION_BASE + boost * _EXPANSION_GAIN
        center_pull = (1 - boost) * _CENTER_PULL_GAIN
        distance = scale * orbit_fraction * expansion * (1 - center_pull)
        bx, by = self.base_position
        return bx * distance, by * distance


def compute_layout_attributes(categories: Sequence[Category]) -> list[CategoryLayoutAttributes]:
    """Attributes for every arranged category, in arrangement order."""
    if not categories:
        raise InvalidInput("At least one category is required")
    ids = [c.id for c in categories]
    if len(set(ids)) != len(ids):
        raise InvalidInput(f"Duplicate category ids: {ids}")

    count = len(categories)
    attrs: list[CategoryLayoutAttributes] = []
    for index, category in enumerate(categories):
        theta = index * 2 * math.pi / count
        intensity, influence = generate(category.id)
        attrs.append(
            CategoryLayoutAttributes(
                category=category,
                index=index,
                base_position=(math.cos(theta), math.sin(theta)),
                angle_degrees=index * 360 / count,
                intensity=intensity,
                influence=influence,
            )
        )
    return attrs
