"""Polar noise shape function: an angle-dependent blob boundary.

r(a) = base * (1 + 0.4·intensity) * (1 + Σ amp_k · sin(freq_k·a + phase + k))

Three harmonics (4, 8, 16) with amplitudes 0.2, 0.1, 0.05 keep the sum in
[-0.35, 0.35], so the boundary never collapses below 0.65× the scaled base.
The phase depends on the category's first character, which gives every
category its own recognisable silhouette.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# (frequency, amplitude, phase constant)
HARMONICS: tuple[tuple[int, float, float], ...] = (
    (4, 0.2, 0.0),
    (8, 0.1, 1.0),
    (16, 0.05, 2.0),
)

_PHASE_SCALE = 0.1
_INTENSITY_GROWTH = 0.4


def phase_offset(category_id: str) -> float:
    if not category_id:
        return 0.0
    return ord(category_id[0]) * _PHASE_SCALE


def organic_radius(
    angle: float | NDArray[np.float64],
    base_radius: float,
    category_id: str,
    intensity: float,
) -> float | NDArray[np.float64]:
    """Boundary radius at `angle` (radians). Accepts a scalar or an array of angles."""
    seed = phase_offset(category_id)
    noise = sum(amp * np.sin(angle * freq + seed + const) for freq, amp, const in HARMONICS)
    radius = base_radius * (1 + intensity * _INTENSITY_GROWTH) * (1 + noise)
    if isinstance(radius, np.ndarray):
        return radius
    return float(radius)
