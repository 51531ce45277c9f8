"""Raster blob synthesizer: one RGBA glow layer per category.

Every pixel is an independent function of its coordinate and the category's
attributes (see `shade`). The full pass is that function evaluated over a
pixel grid with numpy; large rasters are split into row bands that can be
evaluated on worker threads and stacked back together.

Per pixel:
1. Outside the circular viewport (0.4·R from the raster center) -> transparent.
2. Radial falloff (1 - d/r_organic)^1.5 · intensity inside the organic boundary.
3. Directional texture from sin(6t) + sin(13t) of the raw angle, floor 0.3.
4. Global vignette 1 - (d0/d_max)^1.8.
5. Intensity > 0.05 -> category colour with alpha min(255, i·255·0.8).
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor
from dataclasses import dataclass, replace

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from circumplex.engine.attributes import CategoryLayoutAttributes
from circumplex.engine.catalog import Category
from circumplex.engine.config import DEFAULT_CONFIG, RenderConfig
from circumplex.engine.errors import InvalidInput
from circumplex.engine.shape import organic_radius
from circumplex.utils.imaging import array_to_image, png_data_url

logger = logging.getLogger(__name__)

_FALLOFF_EXPONENT = 1.5
_VIGNETTE_EXPONENT = 1.8
_TEXTURE_FREQS = (6, 13)
_TEXTURE_AMPLITUDE = 0.1
_TEXTURE_FLOOR = 0.3
# Pixels at or below this intensity are dropped entirely
_VISIBILITY_THRESHOLD = 0.05
_ALPHA_GAIN = 0.8


@dataclass(frozen=True)
class BlobRaster:
    """resolution x resolution RGBA glow for one category."""

    category_id: str
    resolution: int
    pixels: NDArray[np.uint8]

    @property
    def alpha(self) -> NDArray[np.uint8]:
        return self.pixels[:, :, 3]

    def to_image(self) -> Image.Image:
        return array_to_image(self.pixels)

    def to_data_url(self) -> str:
        return png_data_url(self.to_image())


def validate_resolution(resolution: int) -> None:
    if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)):
        raise InvalidInput(f"Resolution must be an integer, got {resolution!r}")
    if resolution <= 0:
        raise InvalidInput(f"Resolution must be positive, got {resolution}")


def shade(
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    attrs: CategoryLayoutAttributes,
    resolution: int,
    config: RenderConfig = DEFAULT_CONFIG,
) -> NDArray[np.uint8]:
    """RGBA for each (x, y) pixel coordinate. Output shape is xs.shape + (4,)."""
    half = resolution / 2
    px = np.asarray(xs, dtype=np.float64) - half
    py = np.asarray(ys, dtype=np.float64) - half
    distance_from_center = np.sqrt(px * px + py * py)
    max_distance = resolution * config.viewport_fraction

    cx, cy = attrs.blob_center(resolution, config.orbit_fraction)
    dx = px - cx
    dy = py - cy
    item_distance = np.sqrt(dx * dx + dy * dy)
    boundary = organic_radius(np.arctan2(dy, dx), attrs.effective_radius, attrs.id, attrs.intensity)

    inside = item_distance < boundary
    normalized = np.clip(1 - item_distance / boundary, 0.0, None)
    value = np.where(inside, normalized ** _FALLOFF_EXPONENT * attrs.intensity, 0.0)

    t = np.arctan2(py, px)
    texture = sum(np.sin(t * f) for f in _TEXTURE_FREQS) * _TEXTURE_AMPLITUDE + 1
    value = value * np.maximum(_TEXTURE_FLOOR, texture)

    ratio = np.minimum(distance_from_center / max_distance, 1.0)
    value = value * np.maximum(0.0, 1 - ratio ** _VIGNETTE_EXPONENT)

    visible = (distance_from_center <= max_distance) & (value > _VISIBILITY_THRESHOLD)

    out = np.zeros(px.shape + (4,), dtype=np.uint8)
    out[visible, 0:3] = attrs.category.color
    out[visible, 3] = np.minimum(255.0, np.rint(value[visible] * 255 * _ALPHA_GAIN)).astype(np.uint8)
    return out


def shade_pixel(
    x: int,
    y: int,
    attrs: CategoryLayoutAttributes,
    resolution: int,
    config: RenderConfig = DEFAULT_CONFIG,
) -> tuple[int, int, int, int]:
    """Single-pixel evaluation of `shade`; identical to the value in a full pass."""
    rgba = shade(np.array([x], dtype=np.float64), np.array([y], dtype=np.float64), attrs, resolution, config)[0]
    return (int(rgba[0]), int(rgba[1]), int(rgba[2]), int(rgba[3]))


def shade_band(
    attrs: CategoryLayoutAttributes,
    resolution: int,
    row_start: int,
    row_end: int,
    config: RenderConfig = DEFAULT_CONFIG,
) -> NDArray[np.uint8]:
    """Rows [row_start, row_end) of the raster."""
    ys, xs = np.mgrid[row_start:row_end, 0:resolution].astype(np.float64)
    return shade(xs, ys, attrs, resolution, config)


def band_bounds(resolution: int, band_rows: int) -> list[tuple[int, int]]:
    step = max(1, band_rows)
    return [(r, min(r + step, resolution)) for r in range(0, resolution, step)]


def synthesize_blob(
    category: Category,
    attrs: CategoryLayoutAttributes,
    resolution: int,
    *,
    config: RenderConfig = DEFAULT_CONFIG,
    executor: Executor | None = None,
    band_rows: int | None = None,
) -> BlobRaster:
    """Render one category's glow.

    With an executor and band_rows smaller than the resolution, row bands are
    shaded concurrently. The result is identical either way.
    """
    validate_resolution(resolution)
    if category.id != attrs.id:
        raise InvalidInput(f"Attributes belong to {attrs.id!r}, not {category.id!r}")
    if category != attrs.category:
        attrs = replace(attrs, category=category)

    t0 = time.perf_counter()
    if executor is not None and band_rows is not None and band_rows < resolution:
        futures = [
            executor.submit(shade_band, attrs, resolution, start, end, config)
            for start, end in band_bounds(resolution, band_rows)
        ]
        pixels = np.concatenate([f.result() for f in futures], axis=0)
    else:
        pixels = shade_band(attrs, resolution, 0, resolution, config)

    pixels.flags.writeable = False
    logger.debug(
        "Synthesized %s at %dpx in %.1fms",
        category.id,
        resolution,
        (time.perf_counter() - t0) * 1000,
    )
    return BlobRaster(category_id=category.id, resolution=resolution, pixels=pixels)
