"""Tests for the raster blob synthesizer."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import math

import numpy as np
import pytest

from circumplex.engine.catalog import EMOTIONS, Category
from circumplex.engine.errors import InvalidInput
from circumplex.engine.synthesizer import band_bounds, shade_pixel, synthesize_blob
from tests.conftest import SMALL_RESOLUTION


def _distance_grid(resolution: int) -> np.ndarray:
    ys, xs = np.mgrid[0:resolution, 0:resolution].astype(np.float64)
    px = xs - resolution / 2
    py = ys - resolution / 2
    return np.sqrt(px * px + py * py)


def _reference_alpha(x, y, attrs, resolution):
    """Straight per-pixel evaluation of the glow formula."""
    px, py = x - resolution / 2, y - resolution / 2
    d0 = math.hypot(px, py)
    max_distance = resolution * 0.4
    if d0 > max_distance:
        return 0

    boost = attrs.intensity**0.7
    expansion = 0.6 + boost * 0.8
    pull = (1 - boost) * 0.3
    orbit = resolution * 0.3 * expansion * (1 - pull)
    cx, cy = attrs.base_position[0] * orbit, attrs.base_position[1] * orbit

    dx, dy = px - cx, py - cy
    distance = math.hypot(dx, dy)
    a = math.atan2(dy, dx)
    seed = ord(attrs.id[0]) * 0.1
    noise = 0.2 * math.sin(4 * a + seed) + 0.1 * math.sin(8 * a + seed + 1) + 0.05 * math.sin(16 * a + seed + 2)
    organic = attrs.influence * boost * 1.2 * (1 + attrs.intensity * 0.4) * (1 + noise)

    value = (1 - distance / organic) ** 1.5 * attrs.intensity if distance < organic else 0.0
    t = math.atan2(py, px)
    value *= max(0.3, (math.sin(6 * t) + math.sin(13 * t)) * 0.1 + 1)
    value *= max(0.0, 1 - (d0 / max_distance) ** 1.8)
    if value <= 0.05:
        return 0
    return min(255, round(value * 255 * 0.8))


def test_shape_and_dtype(joy, joy_attrs):
    raster = synthesize_blob(joy, joy_attrs, SMALL_RESOLUTION)
    assert raster.pixels.shape == (SMALL_RESOLUTION, SMALL_RESOLUTION, 4)
    assert raster.pixels.dtype == np.uint8
    assert raster.category_id == "joy"


@pytest.mark.parametrize("resolution", [17, 40, SMALL_RESOLUTION])
def test_transparent_outside_viewport(default_categories, default_attrs, resolution):
    outside = _distance_grid(resolution) > 0.4 * resolution
    for category, attrs in zip(default_categories, default_attrs):
        raster = synthesize_blob(category, attrs, resolution)
        assert np.all(raster.alpha[outside] == 0)
        assert np.all(raster.pixels[outside] == 0)


def test_center_pixel_has_category_colour(joy, joy_attrs):
    raster = synthesize_blob(joy, joy_attrs, SMALL_RESOLUTION)
    c = SMALL_RESOLUTION // 2
    r, g, b, a = raster.pixels[c, c]
    assert (r, g, b) == joy.color
    assert a > 0


def test_visible_pixels_use_only_category_colour(joy, joy_attrs):
    raster = synthesize_blob(joy, joy_attrs, SMALL_RESOLUTION)
    visible = raster.alpha > 0
    assert visible.any()
    assert np.all(raster.pixels[visible][:, :3] == joy.color)
    # alpha = min(255, i·255·0.8) with i <= 0.7·1.2
    assert raster.alpha.max() <= round(0.7 * 1.2 * 255 * 0.8)


def test_deterministic(joy, joy_attrs):
    a = synthesize_blob(joy, joy_attrs, SMALL_RESOLUTION)
    b = synthesize_blob(joy, joy_attrs, SMALL_RESOLUTION)
    assert np.array_equal(a.pixels, b.pixels)


@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_alpha_matches_per_pixel_formula(default_categories, default_attrs, index):
    resolution = 40
    category, attrs = default_categories[index], default_attrs[index]
    raster = synthesize_blob(category, attrs, resolution)
    expected = np.array(
        [[_reference_alpha(x, y, attrs, resolution) for x in range(resolution)] for y in range(resolution)]
    )
    assert (expected > 0).any()
    assert np.array_equal(raster.alpha > 0, expected > 0)
    assert np.abs(raster.alpha.astype(int) - expected).max() <= 1


def test_single_pixel_matches_full_pass(joy, joy_attrs):
    raster = synthesize_blob(joy, joy_attrs, SMALL_RESOLUTION)
    for x, y in [(32, 32), (10, 40), (50, 20), (0, 0), (45, 45)]:
        assert shade_pixel(x, y, joy_attrs, SMALL_RESOLUTION) == tuple(int(v) for v in raster.pixels[y, x])


def test_banded_pass_matches_single_pass(default_categories, default_attrs):
    category, attrs = default_categories[1], default_attrs[1]
    whole = synthesize_blob(category, attrs, SMALL_RESOLUTION)
    with ThreadPoolExecutor(max_workers=3) as executor:
        banded = synthesize_blob(category, attrs, SMALL_RESOLUTION, executor=executor, band_rows=10)
    assert np.array_equal(whole.pixels, banded.pixels)


def test_band_bounds_cover_all_rows():
    bounds = band_bounds(50, 16)
    assert bounds == [(0, 16), (16, 32), (32, 48), (48, 50)]


def test_category_colour_override(joy_attrs):
    recoloured = Category(id="joy", name="Joy", color=(10, 20, 30))
    raster = synthesize_blob(recoloured, joy_attrs, SMALL_RESOLUTION)
    visible = raster.alpha > 0
    assert np.all(raster.pixels[visible][:, :3] == (10, 20, 30))


@pytest.mark.parametrize("resolution", [0, -5, 2.5, True, "64"])
def test_invalid_resolution_rejected(joy, joy_attrs, resolution):
    with pytest.raises(InvalidInput):
        synthesize_blob(joy, joy_attrs, resolution)


def test_mismatched_category_rejected(joy_attrs):
    with pytest.raises(InvalidInput):
        synthesize_blob(EMOTIONS.get("anger"), joy_attrs, SMALL_RESOLUTION)


def test_raster_encodes_to_png(joy, joy_attrs):
    raster = synthesize_blob(joy, joy_attrs, 24)
    image = raster.to_image()
    assert image.mode == "RGBA"
    assert image.size == (24, 24)
    assert raster.to_data_url().startswith("data:image/png;base64,")
