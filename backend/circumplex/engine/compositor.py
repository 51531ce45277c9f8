"""Compositor: stack blob rasters, first with normal blending, the rest with screen.

Blending follows W3C Compositing and Blending Level 1 for separable modes:

    cs' = (1 - ab)·cs + ab·B(cb, cs)         B = screen: cb + cs - cb·cs
    ao  = as + ab·(1 - as)
    co  = (as·cs' + ab·cb·(1 - as)) / ao     (source-over)

For the first layer B is the identity (normal). Screen is commutative, so only
the first-vs-rest distinction depends on order.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from circumplex.engine.errors import InvalidInput
from circumplex.engine.synthesizer import BlobRaster

BLEND_NORMAL = "normal"
BLEND_SCREEN = "screen"


def _screen(cb: NDArray[np.float64], cs: NDArray[np.float64]) -> NDArray[np.float64]:
    return cb + cs - cb * cs


def blend_layer(
    backdrop: NDArray[np.float64],
    layer: NDArray[np.float64],
    mode: str,
) -> NDArray[np.float64]:
    """Blend one straight-alpha float RGBA layer (0..1) onto a backdrop."""
    cb, ab = backdrop[..., :3], backdrop[..., 3:4]
    cs, a_s = layer[..., :3], layer[..., 3:4]

    if mode == BLEND_SCREEN:
        cs = (1 - ab) * cs + ab * _screen(cb, cs)
    elif mode != BLEND_NORMAL:
        raise InvalidInput(f"Unknown blend mode: {mode!r}")

    ao = a_s + ab * (1 - a_s)
    premultiplied = a_s * cs + ab * cb * (1 - a_s)
    co = np.divide(premultiplied, ao, out=np.zeros_like(premultiplied), where=ao > 0)
    return np.concatenate([co, ao], axis=-1)


def _as_array(raster: BlobRaster | NDArray[np.uint8]) -> NDArray[np.uint8]:
    pixels = raster.pixels if isinstance(raster, BlobRaster) else np.asarray(raster)
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise InvalidInput(f"Expected an HxWx4 RGBA raster, got shape {pixels.shape}")
    return pixels


def compose(rasters: Sequence[BlobRaster | NDArray[np.uint8]]) -> NDArray[np.uint8]:
    """Composite rasters in arrangement order onto a transparent canvas."""
    if not rasters:
        raise InvalidInput("Nothing to compose")
    layers = [_as_array(r) for r in rasters]
    shape = layers[0].shape
    for pixels in layers[1:]:
        if pixels.shape != shape:
            raise InvalidInput(f"Raster shapes differ: {shape} vs {pixels.shape}")

    result = np.zeros(shape, dtype=np.float64)
    for index, pixels in enumerate(layers):
        mode = BLEND_NORMAL if index == 0 else BLEND_SCREEN
        result = blend_layer(result, pixels.astype(np.float64) / 255.0, mode)

    return np.clip(np.rint(result * 255.0), 0, 255).astype(np.uint8)
