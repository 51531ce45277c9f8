"""Pillow helpers: RGBA arrays to images, PNG bytes and data URLs. No engine imports."""

from __future__ import annotations

import base64
import io

import numpy as np
from numpy.typing import NDArray
from PIL import Image


def array_to_image(pixels: NDArray[np.uint8]) -> Image.Image:
    """HxWx4 uint8 array -> RGBA Pillow image."""
    # uint8 with 4 bands is inferred as RGBA
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))


def png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def png_data_url(image: Image.Image) -> str:
    """Same shape as a browser canvas toDataURL(): "data:image/png;base64,..."."""
    encoded = base64.b64encode(png_bytes(image)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
