"""Render configuration: geometry tunables shared by layout, synthesis and scene rendering."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderConfig:
    """Geometry constants for one render pass."""

    # Blob raster resolution (square, pixels)
    resolution: int = 400
    # Fraction of the raster radius inside which blobs are drawn
    viewport_fraction: float = 0.4
    # Fraction of the raster (or base radius) used as the blob orbit
    orbit_fraction: float = 0.3

    # Canvas space reserved around the blobs for labels
    label_margin: float = 120.0
    min_base_radius: float = 200.0
    # Label ring sits this far past the base radius
    label_padding: float = 60.0
    # Labels never come closer than this to the canvas edge
    edge_padding: float = 60.0
    label_spread: float = 0.8
    intensity_extension: float = 30.0

    # Scene rendering
    glow_blur_radius: float = 15.0
    layer_radius_factor: float = 1.2
    pattern_factor: float = 2.5

    # Resize clamp applied by collaborators that follow a container width
    min_canvas: int = 850
    max_canvas: int = 1300


DEFAULT_CONFIG = RenderConfig()


def clamp_canvas_size(container_width: float, config: RenderConfig = DEFAULT_CONFIG) -> int:
    """Square canvas size for a container: max(850, min(1300, width))."""
    return int(max(config.min_canvas, min(config.max_canvas, container_width)))
