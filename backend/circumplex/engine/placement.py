"""Layout & placement: blob centers, label positions and the label safety ratio.

Labels sit on a ring outside each blob center. The ideal distance of every
label is computed first; only then is the uniform safety ratio known, so
final placement is a second pass over the whole active list. The ratio
shrinks all labels by the same factor, which preserves their relative
spacing while keeping the outermost one inside the canvas.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from circumplex.engine.attributes import CategoryLayoutAttributes, compute_layout_attributes
from circumplex.engine.catalog import Category
from circumplex.engine.config import DEFAULT_CONFIG, RenderConfig
from circumplex.engine.errors import InvalidInput

logger = logging.getLogger(__name__)

# Below this distance the blob center is treated as coinciding with the canvas center
_CENTER_EPS = 1e-9


@dataclass(frozen=True)
class PlacementTransform:
    """Offsets relative to the shared canvas center."""

    category_id: str
    blob_offset: tuple[float, float]
    label_offset: tuple[float, float]
    label_distance: float
    safety_ratio: float
    blend_mode: str = "normal"


@dataclass(frozen=True)
class LabelStyle:
    circle_radius: float
    circle_opacity: float
    percent_text: str
    percent_font_size: float
    name: str
    name_font_size: float
    name_font_weight: int
    name_offset_y: float
    name_opacity: float
    color: str


@dataclass(frozen=True)
class LayerStyle:
    opacity: float
    radius: float
    pattern_size: float
    blend_mode: str


@dataclass
class SceneLayout:
    """Everything a collaborator needs to draw one pass, besides the rasters."""

    width: int
    height: int
    base_radius: float
    safety_ratio: float
    attributes: list[CategoryLayoutAttributes] = field(default_factory=list)
    placements: dict[str, PlacementTransform] = field(default_factory=dict)
    label_styles: dict[str, LabelStyle] = field(default_factory=dict)
    layer_styles: dict[str, LayerStyle] = field(default_factory=dict)


def validate_canvas(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidInput(f"Canvas {name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidInput(f"Canvas {name} must be positive, got {value}")


def base_radius_for(width: int, height: int, config: RenderConfig = DEFAULT_CONFIG) -> float:
    """max(200, min(w, h)/2 - 120): the margin keeps room for labels."""
    available = min(width, height) / 2 - config.label_margin
    return max(config.min_base_radius, available)


def blend_mode_for(index: int) -> str:
    return "normal" if index == 0 else "screen"


def ideal_label_distance(
    attrs: CategoryLayoutAttributes,
    base_radius: float,
    config: RenderConfig = DEFAULT_CONFIG,
) -> float:
    bx, by = attrs.blob_center(base_radius, config.orbit_fraction)
    label_radius = base_radius + config.label_padding
    return math.hypot(bx, by) + label_radius * config.label_spread + attrs.intensity * config.intensity_extension


def safety_ratio_for(max_label_distance: float, width: int, height: int, config: RenderConfig = DEFAULT_CONFIG) -> float:
    safe_max = min(max_label_distance, min(width, height) / 2 - config.edge_padding)
    if max_label_distance > safe_max:
        return safe_max / max_label_distance
    return 1.0


def _label_direction(attrs: CategoryLayoutAttributes, blob_offset: tuple[float, float]) -> tuple[float, float]:
    bx, by = blob_offset
    dist = math.hypot(bx, by)
    if dist > _CENTER_EPS:
        return bx / dist, by / dist
    # Quarter-turn back from the slot angle, so the first slot points up
    theta = math.radians(attrs.angle_degrees) - math.pi / 2
    return math.cos(theta), math.sin(theta)


def place_attributes(
    attributes: Sequence[CategoryLayoutAttributes],
    width: int,
    height: int,
    config: RenderConfig = DEFAULT_CONFIG,
) -> tuple[float, float, dict[str, PlacementTransform]]:
    """(base_radius, safety_ratio, placements) for precomputed attributes."""
    validate_canvas(width, height)
    if not attributes:
        raise InvalidInput("At least one category is required")

    if min(width, height) / 2 <= config.edge_padding:
        raise InvalidInput(f"Canvas {width}x{height} leaves no room for labels")

    base_radius = base_radius_for(width, height, config)

    # Pass 1: every ideal distance, so the uniform ratio is known
    ideals = [ideal_label_distance(a, base_radius, config) for a in attributes]
    max_label = max(ideals)
    ratio = safety_ratio_for(max_label, width, height, config)
    bound = min(width, height) / 2 - config.edge_padding
    if ratio < 1.0:
        logger.info(
            "Label ring clamped: max distance %.1f exceeds canvas bound, safety ratio %.3f",
            max_label,
            ratio,
        )

    # Pass 2: final placement
    placements: dict[str, PlacementTransform] = {}
    for attrs, ideal in zip(attributes, ideals):
        blob_offset = attrs.blob_center(base_radius, config.orbit_fraction)
        ux, uy = _label_direction(attrs, blob_offset)
        distance = ideal * ratio
        if ratio < 1.0:
            # ideal * (bound / max) can round one ulp past the bound
            distance = min(distance, bound)
        placements[attrs.id] = PlacementTransform(
            category_id=attrs.id,
            blob_offset=blob_offset,
            label_offset=(ux * distance, uy * distance),
            label_distance=distance,
            safety_ratio=ratio,
            blend_mode=blend_mode_for(attrs.index),
        )
    return base_radius, ratio, placements


def compute_layout(
    categories: Sequence[Category],
    width: int,
    height: int,
    config: RenderConfig = DEFAULT_CONFIG,
) -> dict[str, PlacementTransform]:
    """Placement per category id, in arrangement order."""
    attributes = compute_layout_attributes(categories)
    _, _, placements = place_attributes(attributes, width, height, config)
    return placements


def label_style(attrs: CategoryLayoutAttributes) -> LabelStyle:
    i = attrs.intensity
    circle_radius = 12 + i * 18
    return LabelStyle(
        circle_radius=circle_radius,
        circle_opacity=0.85 + i * 0.15,
        percent_text=f"{math.floor(i * 100 + 0.5)}%",
        percent_font_size=10 + i * 3,
        name=attrs.category.name,
        name_font_size=14 + i * 2,
        name_font_weight=500 if i > 0.6 else 400,
        name_offset_y=-(circle_radius + 16),
        name_opacity=0.9 + i * 0.1,
        color=attrs.category.hex_color,
    )


def layer_style(attrs: CategoryLayoutAttributes, base_radius: float, config: RenderConfig = DEFAULT_CONFIG) -> LayerStyle:
    return LayerStyle(
        opacity=0.7 + attrs.intensity * 0.3,
        radius=base_radius * config.layer_radius_factor,
        pattern_size=base_radius * config.pattern_factor,
        blend_mode=blend_mode_for(attrs.index),
    )


def compute_scene_layout(
    categories: Sequence[Category],
    width: int,
    height: int,
    config: RenderConfig = DEFAULT_CONFIG,
) -> SceneLayout:
    attributes = compute_layout_attributes(categories)
    base_radius, ratio, placements = place_attributes(attributes, width, height, config)
    return SceneLayout(
        width=width,
        height=height,
        base_radius=base_radius,
        safety_ratio=ratio,
        attributes=attributes,
        placements=placements,
        label_styles={a.id: label_style(a) for a in attributes},
        layer_styles={a.id: layer_style(a, base_radius, config) for a in attributes},
    )
