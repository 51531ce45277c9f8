"""Emotional circumplex glow engine."""

from circumplex.engine.attributes import CategoryLayoutAttributes, compute_layout_attributes, generate
from circumplex.engine.catalog import DEFAULT_ACTIVE_IDS, EMOTIONS, ActiveSet, Catalog, Category
from circumplex.engine.compositor import compose
from circumplex.engine.errors import CircumplexError, InvalidInput, RenderCancelled
from circumplex.engine.placement import PlacementTransform, SceneLayout, compute_layout, compute_scene_layout
from circumplex.engine.renderer import Renderer, RenderResult
from circumplex.engine.shape import organic_radius
from circumplex.engine.synthesizer import BlobRaster, shade_pixel, synthesize_blob

__all__ = [
    "ActiveSet",
    "BlobRaster",
    "Catalog",
    "Category",
    "CategoryLayoutAttributes",
    "CircumplexError",
    "DEFAULT_ACTIVE_IDS",
    "EMOTIONS",
    "InvalidInput",
    "PlacementTransform",
    "RenderCancelled",
    "RenderResult",
    "Renderer",
    "SceneLayout",
    "compose",
    "compute_layout",
    "compute_layout_attributes",
    "compute_scene_layout",
    "generate",
    "organic_radius",
    "shade_pixel",
    "synthesize_blob",
]
