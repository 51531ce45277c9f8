"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    categories: int = 0


class CategoryModel(BaseModel):
    id: str
    name: str
    color: str


class CatalogResponse(BaseModel):
    categories: list[CategoryModel] = Field(default_factory=list)
    default_active: list[str] = Field(default_factory=list)


class ToggleResponse(BaseModel):
    active: list[str]


class LabelStyleModel(BaseModel):
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


class PlacementModel(BaseModel):
    id: str
    name: str
    color: str
    index: int
    angle: float
    intensity: float
    influence: float
    blob_offset: tuple[float, float]
    label_offset: tuple[float, float]
    label_distance: float
    blend_mode: str
    layer_opacity: float
    label: LabelStyleModel


class LayoutResponse(BaseModel):
    width: int
    height: int
    base_radius: float
    safety_ratio: float
    layer_radius: float
    pattern_size: float
    placements: list[PlacementModel] = Field(default_factory=list)


class BlobModel(BaseModel):
    id: str
    resolution: int
    blend_mode: str
    image: str = Field(..., description="PNG data URL")


class RenderResponse(BaseModel):
    layout: LayoutResponse
    blobs: list[BlobModel] = Field(default_factory=list)
    composite: str = Field(..., description="PNG data URL of the composited blobs")
    scene: str | None = None
    generation: int = 0
    processing_time_ms: float = 0.0
