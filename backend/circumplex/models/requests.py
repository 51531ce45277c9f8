"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from circumplex.engine.catalog import DEFAULT_ACTIVE_IDS


class ToggleRequest(BaseModel):
    active: list[str] = Field(..., description="Currently active category ids")
    category_id: str = Field(..., description="Category to add or remove")


class LayoutRequest(BaseModel):
    active: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ACTIVE_IDS),
        description="Active category ids",
    )
    width: int = Field(default=900, description="Canvas width")
    height: int = Field(default=900, description="Canvas height")


# A 2048px raster already needs ~200MB of float64 scratch per category
MAX_RESOLUTION = 2048


class RenderRequest(LayoutRequest):
    resolution: int | None = Field(
        default=None,
        gt=0,
        le=MAX_RESOLUTION,
        description="Blob raster resolution (default from settings)",
    )
    session_id: str | None = Field(
        default=None,
        max_length=128,
        description="Caller key; a newer render with the same key cancels an older one",
    )
    include_scene: bool = Field(default=False, description="Also render the canvas-sized scene PNG")
