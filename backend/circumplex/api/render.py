"""POST /api/layout and POST /api/render."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from circumplex.config import settings
from circumplex.dependencies import get_renderer
from circumplex.engine.catalog import EMOTIONS, ActiveSet
from circumplex.engine.errors import RenderCancelled
from circumplex.engine.placement import SceneLayout, compute_scene_layout
from circumplex.engine.renderer import Renderer
from circumplex.models.requests import LayoutRequest, RenderRequest
from circumplex.models.responses import (
    BlobModel,
    LabelStyleModel,
    LayoutResponse,
    PlacementModel,
    RenderResponse,
)
from circumplex.utils.imaging import png_data_url

router = APIRouter()


def layout_to_response(layout: SceneLayout) -> LayoutResponse:
    placements: list[PlacementModel] = []
    for attrs in layout.attributes:
        p = layout.placements[attrs.id]
        layer = layout.layer_styles[attrs.id]
        label = layout.label_styles[attrs.id]
        placements.append(
            PlacementModel(
                id=attrs.id,
                name=attrs.category.name,
                color=attrs.category.hex_color,
                index=attrs.index,
                angle=attrs.angle_degrees,
                intensity=attrs.intensity,
                influence=attrs.influence,
                blob_offset=p.blob_offset,
                label_offset=p.label_offset,
                label_distance=p.label_distance,
                blend_mode=p.blend_mode,
                layer_opacity=layer.opacity,
                label=LabelStyleModel(**asdict(label)),
            )
        )
    first = layout.layer_styles[layout.attributes[0].id]
    return LayoutResponse(
        width=layout.width,
        height=layout.height,
        base_radius=layout.base_radius,
        safety_ratio=layout.safety_ratio,
        layer_radius=first.radius,
        pattern_size=first.pattern_size,
        placements=placements,
    )


@router.post("/layout", response_model=LayoutResponse)
async def layout(req: LayoutRequest) -> LayoutResponse:
    categories = ActiveSet(req.active).arranged(EMOTIONS)
    return layout_to_response(compute_scene_layout(categories, req.width, req.height))


@router.post("/render", response_model=RenderResponse)
async def render(req: RenderRequest, renderer: Renderer = Depends(get_renderer)) -> RenderResponse:
    active = ActiveSet(req.active)
    resolution = req.resolution if req.resolution is not None else settings.blob_resolution
    # Without a key, a request never supersedes anyone else's render
    session = req.session_id or uuid.uuid4().hex

    def _run() -> RenderResponse:
        result = renderer.render(active, req.width, req.height, resolution, session=session)
        scene = png_data_url(renderer.render_scene(result)) if req.include_scene else None
        return RenderResponse(
            layout=layout_to_response(result.layout),
            blobs=[
                BlobModel(
                    id=r.category_id,
                    resolution=r.resolution,
                    blend_mode=result.layout.placements[r.category_id].blend_mode,
                    image=r.to_data_url(),
                )
                for r in result.rasters
            ],
            composite=png_data_url(result.composite_image()),
            scene=scene,
            generation=result.generation,
            processing_time_ms=result.elapsed_ms,
        )

    # Synthesis is CPU-bound; keep the event loop free
    try:
        return await asyncio.get_running_loop().run_in_executor(None, _run)
    except RenderCancelled as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
