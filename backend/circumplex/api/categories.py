"""GET /api/categories and POST /api/active/toggle."""

from __future__ import annotations

from fastapi import APIRouter

from circumplex.engine.catalog import DEFAULT_ACTIVE_IDS, EMOTIONS, ActiveSet
from circumplex.models.requests import ToggleRequest
from circumplex.models.responses import CatalogResponse, CategoryModel, ToggleResponse

router = APIRouter()


@router.get("/categories", response_model=CatalogResponse)
async def list_categories() -> CatalogResponse:
    return CatalogResponse(
        categories=[CategoryModel(id=c.id, name=c.name, color=c.hex_color) for c in EMOTIONS],
        default_active=list(DEFAULT_ACTIVE_IDS),
    )


@router.post("/active/toggle", response_model=ToggleResponse)
async def toggle_active(req: ToggleRequest) -> ToggleResponse:
    """Add or remove one category. Removing the last one is rejected (422)."""
    # Unknown ids are rejected here so the client never holds an unrenderable set
    EMOTIONS.get(req.category_id)
    updated = ActiveSet(req.active).toggle(req.category_id)
    return ToggleResponse(active=list(updated))
