"""FastAPI dependency injection."""

from __future__ import annotations

from functools import lru_cache

from circumplex.config import settings
from circumplex.engine.renderer import Renderer


@lru_cache(maxsize=1)
def get_renderer() -> Renderer:
    return Renderer(max_workers=settings.render_workers, band_rows=settings.band_rows)
