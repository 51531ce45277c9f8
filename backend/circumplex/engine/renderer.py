"""Render pass orchestration.

A pass validates its inputs, lays out the active categories (the safety-ratio
barrier), synthesizes one blob per category on a thread pool and composites
them in arrangement order. Passes are numbered and belong to a session (one
collaborator); starting a new pass supersedes every older pass of the same
session, whose partial results are dropped. Sessions never cancel each other.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw, ImageFilter

from circumplex.engine.catalog import EMOTIONS, ActiveSet, Catalog
from circumplex.engine.compositor import blend_layer, compose
from circumplex.engine.config import DEFAULT_CONFIG, RenderConfig
from circumplex.engine.errors import RenderCancelled
from circumplex.engine.placement import SceneLayout, compute_scene_layout, validate_canvas
from circumplex.engine.synthesizer import BlobRaster, synthesize_blob, validate_resolution
from circumplex.utils.imaging import array_to_image

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"


@dataclass
class RenderResult:
    """Output of one completed pass."""

    generation: int
    layout: SceneLayout
    rasters: list[BlobRaster] = field(default_factory=list)
    composite: NDArray[np.uint8] | None = None
    elapsed_ms: float = 0.0

    def composite_image(self) -> Image.Image:
        return array_to_image(self.composite)


class Renderer:
    """Runs render passes. Safe to share between threads."""

    def __init__(
        self,
        catalog: Catalog = EMOTIONS,
        config: RenderConfig = DEFAULT_CONFIG,
        max_workers: int = 4,
        band_rows: int = 128,
    ) -> None:
        self.catalog = catalog
        self.config = config
        self.max_workers = max(1, max_workers)
        self.band_rows = band_rows
        self._lock = threading.Lock()
        self._generation = 0
        # session -> generation of its newest pass
        self._latest: dict[str, int] = {}

    @property
    def generation(self) -> int:
        """Number of passes started, over all sessions."""
        with self._lock:
            return self._generation

    def begin_pass(self, session: str = DEFAULT_SESSION) -> int:
        """Claim a new generation number; older passes of `session` become stale."""
        with self._lock:
            self._generation += 1
            self._latest[session] = self._generation
            return self._generation

    def is_current(self, generation: int, session: str = DEFAULT_SESSION) -> bool:
        with self._lock:
            return self._latest.get(session) == generation

    def _end_pass(self, generation: int, session: str) -> None:
        with self._lock:
            if self._latest.get(session) == generation:
                del self._latest[session]

    def _check(self, generation: int, session: str) -> None:
        if not self.is_current(generation, session):
            logger.info("Render pass %d superseded, discarding partial results", generation)
            raise RenderCancelled(f"Render pass {generation} was superseded")

    def render(
        self,
        active: ActiveSet,
        width: int,
        height: int,
        resolution: int | None = None,
        session: str = DEFAULT_SESSION,
    ) -> RenderResult:
        """Run a full pass for a snapshot of the active set.

        Raises InvalidInput before any synthesis, and RenderCancelled if a
        newer pass of the same session started while this one was running.
        """
        resolution = self.config.resolution if resolution is None else resolution
        validate_resolution(resolution)
        validate_canvas(width, height)
        categories = active.arranged(self.catalog)
        layout = compute_scene_layout(categories, width, height, self.config)

        generation = self.begin_pass(session)
        start = time.perf_counter()
        logger.info(
            "Render pass %d (%s): %d categories at %dpx on %dx%d",
            generation,
            session,
            len(categories),
            resolution,
            width,
            height,
        )
        try:
            ordered = self._synthesize(layout, resolution, generation, session)
            composite = compose(ordered)
            self._check(generation, session)
        finally:
            self._end_pass(generation, session)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Render pass %d complete in %.0fms", generation, elapsed)
        return RenderResult(
            generation=generation,
            layout=layout,
            rasters=ordered,
            composite=composite,
            elapsed_ms=round(elapsed, 1),
        )

    def _synthesize(self, layout: SceneLayout, resolution: int, generation: int, session: str) -> list[BlobRaster]:
        rasters: dict[str, BlobRaster] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            if len(layout.attributes) == 1:
                attrs = layout.attributes[0]
                rasters[attrs.id] = synthesize_blob(
                    attrs.category,
                    attrs,
                    resolution,
                    config=self.config,
                    executor=executor,
                    band_rows=self.band_rows,
                )
            else:
                futures: dict[Future[BlobRaster], str] = {
                    executor.submit(synthesize_blob, a.category, a, resolution, config=self.config): a.id
                    for a in layout.attributes
                }
                try:
                    for future in as_completed(futures):
                        self._check(generation, session)
                        rasters[futures[future]] = future.result()
                except RenderCancelled:
                    for future in futures:
                        future.cancel()
                    raise

        self._check(generation, session)
        return [rasters[a.id] for a in layout.attributes]

    def render_scene(self, result: RenderResult) -> Image.Image:
        """Canvas-sized picture of a pass: each layer stretched over its
        pattern square, clipped to the layer circle, glow-filtered, faded by
        its opacity and blended normal/screen onto a transparent canvas."""
        layout = result.layout
        w, h = layout.width, layout.height
        scene = np.zeros((h, w, 4), dtype=np.float64)
        for raster in result.rasters:
            style = layout.layer_styles[raster.category_id]
            layer = self._scene_layer(raster, style.pattern_size, style.radius, w, h)
            pixels = np.asarray(layer, dtype=np.float64) / 255.0
            pixels[..., 3] *= style.opacity
            scene = blend_layer(scene, pixels, style.blend_mode)
        return array_to_image(np.clip(np.rint(scene * 255.0), 0, 255).astype(np.uint8))

    def _scene_layer(self, raster: BlobRaster, pattern_size: float, radius: float, w: int, h: int) -> Image.Image:
        cx, cy = w / 2, h / 2
        size = max(1, round(pattern_size))
        pattern = raster.to_image().resize((size, size), Image.Resampling.BILINEAR)

        canvas = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        canvas.paste(pattern, (round(cx - size / 2), round(cy - size / 2)))

        mask = Image.new("L", (w, h), 0)
        ImageDraw.Draw(mask).ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=255)
        clipped = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        clipped.paste(canvas, (0, 0), mask)

        # Glow: blurred copy underneath the sharp layer
        glow = clipped.filter(ImageFilter.GaussianBlur(self.config.glow_blur_radius))
        return Image.alpha_composite(glow, clipped)
