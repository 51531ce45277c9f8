"""Tests for render passes: end-to-end output, validation and cancellation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

import circumplex.engine.renderer as renderer_module
from circumplex.engine.catalog import ActiveSet
from circumplex.engine.errors import InvalidInput, RenderCancelled
from circumplex.engine.renderer import Renderer
from tests.conftest import SMALL_RESOLUTION


def test_single_category_pass():
    renderer = Renderer(max_workers=2, band_rows=16)
    result = renderer.render(ActiveSet(["joy"]), 900, 900, SMALL_RESOLUTION)

    assert len(result.rasters) == 1
    assert result.layout.placements["joy"].blend_mode == "normal"
    assert result.layout.placements["joy"].label_distance <= 390
    # Nothing to screen-blend with: the composite is the raster itself
    assert np.array_equal(result.composite, result.rasters[0].pixels)
    assert result.generation == 1


def test_multi_category_pass_in_catalog_order():
    renderer = Renderer(max_workers=4)
    result = renderer.render(ActiveSet(["love", "joy", "anger", "sadness"]), 900, 900, SMALL_RESOLUTION)

    assert [r.category_id for r in result.rasters] == ["joy", "sadness", "anger", "love"]
    assert [result.layout.placements[r.category_id].blend_mode for r in result.rasters] == [
        "normal",
        "screen",
        "screen",
        "screen",
    ]
    assert result.composite.shape == (SMALL_RESOLUTION, SMALL_RESOLUTION, 4)
    assert result.composite_image().size == (SMALL_RESOLUTION, SMALL_RESOLUTION)


def test_passes_are_reproducible():
    renderer = Renderer()
    active = ActiveSet(["joy", "calm"])
    first = renderer.render(active, 800, 800, SMALL_RESOLUTION)
    second = renderer.render(active, 800, 800, SMALL_RESOLUTION)
    assert second.generation == first.generation + 1
    assert np.array_equal(first.composite, second.composite)


@pytest.mark.parametrize("width,height,resolution", [(900, 900, 0), (0, 900, 32), (900, 900, -3)])
def test_invalid_input_fails_before_synthesis(monkeypatch, width, height, resolution):
    calls = []
    monkeypatch.setattr(renderer_module, "synthesize_blob", lambda *a, **kw: calls.append(a))
    renderer = Renderer()
    with pytest.raises(InvalidInput):
        renderer.render(ActiveSet(["joy", "sadness"]), width, height, resolution)
    assert calls == []
    assert renderer.generation == 0


def test_unknown_category_rejected():
    with pytest.raises(InvalidInput):
        Renderer().render(ActiveSet(["joy", "boredom"]), 900, 900, SMALL_RESOLUTION)


def test_superseded_pass_is_discarded(monkeypatch):
    renderer = Renderer(max_workers=1)
    real = renderer_module.synthesize_blob
    started: list[int] = []

    def _synthesize_and_supersede(*args, **kwargs):
        if not started:
            # A newer pass begins while this one is still synthesizing
            started.append(renderer.begin_pass())
        return real(*args, **kwargs)

    monkeypatch.setattr(renderer_module, "synthesize_blob", _synthesize_and_supersede)
    with pytest.raises(RenderCancelled):
        renderer.render(ActiveSet(["joy", "sadness", "anger"]), 900, 900, 16)
    assert renderer.is_current(started[0])



def test_other_session_does_not_supersede(monkeypatch):
    renderer = Renderer(max_workers=1)
    real = renderer_module.synthesize_blob
    started: list[int] = []

    def _synthesize_while_other_session_starts(*args, **kwargs):
        if not started:
            started.append(renderer.begin_pass("other"))
        return real(*args, **kwargs)

    monkeypatch.setattr(renderer_module, "synthesize_blob", _synthesize_while_other_session_starts)
    result = renderer.render(ActiveSet(["joy", "sadness", "anger"]), 900, 900, 16, session="mine")
    assert [r.category_id for r in result.rasters] == ["joy", "sadness", "anger"]
    assert renderer.is_current(started[0], "other")


def test_concurrent_sessions_both_complete():
    renderer = Renderer(max_workers=2)
    jobs = {
        "first": ActiveSet(["joy", "sadness"]),
        "second": ActiveSet(["anger", "love", "calm"]),
    }
    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = {
            name: pool.submit(renderer.render, active, 800, 800, 48, session=name) for name, active in jobs.items()
        }
        results = {name: f.result() for name, f in futures.items()}

    assert [r.category_id for r in results["first"].rasters] == ["joy", "sadness"]
    assert [r.category_id for r in results["second"].rasters] == ["anger", "love", "calm"]
    assert renderer.generation == 2


def test_finished_pass_is_no_longer_current():
    renderer = Renderer()
    result = renderer.render(ActiveSet(["joy"]), 900, 900, SMALL_RESOLUTION, session="a")
    assert not renderer.is_current(result.generation, "a")
    assert renderer.render(ActiveSet(["joy"]), 900, 900, SMALL_RESOLUTION, session="a").generation == 2


def test_render_scene_canvas():
    renderer = Renderer()
    result = renderer.render(ActiveSet(["joy", "sadness"]), 600, 600, 48)
    scene = renderer.render_scene(result)
    assert scene.mode == "RGBA"
    assert scene.size == (600, 600)
    pixels = np.asarray(scene)
    # Glow fills the middle; corners stay outside the layer circle
    assert pixels[300, 300, 3] > 0
    assert pixels[0, 0, 3] == 0
