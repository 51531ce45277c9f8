"""Render a circumplex preview PNG to disk.

    python render_preview.py --active joy,sadness,anger,love --size 900 --out preview.png
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from circumplex.config import settings
from circumplex.engine.catalog import DEFAULT_ACTIVE_IDS, ActiveSet
from circumplex.engine.renderer import Renderer

logger = logging.getLogger("render_preview")


def main(argv: list[str] | None = None) -> Path:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--active", default=",".join(DEFAULT_ACTIVE_IDS), help="Comma-separated category ids")
    parser.add_argument("--size", type=int, default=900, help="Square canvas size")
    parser.add_argument("--resolution", type=int, default=settings.blob_resolution)
    parser.add_argument("--out", type=Path, default=Path("circumplex_preview.png"))
    parser.add_argument("--composite-out", type=Path, default=None, help="Also write the raw blob composite")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.circumplex_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    active = ActiveSet(i.strip() for i in args.active.split(",") if i.strip())
    renderer = Renderer(max_workers=settings.render_workers, band_rows=settings.band_rows)
    result = renderer.render(active, args.size, args.size, args.resolution)

    renderer.render_scene(result).save(args.out)
    logger.info("Wrote %s (safety ratio %.3f)", args.out, result.layout.safety_ratio)
    if args.composite_out is not None:
        result.composite_image().save(args.composite_out)
        logger.info("Wrote %s", args.composite_out)
    return args.out


if __name__ == "__main__":
    main()
