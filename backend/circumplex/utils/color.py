"""Colour helpers: hex parsing and formatting. No engine imports."""

from __future__ import annotations

RGB = tuple[int, int, int]


def parse_hex(color: str) -> RGB | None:
    """Parse "#rgb" or "#rrggbb" to (r, g, b). Returns None for anything else."""
    if not color:
        return None
    color = color.strip().lower()
    if not color.startswith("#"):
        return None
    color = color[1:]
    if len(color) == 3:
        color = color[0]*2 + color[1]*2 + color[2]*2
    if len(color) != 6:
        return None
    try:
        r = int(color[0:2], 16)
        g = int(color[2:4], 16)
        b = int(color[4:6], 16)
        return (r, g, b)
    except ValueError:
        return None


def to_hex(rgb: RGB) -> str:
    """(255, 215, 0) -> "#FFD700"."""
    r, g, b = rgb
    return f"#{r:02X}{g:02X}{b:02X}"
