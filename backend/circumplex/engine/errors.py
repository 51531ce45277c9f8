"""Engine error taxonomy."""

from __future__ import annotations


class CircumplexError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInput(CircumplexError, ValueError):
    """Rejected before any synthesis work starts. No partial raster is produced."""


class RenderCancelled(CircumplexError):
    """A newer render pass superseded this one; its partial results were dropped."""
