"""Command entry points for the Dusky CLI."""

from . import matugen, terminal

__all__ = ["matugen", "terminal"]
