"""Exception hierarchy shared by the Dusky menus."""

from __future__ import annotations


class DuskyError(Exception):
    """Base class for every error raised by Dusky."""


class TerminalUnavailableError(DuskyError):
    """Raised when no interactive terminal can be put into raw mode."""


class CatalogError(DuskyError):
    """Raised when a menu catalog or setting descriptor is malformed."""


class ConfigPatchError(DuskyError):
    """Raised when a Hyprland config file cannot be located or rewritten."""


__all__ = ["CatalogError", "ConfigPatchError", "DuskyError", "TerminalUnavailableError"]
