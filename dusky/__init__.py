"""Dusky desktop menus for Hyprland."""

__version__ = "3.1.0"

__all__ = ["__version__"]
