"""Filesystem path helpers for Dusky state."""

from __future__ import annotations

import os
from pathlib import Path


def state_dir() -> Path:
    """Return the directory used for persistent Dusky state.

    The location defaults to ``~/.config/dusky`` but can be overridden via the
    ``DUSKY_STATE_DIR`` environment variable. The path is expanded and
    resolved so callers always receive an absolute location.
    """

    override = os.environ.get("DUSKY_STATE_DIR")
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / ".config" / "dusky"


def hypr_source_dir() -> Path:
    """Return the Hyprland ``edit_here/source`` directory holding user overrides."""

    override = os.environ.get("DUSKY_HYPR_SOURCE_DIR")
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / ".config" / "hypr" / "edit_here" / "source"


__all__ = ["hypr_source_dir", "state_dir"]
