"""Collaborators the Dusky menus apply their selections through."""

from .matugen import MatugenController, MatugenMenuBackend, build_matugen_menu
from .terminal_switcher import TerminalMenuBackend, TerminalSwitcher, build_terminal_menu

__all__ = [
    "MatugenController",
    "MatugenMenuBackend",
    "TerminalMenuBackend",
    "TerminalSwitcher",
    "build_matugen_menu",
    "build_terminal_menu",
]
