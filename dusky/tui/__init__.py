"""Terminal menu engine: decoding, scrolling, rendering and dispatch."""

from .dispatch import InputDispatcher, Outcome
from .keys import Key, KeyEvent, MouseReport, read_key
from .loop import MenuLoop, run_menu
from .model import (
    ActionKind,
    ActionResult,
    CatalogBuilder,
    ChoiceValue,
    ColorValue,
    CustomAction,
    Layout,
    Menu,
    MenuBackend,
    MenuItem,
    MenuState,
    SettingRef,
    Tab,
    TabKind,
)
from .render import Frame, Renderer
from .scroll import ScrollWindow, compute_scroll_window
from .terminal import TerminalModeGuard

__all__ = [
    "ActionKind",
    "ActionResult",
    "CatalogBuilder",
    "ChoiceValue",
    "ColorValue",
    "CustomAction",
    "Frame",
    "InputDispatcher",
    "Key",
    "KeyEvent",
    "Layout",
    "Menu",
    "MenuBackend",
    "MenuItem",
    "MenuLoop",
    "MenuState",
    "MouseReport",
    "Outcome",
    "Renderer",
    "ScrollWindow",
    "SettingRef",
    "Tab",
    "TabKind",
    "TerminalModeGuard",
    "compute_scroll_window",
    "read_key",
    "run_menu",
]
