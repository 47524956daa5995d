"""Frame rendering for the boxed Dusky menus."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .model import (
    ChoiceValue,
    ColorValue,
    CustomAction,
    Menu,
    MenuItem,
    MenuState,
    SettingRef,
)
from .scroll import ScrollWindow, compute_scroll_window

CLR_EOL = "\033[K"
CLR_EOS = "\033[J"
CURSOR_HOME = "\033[H"

SELECT_MARKER = " ➤ "
ELLIPSIS = "…"

_ANSI = re.compile(r"\x1b\[[0-9;:?<=>]*[@-~]")

PALETTE: Dict[str, str] = {
    "reset": "\033[0m",
    "border": "\033[1;35m",
    "title": "\033[1;37m",
    "version": "\033[1;36m",
    "accent": "\033[1;36m",
    "muted": "\033[1;30m",
    "active": "\033[1;32m",
    "value": "\033[1;33m",
    "error": "\033[1;31m",
    "inverse": "\033[7m",
}


def palette(color: bool = True) -> Dict[str, str]:
    """Return the ANSI palette, or blank codes when colour is disabled."""

    if color:
        return dict(PALETTE)
    return {name: "" for name in PALETTE}


def strip_ansi(text: str) -> str:
    return _ANSI.sub("", text)


def _char_width(char: str) -> int:
    code = ord(char)
    if 0x20 <= code <= 0x7E:
        return 1
    if code < 0x20 or code == 0x7F:
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    if unicodedata.category(char).startswith("M"):
        return 0
    return 1


def visible_width(text: str) -> int:
    """Return the number of terminal cells ``text`` occupies, ignoring ANSI codes."""

    return sum(_char_width(char) for char in strip_ansi(text))


def _cut(text: str, width: int) -> str:
    """Return the longest prefix of plain ``text`` fitting in ``width`` cells."""

    used = 0
    out: List[str] = []
    for char in text:
        cells = _char_width(char)
        if used + cells > width:
            break
        out.append(char)
        used += cells
    return "".join(out)


def truncate_label(label: str, width: int) -> str:
    """Fit ``label`` into exactly ``width`` cells, ending in ``…`` when cut short."""

    if width <= 0:
        return ""
    if visible_width(label) > width:
        head = _cut(label, width - 1)
        label = head + ELLIPSIS
    return label + " " * (width - visible_width(label))


@dataclass(frozen=True)
class Frame:
    """A rendered screen plus the geometry needed for mouse hit-testing.

    Rows and columns are 1-based, matching SGR mouse coordinates.
    """

    text: str
    items_top: int
    tab_row: Optional[int]
    tab_zones: Tuple[Tuple[int, int], ...]
    height: int


class Renderer:
    """Build full-screen frames for ``menu``.

    The frame height depends only on the menu geometry, never on the number of
    items, so redraws overwrite the previous frame without scrolling.
    """

    def __init__(self, menu: Menu, *, color: bool = True) -> None:
        self.menu = menu
        self.colors = palette(color)

    # ------------------------------------------------------------------
    # Line helpers
    # ------------------------------------------------------------------
    def _horizontal(self, left: str, right: str) -> str:
        c = self.colors
        return f"{c['border']}{left}{'─' * self.menu.layout.box_width}{right}{c['reset']}"

    def _boxed(self, content: str) -> str:
        c = self.colors
        width = self.menu.layout.box_width
        used = visible_width(content)
        left_pad = max(0, (width - used) // 2)
        right_pad = max(0, width - used - left_pad)
        return (
            f"{c['border']}│{' ' * left_pad}{content}{c['border']}"
            f"{' ' * right_pad}│{c['reset']}"
        )

    def _title_line(self) -> str:
        c = self.colors
        return self._boxed(f"{c['title']}{self.menu.title} {c['version']}{self.menu.version}")

    def _context_line(self, context: str) -> str:
        text = _cut(strip_ansi(context), max(0, self.menu.layout.box_width - 2))
        return self._boxed(f"{self.colors['muted']}{text}")

    def _tab_bar(self, state: MenuState) -> Tuple[str, Tuple[Tuple[int, int], ...]]:
        c = self.colors
        zones: List[Tuple[int, int]] = []
        line = f"{c['border']}│ "
        column = 3
        for index, tab in enumerate(self.menu.tabs):
            length = visible_width(tab.name)
            zones.append((column, column + length + 1))
            if index == state.tab_index:
                line += f"{c['accent']}{c['inverse']} {tab.name} {c['reset']}{c['border']}│ "
            else:
                line += f"{c['muted']} {tab.name} {c['border']}│ "
            column += length + 4
        pad = self.menu.layout.box_width - column + 2
        if pad > 0:
            line += " " * pad
        line += f"{c['border']}│{c['reset']}"
        return line, tuple(zones)

    def indicator(self, item: MenuItem, state: MenuState, active: Optional[str]) -> str:
        """Return the right-hand marker describing ``item``."""

        c = self.colors
        payload = item.payload
        if isinstance(payload, SettingRef):
            return f"{c['value']}◀ {state.settings.get(payload.key, '')} ▶{c['reset']}"
        if isinstance(payload, CustomAction):
            return f"{c['muted']}>>{c['reset']}"
        if isinstance(payload, ColorValue):
            if active is not None and payload.hex.upper() == active.upper():
                return f"{c['active']}● ACTIVE{c['reset']}"
            return f"{c['muted']}{payload.hex}{c['reset']}"
        if isinstance(payload, ChoiceValue) and payload.value == active:
            return f"{c['active']}● ACTIVE{c['reset']}"
        return f"{c['muted']}○{c['reset']}"

    def item_row(self, item: MenuItem, selected: bool, state: MenuState, active: Optional[str]) -> str:
        c = self.colors
        label = truncate_label(item.label, self.menu.layout.label_width)
        marker = self.indicator(item, state, active)
        if selected:
            return f"{c['accent']}{SELECT_MARKER}{c['inverse']}{label}{c['reset']} {marker}"
        return f"{' ' * len(SELECT_MARKER)}{c['accent']}{label}{c['reset']} {marker}"

    def _scroll_hint(self, window: ScrollWindow, count: int, above: bool) -> str:
        c = self.colors
        height = self.menu.layout.viewport_height
        if above:
            if window.offset > 0:
                return f"{c['muted']}    ▲ (more above){c['reset']}"
            return ""
        if count <= height:
            return ""
        info = f"[{window.selected + 1}/{count}]"
        if window.end < count:
            return f"{c['muted']}    ▼ (more below) {info}{c['reset']}"
        return f"{c['muted']}{' ' * 19}{info}{c['reset']}"

    def _status_line(self, state: MenuState) -> str:
        c = self.colors
        if not state.status:
            return ""
        if state.status_ok is True:
            return f" {c['active']}{state.status}{c['reset']}"
        if state.status_ok is False:
            return f" {c['error']}{state.status}{c['reset']}"
        return f" {state.status}"

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------
    def render(self, state: MenuState, *, active: Optional[str] = None, context: str = "") -> Frame:
        """Render ``state`` into a :class:`Frame`."""

        menu = self.menu
        c = self.colors
        height = menu.layout.viewport_height
        items = menu.tabs[state.tab_index].items
        window = compute_scroll_window(state.selected, state.offset, len(items), height)

        rows: List[str] = [
            self._horizontal("┌", "┐"),
            self._title_line(),
            self._context_line(context),
        ]
        tab_row: Optional[int] = None
        zones: Tuple[Tuple[int, int], ...] = ()
        if menu.tabbed:
            tab_line, zones = self._tab_bar(state)
            rows.append(tab_line)
            tab_row = len(rows)
        rows.append(self._horizontal("└", "┘"))
        if not menu.tabbed:
            rows.append(self._scroll_hint(window, len(items), above=True))

        items_top = len(rows) + 1
        for index in range(window.start, window.end):
            rows.append(self.item_row(items[index], index == window.selected, state, active))
        rows.extend("" for _ in range(height - (window.end - window.start)))

        if not menu.tabbed:
            rows.append(self._scroll_hint(window, len(items), above=False))
        rows.append("")
        rows.append(self._status_line(state))
        rows.append(f"{c['accent']} {menu.footer}{c['reset']}")

        body = "\n".join(f"{row}{CLR_EOL}" for row in rows[:-1])
        text = f"{CURSOR_HOME}{body}\n{rows[-1]}{CLR_EOL}{CLR_EOS}"
        return Frame(text=text, items_top=items_top, tab_row=tab_row, tab_zones=zones, height=len(rows))


__all__ = [
    "CLR_EOL",
    "CLR_EOS",
    "CURSOR_HOME",
    "Frame",
    "PALETTE",
    "Renderer",
    "palette",
    "strip_ansi",
    "truncate_label",
    "visible_width",
]
