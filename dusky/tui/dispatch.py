"""Translate decoded input events into menu state transitions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .keys import Key, KeyEvent, MouseReport
from .model import InputMode, Menu, MenuItem, MenuState, SettingRef, current_items
from .render import Frame
from .scroll import ScrollWindow, compute_scroll_window

UP_CHARS = {"k", "K"}
DOWN_CHARS = {"j", "J"}
LEFT_CHARS = {"h", "H"}
RIGHT_CHARS = {"l", "L"}
QUIT_CHARS = {"q", "Q", "\x03"}
ENTER_CHARS = {"\n", "\r", ""}
TAB_CHAR = "\t"
HOME_CHAR = "g"
END_CHAR = "G"

LEFT_BUTTON = 0


@dataclass(frozen=True)
class Outcome:
    """What the loop should do after an event has been dispatched."""

    quit: bool = False
    trigger: Optional[MenuItem] = None


CONTINUE = Outcome()
QUIT = Outcome(quit=True)


def sync_scroll(menu: Menu, state: MenuState) -> ScrollWindow:
    """Clamp the selection and scroll offset of ``state`` in place."""

    window = compute_scroll_window(
        state.selected,
        state.offset,
        len(current_items(menu, state)),
        menu.layout.viewport_height,
    )
    state.selected = window.selected
    state.offset = window.offset
    return window


def navigate(menu: Menu, state: MenuState, direction: int) -> None:
    """Move the selection by ``direction`` wrapping around both ends."""

    count = len(current_items(menu, state))
    if count == 0:
        return
    state.selected = (state.selected + direction) % count
    state.clear_status()


def navigate_page(menu: Menu, state: MenuState, direction: int) -> None:
    """Move a full viewport up or down, stopping at the first and last item."""

    count = len(current_items(menu, state))
    if count == 0:
        return
    target = state.selected + direction * menu.layout.viewport_height
    state.selected = min(max(target, 0), count - 1)
    state.clear_status()


def jump(menu: Menu, state: MenuState, to_end: bool) -> None:
    count = len(current_items(menu, state))
    state.selected = max(0, count - 1) if to_end else 0
    state.clear_status()


def select_tab(state: MenuState, index: int) -> None:
    state.tab_index = index
    state.selected = 0
    state.offset = 0
    state.clear_status()


def switch_tab(menu: Menu, state: MenuState, direction: int) -> None:
    select_tab(state, (state.tab_index + direction) % len(menu.tabs))


def adjust_setting(menu: Menu, state: MenuState, direction: int) -> bool:
    """Step the selected setting by ``direction``; only acts on settings tabs."""

    tab = menu.tabs[state.tab_index]
    if not tab.is_settings or not tab.items:
        return False
    payload = tab.items[state.selected].payload
    if not isinstance(payload, SettingRef):
        return False
    spec = menu.settings[payload.key]
    state.settings[payload.key] = spec.adjust(state.settings.get(payload.key, ""), direction)
    return True


def activate(menu: Menu, state: MenuState) -> Outcome:
    """Handle Enter: settings advance in place, everything else is triggered."""

    items = current_items(menu, state)
    if not items:
        return CONTINUE
    if menu.tabs[state.tab_index].is_settings:
        adjust_setting(menu, state, 1)
        return CONTINUE
    return Outcome(trigger=items[state.selected])


class InputDispatcher:
    """Browsing-mode key and mouse bindings for one :class:`Menu`."""

    def __init__(self, menu: Menu) -> None:
        self.menu = menu

    def dispatch(self, state: MenuState, event: KeyEvent, frame: Optional[Frame] = None) -> Outcome:
        if state.mode is not InputMode.BROWSING:
            return CONTINUE

        menu = self.menu
        key = event.key
        if key is Key.EOF:
            return QUIT
        if key is Key.UP:
            navigate(menu, state, -1)
        elif key is Key.DOWN:
            navigate(menu, state, 1)
        elif key is Key.PAGE_UP:
            navigate_page(menu, state, -1)
        elif key is Key.PAGE_DOWN:
            navigate_page(menu, state, 1)
        elif key is Key.HOME:
            jump(menu, state, to_end=False)
        elif key is Key.END:
            jump(menu, state, to_end=True)
        elif key is Key.SHIFT_TAB:
            switch_tab(menu, state, -1)
        elif key is Key.LEFT:
            adjust_setting(menu, state, -1)
        elif key is Key.RIGHT:
            adjust_setting(menu, state, 1)
        elif key is Key.MOUSE and event.mouse is not None:
            return self._mouse(state, event.mouse, frame)
        elif key is Key.CHAR:
            return self._char(state, event.char)
        return CONTINUE

    def _char(self, state: MenuState, char: str) -> Outcome:
        menu = self.menu
        if char in QUIT_CHARS:
            return QUIT
        if char in ENTER_CHARS:
            return activate(menu, state)
        if char in UP_CHARS:
            navigate(menu, state, -1)
        elif char in DOWN_CHARS:
            navigate(menu, state, 1)
        elif char in LEFT_CHARS:
            adjust_setting(menu, state, -1)
        elif char in RIGHT_CHARS:
            adjust_setting(menu, state, 1)
        elif char == TAB_CHAR:
            switch_tab(menu, state, 1)
        elif char == HOME_CHAR:
            jump(menu, state, to_end=False)
        elif char == END_CHAR:
            jump(menu, state, to_end=True)
        return CONTINUE

    def _mouse(self, state: MenuState, report: MouseReport, frame: Optional[Frame]) -> Outcome:
        menu = self.menu
        if report.wheel:
            navigate(menu, state, report.wheel)
            return CONTINUE
        if not report.pressed or frame is None:
            return CONTINUE

        if frame.tab_row is not None and report.y == frame.tab_row:
            for index, (start, end) in enumerate(frame.tab_zones):
                if start <= report.x <= end:
                    select_tab(state, index)
                    break
            return CONTINUE

        row = report.y - frame.items_top
        if not 0 <= row < menu.layout.viewport_height:
            return CONTINUE
        index = state.offset + row
        items = current_items(menu, state)
        if index >= len(items):
            return CONTINUE

        state.selected = index
        if report.x <= menu.layout.adjust_threshold:
            state.clear_status()
            return CONTINUE
        if menu.tabs[state.tab_index].is_settings:
            adjust_setting(menu, state, 1 if report.button == LEFT_BUTTON else -1)
            return CONTINUE
        if report.button == LEFT_BUTTON:
            return Outcome(trigger=items[index])
        return CONTINUE


__all__ = [
    "CONTINUE",
    "InputDispatcher",
    "Outcome",
    "QUIT",
    "activate",
    "adjust_setting",
    "jump",
    "navigate",
    "navigate_page",
    "select_tab",
    "switch_tab",
    "sync_scroll",
]
