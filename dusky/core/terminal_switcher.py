"""Switch the Hyprland default terminal and keep the launch keybind in sync."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..errors import CatalogError, ConfigPatchError
from ..tui.model import (
    ActionResult,
    CatalogBuilder,
    ChoiceValue,
    ItemPayload,
    Layout,
    Menu,
    MenuBackend,
    MenuState,
)
from ..utils.env_tools import DuskyConfig
from ..utils.fileio import atomic_write

logger = logging.getLogger(__name__)

APP_TITLE = "Dusky Terminal Manager"
APP_VERSION = "v6.2 (Stable)"

# key|type|desktop_file|display_name
TERM_CATALOG: Tuple[str, ...] = (
    "kitty|0|kitty.desktop|Kitty",
    "foot|0|org.codeberg.dnkl.foot.desktop|Foot",
    "alacritty|0|Alacritty.desktop|Alacritty",
    "wezterm|0|org.wezfurlong.wezterm.desktop|WezTerm",
    "ghostty|0|com.mitchellh.ghostty.desktop|Ghostty",
    "konsole|0|org.kde.konsole.desktop|Konsole",
    "gnome-terminal|0|org.gnome.Terminal.desktop|GNOME Terminal",
)

UNKNOWN = "unknown"
LEGACY_KEY = "kitty"
LEGACY_FALLBACK = "foot"
EXEC_CMD = "uwsm-app -- $terminal"

_TERMINAL_LINE = re.compile(r"^[\t ]*\$terminal[\t ]*=")
_LAUNCH_BIND = re.compile(r"bindd[ \t]*=.*,[ \t]*Launch Terminal[ \t]*,")


@dataclass(frozen=True)
class TerminalEntry:
    key: str
    kind: str
    desktop_file: str
    name: str


def parse_catalog(entries: Iterable[str]) -> List[TerminalEntry]:
    """Parse ``key|type|desktop_file|display_name`` descriptors."""

    parsed: List[TerminalEntry] = []
    for raw in entries:
        fields = raw.split("|")
        if len(fields) != 4 or not fields[0]:
            raise CatalogError(f"Malformed terminal entry: {raw!r}")
        parsed.append(TerminalEntry(*fields))
    return parsed


def rewrite_terminal_variable(text: str, key: str) -> str:
    """Point every ``$terminal =`` assignment at ``key``, appending one if absent."""

    lines = text.splitlines()
    found = False
    out: List[str] = []
    for line in lines:
        if _TERMINAL_LINE.match(line):
            out.append(f"$terminal = {key}")
            found = True
        else:
            out.append(line)
    if not found:
        out.append(f"$terminal = {key}")
    return "\n".join(out)


def rewrite_launch_bind(text: str, command: str = EXEC_CMD) -> str:
    """Make the ``Launch Terminal`` keybind exec ``command``, keeping its mods and key."""

    found = False
    out: List[str] = []
    for line in text.splitlines():
        if _LAUNCH_BIND.search(line):
            parts = line.split(",")
            out.append(f"{parts[0]},{parts[1]},{parts[2]}, exec, {command}")
            found = True
        else:
            out.append(line)
    if not found:
        out.extend(
            [
                "",
                "# Auto-generated by Terminal Switcher",
                f"bindd = $mainMod, Q, Launch Terminal, exec, {command}",
            ]
        )
    return "\n".join(out)


class TerminalSwitcher:
    """Rewrite Hyprland's default-apps and keybind files for a new terminal."""

    def __init__(self, config: DuskyConfig, catalog: Sequence[str] = TERM_CATALOG) -> None:
        self.config = config
        self.entries = parse_catalog(catalog)

    @property
    def smart_state_file(self) -> Path:
        state = self.config.terminal_state_file
        return state.with_name(f"{state.name}.smart")

    def lookup(self, key: str) -> Optional[TerminalEntry]:
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None

    def detect_current(self) -> str:
        """Return the key assigned to ``$terminal``, or ``"unknown"``."""

        path = self.config.default_apps_conf
        if not path.is_file():
            return UNKNOWN
        for line in path.read_text(encoding="utf-8").splitlines():
            if _TERMINAL_LINE.match(line):
                fields = line.split("=")
                value = "".join(fields[1].split()).replace('"', "") if len(fields) > 1 else ""
                return value or UNKNOWN
        return UNKNOWN

    def _patch(self, path: Path, what: str, transform: Callable[..., str], *args: str) -> None:
        if not path.is_file():
            raise ConfigPatchError(f"{what} not found: {path}")
        atomic_write(path, transform(path.read_text(encoding="utf-8"), *args))

    def switch(self, key: str) -> ActionResult:
        """Make ``key`` the default terminal and persist the choice."""

        entry = self.lookup(key)
        if entry is None:
            return ActionResult(False, f"Terminal '{key}' not found in catalog.")

        try:
            self._patch(self.config.default_apps_conf, "Config", rewrite_terminal_variable, entry.key)
            self._patch(self.config.keybinds_conf, "Keybinds", rewrite_launch_bind)
            atomic_write(self.config.terminal_state_file, "true" if entry.key == LEGACY_KEY else "false")
            atomic_write(self.smart_state_file, entry.key)
        except ConfigPatchError as exc:
            return ActionResult(False, str(exc))
        except OSError as exc:
            logger.warning("terminal switch to %s failed: %s", entry.key, exc)
            return ActionResult(False, f"Write failed: {exc}")

        logger.info("terminal switched to %s", entry.key)
        return ActionResult(True, f"Switched to {entry.name}")

    def apply_state(self) -> ActionResult:
        """Re-apply the persisted terminal choice, e.g. after a dotfiles update."""

        if self.smart_state_file.is_file():
            return self.switch(self.smart_state_file.read_text(encoding="utf-8").strip())
        legacy = self.config.terminal_state_file
        if legacy.is_file():
            enabled = "true" in legacy.read_text(encoding="utf-8")
            return self.switch(LEGACY_KEY if enabled else LEGACY_FALLBACK)
        return ActionResult(True, "No state file found.")


class TerminalMenuBackend(MenuBackend):
    """Expose a :class:`TerminalSwitcher` to the menu loop."""

    def __init__(self, switcher: TerminalSwitcher) -> None:
        self.switcher = switcher
        self.current = switcher.detect_current()

    def current_value(self) -> Optional[str]:
        return self.current

    def context_line(self, state: MenuState) -> str:
        return f"Current: {self.current}"

    def apply(self, payload: ItemPayload, text: Optional[str] = None) -> ActionResult:
        if not isinstance(payload, ChoiceValue):
            return ActionResult(False, "Error: Nothing to apply")
        result = self.switcher.switch(payload.value)
        self.current = self.switcher.detect_current()
        if result.success:
            return ActionResult(True, f"Success: {result.message}")
        return ActionResult(False, f"Error: {result.message}")


def build_terminal_menu(switcher: TerminalSwitcher) -> Menu:
    builder = CatalogBuilder()
    tab = builder.tab("Terminals")
    for entry in switcher.entries:
        builder.register(tab, entry.name, ChoiceValue(entry.key))
    return builder.build(
        APP_TITLE,
        APP_VERSION,
        layout=Layout(box_width=60, viewport_height=10, label_width=38, adjust_threshold=38),
        footer="[↑/↓ j/k] Select  [Enter] Apply  [q] Quit",
    )


def initial_state(switcher: TerminalSwitcher, current: str) -> MenuState:
    """Start with the configured terminal selected."""

    state = MenuState()
    for index, entry in enumerate(switcher.entries):
        if entry.key == current:
            state.selected = index
            break
    return state


__all__ = [
    "TERM_CATALOG",
    "TerminalEntry",
    "TerminalMenuBackend",
    "TerminalSwitcher",
    "build_terminal_menu",
    "initial_state",
    "parse_catalog",
    "rewrite_launch_bind",
    "rewrite_terminal_variable",
]
