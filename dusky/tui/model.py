"""Catalog, settings and state types driving the menu engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..errors import CatalogError

ONE_DECIMAL = Decimal("0.1")


# --- Item payloads ---------------------------------------------------------


@dataclass(frozen=True)
class ColorValue:
    """A ``#RRGGBB`` colour preset."""

    hex: str


@dataclass(frozen=True)
class SettingRef:
    """Reference to an adjustable setting by key."""

    key: str


class ActionKind(Enum):
    INPUT_HEX = "input_hex"
    INPUT_RGB = "input_rgb"
    REGENERATE = "regenerate"


@dataclass(frozen=True)
class CustomAction:
    kind: ActionKind


@dataclass(frozen=True)
class ChoiceValue:
    """A plain value written out as-is when selected, e.g. a terminal key."""

    value: str


ItemPayload = Union[ColorValue, SettingRef, CustomAction, ChoiceValue]


@dataclass(frozen=True)
class MenuItem:
    label: str
    payload: ItemPayload


class TabKind(Enum):
    ACTIONS = "actions"
    SETTINGS = "settings"


@dataclass(frozen=True)
class Tab:
    name: str
    items: Tuple[MenuItem, ...] = ()
    kind: TabKind = TabKind.ACTIONS

    @property
    def is_settings(self) -> bool:
        return self.kind is TabKind.SETTINGS


# --- Settings --------------------------------------------------------------


@dataclass(frozen=True)
class CycleSetting:
    """A setting restricted to an ordered option list, advanced with wraparound."""

    key: str
    options: Tuple[str, ...]

    def adjust(self, current: str, direction: int) -> str:
        count = len(self.options)
        try:
            index = self.options.index(current)
        except ValueError:
            index = 0
        return self.options[(index + direction) % count]


@dataclass(frozen=True)
class FloatSetting:
    """A decimal setting clamped to ``[minimum, maximum]`` and kept to one decimal."""

    key: str
    minimum: Decimal
    maximum: Decimal
    step: Decimal

    def adjust(self, current: str, direction: int) -> str:
        try:
            value = Decimal(current)
        except (InvalidOperation, TypeError):
            value = Decimal(0)
        if not value.is_finite():
            value = Decimal(0)
        value += direction * self.step
        value = min(max(value, self.minimum), self.maximum)
        return format_decimal(value)


SettingSpec = Union[CycleSetting, FloatSetting]


def format_decimal(value: Decimal) -> str:
    """Render ``value`` with exactly one decimal place and a ``.`` separator."""

    rounded = value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:.1f}"


def parse_setting_descriptor(descriptor: str) -> SettingSpec:
    """Parse ``key|cycle|a,b,c`` or ``key|float|min|max|step`` once at registration."""

    parts = descriptor.split("|")
    if len(parts) < 3 or not parts[0]:
        raise CatalogError(f"Malformed setting descriptor: {descriptor!r}")
    key, kind = parts[0], parts[1]
    if kind == "cycle":
        options = tuple(option for option in parts[2].split(",") if option)
        if not options:
            raise CatalogError(f"Cycle setting {key!r} has no options")
        return CycleSetting(key=key, options=options)
    if kind == "float":
        if len(parts) != 5:
            raise CatalogError(f"Float setting {key!r} needs min|max|step")
        try:
            minimum, maximum, step = (Decimal(part) for part in parts[2:])
        except InvalidOperation as exc:
            raise CatalogError(f"Float setting {key!r} has a non-numeric bound") from exc
        if minimum > maximum or step <= 0:
            raise CatalogError(f"Float setting {key!r} has an empty range or step")
        return FloatSetting(key=key, minimum=minimum, maximum=maximum, step=step)
    raise CatalogError(f"Unknown setting type {kind!r} for {key!r}")


# --- Catalog ---------------------------------------------------------------


@dataclass(frozen=True)
class Layout:
    """Fixed geometry shared by the renderer and the mouse hit-testing."""

    box_width: int = 60
    viewport_height: int = 10
    label_width: int = 38
    adjust_threshold: int = 38


@dataclass
class Menu:
    """Static description of one menu: title, tabs and setting specs.

    With a single tab the tab bar is hidden and the menu behaves as a plain
    scrolling list.
    """

    title: str
    version: str
    tabs: List[Tab]
    settings: Dict[str, SettingSpec] = field(default_factory=dict)
    layout: Layout = field(default_factory=Layout)
    footer: str = "[↑/↓ j/k] Select  [Enter] Apply  [q] Quit"

    def __post_init__(self) -> None:
        if not self.tabs:
            raise CatalogError(f"Menu {self.title!r} has no tabs")
        for tab in self.tabs:
            for item in tab.items:
                if isinstance(item.payload, SettingRef) and item.payload.key not in self.settings:
                    raise CatalogError(f"Item {item.label!r} references unknown setting {item.payload.key!r}")

    @property
    def tabbed(self) -> bool:
        return len(self.tabs) > 1


class CatalogBuilder:
    """Incrementally register tabs and items, resolving payloads once."""

    def __init__(self) -> None:
        self._tabs: List[Tuple[str, TabKind, List[MenuItem]]] = []
        self._settings: Dict[str, SettingSpec] = {}

    def tab(self, name: str, kind: TabKind = TabKind.ACTIONS) -> int:
        self._tabs.append((name, kind, []))
        return len(self._tabs) - 1

    def register(self, tab_index: int, label: str, payload: ItemPayload) -> MenuItem:
        if not 0 <= tab_index < len(self._tabs):
            raise CatalogError(f"Tab {tab_index} does not exist")
        item = MenuItem(label=label, payload=payload)
        self._tabs[tab_index][2].append(item)
        return item

    def register_setting(self, tab_index: int, label: str, descriptor: str) -> MenuItem:
        spec = parse_setting_descriptor(descriptor)
        self._settings[spec.key] = spec
        return self.register(tab_index, label, SettingRef(spec.key))

    def build(self, title: str, version: str, **options: object) -> Menu:
        tabs = [Tab(name=name, items=tuple(items), kind=kind) for name, kind, items in self._tabs]
        return Menu(title=title, version=version, tabs=tabs, settings=dict(self._settings), **options)


# --- Runtime state ---------------------------------------------------------


class InputMode(Enum):
    BROWSING = "browsing"
    AWAITING_TEXT = "awaiting_text"


@dataclass
class MenuState:
    """Mutable navigation state owned by a single menu loop."""

    selected: int = 0
    offset: int = 0
    tab_index: int = 0
    status: str = ""
    status_ok: Optional[bool] = None
    settings: Dict[str, str] = field(default_factory=dict)
    mode: InputMode = InputMode.BROWSING
    running: bool = True

    def set_status(self, message: str, ok: Optional[bool] = None) -> None:
        self.status = message
        self.status_ok = ok

    def clear_status(self) -> None:
        self.status = ""
        self.status_ok = None


@dataclass(frozen=True)
class ActionResult:
    success: bool
    message: str


class MenuBackend:
    """Collaborator consulted by the loop for external state and actions.

    Subclasses override :meth:`apply`; the remaining hooks have defaults.
    """

    def current_value(self) -> Optional[str]:
        """Return the value rendered as active, e.g. the configured terminal."""

        return None

    def context_line(self, state: MenuState) -> str:
        return ""

    def input_prompt(self, payload: ItemPayload) -> Optional[str]:
        """Return a prompt when ``payload`` needs a line of text before applying."""

        return None

    def apply(self, payload: ItemPayload, text: Optional[str] = None) -> ActionResult:
        raise NotImplementedError


def current_items(menu: Menu, state: MenuState) -> Sequence[MenuItem]:
    return menu.tabs[state.tab_index].items


__all__ = [
    "ActionKind",
    "ActionResult",
    "CatalogBuilder",
    "ChoiceValue",
    "ColorValue",
    "CustomAction",
    "CycleSetting",
    "FloatSetting",
    "InputMode",
    "ItemPayload",
    "Layout",
    "Menu",
    "MenuBackend",
    "MenuItem",
    "MenuState",
    "SettingRef",
    "SettingSpec",
    "Tab",
    "TabKind",
    "current_items",
    "format_decimal",
    "parse_setting_descriptor",
]
