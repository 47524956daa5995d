"""Matugen colour-scheme presets and the command that applies them."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from typing import Callable, Dict, Optional, Sequence, Tuple

from ..tui.model import (
    ActionKind,
    ActionResult,
    CatalogBuilder,
    ColorValue,
    CustomAction,
    ItemPayload,
    Layout,
    Menu,
    MenuBackend,
    MenuState,
    TabKind,
)
from ..utils.env_tools import DuskyConfig

logger = logging.getLogger(__name__)

APP_TITLE = "Dusky Matugen Presets"
APP_VERSION = "v3.1.0"

DEFAULT_HEX = "#FF0000"
DEFAULT_SETTINGS: Dict[str, str] = {
    "type": "scheme-fidelity",
    "mode": "dark",
    "contrast": "0.0",
}

_HEX = re.compile(r"^#?[a-fA-F0-9]{6}$")
_DECIMAL = re.compile(r"^[0-9]+$")

Runner = Callable[..., subprocess.CompletedProcess]

PRESETS: Tuple[Tuple[str, Tuple[Tuple[str, str], ...]], ...] = (
    (
        "Vibrant",
        (
            ("Hyper Red", "#FF0000"),
            ("Electric Blue", "#0000FF"),
            ("Toxic Green", "#00FF00"),
            ("Pure Magenta", "#FF00FF"),
            ("Cyan Punch", "#00FFFF"),
            ("Safety Yellow", "#FFFF00"),
            ("Blood Orange", "#FF4500"),
            ("Plasma Purple", "#6A0DAD"),
            ("Deep Pink", "#FF1493"),
            ("Ultramarine", "#120A8F"),
            ("Emerald City", "#50C878"),
            ("Crimson Tide", "#DC143C"),
            ("Chartreuse", "#7FFF00"),
            ("Spring Green", "#00FF7F"),
            ("Azure Sky", "#007FFF"),
            ("Violet Ray", "#EE82EE"),
            ("Aquamarine", "#7FFFD4"),
            ("Solid Gold", "#FFD700"),
            ("Rich Teal", "#008080"),
            ("Olive Drab", "#808000"),
        ),
    ),
    (
        "Neon",
        (
            ("Laser Lemon", "#FFFF66"),
            ("Hot Pink", "#FF69B4"),
            ("Cyber Grape", "#58427C"),
            ("Neon Carrot", "#FFA343"),
            ("Matrix Green", "#03A062"),
            ("Electric Indigo", "#6F00FF"),
            ("Miami Pink", "#FF5AC4"),
            ("Vice Blue", "#00C6FF"),
            ("Radioactive", "#CCFF00"),
            ("Plastic Purple", "#D400FF"),
            ("Arcade Red", "#FF0055"),
            ("Hacker Green", "#00FF2A"),
            ("Synthwave Sun", "#FF7E00"),
            ("Tron Cyan", "#6EFFFF"),
            ("Flux Capacitor", "#FFAE00"),
            ("Highlighter Blue", "#1F51FF"),
            ("Shocking Pink", "#FC0FC0"),
            ("Lime Light", "#BFFF00"),
        ),
    ),
    (
        "Deep",
        (
            ("Midnight Blue", "#191970"),
            ("Dark Slate", "#2F4F4F"),
            ("Saddle Brown", "#8B4513"),
            ("Dark Olive", "#556B2F"),
            ("Indigo Dye", "#4B0082"),
            ("Maroon", "#800000"),
            ("Navy", "#000080"),
            ("Dark Green", "#006400"),
            ("Dark Cyan", "#008B8B"),
            ("Dark Magenta", "#8B008B"),
            ("Tyrian Purple", "#66023C"),
            ("Oxblood", "#4A0404"),
            ("Deep Forest", "#013220"),
            ("Night Sky", "#0C090A"),
            ("Black Cherry", "#540026"),
            ("Deep Coffee", "#3B2F2F"),
        ),
    ),
    (
        "Pastel",
        (
            ("Baby Blue", "#89CFF0"),
            ("Mint Cream", "#F5FFFA"),
            ("Lavender", "#E6E6FA"),
            ("Peach Puff", "#FFDAB9"),
            ("Misty Rose", "#FFE4E1"),
            ("Honeydew", "#F0FFF0"),
            ("Alice Blue", "#F0F8FF"),
            ("Lemon Chiffon", "#FFFACD"),
            ("Tea Green", "#D0F0C0"),
            ("Celeste", "#B2FFFF"),
            ("Mauve", "#E0B0FF"),
            ("Salmon", "#FA8072"),
            ("Cornflower", "#6495ED"),
            ("Thistle", "#D8BFD8"),
            ("Wheat", "#F5DEB3"),
        ),
    ),
    (
        "Mono",
        (
            ("Pure Black", "#000000"),
            ("Pure White", "#FFFFFF"),
            ("Dim Gray", "#696969"),
            ("Slate Gray", "#708090"),
            ("Light Slate", "#778899"),
            ("Silver", "#C0C0C0"),
            ("Gainsboro", "#DCDCDC"),
            ("Charcoal", "#36454F"),
            ("Onyx", "#353839"),
            ("Gunmetal", "#2A3439"),
        ),
    ),
)

CUSTOM_ACTIONS: Tuple[Tuple[str, ActionKind], ...] = (
    ("Input HEX Code", ActionKind.INPUT_HEX),
    ("Input RGB Values", ActionKind.INPUT_RGB),
    ("Regenerate Last", ActionKind.REGENERATE),
)

# key|cycle|options or key|float|min|max|step
SETTING_DESCRIPTORS: Tuple[Tuple[str, str], ...] = (
    (
        "Scheme Type",
        "type|cycle|scheme-fidelity,scheme-content,scheme-fruit-salad,scheme-rainbow,"
        "scheme-neutral,scheme-tonal-spot,scheme-expressive,scheme-monochrome",
    ),
    ("Mode", "mode|cycle|dark,light"),
    ("Contrast", "contrast|float|-1.0|1.0|0.1"),
)

INPUT_PROMPTS: Dict[ActionKind, str] = {
    ActionKind.INPUT_HEX: "Enter HEX (e.g. #FF0000):",
    ActionKind.INPUT_RGB: "Enter RGB (e.g. 255 0 0):",
}


def normalize_hex(text: str) -> Optional[str]:
    """Return ``#RRGGBB`` for a valid hex code (``#`` optional), else ``None``."""

    value = text.strip()
    if not _HEX.match(value):
        return None
    if not value.startswith("#"):
        value = f"#{value}"
    return value.upper()


def rgb_to_hex(text: str) -> Optional[str]:
    """Convert ``"R G B"`` (0-255 each, extra tokens ignored) to ``#rrggbb``."""

    tokens = text.split()
    if len(tokens) < 3:
        return None
    components = []
    for token in tokens[:3]:
        if not _DECIMAL.match(token):
            return None
        number = int(token)
        if not 0 <= number <= 255:
            return None
        components.append(number)
    red, green, blue = components
    return f"#{red:02x}{green:02x}{blue:02x}"


class MatugenController:
    """Run ``matugen color hex`` with the current scheme settings."""

    def __init__(
        self,
        config: DuskyConfig,
        *,
        settings: Optional[Dict[str, str]] = None,
        runner: Runner = subprocess.run,
    ) -> None:
        self.config = config
        self.settings = settings if settings is not None else dict(DEFAULT_SETTINGS)
        self.runner = runner
        self.last_applied = DEFAULT_HEX

    def available(self) -> bool:
        return shutil.which(self.config.matugen_bin) is not None

    def command(self, hex_code: str) -> Sequence[str]:
        return [
            self.config.matugen_bin,
            "color",
            "hex",
            hex_code,
            "--type",
            self.settings["type"],
            "--mode",
            self.settings["mode"],
            "--contrast",
            self.settings["contrast"],
        ]

    def apply(self, hex_code: str) -> ActionResult:
        hex_code = hex_code.upper()
        self.last_applied = hex_code
        try:
            completed = self.runner(
                self.command(hex_code),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as exc:
            logger.warning("matugen could not be started: %s", exc)
            return ActionResult(False, f"✗ Failed to apply: {hex_code}")
        if completed.returncode == 0:
            return ActionResult(True, f"✓ Applied: {hex_code} ({self.settings['type']})")
        logger.info("matugen exited with %s for %s", completed.returncode, hex_code)
        return ActionResult(False, f"✗ Failed to apply: {hex_code}")


class MatugenMenuBackend(MenuBackend):
    """Bridge between the preset menu and :class:`MatugenController`."""

    def __init__(self, controller: MatugenController) -> None:
        self.controller = controller

    def current_value(self) -> Optional[str]:
        return self.controller.last_applied

    def context_line(self, state: MenuState) -> str:
        settings = state.settings
        return (
            f"Mode: {settings.get('mode', '')} | Type: {settings.get('type', '')} "
            f"| Contrast: {settings.get('contrast', '')}"
        )

    def input_prompt(self, payload: ItemPayload) -> Optional[str]:
        if isinstance(payload, CustomAction):
            return INPUT_PROMPTS.get(payload.kind)
        return None

    def apply(self, payload: ItemPayload, text: Optional[str] = None) -> ActionResult:
        if isinstance(payload, ColorValue):
            return self.controller.apply(payload.hex)
        if not isinstance(payload, CustomAction):
            return ActionResult(False, "Nothing to apply")
        if payload.kind is ActionKind.INPUT_HEX:
            hex_code = normalize_hex(text or "")
            if hex_code is None:
                return ActionResult(False, "Invalid HEX code")
            return self.controller.apply(hex_code)
        if payload.kind is ActionKind.INPUT_RGB:
            hex_code = rgb_to_hex(text or "")
            if hex_code is None:
                return ActionResult(False, "Invalid RGB values")
            return self.controller.apply(hex_code)
        return self.controller.apply(self.controller.last_applied)


def build_matugen_menu() -> Menu:
    builder = CatalogBuilder()
    for name, presets in PRESETS:
        tab = builder.tab(name)
        for label, hex_code in presets:
            builder.register(tab, label, ColorValue(hex_code))
    custom = builder.tab("Custom")
    for label, kind in CUSTOM_ACTIONS:
        builder.register(custom, label, CustomAction(kind))
    settings = builder.tab("Settings", TabKind.SETTINGS)
    for label, descriptor in SETTING_DESCRIPTORS:
        builder.register_setting(settings, label, descriptor)
    return builder.build(
        APP_TITLE,
        APP_VERSION,
        layout=Layout(box_width=80, viewport_height=16, label_width=30, adjust_threshold=40),
        footer="[Enter] Apply  [Tab] Switch Tab  [Arrows] Nav  [q] Quit",
    )


__all__ = [
    "DEFAULT_SETTINGS",
    "MatugenController",
    "MatugenMenuBackend",
    "build_matugen_menu",
    "normalize_hex",
    "rgb_to_hex",
]
