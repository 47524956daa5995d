"""Environment and dotenv driven configuration for Dusky."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .paths import hypr_source_dir, state_dir

DEFAULT_ESC_TIMEOUT = 0.05
MIN_ESC_TIMEOUT = 0.02
MAX_ESC_TIMEOUT = 0.10


@dataclass(frozen=True)
class DuskyConfig:
    """Resolved runtime settings shared by every menu."""

    state_dir: Path
    hypr_source_dir: Path
    escape_timeout: float = DEFAULT_ESC_TIMEOUT
    color: bool = True
    matugen_bin: str = "matugen"

    @property
    def default_apps_conf(self) -> Path:
        return self.hypr_source_dir / "default_apps.conf"

    @property
    def keybinds_conf(self) -> Path:
        return self.hypr_source_dir / "keybinds.conf"

    @property
    def terminal_state_file(self) -> Path:
        return self.state_dir / "settings" / "terminal_switch"


def env_file_path() -> Path:
    """Return the dotenv file consulted before reading the environment."""

    override = os.environ.get("DUSKY_ENV_FILE")
    if override:
        return Path(override).expanduser()
    return state_dir() / "dusky.env"


def _escape_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_ESC_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_ESC_TIMEOUT
    return min(MAX_ESC_TIMEOUT, max(MIN_ESC_TIMEOUT, value))


def load_config(env_file: Optional[Path] = None) -> DuskyConfig:
    """Load the optional dotenv file and build a :class:`DuskyConfig`.

    Values already present in the process environment win over the file.
    """

    path = env_file or env_file_path()
    if path.is_file():
        load_dotenv(path, override=False)
    return DuskyConfig(
        state_dir=state_dir(),
        hypr_source_dir=hypr_source_dir(),
        escape_timeout=_escape_timeout(os.environ.get("DUSKY_ESC_TIMEOUT")),
        color="NO_COLOR" not in os.environ,
        matugen_bin=os.environ.get("DUSKY_MATUGEN_BIN") or "matugen",
    )


__all__ = ["DEFAULT_ESC_TIMEOUT", "DuskyConfig", "env_file_path", "load_config"]
