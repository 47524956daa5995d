"""Handlers for the ``dusky matugen`` surface."""

from __future__ import annotations

from typing import Dict

from rich.console import Console
from rich.markup import escape

from ..core.matugen import MatugenController, MatugenMenuBackend, build_matugen_menu
from ..tui import MenuState, run_menu
from ..utils import logbook
from ..utils.env_tools import DuskyConfig

error_console = Console(highlight=False, stderr=True)


def menu(args, config: DuskyConfig) -> Dict[str, object]:
    """Open the matugen preset picker once the binary is known to exist."""

    controller = MatugenController(config)
    if not controller.available():
        record = {
            "action": "matugen_menu",
            "success": False,
            "message": f"Missing dependency: {config.matugen_bin}",
        }
        logbook.info(record)
        error_console.print(f"[red][ERROR][/] {escape(str(record['message']))}")
        return record

    # Menu adjustments and matugen invocations share one settings mapping.
    state = MenuState(settings=controller.settings)
    state = run_menu(
        build_matugen_menu(),
        MatugenMenuBackend(controller),
        state=state,
        escape_timeout=config.escape_timeout,
        color=config.color,
    )
    return {
        "action": "matugen_menu",
        "success": True,
        "last_applied": controller.last_applied,
        "settings": dict(controller.settings),
        "status": state.status,
    }


__all__ = ["menu"]
