"""Application entry point launching the Dusky menus."""

from __future__ import annotations

import argparse
import importlib.util
import logging
import sys
from textwrap import dedent
from typing import Optional, Sequence

from rich.console import Console

from . import __version__
from .commands import matugen, terminal
from .errors import DuskyError
from .utils import load_config
from .utils.logbook import get_logger

EXIT_INTERRUPT = 130


def _missing_ui_dependencies() -> list[str]:
    """Return the third-party packages the interactive menus need."""

    required = ("prompt_toolkit", "rich")
    return [name for name in required if importlib.util.find_spec(name) is None]


def _print_dependency_error(missing: list[str]) -> None:
    message = dedent(
        f"""
        Dusky could not start because the following Python packages are missing:
            {', '.join(sorted(missing))}

        Install the project dependencies before launching a menu, e.g.:
            python -m pip install -e .
        """
    ).strip()
    print(message, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dusky", description="Dusky desktop configuration menus")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command")

    term = commands.add_parser("terminal", help="Choose the default Hyprland terminal")
    choice = term.add_mutually_exclusive_group()
    choice.add_argument("--set", metavar="NAME", help="Switch to NAME without opening the menu")
    choice.add_argument("--kitty", action="store_true", help="Shortcut for --set kitty")
    choice.add_argument("--foot", action="store_true", help="Shortcut for --set foot")
    choice.add_argument("--wezterm", action="store_true", help="Shortcut for --set wezterm")
    choice.add_argument(
        "--apply-state",
        action="store_true",
        help="Re-apply the saved terminal choice (used after updates)",
    )

    commands.add_parser("matugen", help="Pick a matugen colour scheme preset")
    return parser


def _dispatch(options: argparse.Namespace) -> int:
    config = load_config()
    if options.command == "terminal":
        if options.apply_state:
            record = terminal.apply_state(options, config)
        elif terminal.requested_terminal(options):
            record = terminal.switch(options, config)
        else:
            record = terminal.menu(options, config)
    else:
        record = matugen.menu(options, config)
    return 0 if record.get("success", True) else 1


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse ``argv`` and run the requested Dusky surface."""

    parser = build_parser()
    options = parser.parse_args(list(argv) if argv is not None else None)
    if options.command is None:
        parser.print_help()
        return

    missing = _missing_ui_dependencies()
    if missing:
        _print_dependency_error(missing)
        raise SystemExit(1)

    get_logger()
    console = Console(highlight=False, stderr=True)
    try:
        code = _dispatch(options)
    except DuskyError as exc:
        console.print(f"[red][ERROR][/] {exc}")
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        raise SystemExit(EXIT_INTERRUPT) from None
    finally:
        logging.shutdown()
    if code:
        raise SystemExit(code)


__all__ = ["build_parser", "main"]
