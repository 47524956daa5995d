"""Tests for the command line launcher."""

from __future__ import annotations

from pathlib import Path

import pytest

from dusky import __version__
from dusky.app import build_parser, main
from dusky.commands import terminal


@pytest.fixture()
def hypr(tmp_path: Path) -> Path:
    source = tmp_path / "hypr"
    source.mkdir()
    (source / "default_apps.conf").write_text("$terminal = kitty\n", encoding="utf-8")
    (source / "keybinds.conf").write_text(
        "bindd = $mainMod, Return, Launch Terminal, exec, kitty\n", encoding="utf-8"
    )
    return source


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    main([])

    assert "terminal" in capsys.readouterr().out


def test_shortcut_flags_pick_terminal() -> None:
    parser = build_parser()

    assert terminal.requested_terminal(parser.parse_args(["terminal", "--foot"])) == "foot"
    assert terminal.requested_terminal(parser.parse_args(["terminal", "--set", "ghostty"])) == "ghostty"
    assert terminal.requested_terminal(parser.parse_args(["terminal"])) is None


def test_set_flag_switches_without_menu(hypr: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["terminal", "--set", "foot"])

    assert "$terminal = foot" in (hypr / "default_apps.conf").read_text(encoding="utf-8")
    out = capsys.readouterr().out
    assert "[INFO]" in out
    assert "Switched to Foot" in out


def test_unknown_terminal_exits_nonzero(hypr: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["terminal", "--set", "xterm"])

    assert excinfo.value.code == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_apply_state_reapplies_saved_choice(hypr: Path, isolated_state: Path) -> None:
    smart = isolated_state / "settings" / "terminal_switch.smart"
    smart.parent.mkdir(parents=True)
    smart.write_text("wezterm\n", encoding="utf-8")

    main(["terminal", "--apply-state"])

    assert "$terminal = wezterm" in (hypr / "default_apps.conf").read_text(encoding="utf-8")


def test_matugen_requires_binary(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("DUSKY_MATUGEN_BIN", "definitely-not-installed-matugen")

    with pytest.raises(SystemExit) as excinfo:
        main(["matugen"])

    assert excinfo.value.code == 1
    assert "Missing dependency" in capsys.readouterr().err


def test_conflicting_flags_are_rejected() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["terminal", "--kitty", "--foot"])


def test_markup_in_terminal_name_is_printed_verbatim(hypr: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["terminal", "--set", "[/x]"])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "[ERROR]" in err
    assert "[/x]" in err
