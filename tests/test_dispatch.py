"""Tests for key and mouse dispatch."""

from __future__ import annotations

from dusky.tui.dispatch import InputDispatcher, sync_scroll
from dusky.tui.keys import Key, KeyEvent, read_key
from dusky.tui.model import (
    CatalogBuilder,
    ChoiceValue,
    ColorValue,
    Layout,
    MenuState,
    TabKind,
)
from dusky.tui.render import Renderer

from conftest import ScriptedSource


def _list_menu(count: int = 7):
    builder = CatalogBuilder()
    tab = builder.tab("Terminals")
    for index in range(count):
        builder.register(tab, f"Term {index}", ChoiceValue(f"term{index}"))
    return builder.build("Terminals", "v1", layout=Layout(viewport_height=5))


def _tabbed_menu():
    builder = CatalogBuilder()
    colors = builder.tab("Vibrant")
    builder.register(colors, "Hyper Red", ColorValue("#FF0000"))
    builder.register(colors, "Electric Blue", ColorValue("#0000FF"))
    builder.tab("Neon")
    settings = builder.tab("Settings", TabKind.SETTINGS)
    builder.register_setting(settings, "Mode", "mode|cycle|dark,light")
    builder.register_setting(settings, "Contrast", "contrast|float|-1.0|1.0|0.1")
    return builder.build("Presets", "v2", layout=Layout(box_width=80, viewport_height=8, label_width=30, adjust_threshold=40))


def _char(char: str) -> KeyEvent:
    return KeyEvent(Key.CHAR, char=char)


def test_navigation_wraps_around() -> None:
    menu = _list_menu(3)
    dispatcher = InputDispatcher(menu)
    state = MenuState()

    dispatcher.dispatch(state, KeyEvent(Key.UP))
    assert state.selected == 2
    dispatcher.dispatch(state, _char("j"))
    assert state.selected == 0


def test_page_navigation_clamps() -> None:
    menu = _list_menu(7)
    dispatcher = InputDispatcher(menu)
    state = MenuState(selected=3)

    dispatcher.dispatch(state, KeyEvent(Key.PAGE_DOWN))
    assert state.selected == 6
    dispatcher.dispatch(state, KeyEvent(Key.PAGE_DOWN))
    assert state.selected == 6
    dispatcher.dispatch(state, KeyEvent(Key.PAGE_UP))
    assert state.selected == 1
    dispatcher.dispatch(state, KeyEvent(Key.PAGE_UP))
    assert state.selected == 0


def test_home_end_keys() -> None:
    menu = _list_menu(7)
    dispatcher = InputDispatcher(menu)
    state = MenuState(selected=3)

    dispatcher.dispatch(state, _char("G"))
    assert state.selected == 6
    dispatcher.dispatch(state, KeyEvent(Key.HOME))
    assert state.selected == 0


def test_navigation_clears_status() -> None:
    state = MenuState()
    state.set_status("Error: boom", ok=False)

    InputDispatcher(_list_menu()).dispatch(state, KeyEvent(Key.DOWN))

    assert state.status == ""
    assert state.status_ok is None


def test_quit_keys_and_eof() -> None:
    dispatcher = InputDispatcher(_list_menu())

    for event in (_char("q"), _char("Q"), _char("\x03"), KeyEvent(Key.EOF)):
        assert dispatcher.dispatch(MenuState(), event).quit


def test_escape_and_unknown_are_ignored() -> None:
    dispatcher = InputDispatcher(_list_menu())
    state = MenuState(selected=2)

    for event in (KeyEvent(Key.ESCAPE), KeyEvent(Key.UNKNOWN, raw="[99~")):
        outcome = dispatcher.dispatch(state, event)
        assert not outcome.quit and outcome.trigger is None
    assert state.selected == 2


def test_enter_triggers_selected_item() -> None:
    menu = _list_menu()
    outcome = InputDispatcher(menu).dispatch(MenuState(selected=4), _char("\r"))

    assert outcome.trigger is menu.tabs[0].items[4]


def test_tab_cycles_and_resets_selection() -> None:
    menu = _tabbed_menu()
    dispatcher = InputDispatcher(menu)
    state = MenuState(selected=1)

    dispatcher.dispatch(state, _char("\t"))
    assert (state.tab_index, state.selected) == (1, 0)
    dispatcher.dispatch(state, KeyEvent(Key.SHIFT_TAB))
    dispatcher.dispatch(state, KeyEvent(Key.SHIFT_TAB))
    assert state.tab_index == 2


def test_enter_on_empty_tab_does_nothing() -> None:
    menu = _tabbed_menu()
    outcome = InputDispatcher(menu).dispatch(MenuState(tab_index=1), _char("\n"))

    assert outcome.trigger is None


def test_settings_adjust_with_arrows_and_enter() -> None:
    menu = _tabbed_menu()
    dispatcher = InputDispatcher(menu)
    state = MenuState(tab_index=2, settings={"mode": "dark", "contrast": "0.0"})

    dispatcher.dispatch(state, KeyEvent(Key.RIGHT))
    assert state.settings["mode"] == "light"
    outcome = dispatcher.dispatch(state, _char("\r"))
    assert outcome.trigger is None
    assert state.settings["mode"] == "dark"

    state.selected = 1
    dispatcher.dispatch(state, _char("h"))
    assert state.settings["contrast"] == "-0.1"


def test_left_right_outside_settings_tab_do_nothing() -> None:
    menu = _tabbed_menu()
    state = MenuState(settings={"mode": "dark"})

    InputDispatcher(menu).dispatch(state, KeyEvent(Key.RIGHT))

    assert state.settings == {"mode": "dark"}


def test_mouse_click_selects_row_from_decoded_report() -> None:
    menu = _list_menu()
    state = MenuState()
    frame = Renderer(menu).render(state)
    event = read_key(ScriptedSource(b"\x1b[<0;10;7M"), 0.05)

    outcome = InputDispatcher(menu).dispatch(state, event, frame)

    assert state.selected == 1
    assert outcome.trigger is None


def test_mouse_click_past_threshold_triggers() -> None:
    menu = _list_menu()
    state = MenuState(offset=0)
    frame = Renderer(menu).render(state)
    event = read_key(ScriptedSource(b"\x1b[<0;45;8M"), 0.05)

    outcome = InputDispatcher(menu).dispatch(state, event, frame)

    assert state.selected == 2
    assert outcome.trigger is menu.tabs[0].items[2]


def test_mouse_click_respects_scroll_offset() -> None:
    menu = _list_menu(7)
    state = MenuState(selected=6)
    sync_scroll(menu, state)
    frame = Renderer(menu).render(state)

    InputDispatcher(menu).dispatch(state, read_key(ScriptedSource(b"\x1b[<0;5;6M"), 0.05), frame)

    assert state.offset == 2
    assert state.selected == 2


def test_mouse_release_and_clicks_outside_rows_are_ignored() -> None:
    menu = _list_menu()
    state = MenuState(selected=3)
    frame = Renderer(menu).render(state)
    dispatcher = InputDispatcher(menu)

    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<0;10;7m"), 0.05), frame)
    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<0;10;2M"), 0.05), frame)
    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<0;10;40M"), 0.05), frame)

    assert state.selected == 3


def test_mouse_wheel_navigates() -> None:
    menu = _list_menu(3)
    state = MenuState()
    dispatcher = InputDispatcher(menu)

    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<65;1;1M"), 0.05))
    assert state.selected == 1
    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<64;1;1M"), 0.05))
    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<64;1;1M"), 0.05))
    assert state.selected == 2


def test_mouse_click_on_tab_bar_switches_tab() -> None:
    menu = _tabbed_menu()
    state = MenuState()
    frame = Renderer(menu).render(state)
    start, _ = frame.tab_zones[2]

    InputDispatcher(menu).dispatch(state, read_key(ScriptedSource(f"\x1b[<0;{start + 1};4M".encode()), 0.05), frame)

    assert state.tab_index == 2


def test_mouse_on_settings_adjusts_by_button() -> None:
    menu = _tabbed_menu()
    state = MenuState(tab_index=2, settings={"mode": "dark", "contrast": "0.0"})
    frame = Renderer(menu).render(state)
    dispatcher = InputDispatcher(menu)

    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<0;60;7M"), 0.05), frame)
    assert state.selected == 1
    assert state.settings["contrast"] == "0.1"
    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<2;60;7M"), 0.05), frame)
    dispatcher.dispatch(state, read_key(ScriptedSource(b"\x1b[<2;60;7M"), 0.05), frame)
    assert state.settings["contrast"] == "-0.1"


def test_literal_sgr_press_round_trip_selects_row_one() -> None:
    menu = _list_menu()
    state = MenuState()
    frame = Renderer(menu).render(state)
    event = read_key(ScriptedSource(bytes([0x1B, ord("["), ord("<"), ord("0"), ord(";"), ord("4"), ord("5"), ord(";"), ord("7"), ord("M")])), 0.05)

    InputDispatcher(menu).dispatch(state, event, frame)

    assert frame.items_top == 6
    assert state.selected == 1
