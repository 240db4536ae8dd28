import asyncio
import io

import pytest
from blessed import Terminal
from blessed.keyboard import Keystroke
from rich.text import Text

from blockytui.events import Event, EventKind, KeyCode, KeyEvent, KeyModifiers
from blockytui.tui import Tui, key_from_keystroke


def _tui(frame_rate=50.0):
    tui = Tui(frame_rate=frame_rate)
    tui.terminal = Terminal(stream=io.StringIO())
    return tui


def test_plain_character():
    assert key_from_keystroke(Keystroke("q")) == KeyEvent(KeyCode.CHAR, "q")


def test_plain_string_is_accepted():
    assert key_from_keystroke("7") == KeyEvent(KeyCode.CHAR, "7")


def test_control_c():
    assert key_from_keystroke(Keystroke("\x03")) == KeyEvent(
        KeyCode.CHAR, "c", KeyModifiers.CONTROL
    )


@pytest.mark.parametrize(
    "keystroke, code",
    [
        (Keystroke("\r"), KeyCode.ENTER),
        (Keystroke("\n"), KeyCode.ENTER),
        (Keystroke("\t"), KeyCode.TAB),
        (Keystroke("\x1b"), KeyCode.ESC),
        (Keystroke("\x7f"), KeyCode.BACKSPACE),
        (Keystroke("\x1b[Z", code=353, name="KEY_BTAB"), KeyCode.BACKTAB),
        (Keystroke("\x1b[A", code=259, name="KEY_UP"), KeyCode.UP),
        (Keystroke("\r", code=343, name="KEY_ENTER"), KeyCode.ENTER),
        (Keystroke("\x1b", code=361, name="KEY_ESCAPE"), KeyCode.ESC),
    ],
)
def test_special_keys(keystroke, code):
    assert key_from_keystroke(keystroke) == KeyEvent(code)


def test_empty_and_unknown_sequences_are_ignored():
    assert key_from_keystroke(Keystroke("")) is None
    assert key_from_keystroke(Keystroke("\x1b[24~", code=276, name="KEY_F12")) is None


def test_frame_rate_must_be_positive():
    with pytest.raises(ValueError):
        Tui(frame_rate=0)


@pytest.mark.asyncio
async def test_start_emits_init_then_render():
    tui = _tui()
    tui.start()
    try:
        first = await asyncio.wait_for(tui.next(), 1)
        second = await asyncio.wait_for(tui.next(), 1)
    finally:
        tui.stop()
    assert first == Event(EventKind.INIT)
    assert second == Event(EventKind.RENDER)


@pytest.mark.asyncio
async def test_stop_ends_render_ticks():
    tui = _tui()
    tui.start()
    await asyncio.sleep(0.05)
    tui.stop()
    await asyncio.sleep(0.05)
    drained = 0
    with pytest.raises(asyncio.TimeoutError):
        while True:
            await asyncio.wait_for(tui.next(), 0.2)
            drained += 1
            assert drained < 20


def test_draw_writes_renderable():
    tui = _tui()
    tui.draw(Text("Blocky TUI"))
    assert "Blocky TUI" in tui.terminal.stream.getvalue()


def test_draw_uses_carriage_returns():
    tui = _tui()
    tui.draw(Text("first\nsecond"))
    out = tui.terminal.stream.getvalue()
    lines = out.split("\n")
    assert len(lines) > 1
    assert all(line.endswith("\r") for line in lines[:-1])


def test_exit_without_enter_leaves_terminal_untouched():
    tui = _tui()
    tui.exit()
    tui.exit()
    assert tui.terminal.stream.getvalue() == ""