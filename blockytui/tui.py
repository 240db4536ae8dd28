"""Terminal handling: raw mode, the alternate screen and the event stream."""

from __future__ import annotations

import asyncio
import io
import logging
import threading
from contextlib import ExitStack
from typing import Any

from blessed import Terminal
from rich.console import Console, RenderableType

from blockytui.events import Event, EventKind, KeyCode, KeyEvent, KeyModifiers

log = logging.getLogger(__name__)

_MOUSE_ON = "\x1b[?1000h\x1b[?1002h\x1b[?1015h\x1b[?1006h"
_MOUSE_OFF = "\x1b[?1006l\x1b[?1015l\x1b[?1002l\x1b[?1000l"
_PASTE_ON = "\x1b[?2004h"
_PASTE_OFF = "\x1b[?2004l"

_KEY_POLL = 0.05
"""Seconds the key reader waits for input before checking for cancellation."""

_NAMED_KEYS = {
    "KEY_ENTER": KeyCode.ENTER,
    "KEY_ESCAPE": KeyCode.ESC,
    "KEY_TAB": KeyCode.TAB,
    "KEY_BTAB": KeyCode.BACKTAB,
    "KEY_BACKSPACE": KeyCode.BACKSPACE,
    "KEY_DELETE": KeyCode.DELETE,
    "KEY_LEFT": KeyCode.LEFT,
    "KEY_RIGHT": KeyCode.RIGHT,
    "KEY_UP": KeyCode.UP,
    "KEY_DOWN": KeyCode.DOWN,
    "KEY_HOME": KeyCode.HOME,
    "KEY_END": KeyCode.END,
    "KEY_PGUP": KeyCode.PAGE_UP,
    "KEY_PGDOWN": KeyCode.PAGE_DOWN,
}

_CONTROL_CHARS = {
    "\r": KeyCode.ENTER,
    "\n": KeyCode.ENTER,
    "\t": KeyCode.TAB,
    "\x1b": KeyCode.ESC,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
}


def key_from_keystroke(keystroke: Any) -> KeyEvent | None:
    """Convert a blessed keystroke (or a plain string) to a key event.

    Returns None for empty input and for sequences the application does not use.
    """
    name = getattr(keystroke, "name", None)
    if name in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[name])
    text = str(keystroke)
    if getattr(keystroke, "is_sequence", False) or len(text) != 1:
        return None
    if text in _CONTROL_CHARS:
        return KeyEvent(_CONTROL_CHARS[text])
    code = ord(text)
    if 1 <= code <= 26:
        return KeyEvent(KeyCode.CHAR, chr(code + ord("a") - 1), KeyModifiers.CONTROL)
    if code < 32:
        return None
    return KeyEvent(KeyCode.CHAR, text)


class Tui:
    """Full-screen terminal that produces events and draws rich renderables."""

    def __init__(self, frame_rate: float = 10.0, mouse: bool = False, paste: bool = False) -> None:
        if not frame_rate > 0:
            raise ValueError(f"frame rate must be positive, got {frame_rate!r}")
        self.frame_rate = float(frame_rate)
        self.mouse = mouse
        self.paste = paste
        self.terminal = Terminal()
        self._queue: asyncio.Queue[Event] | None = None
        self._stop_reading = threading.Event()
        self._ticker: asyncio.Task | None = None
        self._reader: threading.Thread | None = None
        self._screen: ExitStack | None = None
        log.debug("created new TUI")

    def __enter__(self) -> Tui:
        self.enter()
        return self

    def __exit__(self, *exc_info) -> None:
        self.exit()

    def _events(self) -> asyncio.Queue[Event]:
        if self._queue is None:
            self._queue = asyncio.Queue()
        return self._queue

    def _size(self) -> tuple[int, int]:
        return (self.terminal.width, self.terminal.height)

    async def _tick(self, queue: asyncio.Queue[Event]) -> None:
        delay = 1.0 / self.frame_rate
        size = self._size()
        while True:
            current = self._size()
            if current != size:
                size = current
                queue.put_nowait(Event(EventKind.RESIZE, size=current))
            queue.put_nowait(Event(EventKind.RENDER))
            await asyncio.sleep(delay)

    def _read_keys(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[Event]) -> None:
        stop = self._stop_reading
        while not stop.is_set():
            try:
                keystroke = self.terminal.inkey(timeout=_KEY_POLL)
            except (OSError, ValueError):
                event = Event(EventKind.ERROR)
            else:
                key = key_from_keystroke(keystroke)
                if key is None:
                    continue
                event = Event(EventKind.KEY, key=key)
            if stop.is_set():
                break
            try:
                loop.call_soon_threadsafe(queue.put_nowait, event)
            except RuntimeError:
                break

    def start(self) -> None:
        """Start producing events; must be called with an event loop running."""
        loop = asyncio.get_running_loop()
        self.cancel()
        queue = self._events()
        self._stop_reading = threading.Event()
        queue.put_nowait(Event(EventKind.INIT))
        self._ticker = loop.create_task(self._tick(queue))
        self._reader = threading.Thread(
            target=self._read_keys, args=(loop, queue), name="tui-keys", daemon=True
        )
        self._reader.start()
        log.info("started listening for tui events")

    def cancel(self) -> None:
        """Ask the event producers to finish."""
        self._stop_reading.set()
        if self._ticker is not None:
            self._ticker.cancel()

    def stop(self) -> None:
        """Stop producing events."""
        self.cancel()
        reader = self._reader
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=0.1)
            if reader.is_alive():
                log.error("failed to stop the key reader in 100 milliseconds")
        self._reader = None
        self._ticker = None

    def _write(self, text: str) -> None:
        self.terminal.stream.write(text)
        self.terminal.stream.flush()

    def enter(self) -> None:
        """Switch to raw mode and the alternate screen, then start the event stream."""
        if self._screen is None:
            stack = ExitStack()
            try:
                stack.enter_context(self.terminal.raw())
                stack.enter_context(self.terminal.fullscreen())
                stack.enter_context(self.terminal.hidden_cursor())
            except BaseException:
                stack.close()
                raise
            self._screen = stack
            if self.mouse:
                self._write(_MOUSE_ON)
            if self.paste:
                self._write(_PASTE_ON)
        self.start()

    def exit(self) -> None:
        """Stop the event stream and restore the terminal; safe to call twice."""
        self.stop()
        screen, self._screen = self._screen, None
        if screen is None:
            return
        self.terminal.stream.flush()
        if self.paste:
            self._write(_PASTE_OFF)
        if self.mouse:
            self._write(_MOUSE_OFF)
        screen.close()

    async def next(self) -> Event:
        """Wait for the next event."""
        return await self._events().get()

    def draw(self, renderable: RenderableType) -> None:
        """Draw ``renderable`` over the whole screen."""
        styled = self.terminal.does_styling
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=self.terminal.width,
            height=self.terminal.height,
            force_terminal=styled,
            color_system="truecolor" if styled else None,
            legacy_windows=False,
        )
        console.print(renderable)
        frame = buffer.getvalue().rstrip("\n").replace("\n", "\r\n")
        self._write(self.terminal.home + frame)