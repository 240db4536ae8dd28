"""Terminal events delivered to the application."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class KeyCode(enum.Enum):
    """The key that was pressed."""

    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    TAB = "tab"
    BACKTAB = "backtab"
    BACKSPACE = "backspace"
    DELETE = "delete"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


class KeyModifiers(enum.Flag):
    """Modifier keys held during a key press."""

    NONE = 0
    SHIFT = enum.auto()
    CONTROL = enum.auto()
    ALT = enum.auto()


@dataclass(frozen=True)
class KeyEvent:
    """A key press; ``char`` is set exactly when ``code`` is CHAR."""

    code: KeyCode
    char: str | None = None
    modifiers: KeyModifiers = KeyModifiers.NONE

    def __post_init__(self) -> None:
        if self.code is KeyCode.CHAR:
            if not isinstance(self.char, str) or len(self.char) != 1:
                raise ValueError("a CHAR key event needs exactly one character")
        elif self.char is not None:
            raise ValueError(f"a {self.code.name} key event carries no character")


class EventKind(enum.Enum):
    """Kinds of terminal events."""

    INIT = "init"
    QUIT = "quit"
    ERROR = "error"
    CLOSED = "closed"
    RENDER = "render"
    FOCUS_GAINED = "focus_gained"
    FOCUS_LOST = "focus_lost"
    PASTE = "paste"
    KEY = "key"
    MOUSE = "mouse"
    RESIZE = "resize"


@dataclass(frozen=True)
class Event:
    """A terminal event with the payload its kind requires."""

    kind: EventKind
    key: KeyEvent | None = None
    text: str | None = None
    size: tuple[int, int] | None = None

    def __post_init__(self) -> None:
        expected = {
            EventKind.KEY: "key",
            EventKind.PASTE: "text",
            EventKind.RESIZE: "size",
        }.get(self.kind)
        for field in ("key", "text", "size"):
            if field != expected and getattr(self, field) is not None:
                raise ValueError(f"a {self.kind.name} event carries no {field}")
        if expected == "key" and not isinstance(self.key, KeyEvent):
            raise ValueError("a KEY event needs a KeyEvent")
        if expected == "text" and not isinstance(self.text, str):
            raise ValueError("a PASTE event needs the pasted text")
        if expected == "size":
            size = self.size
            if (
                not isinstance(size, tuple)
                or len(size) != 2
                or not all(isinstance(n, int) and n >= 0 for n in size)
            ):
                raise ValueError("a RESIZE event needs a (columns, rows) pair")