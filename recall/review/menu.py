"""
Horizontal Selection Menu.

A one-line menu of labelled options driven from the keyboard:
- Arrow keys, h/l (vim) or Ctrl-B/Ctrl-F (emacs) move the highlight
- Home/End or Ctrl-A/Ctrl-E jump to the first/last option
- Enter confirms the highlighted option
- An option's shortcut letter confirms that option directly
- Esc or any other control key cancels

The keyboard handling is an explicit state machine (SelectionMenu) fed
with decoded key events, so it can be driven by a scripted key source in
tests and by click.getchar() on a real terminal.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

import click
from rich.console import Console
from rich.control import Control
from rich.segment import ControlType
from rich.text import Text

# =============================================================================
# Key Decoding
# =============================================================================


class Key(Enum):
    """Keyboard events the menu understands."""

    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    CANCEL = "cancel"
    CHAR = "char"
    IGNORED = "ignored"


@dataclass(frozen=True)
class KeyEvent:
    """A decoded keystroke."""

    key: Key
    char: str | None = None


CTRL_A = "\x01"
CTRL_B = "\x02"
CTRL_C = "\x03"
CTRL_E = "\x05"
CTRL_F = "\x06"
ESCAPE = "\x1b"

# POSIX escape sequences and Windows scan codes (prefixed by \xe0 or \x00)
_SEQUENCES: dict[str, Key] = {}
for _key, _codes in {
    Key.LEFT: ("\x1b[D", "\x1bOD", "\x1b[A", "\x1bOA", "\xe0K", "\xe0H", "\x00K", "\x00H"),
    Key.RIGHT: ("\x1b[C", "\x1bOC", "\x1b[B", "\x1bOB", "\xe0M", "\xe0P", "\x00M", "\x00P"),
    Key.HOME: ("\x1b[H", "\x1bOH", "\x1b[1~", "\x1b[7~", "\xe0G", "\x00G"),
    Key.END: ("\x1b[F", "\x1bOF", "\x1b[4~", "\x1b[8~", "\xe0O", "\x00O"),
}.items():
    for _code in _codes:
        _SEQUENCES[_code] = _key

_SINGLE: dict[str, Key] = {
    "h": Key.LEFT,
    CTRL_B: Key.LEFT,
    "l": Key.RIGHT,
    CTRL_F: Key.RIGHT,
    CTRL_A: Key.HOME,
    CTRL_E: Key.END,
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    ESCAPE: Key.CANCEL,
    # not treated as control keys
    "\t": Key.IGNORED,
    "\x7f": Key.IGNORED,
}


def decode_key(raw: str) -> KeyEvent:
    """
    Map a raw keystroke string to a KeyEvent.

    Args:
        raw: What the terminal delivered for one keypress

    Returns:
        KeyEvent (IGNORED for anything the menu does not handle)
    """
    if raw in _SEQUENCES:
        return KeyEvent(_SEQUENCES[raw])
    if raw == "\r\n":
        return KeyEvent(Key.ENTER)
    if len(raw) != 1:
        # unknown escape sequences, function keys, pasted text
        return KeyEvent(Key.IGNORED)
    if raw in _SINGLE:
        return KeyEvent(_SINGLE[raw])
    if ord(raw) < 32:
        return KeyEvent(Key.CANCEL)
    return KeyEvent(Key.CHAR, raw)


def read_key() -> str:
    """
    Block for one keystroke from the terminal.

    The terminal is in raw mode only while click waits for the key.
    Ctrl-C and Ctrl-D are returned as a control key instead of raising.
    """
    try:
        return click.getchar()
    except (KeyboardInterrupt, EOFError):
        return CTRL_C


# =============================================================================
# State Machine
# =============================================================================


class MenuState(Enum):
    """Lifecycle of a single menu interaction."""

    BROWSING = "browsing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MenuOption:
    """A selectable option and its single-character shortcut."""

    label: str
    shortcut: str


class SelectionMenu:
    """
    Keyboard state machine for a horizontal menu.

    Starts in BROWSING with the first option highlighted and ends in
    CONFIRMED or CANCELLED. Events received after that are ignored.
    """

    def __init__(self, options: Sequence[MenuOption]):
        if not options:
            raise ValueError("A menu needs at least one option")
        self.options = list(options)
        self.selected_index = 0
        self.state = MenuState.BROWSING

    @property
    def max_index(self) -> int:
        return len(self.options) - 1

    @property
    def done(self) -> bool:
        return self.state is not MenuState.BROWSING

    @property
    def result(self) -> int | None:
        """Chosen index once confirmed, otherwise None."""
        if self.state is MenuState.CONFIRMED:
            return self.selected_index
        return None

    def shortcut_index(self, char: str) -> int | None:
        """Position of the first option bound to ``char``."""
        for i, option in enumerate(self.options):
            if option.shortcut == char:
                return i
        return None

    def handle(self, event: KeyEvent) -> bool:
        """
        Apply one key event.

        Args:
            event: Decoded keystroke

        Returns:
            True if the highlight changed and the menu should be redrawn
        """
        if self.done:
            return False

        if event.key is Key.LEFT:
            if self.selected_index > 0:
                self.selected_index -= 1
                return True
        elif event.key is Key.RIGHT:
            if self.selected_index < self.max_index:
                self.selected_index += 1
                return True
        elif event.key is Key.HOME:
            self.selected_index = 0
            return True
        elif event.key is Key.END:
            self.selected_index = self.max_index
            return True
        elif event.key is Key.ENTER:
            self.state = MenuState.CONFIRMED
        elif event.key is Key.CANCEL:
            self.state = MenuState.CANCELLED
        elif event.key is Key.CHAR and event.char is not None:
            index = self.shortcut_index(event.char)
            if index is not None:
                self.selected_index = index
                self.state = MenuState.CONFIRMED
                return True

        return False

    def render(self, separator: str | None = None) -> Text:
        """Render all options on one line, the selected one reversed."""
        if separator is None:
            separator = "|" if sys.platform == "win32" else "│"

        line = Text()
        for i, option in enumerate(self.options):
            style = "reverse" if i == self.selected_index else ""
            line.append(f"{option.label} ({option.shortcut})", style=style)
            if i < self.max_index:
                line.append(f" {separator} ")
        return line


# =============================================================================
# Terminal Driver
# =============================================================================


def _draw(console: Console, menu: SelectionMenu) -> None:
    """Overwrite the current line with the menu."""
    console.control(
        Control.move_to_column(0),
        Control((ControlType.ERASE_IN_LINE, 2)),
    )
    console.print(menu.render(), end="", soft_wrap=True)


def horizontal_menu_select(
    options: Sequence[MenuOption],
    console: Console | None = None,
    read_key: Callable[[], str] = read_key,
) -> int | None:
    """
    Let the user pick one option from a horizontal menu.

    The cursor is hidden while the menu is active and shown again on
    every exit path, including terminal errors.

    Args:
        options: Options in display order
        console: Rich console to draw on
        read_key: Source of raw keystrokes

    Returns:
        Index of the chosen option, or None if the menu was cancelled

    Raises:
        OSError: If the terminal cannot be read or written
    """
    console = console or Console()
    menu = SelectionMenu(options)

    console.show_cursor(False)
    try:
        _draw(console, menu)
        while not menu.done:
            if menu.handle(decode_key(read_key())):
                _draw(console, menu)
        console.line()
    finally:
        console.show_cursor(True)

    return menu.result
