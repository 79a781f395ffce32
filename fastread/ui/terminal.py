"""Rich full-screen front end driven by single keystrokes from stdin.

Terminals only report a key once it has been typed, so every keystroke is
delivered as a completed key release.

Controls:
  Space     Toggle run/pause
  Left      Previous word
  Right     Next word
  Esc       Quit
"""
from __future__ import annotations

import logging
import os
import select
import sys
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, List, Optional

from rich import errors as rich_errors
from rich.align import Align
from rich.color import Color as RichColor
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from ..config import ReaderConfig
from ..input import InputEvent, Key, KeyReleased, Quit
from .base import Color, DisplayError, FontCache, RenderError

_logger = logging.getLogger(__name__)

_SEQUENCES = {
    "\x1b": Key.ESCAPE,
    " ": Key.SPACE,
    "\x1b[D": Key.LEFT,
    "\x1bOD": Key.LEFT,
    "\x1b[C": Key.RIGHT,
    "\x1bOC": Key.RIGHT,
}


def translate_key(seq: str) -> InputEvent:
    if seq == "":
        return Quit()
    return KeyReleased(_SEQUENCES.get(seq, Key.OTHER))


@dataclass(frozen=True)
class TerminalFont:
    """Glyph size belongs to the terminal emulator; only the style applies."""

    name: str
    size: int
    style: Style


def split_keys(data: str) -> List[str]:
    """Split a chunk read from the terminal into single keys.

    Arrow keys arrive as three-character `ESC [ x` / `ESC O x` sequences; an
    ESC not followed by `[` or `O` is the Escape key itself.
    """
    keys: List[str] = []
    i = 0
    while i < len(data):
        if data[i] == "\x1b" and i + 2 < len(data) and data[i + 1] in "[O":
            keys.append(data[i : i + 3])
            i += 3
        else:
            keys.append(data[i])
            i += 1
    return keys


class _RawTerminal:
    """Put stdin into cbreak mode so we can read single-key presses."""

    def __init__(self) -> None:
        self._enabled = False
        self._fd: Optional[int] = None
        self._old: Optional[Any] = None
        self._pending: Deque[str] = deque()

    def __enter__(self) -> "_RawTerminal":
        if not sys.stdin.isatty():
            return self
        import termios
        import tty

        self._fd = sys.stdin.fileno()
        self._old = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        self._enabled = True
        return self

    def __exit__(self, *args) -> None:
        if not self._enabled or self._fd is None or self._old is None:
            return
        import termios

        termios.tcsetattr(self._fd, termios.TCSADRAIN, self._old)
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def read_key(self, timeout: float) -> Optional[str]:
        """Wait up to `timeout` seconds for one key; "" means stdin closed.

        Reads bypass the buffered `sys.stdin` layer so `select` sees every
        pending byte of an escape sequence.
        """
        if self._pending:
            return self._pending.popleft()
        if not self._enabled or self._fd is None:
            time.sleep(max(0.0, timeout))
            return None
        ready, _, _ = select.select([self._fd], [], [], max(0.0, timeout))
        if not ready:
            return None
        chunk = os.read(self._fd, 32)
        if not chunk:
            return ""
        while chunk.endswith((b"\x1b", b"\x1b[", b"\x1bO")):
            # Give a split escape sequence a moment to complete.
            ready, _, _ = select.select([self._fd], [], [], 0.01)
            if not ready:
                break
            more = os.read(self._fd, 32)
            if not more:
                break
            chunk += more
        self._pending.extend(split_keys(chunk.decode("utf-8", errors="replace")))
        return self._pending.popleft()


class TerminalFrontend:
    """Owns the Rich `Live` screen; acts as both `Display` and `InputSource`."""

    def __init__(self, cfg: ReaderConfig, console: Optional[Console] = None) -> None:
        self.cfg = cfg
        self.console = console if console is not None else Console()
        self.fonts: FontCache[TerminalFont] = FontCache(self._load_font)
        self._raw = _RawTerminal()
        self._live: Optional[Live] = None
        self._background = Style()
        self._body: Optional[Text] = None

    def _load_font(self, name: str, size: int) -> TerminalFont:
        style = Style(color=RichColor.from_rgb(*self.cfg.text_color), bold=self.cfg.high_quality)
        return TerminalFont(name=name, size=size, style=style)

    def __enter__(self) -> "TerminalFrontend":
        self._raw.__enter__()
        try:
            self._live = Live(
                Text(""),
                console=self.console,
                screen=True,
                transient=True,
                auto_refresh=False,
            )
            self._live.__enter__()
        except rich_errors.LiveError as exc:
            self._raw.__exit__(None, None, None)
            raise DisplayError(f"Could not start terminal view: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if self._live is not None:
                self._live.__exit__(exc_type, exc_val, exc_tb)
                self._live = None
        finally:
            self.fonts.close()
            self._raw.__exit__(exc_type, exc_val, exc_tb)

    # ---------------------------- InputSource
    def wait_event(self, timeout: float) -> Optional[InputEvent]:
        seq = self._raw.read_key(timeout)
        if seq is None:
            return None
        return translate_key(seq)

    # ---------------------------- Display
    def clear(self, color: Color) -> None:
        try:
            self._background = Style(bgcolor=RichColor.from_rgb(*color))
        except (rich_errors.StyleError, TypeError, ValueError) as exc:
            raise RenderError(f"Could not clear to {color!r}: {exc}") from exc
        self._body = None

    def draw_centered(self, font: TerminalFont, text: str) -> None:
        try:
            self._body = Text(text, style=font.style, justify="center")
        except (rich_errors.StyleError, rich_errors.MarkupError) as exc:
            raise RenderError(f"Could not render {text!r}: {exc}") from exc

    def present(self) -> None:
        if self._live is None:
            raise RenderError("Terminal view is not open")
        body = self._body if self._body is not None else Text("")
        panel = Panel(
            Align.center(body, vertical="middle"),
            title=self.cfg.title,
            style=self._background,
            height=self.console.size.height,
        )
        try:
            self._live.update(panel, refresh=True)
        except (rich_errors.ConsoleError, rich_errors.LiveError, OSError) as exc:
            raise RenderError(f"Could not refresh terminal: {exc}") from exc
