"""pygame window front end: TTF fonts, key-up events, window-close quit."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import pygame

from ..config import ReaderConfig
from ..input import InputEvent, Key, KeyPressed, KeyReleased, Other, Quit
from .base import Color, DisplayError, FontCache, FontLoadError, RenderError

_logger = logging.getLogger(__name__)

_KEYS = {
    pygame.K_ESCAPE: Key.ESCAPE,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
}


def translate_event(event: Any) -> Optional[InputEvent]:
    if event.type == pygame.NOEVENT:
        return None
    if event.type == pygame.QUIT:
        return Quit()
    if event.type == pygame.KEYUP:
        return KeyReleased(_KEYS.get(event.key, Key.OTHER))
    if event.type == pygame.KEYDOWN:
        return KeyPressed(_KEYS.get(event.key, Key.OTHER))
    return Other(pygame.event.event_name(event.type))


def load_font(fonts_dir: str | Path, name: str, size: int) -> "pygame.font.Font":
    path = Path(fonts_dir) / f"{name}.ttf"
    if not path.is_file():
        raise FontLoadError(f"Font file not found: {path}")
    try:
        return pygame.font.Font(str(path), int(size))
    except (pygame.error, OSError) as exc:
        raise FontLoadError(f"Could not open font {path}: {exc}") from exc


class WindowFrontend:
    """Owns the pygame window; acts as both `Display` and `InputSource`."""

    def __init__(self, cfg: ReaderConfig) -> None:
        self.cfg = cfg
        self.fonts: FontCache[Any] = FontCache(
            lambda name, size: load_font(cfg.fonts_dir, name, size)
        )
        self._screen: Optional[pygame.Surface] = None

    def __enter__(self) -> "WindowFrontend":
        try:
            pygame.init()
            pygame.font.init()
            self._screen = pygame.display.set_mode((self.cfg.window_width, self.cfg.window_height))
            pygame.display.set_caption(self.cfg.title)
        except pygame.error as exc:
            pygame.quit()
            raise DisplayError(f"Could not open window: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.fonts.close()
        self._screen = None
        pygame.quit()

    @property
    def screen(self) -> "pygame.Surface":
        if self._screen is None:
            raise DisplayError("Window is not open")
        return self._screen

    # ---------------------------- InputSource
    def wait_event(self, timeout: float) -> Optional[InputEvent]:
        ms = int(round(timeout * 1000.0))
        # pygame treats a zero wait timeout as "forever".
        event = pygame.event.poll() if ms <= 0 else pygame.event.wait(ms)
        return translate_event(event)

    # ---------------------------- Display
    def clear(self, color: Color) -> None:
        try:
            self.screen.fill(color)
        except (pygame.error, DisplayError) as exc:
            raise RenderError(f"Could not clear window: {exc}") from exc

    def draw_centered(self, font: Any, text: str) -> None:
        try:
            surface = font.render(text, self.cfg.high_quality, self.cfg.text_color)
        except pygame.error as exc:
            raise RenderError(f"Could not render {text!r}: {exc}") from exc
        try:
            screen = self.screen
        except DisplayError as exc:
            raise RenderError(str(exc)) from exc
        pos_x = (screen.get_width() - surface.get_width()) // 2
        pos_y = (screen.get_height() - surface.get_height()) // 2
        screen.blit(surface, (pos_x, pos_y))

    def present(self) -> None:
        try:
            pygame.display.flip()
        except pygame.error as exc:
            raise RenderError(f"Could not present frame: {exc}") from exc
