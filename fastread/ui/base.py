from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, Tuple, TypeVar

from ..errors import ReaderError

_logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]
FontT = TypeVar("FontT")


class DisplayError(ReaderError):
    """Window or terminal could not be set up."""


class FontLoadError(ReaderError):
    """A font could not be resolved or opened."""


class RenderError(ReaderError):
    """A single repaint failed; the next dirty cycle retries."""


class Display(Protocol):
    def clear(self, color: Color) -> None:
        ...

    def draw_centered(self, font: Any, text: str) -> None:
        ...

    def present(self) -> None:
        ...


class FontCache(Generic[FontT]):
    """Loads each `(name, size)` once and releases every handle on close."""

    def __init__(
        self,
        loader: Callable[[str, int], FontT],
        release: Optional[Callable[[FontT], None]] = None,
    ) -> None:
        self._loader = loader
        self._release = release
        self._fonts: Dict[Tuple[str, int], FontT] = {}

    def __len__(self) -> int:
        return len(self._fonts)

    def get(self, name: str, size: int) -> FontT:
        key = (str(name), int(size))
        font = self._fonts.get(key)
        if font is None:
            font = self._loader(*key)
            self._fonts[key] = font
            _logger.debug("Loaded font %s size %d", *key)
        return font

    def close(self) -> None:
        fonts: List[FontT] = list(self._fonts.values())
        self._fonts.clear()
        if self._release is None:
            return
        for font in fonts:
            self._release(font)
