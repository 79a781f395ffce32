"""Front ends for the reader.

Submodules import their toolkit lazily so that the core stays usable
without a display:
    fastread.ui.window    pygame window with TTF fonts
    fastread.ui.terminal  Rich full-screen terminal view
"""
from __future__ import annotations

from .base import Display, DisplayError, FontCache, FontLoadError, RenderError

__all__ = ["Display", "DisplayError", "FontCache", "FontLoadError", "RenderError"]
