"""RSVP reader: one word at a time, paced by a small callback reactor."""
from __future__ import annotations

from .app import ReaderApp
from .config import ReaderConfig, build_config, word_delay_ms
from .errors import ConfigError, ReaderError
from .playback import PlaybackController, PlaybackState
from .reactor import Reactor, ScheduledCallback
from .text import END_OF_TEXT, TokenSource, tokenize

__all__ = [
    "ReaderApp",
    "ReaderConfig",
    "build_config",
    "word_delay_ms",
    "ConfigError",
    "ReaderError",
    "PlaybackController",
    "PlaybackState",
    "Reactor",
    "ScheduledCallback",
    "END_OF_TEXT",
    "TokenSource",
    "tokenize",
]
