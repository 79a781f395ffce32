"""Exception hierarchy shared by the reader components."""
from __future__ import annotations


class ReaderError(RuntimeError):
    """Base class for errors raised by fastread."""


class ConfigError(ReaderError, ValueError):
    """Raised when the reader configuration is invalid."""
