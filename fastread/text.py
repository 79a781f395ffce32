"""Split a UTF-8 text into display tokens."""
from __future__ import annotations

import logging
import unicodedata
from pathlib import Path
from typing import Iterator, List, Sequence

_logger = logging.getLogger(__name__)

END_OF_TEXT = "- THE END -"


def _is_word_char(ch: str) -> bool:
    return unicodedata.category(ch)[0] in {"L", "N"}


def _is_separator(ch: str) -> bool:
    return ch.isspace() or unicodedata.category(ch)[0] == "P"


def tokenize(text: str) -> List[str]:
    """Return runs of letters/digits, split on punctuation and whitespace.

    Characters that are neither (symbols, control or format characters) are
    logged and dropped without closing the current word.
    """
    words: List[str] = []
    word: List[str] = []
    for ch in text:
        if _is_word_char(ch):
            word.append(ch)
        elif _is_separator(ch):
            if word:
                words.append("".join(word))
                word = []
        else:
            _logger.debug("unknown: ch = %r", ch)
    if word:
        words.append("".join(word))
    return words


class TokenSource:
    """Read-only token sequence with an end-of-text sentinel."""

    def __init__(self, tokens: Sequence[str] = ()) -> None:
        self._tokens: List[str] = list(tokens)

    @classmethod
    def from_text(cls, text: str) -> "TokenSource":
        return cls(tokenize(text))

    @classmethod
    def load(cls, path: str | Path) -> "TokenSource":
        # Undecodable bytes become U+FFFD, which the tokenizer skips.
        data = Path(path).read_text(encoding="utf-8", errors="replace")
        source = cls.from_text(data)
        _logger.info("Loaded %d word(s) from %s", len(source), path)
        return source

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    @property
    def tokens(self) -> List[str]:
        return list(self._tokens)

    def get(self, index: int) -> str:
        if 0 <= index < len(self._tokens):
            return self._tokens[index]
        return END_OF_TEXT
