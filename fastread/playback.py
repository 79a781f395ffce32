"""Word pacing state machine.

Semantics:
  - Pacing ticks fire every `60000 // words_per_minute` ms, recomputed on each
    tick, and keep firing while paused; a paused tick just does not advance.
  - Each re-arm is measured from the moment the tick ran ("now"), unlike the
    diagnostics monitor which accumulates nominal due times.
  - Manual seeks move the cursor outside the tick cycle and never go below 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import word_delay_ms
from .diagnostics.monitor import DiagnosticsState
from .reactor import Reactor

_logger = logging.getLogger(__name__)


@dataclass
class PlaybackState:
    position: int = 0
    paused: bool = True
    words_per_minute: int = 240
    dirty: bool = True
    running: bool = False

    def snapshot(self) -> Dict[str, Any]:
        return {
            "position": int(self.position),
            "paused": bool(self.paused),
            "words_per_minute": int(self.words_per_minute),
            "dirty": bool(self.dirty),
            "running": bool(self.running),
        }


class PlaybackController:
    def __init__(
        self,
        reactor: Reactor,
        state: PlaybackState,
        diagnostics: Optional[DiagnosticsState] = None,
        *,
        warmup: float = 1.0,
    ) -> None:
        if state.words_per_minute <= 0:
            raise ValueError(
                f"words_per_minute must be positive, received {state.words_per_minute}"
            )
        self.reactor = reactor
        self.state = state
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsState()
        self.warmup = float(warmup)

    @property
    def delay(self) -> float:
        """Seconds until the next pacing tick at the current rate."""
        return word_delay_ms(self.state.words_per_minute) / 1000.0

    def start(self) -> None:
        """Enter Paused and arm the first tick after the warm-up delay."""
        self.state.paused = True
        self.reactor.schedule_after(self.warmup, self.tick)

    def tick(self) -> None:
        delay = self.delay
        _logger.debug("Word %d duration on screen %.3fs", self.state.position, delay)
        if not self.state.paused:
            self.state.position += 1
            self.diagnostics.record_action()
            self.state.dirty = True
        self.reactor.schedule_after(delay, self.tick)

    def toggle_pause(self) -> None:
        self.state.paused = not self.state.paused
        _logger.info("Pause = %s", self.state.paused)

    def step_back(self) -> None:
        if self.state.position > 0:
            self.state.position -= 1
            self.state.dirty = True

    def step_forward(self) -> None:
        # Past the end the token source answers with its end-of-text marker.
        self.state.position += 1
        self.state.dirty = True

    def set_words_per_minute(self, words_per_minute: int) -> None:
        """Change the rate; the already-armed tick keeps its old delay."""
        word_delay_ms(words_per_minute)
        self.state.words_per_minute = int(words_per_minute)
        _logger.info("Reading speed %d words per minute", self.state.words_per_minute)
