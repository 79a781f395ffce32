from __future__ import annotations

import logging
from typing import Any, Optional

from .config import ReaderConfig
from .diagnostics import DiagnosticsMonitor, DiagnosticsState, EventBus
from .input import InputSource, dispatch
from .playback import PlaybackController, PlaybackState
from .reactor import Clock, Reactor
from .text import TokenSource
from .ui.base import Display, FontCache, RenderError

_logger = logging.getLogger(__name__)


class ReaderApp:
    """Wires the reactor, pacing, diagnostics and a front end into one loop.

    Each iteration runs, in order: due reactor callbacks, one bounded input
    wait (non-blocking while a repaint is pending), dispatch, and a repaint
    when the state is dirty.
    """

    def __init__(
        self,
        cfg: ReaderConfig,
        tokens: TokenSource,
        display: Display,
        input_source: InputSource,
        fonts: FontCache[Any],
        *,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.cfg = cfg
        self.tokens = tokens
        self.display = display
        self.input = input_source
        self.fonts = fonts
        self.reactor = Reactor(clock) if clock is not None else Reactor()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.state = PlaybackState(words_per_minute=cfg.words_per_minute)
        self.diagnostics = DiagnosticsState()
        self.controller = PlaybackController(
            self.reactor,
            self.state,
            self.diagnostics,
            warmup=cfg.warmup_ms / 1000.0,
        )
        self.monitor = DiagnosticsMonitor(
            self.reactor,
            self.diagnostics,
            period=cfg.monitor_period_ms / 1000.0,
            event_bus=self.event_bus,
        )
        self.render_failures = 0
        self.frames = 0
        self._font: Any = None

    def start(self) -> None:
        """Resolve the font and arm the pacing and monitor timers."""
        _logger.info("Start reading speed %d words per minute", self.cfg.words_per_minute)
        self._font = self.fonts.get(self.cfg.font_name, self.cfg.font_size)
        self.monitor.start(self.reactor.now())
        self.controller.start()
        self.state.dirty = True
        self.state.running = True

    def poll_timeout(self) -> float:
        if self.state.dirty:
            return 0.0
        return self.cfg.poll_interval_ms / 1000.0

    def process_iteration(self) -> None:
        self.reactor.process()

        event = self.input.wait_event(self.poll_timeout())
        if event is not None:
            dispatch(event, self.controller)

        if self.state.dirty:
            self.repaint()

    def repaint(self) -> bool:
        msg = self.tokens.get(self.state.position)
        _logger.debug("Show %d is %s", self.state.position, msg)
        try:
            self.display.clear(self.cfg.background)
            self.display.draw_centered(self._font, msg)
            self.display.present()
            self.frames += 1
            return True
        except RenderError as exc:
            self.render_failures += 1
            _logger.warning("Repaint of word %d failed: %s", self.state.position, exc)
            return False
        finally:
            self.state.dirty = False

    def run(self) -> None:
        if not self.state.running:
            self.start()
        try:
            while self.state.running:
                self.process_iteration()
        except KeyboardInterrupt:
            _logger.info("Interrupted")
            self.state.running = False
