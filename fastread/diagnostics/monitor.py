"""Once-per-second sampling of the playback action counter."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..reactor import Reactor
from .event_bus import EventBus

_logger = logging.getLogger(__name__)


@dataclass
class DiagnosticsState:
    action_count: int = 0
    last_sample: int = 0
    samples: int = 0

    def record_action(self) -> None:
        self.action_count += 1

    def sample_and_reset(self) -> int:
        value = int(self.action_count)
        self.action_count = 0
        self.last_sample = value
        self.samples += 1
        return value


class DiagnosticsMonitor:
    """Periodic tick that logs and resets `DiagnosticsState.action_count`.

    The next due time accumulates from the previous *nominal* due time, not
    from the moment the tick actually ran, so a late `Reactor.process()` call
    does not push every later tick back.
    """

    def __init__(
        self,
        reactor: Reactor,
        state: DiagnosticsState,
        *,
        period: float = 1.0,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive, received {period}")
        self.reactor = reactor
        self.state = state
        self.period = float(period)
        self.event_bus = event_bus
        self._nominal: Optional[float] = None

    @property
    def next_due(self) -> Optional[float]:
        return self._nominal

    def start(self, now: Optional[float] = None) -> None:
        base = self.reactor.now() if now is None else float(now)
        self._nominal = base + self.period
        self.reactor.schedule_at(self._nominal, self.tick)

    def tick(self) -> None:
        if self._nominal is None:
            raise RuntimeError("DiagnosticsMonitor.tick() called before start()")
        fired_at = self._nominal
        count = self.state.sample_and_reset()
        _logger.info("Action(s) %d per sec.", count)
        if self.event_bus is not None:
            self.event_bus.emit("actions", count=count, at=fired_at)
        self._nominal = fired_at + self.period
        _logger.debug("Next monitor at %.3f", self._nominal)
        self.reactor.schedule_at(self._nominal, self.tick)
