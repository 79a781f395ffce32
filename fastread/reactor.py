"""Single-threaded reactor for time-stamped one-shot callbacks.

The reactor has no notion of recurring timers. Clients that want periodic
work re-arm themselves from inside their own callback.

Ordering:
  Callbacks due in the same `process()` pass fire earliest `due_at` first,
  ties broken by insertion order.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

Action = Callable[[], None]
Clock = Callable[[], float]


@dataclass(slots=True)
class ScheduledCallback:
    due_at: float
    action: Action
    seq: int
    fired: bool = field(default=False)


class Reactor:
    """Stores time-stamped callbacks and fires those whose time has come."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._pending: List[ScheduledCallback] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._pending)

    def now(self) -> float:
        return float(self._clock())

    def schedule_at(self, at: float, action: Action) -> None:
        self._pending.append(ScheduledCallback(due_at=float(at), action=action, seq=self._seq))
        self._seq += 1

    def schedule_after(self, delay: float, action: Action) -> None:
        self.schedule_at(self.now() + float(delay), action)

    def process(self) -> None:
        """Fire every callback due at the start of this pass.

        Callbacks scheduled by a firing callback land in `_pending` after the
        due snapshot was taken, so they wait for the next pass. An exception
        raised by an action propagates; whatever already fired is still
        swept so it never fires twice.
        """
        if not self._pending:
            return
        now = self.now()
        due = sorted(
            (cb for cb in self._pending if cb.due_at <= now),
            key=lambda cb: (cb.due_at, cb.seq),
        )
        if not due:
            return
        try:
            for cb in due:
                cb.fired = True
                cb.action()
        finally:
            self._sweep()

    def next_due_at(self) -> Optional[float]:
        if not self._pending:
            return None
        return min(cb.due_at for cb in self._pending)

    def _sweep(self) -> None:
        # Swap-remove: move the tail into each fired slot.
        pending = self._pending
        i = 0
        while i < len(pending):
            if pending[i].fired:
                last = pending.pop()
                if i < len(pending):
                    pending[i] = last
                continue
            i += 1
