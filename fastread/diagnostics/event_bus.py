from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List

Handler = Callable[[Dict[str, Any]], None]


class EventBus:
    """Minimal publish/subscribe helper used by the monitor and the app."""

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Handler]] = defaultdict(list)

    def on(self, event_type: str, callback: Handler) -> None:
        self._subs[event_type].append(callback)

    def emit(self, event_type: str, **payload: Any) -> None:
        for callback in list(self._subs[event_type]):
            callback({"type": event_type, **payload})
