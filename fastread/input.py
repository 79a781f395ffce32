"""Input events and their translation into playback transitions.

Only the *release* of a key triggers anything. Holding a key down therefore
never repeats a step.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Union

from .playback import PlaybackController

_logger = logging.getLogger(__name__)


class Key(enum.Enum):
    ESCAPE = "escape"
    SPACE = "space"
    LEFT = "left"
    RIGHT = "right"
    OTHER = "other"


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class KeyPressed:
    key: Key


@dataclass(frozen=True)
class KeyReleased:
    key: Key


@dataclass(frozen=True)
class Other:
    kind: str = ""


InputEvent = Union[Quit, KeyPressed, KeyReleased, Other]


class InputSource(Protocol):
    def wait_event(self, timeout: float) -> Optional[InputEvent]:
        """Block up to `timeout` seconds; return None when nothing arrived."""
        ...


def dispatch(event: InputEvent, controller: PlaybackController) -> None:
    state = controller.state
    if isinstance(event, Quit):
        _logger.info("Quit")
        state.running = False
    elif isinstance(event, KeyReleased):
        if event.key is Key.ESCAPE:
            state.running = False
        elif event.key is Key.SPACE:
            controller.toggle_pause()
        elif event.key is Key.LEFT:
            controller.step_back()
        elif event.key is Key.RIGHT:
            controller.step_forward()
