from __future__ import annotations

import pytest

from fastread.config import word_delay_ms
from fastread.diagnostics import DiagnosticsState
from fastread.playback import PlaybackController, PlaybackState
from fastread.reactor import Reactor


def _controller(reactor: Reactor, **state_kwargs) -> PlaybackController:
    state = PlaybackState(**state_kwargs)
    return PlaybackController(reactor, state, DiagnosticsState())


def test_240_wpm_gives_250ms_delay() -> None:
    assert word_delay_ms(240) == 250
    assert word_delay_ms(60000) == 1
    with pytest.raises(ValueError):
        word_delay_ms(0)


def test_tick_advances_then_pause_holds_position(reactor: Reactor) -> None:
    ctl = _controller(reactor, position=0, paused=False, words_per_minute=240, dirty=False)

    ctl.tick()
    assert ctl.state.position == 1
    assert ctl.state.dirty is True
    assert ctl.diagnostics.action_count == 1

    ctl.state.dirty = False
    ctl.toggle_pause()
    ctl.tick()
    assert ctl.state.position == 1
    assert ctl.state.dirty is False
    assert ctl.diagnostics.action_count == 1


def test_tick_rearms_even_while_paused(clock, reactor: Reactor) -> None:
    ctl = _controller(reactor, paused=True, words_per_minute=240)
    ctl.tick()
    assert len(reactor) == 1
    assert reactor.next_due_at() == pytest.approx(clock.now + 0.25)


def test_start_enters_paused_and_warms_up(clock, reactor: Reactor) -> None:
    ctl = _controller(reactor, paused=False)
    ctl.start()
    assert ctl.state.paused is True
    assert reactor.next_due_at() == pytest.approx(clock.now + 1.0)


def test_pacing_through_reactor(clock, reactor: Reactor) -> None:
    ctl = _controller(reactor, words_per_minute=240)
    ctl.start()
    ctl.toggle_pause()

    clock.advance(1.0)
    reactor.process()
    assert ctl.state.position == 1

    for expected in (2, 3, 4):
        clock.advance(0.25)
        reactor.process()
        assert ctl.state.position == expected
    assert len(reactor) == 1


def test_rearm_is_measured_from_now(clock, reactor: Reactor) -> None:
    ctl = _controller(reactor, paused=False, words_per_minute=240)
    ctl.start()
    ctl.toggle_pause()
    clock.advance(1.7)
    reactor.process()
    assert reactor.next_due_at() == pytest.approx(clock.now + 0.25)


def test_toggle_pause_twice_without_ticks_keeps_position(reactor: Reactor) -> None:
    ctl = _controller(reactor, position=7, paused=False)
    ctl.toggle_pause()
    assert ctl.state.paused is True
    ctl.toggle_pause()
    assert ctl.state.paused is False
    assert ctl.state.position == 7
    assert len(reactor) == 0


def test_step_back_clamps_at_zero(reactor: Reactor) -> None:
    ctl = _controller(reactor, position=0, dirty=False)
    ctl.step_back()
    assert ctl.state.position == 0
    assert ctl.state.dirty is False

    ctl.step_forward()
    ctl.step_forward()
    assert ctl.state.position == 2
    assert ctl.state.dirty is True
    ctl.step_back()
    assert ctl.state.position == 1


def test_manual_steps_do_not_count_as_actions(reactor: Reactor) -> None:
    ctl = _controller(reactor)
    ctl.step_forward()
    ctl.step_back()
    assert ctl.diagnostics.action_count == 0


def test_rate_change_applies_at_next_tick_boundary(clock, reactor: Reactor) -> None:
    ctl = _controller(reactor, paused=False, words_per_minute=240)
    ctl.tick()
    ctl.set_words_per_minute(120)
    assert reactor.next_due_at() == pytest.approx(clock.now + 0.25)

    clock.advance(0.25)
    reactor.process()
    assert reactor.next_due_at() == pytest.approx(clock.now + 0.5)


def test_non_positive_rates_are_rejected(reactor: Reactor) -> None:
    with pytest.raises(ValueError):
        _controller(reactor, words_per_minute=0)
    ctl = _controller(reactor)
    with pytest.raises(ValueError):
        ctl.set_words_per_minute(-5)
    assert ctl.state.words_per_minute == 240
