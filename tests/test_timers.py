"""Tests for delay and sound timers."""

import jax.numpy as jnp
from chipjax import tick
from chipjax.timers import sound_active


def with_timers(state, delay, sound):
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


def test_tick_decrements_both(fresh_state):
    state = tick(with_timers(fresh_state, 10, 3))
    assert state.delay_timer == 9
    assert state.sound_timer == 2


def test_tick_stops_at_zero(fresh_state):
    """Timers never wrap below zero."""
    state = with_timers(fresh_state, 2, 0)
    for _ in range(5):
        state = tick(state)
    assert state.delay_timer == 0
    assert state.sound_timer == 0


def test_tick_touches_nothing_else(fresh_state):
    state = with_timers(fresh_state, 1, 1)
    ticked = tick(state)
    assert ticked.pc == state.pc
    assert jnp.array_equal(ticked.V, state.V)
    assert jnp.array_equal(ticked.memory, state.memory)


def test_sound_active(fresh_state):
    state = with_timers(fresh_state, 0, 1)
    assert bool(sound_active(state))
    assert not bool(sound_active(tick(state)))
