"""CHIP-8 delay and sound timers."""

import jax.numpy as jnp
from chipjax.state import EmulatorState


def _count_down(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer)


def tick(state: EmulatorState) -> EmulatorState:
    """Decrement both timers once, stopping at zero.

    Called by the host at the timer rate (60 Hz), never by instructions.
    """
    return state.replace(
        delay_timer=_count_down(state.delay_timer),
        sound_timer=_count_down(state.sound_timer),
    )


def sound_active(state: EmulatorState) -> jnp.ndarray:
    """Whether the host should be sounding its tone."""
    return state.sound_timer > 0
