"""Keypad writer for the host input collaborator.

The core only reads ``state.keypad``; these functions are the single way
to change it, each returning a new state.
"""

from typing import Sequence

import jax.numpy as jnp
from chipjax.constants import NUM_KEYS
from chipjax.state import EmulatorState


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Mark one key as pressed or released."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index {key} outside 0x0-0x{NUM_KEYS - 1:X}")
    return state.replace(keypad=state.keypad.at[key].set(bool(pressed)))


def set_keypad(state: EmulatorState, keys: Sequence[bool]) -> EmulatorState:
    """Replace the whole keypad in one swap."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key flags, got shape {keypad.shape}")
    return state.replace(keypad=keypad)


def pressed_keys(state: EmulatorState) -> list[int]:
    """Indices of the keys currently held down."""
    return [key for key in range(NUM_KEYS) if bool(state.keypad[key])]
