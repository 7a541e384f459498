"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipjax import create_state, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state positioned at the program start."""
    return create_state().replace(pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16))


@pytest.fixture
def vip_state():
    """Provide a fresh state with the COSMAC VIP quirks enabled."""
    return create_state(shift_uses_vy=True, memory_increments_index=True).replace(
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16)
    )


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program_bytes(*words):
    """Assemble 16-bit instruction words into big-endian program bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)
