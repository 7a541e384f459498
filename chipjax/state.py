"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chipjax.constants import (
    BOOT_CODE, BOOT_START, FONT_DATA, FONT_START, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE,
)


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


class StackState(PyTreeNode):
    """Call stack of return addresses."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _zeros((), jnp.uint8)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Quirk flags are static fields: changing one produces a differently
    compiled emulator rather than a runtime branch.
    """
    rng: jax.Array
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(BOOT_START, dtype=jnp.uint16))
    display: jnp.ndarray = _zeros((SCREEN_WIDTH, SCREEN_HEIGHT), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    error: jnp.ndarray = _zeros((), jnp.uint8)
    waiting: jnp.ndarray = _zeros((), jnp.bool_)
    instruction: jnp.ndarray = _zeros((), jnp.uint16)
    shift_uses_vy: bool = field(pytree_node=False, default=False)
    memory_increments_index: bool = field(pytree_node=False, default=False)


def create_state(
    rng: jax.Array = None,
    shift_uses_vy: bool = False,
    memory_increments_index: bool = False,
) -> EmulatorState:
    """Create initial emulator state with boot jump and font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(
        rng,
        shift_uses_vy=shift_uses_vy,
        memory_increments_index=memory_increments_index,
    )
    memory = state.memory.at[BOOT_START:BOOT_START + len(BOOT_CODE)].set(BOOT_CODE)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA)
    return state.replace(memory=memory)
