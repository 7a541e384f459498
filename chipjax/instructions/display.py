"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import ADDRESS_MASK, SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - XOR an 8xN sprite from memory at I onto the screen at (VX, VY).

    Every pixel wraps independently on both axes. VF is set when any lit
    pixel is turned off.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    # Offset of each screen pixel inside the sprite, measured with wraparound
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < instruction.n)

    base = jnp.astype(state.I & ADDRESS_MASK, jnp.int32)
    sprite_bytes = state.memory[(base + row_offset) & ADDRESS_MASK]
    bit_index = jnp.clip(SPRITE_WIDTH - 1 - col_offset, 0, SPRITE_WIDTH - 1)
    sprite = (((sprite_bytes >> bit_index) & 1) == 1) & in_sprite

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[15].set(jnp.astype(jnp.any(state.display & sprite), jnp.uint8))
    )
