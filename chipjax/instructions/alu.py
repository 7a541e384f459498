"""CHIP-8 ALU operations (8xxx).

Each operation maps (VX, VY) to (result, flag). Operands arrive as int32 so
that sums and differences can be inspected before wrapping to a byte.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.errors import ErrorKind, error_if

NO_FLAG = 0


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, NO_FLAG


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, NO_FLAG


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, NO_FLAG


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, NO_FLAG


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    total = vx + vy
    return total & 0xFF, total > 0xFF


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    return (vx - vy) & 0xFF, vx > vy


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    return (vy - vx) & 0xFF, vy > vx


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return (vx << 1) & 0xFF, (vx >> 7) & 1


# Indexed by the trailing nibble
VALID_OPS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=jnp.bool_)
WRITES_FLAG = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=jnp.bool_)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = jnp.astype(state.V[instruction.x], jnp.int32)
    vy = jnp.astype(state.V[instruction.y], jnp.int32)

    def _shifted(op):
        def shift(vx, vy):
            # COSMAC VIP shifts VY into VX
            return op(vy, vy) if state.shift_uses_vy else op(vx, vy)
        return shift

    def _as_pair(op):
        def run(vx, vy):
            result, flag = op(vx, vy)
            return jnp.astype(result, jnp.uint8), jnp.astype(flag, jnp.uint8)
        return run

    result, flag = jax.lax.switch(
        # Map 0..7 to themselves and 0xE to 8
        jnp.where(instruction.n == 0xE, 8, jnp.minimum(instruction.n, 7)),
        [_as_pair(op) for op in (
            alu_set, alu_or, alu_and, alu_xor, alu_add,
            alu_sub_xy, _shifted(alu_shift_right), alu_sub_yx, _shifted(alu_shift_left),
        )],
        vx, vy
    )

    new_V = state.V.at[instruction.x].set(result)
    # VF is written last so it holds the flag even when X is F
    new_V = new_V.at[15].set(jnp.where(WRITES_FLAG[instruction.n], flag, new_V[15]))
    return state.replace(V=new_V)


def validate_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    return error_if(~VALID_OPS[instruction.n], ErrorKind.INVALID_OPCODE)
