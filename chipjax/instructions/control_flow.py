"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.constants import NUM_KEYS
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.errors import ErrorKind, error_if, first_error
from chipjax.stack import is_full, push

SKIP_IF_PRESSED = 0x9E
SKIP_IF_RELEASED = 0xA1


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def validate_call(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    return error_if(is_full(state.stack), ErrorKind.STACK_OVERFLOW)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0.

    The target is not masked; a target past the end of memory faults on the
    next fetch.
    """
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jump_address)


execute_skip_if_key = make_skip_instruction(
    # EX9E skips on pressed, EXA1 on released
    lambda state, inst: state.keypad[state.V[inst.x] & 0xF] ^ (inst.nn == SKIP_IF_RELEASED)
)


def validate_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    known = (instruction.nn == SKIP_IF_PRESSED) | (instruction.nn == SKIP_IF_RELEASED)
    return first_error(
        error_if(~known, ErrorKind.INVALID_OPCODE),
        error_if(state.V[instruction.x] >= NUM_KEYS, ErrorKind.INVALID_KEY_INDEX),
    )
