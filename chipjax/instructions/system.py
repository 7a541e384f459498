"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.errors import ErrorKind, error_if, first_error
from chipjax.stack import is_empty, pop

CLEAR_SCREEN = 0x00E0
RETURN = 0x00EE


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions.

    Validation has already rejected every word other than 00E0 and 00EE.
    """
    return jax.lax.cond(
        instruction.raw == CLEAR_SCREEN,
        execute_clear_screen,
        execute_return,
        state, instruction
    )


def validate_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    """Only 00E0 and 00EE exist; a return needs a non-empty stack."""
    is_return = instruction.raw == RETURN
    return first_error(
        error_if(~is_return & (instruction.raw != CLEAR_SCREEN), ErrorKind.INVALID_OPCODE),
        error_if(is_return & is_empty(state.stack), ErrorKind.STACK_UNDERFLOW),
    )
