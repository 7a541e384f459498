"""Fatal machine conditions.

Inside compiled code a fault is a value: the offending instruction leaves the
state untouched except for ``error``, and every later cycle is a no-op. Host
code turns that value into one of the exceptions below.
"""

from enum import IntEnum
from typing import Optional

import jax.numpy as jnp


class ErrorKind(IntEnum):
    """Error codes stored in ``EmulatorState.error``."""
    NONE = 0
    INSTRUCTION_FETCH_OVERFLOW = 1
    INVALID_OPCODE = 2
    STACK_OVERFLOW = 3
    STACK_UNDERFLOW = 4
    INVALID_KEY_INDEX = 5


def error_if(condition, kind: ErrorKind) -> jnp.ndarray:
    """Return ``kind`` where ``condition`` holds, ``ErrorKind.NONE`` otherwise."""
    return jnp.where(condition, jnp.uint8(kind.value), jnp.uint8(ErrorKind.NONE.value))


def first_error(*errors) -> jnp.ndarray:
    """Combine error codes, keeping the first nonzero one."""
    result = jnp.uint8(ErrorKind.NONE.value)
    for error in reversed(errors):
        result = jnp.where(error != ErrorKind.NONE.value, error, result)
    return result


def no_error(state, instruction) -> jnp.ndarray:
    """Validator for instruction groups that cannot fault."""
    return jnp.uint8(ErrorKind.NONE.value)


class Chip8Error(Exception):
    """Base class for unrecoverable CHIP-8 program faults."""

    kind: ErrorKind = None

    def __init__(self, message: str, pc: Optional[int] = None, instruction: Optional[int] = None):
        super().__init__(message)
        self.pc = pc
        self.instruction = instruction


class InstructionFetchOverflowError(Chip8Error):
    kind = ErrorKind.INSTRUCTION_FETCH_OVERFLOW


class InvalidOpcodeError(Chip8Error):
    kind = ErrorKind.INVALID_OPCODE


class StackOverflowError(Chip8Error):
    kind = ErrorKind.STACK_OVERFLOW


class StackUnderflowError(Chip8Error):
    kind = ErrorKind.STACK_UNDERFLOW


class InvalidKeyIndexError(Chip8Error):
    kind = ErrorKind.INVALID_KEY_INDEX


class ProgramTooLargeError(Chip8Error):
    """Raised by the loader when a program does not fit in memory."""


_ERROR_CLASSES = {
    cls.kind: cls
    for cls in (
        InstructionFetchOverflowError,
        InvalidOpcodeError,
        StackOverflowError,
        StackUnderflowError,
        InvalidKeyIndexError,
    )
}

_MESSAGES = {
    ErrorKind.INSTRUCTION_FETCH_OVERFLOW: "instruction fetch past end of memory",
    ErrorKind.INVALID_OPCODE: "invalid opcode",
    ErrorKind.STACK_OVERFLOW: "call stack overflow",
    ErrorKind.STACK_UNDERFLOW: "return with empty call stack",
    ErrorKind.INVALID_KEY_INDEX: "key index out of range",
}


def error_from_state(state) -> Optional[Chip8Error]:
    """Build the exception matching ``state.error``, or None if running."""
    kind = ErrorKind(int(state.error))
    if kind == ErrorKind.NONE:
        return None

    pc = int(state.pc)
    instruction = int(state.instruction)
    if kind == ErrorKind.INSTRUCTION_FETCH_OVERFLOW:
        message = f"{_MESSAGES[kind]} at pc=0x{pc:04X}"
    else:
        # fetch already advanced pc past the faulting instruction
        pc = (pc - 2) & 0xFFFF
        message = f"{_MESSAGES[kind]} 0x{instruction:04X} at pc=0x{pc:03X}"
    return _ERROR_CLASSES[kind](message, pc=pc, instruction=instruction)


def raise_for_error(state) -> None:
    """Raise the pending ``Chip8Error`` of a halted state, if any."""
    error = error_from_state(state)
    if error is not None:
        raise error
