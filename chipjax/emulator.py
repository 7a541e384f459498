"""Main CHIP-8 emulator execution engine."""

import os
from enum import IntEnum
from functools import partial
from typing import Union

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import decode, pack_word
from chipjax.constants import MEMORY_SIZE, PROGRAM_START
from chipjax.errors import ErrorKind, ProgramTooLargeError, error_if, no_error
from chipjax.timers import tick
from chipjax.instructions.system import execute_system_instruction, validate_system_instruction
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key,
    validate_call, validate_skip_if_key,
)
from chipjax.instructions.alu import execute_alu_operation, validate_alu_operation
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import execute_misc_instruction, validate_misc_instruction


class CycleStatus(IntEnum):
    """Outcome of a run-cycle, as seen by the host loop."""
    RUNNING = 0
    WAITING_FOR_KEY = 1
    HALTED = 2


# Indexed by opcode class (leading nibble)
HANDLERS = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]

VALIDATORS = [
    validate_system_instruction,
    no_error,
    validate_call,
    no_error,
    no_error,
    no_error,
    no_error,
    no_error,
    validate_alu_operation,
    no_error,
    no_error,
    no_error,
    no_error,
    no_error,
    validate_skip_if_key,
    validate_misc_instruction,
]


def is_halted(state: EmulatorState) -> jnp.ndarray:
    return state.error != ErrorKind.NONE.value


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    A faulting instruction changes nothing but ``error`` and ``instruction``;
    a halted state is returned unchanged.
    """
    instruction = jnp.asarray(instruction, dtype=jnp.uint16)
    decoded_instruction = decode(instruction)
    halted = is_halted(state)

    error = jnp.where(
        halted,
        state.error,
        jax.lax.switch(decoded_instruction.opcode, VALIDATORS, state, decoded_instruction),
    )

    def run(state):
        state = state.replace(instruction=instruction, waiting=jnp.zeros((), dtype=jnp.bool_))
        return jax.lax.switch(decoded_instruction.opcode, HANDLERS, state, decoded_instruction)

    def fail(state):
        return state.replace(
            error=error,
            instruction=jnp.where(halted, state.instruction, instruction),
        )

    return jax.lax.cond(error == ErrorKind.NONE.value, run, fail, state)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Fetch next instruction from memory and advance the program counter."""
    overflow = jnp.astype(state.pc, jnp.int32) + 1 >= MEMORY_SIZE
    address = jnp.where(overflow, 0, state.pc)
    instruction = pack_word(state.memory[address], state.memory[address + 1])

    halted = is_halted(state)
    error = jnp.where(halted, state.error, error_if(overflow, ErrorKind.INSTRUCTION_FETCH_OVERFLOW))
    advanced = jnp.where(error == ErrorKind.NONE.value, state.pc + 2, state.pc)
    return state.replace(pc=advanced, error=error), instruction


def cycle_status(state: EmulatorState) -> jnp.ndarray:
    """Derive the ``CycleStatus`` code of a state."""
    return jnp.where(
        is_halted(state),
        CycleStatus.HALTED.value,
        jnp.where(state.waiting, CycleStatus.WAITING_FOR_KEY.value, CycleStatus.RUNNING.value),
    )


def step(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Run one fetch-decode-execute cycle and report its status."""
    state, instruction = fetch(state)
    state = execute(state, instruction)
    return state, cycle_status(state)


def step_and_tick(state: EmulatorState) -> tuple[EmulatorState, jnp.ndarray]:
    """Run one cycle followed by one timer tick."""
    state, status = step(state)
    return tick(state), status


def _scan_step(state, _):
    state, status = step(state)
    return state, status


@partial(jax.jit, static_argnums=1)
def run_cycles(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` cycles. Cycles after a fault are no-ops."""
    state, _ = jax.lax.scan(_scan_step, state, length=n)
    return state


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` cycles, then tick the timers once."""
    return tick(run_cycles(state, n))


def load_rom(
    state: EmulatorState,
    source: Union[bytes, bytearray, memoryview, str, os.PathLike],
    address: int = PROGRAM_START,
) -> EmulatorState:
    """Copy a program into memory starting at ``address`` (0x200 by default).

    Args:
        state: State to load into
        source: Raw program bytes, or a path to a ROM file
        address: First memory address of the program

    Returns:
        State with the program in memory

    Raises:
        ValueError: If ``address`` lies outside memory
        ProgramTooLargeError: If the program runs past the end of memory
    """
    if not 0 <= address < MEMORY_SIZE:
        raise ValueError(f"Load address 0x{address:X} outside memory (0x000-0x{MEMORY_SIZE - 1:03X})")

    if isinstance(source, (bytes, bytearray, memoryview)):
        rom_data = bytes(source)
    else:
        with open(source, 'rb') as f:
            rom_data = f.read()

    if address + len(rom_data) > MEMORY_SIZE:
        raise ProgramTooLargeError(
            f"Program of {len(rom_data)} bytes does not fit at 0x{address:03X} "
            f"({MEMORY_SIZE - address} bytes available)"
        )
    if not rom_data:
        return state

    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[address:address + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)
