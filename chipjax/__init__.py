"""CHIP-8 emulator package."""

from chipjax.state import EmulatorState, StackState, create_state
from chipjax.emulator import (
    CycleStatus, cycle_status, execute, fetch, load_rom, run_cycles, run_frame, step, step_and_tick,
)
from chipjax.decode import DecodedInstruction, decode
from chipjax.timers import tick
from chipjax.keypad import set_key, set_keypad
from chipjax.framebuffer import read_framebuffer, framebuffer_to_text
from chipjax.errors import (
    ErrorKind, Chip8Error, InstructionFetchOverflowError, InvalidOpcodeError, StackOverflowError,
    StackUnderflowError, InvalidKeyIndexError, ProgramTooLargeError, error_from_state, raise_for_error,
)
from chipjax.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "CycleStatus",
    "cycle_status",
    "fetch",
    "execute",
    "step",
    "step_and_tick",
    "run_cycles",
    "run_frame",
    "load_rom",
    "tick",
    "set_key",
    "set_keypad",
    "read_framebuffer",
    "framebuffer_to_text",
    "DecodedInstruction",
    "decode",
    "ErrorKind",
    "Chip8Error",
    "InstructionFetchOverflowError",
    "InvalidOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "InvalidKeyIndexError",
    "ProgramTooLargeError",
    "error_from_state",
    "raise_for_error",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "NUM_KEYS",
]
