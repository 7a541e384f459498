"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction
from chipjax.constants import ADDRESS_MASK, FONT_GLYPH_SIZE, FONT_START, NUM_REGISTERS
from chipjax.errors import ErrorKind, error_if


def _memory_index(state: EmulatorState, count: int) -> jnp.ndarray:
    """Addresses I, I+1, ... wrapped to 12 bits."""
    return (jnp.astype(state.I & ADDRESS_MASK, jnp.int32) + jnp.arange(count)) & ADDRESS_MASK


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Never blocks: with no key down the program counter is rewound so the
    same instruction runs again next cycle, and ``waiting`` is raised.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=state.pc - 2, waiting=jnp.ones((), dtype=jnp.bool_))

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register. VF is untouched."""
    return state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(FONT_START + digit * FONT_GLYPH_SIZE, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[_memory_index(state, 3)].set(digits)
    return state.replace(memory=new_memory)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    if state.memory_increments_index:
        return state.I + jnp.astype(instruction.x, jnp.uint16) + 1
    return state.I


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    indices = _memory_index(state, NUM_REGISTERS)
    new_memory_values = jnp.where(register_mask, state.V, state.memory[indices])
    new_memory = state.memory.at[indices].set(new_memory_values)
    return state.replace(memory=new_memory, I=_advance_index(state, instruction))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    memory_values = state.memory[_memory_index(state, NUM_REGISTERS)]
    new_V = jnp.where(register_mask, memory_values, state.V)
    return state.replace(V=new_V, I=_advance_index(state, instruction))


# Low byte -> handler, in switch order
MISC_HANDLERS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}
MISC_OPCODES = jnp.array(list(MISC_HANDLERS), dtype=jnp.uint16)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    matches = MISC_OPCODES == instruction.nn
    return jax.lax.switch(
        jnp.argmax(matches),
        list(MISC_HANDLERS.values()),
        state, instruction
    )


def validate_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> jnp.ndarray:
    return error_if(~jnp.any(MISC_OPCODES == instruction.nn), ErrorKind.INVALID_OPCODE)
