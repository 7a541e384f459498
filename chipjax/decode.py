"""CHIP-8 instruction decoding."""

import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of one instruction word."""
    raw: int
    opcode: int  # leading nibble, selects the handler group
    x: int       # register index, low nibble of the high byte
    y: int       # register index, high nibble of the low byte
    n: int       # trailing nibble
    nn: int      # low byte
    nnn: int     # 12-bit address


def pack_word(high: jnp.ndarray, low: jnp.ndarray) -> jnp.ndarray:
    """Join two memory bytes into a big-endian instruction word."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Pure: works on Python ints and traced arrays alike and never touches
    machine state.
    """
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction >> 12) & 0xF,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0xF,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )
