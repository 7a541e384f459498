"""Stateful host driver that runs a ROM frame by frame."""

import os
from typing import Optional, Union

import jax
import numpy as np

from chipjax.constants import PROGRAM_START
from chipjax.emulator import CycleStatus, cycle_status, load_rom, run_frame
from chipjax.errors import Chip8Error, error_from_state, raise_for_error
from chipjax.framebuffer import read_framebuffer
from chipjax.keypad import set_key
from chipjax.logging import EmulatorLogger
from chipjax.state import EmulatorState, create_state


class Chip8Machine:
    """Stateful host-side driver around the pure emulator core.

    Holds the current ``EmulatorState``, applies key changes between frames
    and runs one jitted frame (a batch of cycles plus one timer tick) per
    call. Faults never raise here; they show up as ``CycleStatus.HALTED``
    and can be raised with :meth:`check`.
    """

    def __init__(
        self,
        rom: Union[bytes, bytearray, str, os.PathLike],
        load_address: int = PROGRAM_START,
        instruction_frequency: int = 700,
        timer_frequency: int = 60,
        shift_uses_vy: bool = False,
        memory_increments_index: bool = False,
        seed: int = 0,
        logger: Optional[EmulatorLogger] = None,
    ):
        """Initialize the machine and load the ROM.

        Args:
            rom: Program bytes or path to a ROM file
            load_address: Address the program is copied to
            instruction_frequency: Instructions executed per second (typically 700)
            timer_frequency: Timer tick rate in Hz (60 on real hardware)
            shift_uses_vy: 8XY6/8XYE shift VY into VX (COSMAC VIP behaviour)
            memory_increments_index: FX55/FX65 advance I past the last register
            seed: Seed for the CXNN random generator
            logger: Logger for load and halt messages
        """
        if instruction_frequency <= 0 or timer_frequency <= 0:
            raise ValueError("instruction_frequency and timer_frequency must be positive")
        if instruction_frequency < timer_frequency:
            raise ValueError(
                f"instruction_frequency ({instruction_frequency}) must be at least "
                f"timer_frequency ({timer_frequency})"
            )

        self.load_address = load_address
        self.instruction_frequency = instruction_frequency
        self.timer_frequency = timer_frequency
        self.shift_uses_vy = shift_uses_vy
        self.memory_increments_index = memory_increments_index
        self.seed = seed
        self.logger = logger or EmulatorLogger()

        if isinstance(rom, (bytes, bytearray)):
            self.rom_data = bytes(rom)
            self.rom_name = f"<{len(self.rom_data)} bytes>"
        else:
            with open(rom, 'rb') as f:
                self.rom_data = f.read()
            self.rom_name = os.fspath(rom)

        self._halt_reported = False
        self.state = self.reset()

    @property
    def instructions_per_frame(self) -> int:
        """Number of instructions executed between two timer ticks."""
        return self.instruction_frequency // self.timer_frequency

    def reset(self) -> EmulatorState:
        """Rebuild the state from scratch and reload the ROM."""
        state = create_state(
            jax.random.PRNGKey(self.seed),
            shift_uses_vy=self.shift_uses_vy,
            memory_increments_index=self.memory_increments_index,
        )
        state = load_rom(state, self.rom_data, self.load_address)
        self.logger.log_rom_loaded(self.rom_name, len(self.rom_data), self.load_address)
        self.state = state
        self._halt_reported = False
        return state

    def press_key(self, key: int):
        self.state = set_key(self.state, key, True)

    def release_key(self, key: int):
        self.state = set_key(self.state, key, False)

    def run_frame(self) -> CycleStatus:
        """Run one frame and return the status after its last cycle."""
        self.state = run_frame(self.state, self.instructions_per_frame)
        status = CycleStatus(int(cycle_status(self.state)))
        if status == CycleStatus.HALTED and not self._halt_reported:
            self.logger.log_halt(self.error)
            self._halt_reported = True
        return status

    @property
    def status(self) -> CycleStatus:
        return CycleStatus(int(cycle_status(self.state)))

    @property
    def framebuffer(self) -> np.ndarray:
        return read_framebuffer(self.state)

    @property
    def error(self) -> Optional[Chip8Error]:
        return error_from_state(self.state)

    def check(self):
        """Raise the pending fault, if the machine has halted."""
        raise_for_error(self.state)
