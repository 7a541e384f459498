"""Tests for the stateful host driver."""

import io

import numpy as np
import pytest
from chipjax import CycleStatus, ErrorKind, StackUnderflowError, SCREEN_HEIGHT, SCREEN_WIDTH
from chipjax.logging import EmulatorLogger
from chipjax.machine import Chip8Machine
from conftest import program_bytes


@pytest.fixture
def quiet_logger():
    return EmulatorLogger(log_level="CRITICAL", show_timestamps=False)


# Draw digit 0 at (0, 0), then spin
DRAW_ZERO = program_bytes(0x6000, 0xF029, 0xD005, 0x1206)


def test_machine_runs_frames(quiet_logger):
    machine = Chip8Machine(DRAW_ZERO, logger=quiet_logger)

    status = machine.run_frame()

    assert status == CycleStatus.RUNNING
    assert machine.framebuffer.shape == (SCREEN_HEIGHT, SCREEN_WIDTH)
    assert machine.framebuffer[0, :4].all()
    assert machine.error is None
    machine.check()


def test_instructions_per_frame(quiet_logger):
    machine = Chip8Machine(DRAW_ZERO, instruction_frequency=600, timer_frequency=60, logger=quiet_logger)
    assert machine.instructions_per_frame == 10


@pytest.mark.parametrize("instruction_frequency,timer_frequency", [(0, 60), (700, 0), (30, 60)])
def test_bad_frequencies(quiet_logger, instruction_frequency, timer_frequency):
    with pytest.raises(ValueError):
        Chip8Machine(
            DRAW_ZERO,
            instruction_frequency=instruction_frequency,
            timer_frequency=timer_frequency,
            logger=quiet_logger,
        )


def test_machine_loads_rom_file(tmp_path, quiet_logger):
    rom = tmp_path / "draw.ch8"
    rom.write_bytes(DRAW_ZERO)

    machine = Chip8Machine(str(rom), logger=quiet_logger)
    machine.run_frame()

    assert machine.rom_name == str(rom)
    assert machine.framebuffer.any()


def test_wait_for_key_status(quiet_logger):
    machine = Chip8Machine(program_bytes(0xF50A, 0x1202), logger=quiet_logger)

    assert machine.run_frame() == CycleStatus.WAITING_FOR_KEY

    machine.press_key(0x9)
    assert machine.run_frame() == CycleStatus.RUNNING
    assert machine.state.V[5] == 0x9

    machine.release_key(0x9)
    assert not machine.state.keypad.any()


def test_halt_is_reported_once(capsys):
    logger = EmulatorLogger(log_level="ERROR", show_timestamps=False)
    machine = Chip8Machine(program_bytes(0x00EE), logger=logger)

    assert machine.run_frame() == CycleStatus.HALTED
    assert machine.run_frame() == CycleStatus.HALTED

    output = capsys.readouterr().out
    assert output.count("Machine halted") == 1
    assert "StackUnderflowError" in output
    assert machine.status == CycleStatus.HALTED
    with pytest.raises(StackUnderflowError):
        machine.check()


def test_reset_restores_power_on_state(quiet_logger):
    machine = Chip8Machine(program_bytes(0x00EE), logger=quiet_logger)
    machine.run_frame()
    assert int(machine.state.error) == ErrorKind.STACK_UNDERFLOW

    machine.reset()

    assert machine.status == CycleStatus.RUNNING
    assert int(machine.state.pc) == 0
    assert isinstance(machine.framebuffer, np.ndarray)


def test_quirks_reach_state(quiet_logger):
    machine = Chip8Machine(DRAW_ZERO, shift_uses_vy=True, memory_increments_index=True, logger=quiet_logger)
    assert machine.state.shift_uses_vy
    assert machine.state.memory_increments_index


def test_rom_load_is_logged():
    stream = io.StringIO()
    logger = EmulatorLogger(show_timestamps=False, stream=stream)

    Chip8Machine(DRAW_ZERO, logger=logger)

    assert "Loaded <8 bytes>: 8 bytes at 0x200" in stream.getvalue()
