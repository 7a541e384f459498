"""Headless command-line runner.

    python -m chipjax rom=roms/pong.ch8 frames=300 keys=[5]
"""

import sys
from typing import Any, Dict

import hydra
from omegaconf import DictConfig, OmegaConf
from tqdm import tqdm

from chipjax.emulator import CycleStatus
from chipjax.errors import Chip8Error
from chipjax.framebuffer import framebuffer_to_text
from chipjax.logging import EmulatorLogger
from chipjax.machine import Chip8Machine


def run_headless(config: Dict[str, Any]) -> Chip8Machine:
    """Run a ROM for a fixed number of frames without a window.

    Args:
        config: Plain configuration dictionary (see ``conf/config.yaml``)

    Returns:
        The machine after the run

    Raises:
        Chip8Error: If the program faulted
    """
    logger = EmulatorLogger(log_level=config.get("log_level", "INFO"))
    logger.log_config(config)

    quirks = config.get("quirks", {})
    machine = Chip8Machine(
        rom=config["rom"],
        load_address=config.get("load_address", 0x200),
        instruction_frequency=config.get("instruction_frequency", 700),
        timer_frequency=config.get("timer_frequency", 60),
        shift_uses_vy=quirks.get("shift_uses_vy", False),
        memory_increments_index=quirks.get("memory_increments_index", False),
        seed=config.get("seed", 0),
        logger=logger,
    )
    for key in config.get("keys", []):
        machine.press_key(key)

    frames = range(config.get("frames", 600))
    if config.get("progress", True):
        frames = tqdm(frames, desc="Running", unit="frame")

    for frame in frames:
        status = machine.run_frame()
        logger.log_frame(frame, status.name)
        if status == CycleStatus.HALTED:
            break

    logger.log_run_end(machine.state, machine.error)
    if config.get("show_display", True):
        print(framebuffer_to_text(machine.state))

    machine.check()
    return machine


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    config = OmegaConf.to_container(cfg, resolve=True)
    try:
        run_headless(config)
    except Chip8Error:
        sys.exit(1)


if __name__ == "__main__":
    main()
