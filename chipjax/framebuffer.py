"""Read-only framebuffer access for host renderers."""

import numpy as np

from chipjax.state import EmulatorState


def read_framebuffer(state: EmulatorState) -> np.ndarray:
    """Copy the display out as a read-only (height, width) boolean array.

    The emulator stores pixels as ``display[x, y]``; renderers usually want
    rows first, so the copy is transposed to ``pixels[y, x]``.
    """
    pixels = np.array(state.display, dtype=np.bool_).T
    pixels.flags.writeable = False
    return pixels


def framebuffer_to_text(state: EmulatorState, on: str = "#", off: str = ".") -> str:
    """Render the display as one text line per pixel row."""
    pixels = read_framebuffer(state)
    return "\n".join("".join(on if lit else off for lit in row) for row in pixels)
