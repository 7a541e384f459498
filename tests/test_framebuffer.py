"""Tests for host framebuffer access."""

import numpy as np
import pytest
from chipjax import read_framebuffer, framebuffer_to_text, SCREEN_HEIGHT, SCREEN_WIDTH


def test_framebuffer_shape_and_orientation(fresh_state):
    """Pixels come out rows first."""
    state = fresh_state.replace(display=fresh_state.display.at[10, 3].set(True))

    pixels = read_framebuffer(state)

    assert pixels.shape == (SCREEN_HEIGHT, SCREEN_WIDTH)
    assert pixels.dtype == np.bool_
    assert pixels[3, 10]
    assert pixels.sum() == 1


def test_framebuffer_is_read_only(fresh_state):
    pixels = read_framebuffer(fresh_state)
    with pytest.raises(ValueError):
        pixels[0, 0] = True


def test_framebuffer_to_text(fresh_state):
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True).at[63, 31].set(True))

    lines = framebuffer_to_text(state).splitlines()

    assert len(lines) == SCREEN_HEIGHT
    assert all(len(line) == SCREEN_WIDTH for line in lines)
    assert lines[0] == "#" + "." * 63
    assert lines[-1] == "." * 63 + "#"
    assert framebuffer_to_text(state, on="X", off=" ").splitlines()[0].startswith("X ")
