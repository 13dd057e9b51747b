import os

# No window is ever opened by the tests, but keep SDL off any real display.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from mandelbrot_explorer.renderer import MandelbrotRenderer


@pytest.fixture
def small_renderer():
    return MandelbrotRenderer(resolution=8)
