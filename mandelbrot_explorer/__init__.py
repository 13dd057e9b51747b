"""
Mandelbrot Set Explorer Package

An interactive Mandelbrot set explorer using Pygame for display and
Numba for JIT-compiled, multi-threaded computation.

Quick Start:
    from mandelbrot_explorer import run
    run()

Or from command line:
    python -m mandelbrot_explorer

Package Structure:
    - compute.py: JIT-compiled escape-time, mapping and coloring kernels
    - colormaps.py: Color mappings (grayscale, hue)
    - renderer.py: View state and full-field recompute/render
    - config.py: settings.json loading
    - app.py: Main application and event loop

Controls:
    - Arrows: Pan
    - X / Z: Zoom in / out
    - + / -: Raise / lower the iteration budget
    - C: Next color mapping
    - R: Reset to default view
    - ESC: Quit
"""

from .colormaps import COLORMAPS, ColorMapping, get_colormap, list_colormap_names
from .compute import escape_time
from .config import load_settings
from .renderer import Direction, MandelbrotRenderer, Viewport
from .app import run, MandelbrotApp

__version__ = "1.0.0"
__all__ = [
    "run",
    "MandelbrotApp",
    "MandelbrotRenderer",
    "Viewport",
    "Direction",
    "escape_time",
    "COLORMAPS",
    "ColorMapping",
    "get_colormap",
    "list_colormap_names",
    "load_settings",
]
