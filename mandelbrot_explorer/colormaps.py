"""
Colormap definitions for the Mandelbrot explorer.

Each colormap function returns a numpy array of shape (256, 3) with
RGB values (uint8), one entry per normalized intensity. Rendering is a
plain table lookup, so switching colormaps never touches the computed
intensities.

To add a new colormap:
1. Define a create_colormap_xxx() function that returns the color array
2. Add a member to ColorMapping and register it in COLORMAPS
"""

import colorsys
from enum import Enum

import numpy as np


NUM_COLORS = 256  # One entry per 8-bit intensity


class ColorMapping(Enum):
    """The available color mappings, keyed by display name."""

    GRAYSCALE = 'Grayscale'
    HUE = 'Hue'

    @classmethod
    def from_name(cls, name):
        """Look a mapping up by display name, case-insensitively."""
        for mapping in cls:
            if mapping.value.lower() == str(name).lower():
                return mapping
        raise ValueError(
            f"Unknown colormap {name!r}, expected one of {list_colormap_names()}"
        )


def create_colormap_grayscale():
    """
    Grayscale colormap: intensity v -> (v, v, v).

    Simple, classic look. Shows the raw escape-time structure.
    """
    ramp = np.arange(NUM_COLORS, dtype=np.uint8)
    return np.stack([ramp, ramp, ramp], axis=1)


def create_colormap_hue():
    """
    Hue colormap: sweeps once around the color wheel.

    Full saturation and value. The last entry (points that never
    escaped) is black so the set itself stands out.
    """
    colors = np.zeros((NUM_COLORS, 3), dtype=np.uint8)
    for i in range(NUM_COLORS - 1):
        r, g, b = colorsys.hsv_to_rgb(i / NUM_COLORS, 1.0, 1.0)
        colors[i] = [int(round(r * 255)), int(round(g * 255)), int(round(b * 255))]
    return colors


# Registry of all available colormaps.
COLORMAPS = {
    ColorMapping.GRAYSCALE: create_colormap_grayscale,
    ColorMapping.HUE: create_colormap_hue,
}

DEFAULT_COLORMAP = ColorMapping.GRAYSCALE


def get_colormap(mapping):
    """
    Get the lookup table for a color mapping.

    Args:
        mapping: A ColorMapping member or its display name

    Returns:
        Colormap array (256, 3) of uint8 RGB values

    Raises:
        ValueError if the name is not a known colormap
    """
    if not isinstance(mapping, ColorMapping):
        mapping = ColorMapping.from_name(mapping)
    return COLORMAPS[mapping]()


def next_colormap(mapping):
    """The mapping after `mapping` in registry order, wrapping around."""
    members = list(COLORMAPS)
    return members[(members.index(mapping) + 1) % len(members)]


def list_colormap_names():
    """Get list of available colormap names."""
    return [mapping.value for mapping in COLORMAPS]
