"""
Field renderer for the Mandelbrot explorer.

The MandelbrotRenderer class owns the whole view state:
- The viewport (rectangle of the complex plane on screen)
- The iteration budget
- The color mapping
- The field of normalized intensities (and the raw iteration counts)

Every mutation (pan, zoom, reset, budget change) is expected to be
followed by a full recompute() before the next render(). There is no
incremental update path: each recompute overwrites every pixel.
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .colormaps import DEFAULT_COLORMAP, ColorMapping, get_colormap, next_colormap
from .compute import (
    apply_colormap,
    compute_field,
    compute_field_serial,
    normalize_iterations,
    pixel_to_complex,
)

logger = logging.getLogger(__name__)


class Direction(Enum):
    """
    Pan directions.

    Row 0 of the field is the minimum imaginary value and is drawn at
    the top of the window, so UP moves toward smaller imaginary parts.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)


@dataclass(frozen=True)
class Viewport:
    """Visible rectangle [re_min, re_max] x [im_min, im_max]."""

    re_min: float
    re_max: float
    im_min: float
    im_max: float

    def __post_init__(self):
        for name in ('re_min', 're_max', 'im_min', 'im_max'):
            object.__setattr__(self, name, float(getattr(self, name)))
        if not self.re_min < self.re_max:
            raise ValueError(f"re_min must be below re_max, got [{self.re_min}, {self.re_max}]")
        if not self.im_min < self.im_max:
            raise ValueError(f"im_min must be below im_max, got [{self.im_min}, {self.im_max}]")

    @property
    def re_range(self):
        return self.re_max - self.re_min

    @property
    def im_range(self):
        return self.im_max - self.im_min

    def as_tuple(self):
        return self.re_min, self.re_max, self.im_min, self.im_max


DEFAULT_VIEWPORT = Viewport(-2.0, 2.0, -2.0, 2.0)


class MandelbrotRenderer:
    """
    Computes and colors the Mandelbrot field for the current view.

    Usage:
        renderer = MandelbrotRenderer(400)
        renderer.recompute()
        frame = renderer.new_frame()
        renderer.render(frame)   # RGBA8, row-major, 4 * 400 * 400 bytes

        renderer.pan(Direction.UP, Direction.RIGHT)
        renderer.recompute()

    Attributes:
        resolution: Side length of the square field (fixed)
        viewport: Current Viewport
        max_iter: Current iteration budget
        colormap: Current ColorMapping
        field: (resolution, resolution) uint8 intensities
        iterations: (resolution, resolution) int32 raw escape times
    """

    DEFAULT_RESOLUTION = 400
    DEFAULT_MAX_ITER = 255
    PAN_FRACTION = 0.1
    ZOOM_FRACTION = 0.1
    BUDGET_STEP = 10

    def __init__(self, resolution=None, max_iter=None, viewport=None, colormap=None,
                 parallel=True, pan_fraction=None, zoom_fraction=None, budget_step=None):
        """
        Initialize the renderer.

        Args:
            resolution: Field side length in pixels (default 400)
            max_iter: Iteration budget (default 255)
            viewport: Initial Viewport (default [-2, 2] x [-2, 2])
            colormap: ColorMapping or its name (default Grayscale)
            parallel: Spread recompute over the Numba thread pool
            pan_fraction: Share of the axis range moved per pan step
            zoom_fraction: Share of the axis range trimmed per side per zoom step
            budget_step: Iteration budget increment/decrement

        Raises:
            ValueError if the resolution, budget or budget step is not
            positive, or a fraction is outside (0, 0.5)
        """
        self.resolution = int(self.DEFAULT_RESOLUTION if resolution is None else resolution)
        if self.resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        self.pan_fraction = float(self.PAN_FRACTION if pan_fraction is None else pan_fraction)
        self.zoom_fraction = float(self.ZOOM_FRACTION if zoom_fraction is None else zoom_fraction)
        for name in ('pan_fraction', 'zoom_fraction'):
            if not 0.0 < getattr(self, name) < 0.5:
                raise ValueError(f"{name} must be between 0 and 0.5, got {getattr(self, name)}")
        self.budget_step = int(self.BUDGET_STEP if budget_step is None else budget_step)
        if self.budget_step <= 0:
            raise ValueError(f"budget_step must be positive, got {budget_step}")
        self.parallel = parallel

        # Values restored by reset()
        self.default_viewport = viewport or DEFAULT_VIEWPORT
        self.default_max_iter = int(self.DEFAULT_MAX_ITER if max_iter is None else max_iter)
        if self.default_max_iter <= 0:
            raise ValueError(f"max_iter must be positive, got {max_iter}")
        self.default_colormap = self._as_mapping(colormap or DEFAULT_COLORMAP)

        self.viewport = self.default_viewport
        self.max_iter = self.default_max_iter
        self.colormap = self.default_colormap
        self._colormap_table = get_colormap(self.colormap)

        self.iterations = np.zeros((self.resolution, self.resolution), dtype=np.int32)
        self.field = np.zeros((self.resolution, self.resolution), dtype=np.uint8)

    @classmethod
    def from_settings(cls, settings):
        """Build a renderer from a dict returned by config.load_settings()."""
        re_min, re_max = settings['re_bounds']
        im_min, im_max = settings['im_bounds']
        return cls(
            resolution=settings['resolution'],
            max_iter=settings['max_iterations'],
            viewport=Viewport(re_min, re_max, im_min, im_max),
            colormap=settings['colormap'],
            parallel=settings['parallel'],
            pan_fraction=settings['pan_fraction'],
            zoom_fraction=settings['zoom_fraction'],
            budget_step=settings['budget_step'],
        )

    @staticmethod
    def _as_mapping(colormap):
        if isinstance(colormap, ColorMapping):
            return colormap
        return ColorMapping.from_name(colormap)

    @property
    def frame_size(self):
        """Bytes needed by render(): 4 per pixel (RGBA)."""
        return 4 * self.resolution * self.resolution

    @property
    def colormap_table(self):
        """Lookup table (256, 3) of the current color mapping."""
        return self._colormap_table

    def new_frame(self):
        """Allocate a zeroed frame buffer of exactly frame_size bytes."""
        return np.zeros(self.frame_size, dtype=np.uint8)

    def pixel_to_complex(self, x, y):
        """Point of the complex plane sampled by pixel (x, y)."""
        vp = self.viewport
        return pixel_to_complex(x, y, vp.re_min, vp.re_max, vp.im_min, vp.im_max,
                                self.resolution)

    # ------------------------------------------------------------------
    # Computation and drawing
    # ------------------------------------------------------------------

    def recompute(self):
        """
        Recompute every pixel of the field for the current state.

        Idempotent: calling it again without a mutation in between yields
        byte-identical iterations and field arrays.
        """
        start = time.perf_counter()
        kernel = compute_field if self.parallel else compute_field_serial
        re_min, re_max, im_min, im_max = self.viewport.as_tuple()
        kernel(re_min, re_max, im_min, im_max, self.resolution, self.max_iter,
               self.iterations)
        normalize_iterations(self.iterations, self.max_iter, self.field)
        logger.debug(
            "Recomputed %dx%d field for re [%r, %r] im [%r, %r], max_iter=%d in %.3fs",
            self.resolution, self.resolution, re_min, re_max, im_min, im_max,
            self.max_iter, time.perf_counter() - start,
        )

    def render(self, frame):
        """
        Color the field into an RGBA8 frame buffer.

        Args:
            frame: Writable buffer (bytearray, memoryview, uint8 numpy
                array, ...) of at least frame_size bytes. Pixel (x, y) goes
                to bytes 4 * (y * resolution + x) .. +3; bytes past
                frame_size are left untouched.

        Raises:
            ValueError if the buffer is too small or read-only
        """
        out = np.frombuffer(frame, dtype=np.uint8)
        if out.size < self.frame_size:
            raise ValueError(
                f"Frame buffer holds {out.size} bytes, need {self.frame_size} "
                f"for a {self.resolution}x{self.resolution} RGBA field"
            )
        if not out.flags.writeable:
            raise ValueError("Frame buffer is read-only")
        apply_colormap(self.field, self._colormap_table, out)

    # ------------------------------------------------------------------
    # View mutations
    # ------------------------------------------------------------------

    def pan(self, *directions):
        """
        Shift the viewport by pan_fraction of its range per direction.

        Several directions combine additively (UP + RIGHT moves
        diagonally, UP + DOWN cancels out).

        Returns:
            True if the viewport moved
        """
        vp = self.viewport
        d_re = 0.0
        d_im = 0.0
        for direction in directions:
            sx, sy = direction.value
            d_re += sx * self.pan_fraction * vp.re_range
            d_im += sy * self.pan_fraction * vp.im_range
        if d_re == 0.0 and d_im == 0.0:
            return False
        return self._set_bounds(vp.re_min + d_re, vp.re_max + d_re,
                                vp.im_min + d_im, vp.im_max + d_im)

    def zoom_in(self):
        """
        Trim zoom_fraction of each axis range from both of its ends.

        Refused (returns False) once double precision can no longer
        separate the bounds.
        """
        vp = self.viewport
        d_re = self.zoom_fraction * vp.re_range
        d_im = self.zoom_fraction * vp.im_range
        return self._set_bounds(vp.re_min + d_re, vp.re_max - d_re,
                                vp.im_min + d_im, vp.im_max - d_im)

    def zoom_out(self):
        """
        Exact inverse of zoom_in(): grow both ends of each axis by
        zoom_fraction of the resulting range, so zooming in and then out
        by the same number of steps restores the viewport. Growing by
        zoom_fraction of the current range would drift.

        Refused (returns False) once a bound would overflow to infinity.
        """
        vp = self.viewport
        shrink = 1.0 - 2.0 * self.zoom_fraction
        d_re = self.zoom_fraction * vp.re_range / shrink
        d_im = self.zoom_fraction * vp.im_range / shrink
        return self._set_bounds(vp.re_min - d_re, vp.re_max + d_re,
                                vp.im_min - d_im, vp.im_max + d_im)

    def zoom(self, zoom_in=False, zoom_out=False):
        """
        Apply at most one zoom step.

        Asking for both directions in one call applies neither.

        Returns:
            True if the viewport changed
        """
        if zoom_in and zoom_out:
            return False
        if zoom_in:
            return self.zoom_in()
        if zoom_out:
            return self.zoom_out()
        return False

    def _set_bounds(self, re_min, re_max, im_min, im_max):
        # Ranges must stay finite too, or the next step computes inf - inf.
        values = (re_min, re_max, im_min, im_max, re_max - re_min, im_max - im_min)
        if not all(math.isfinite(v) for v in values) or \
                not (re_min < re_max and im_min < im_max):
            logger.info("View limit reached at %r", self.viewport)
            return False
        self.viewport = Viewport(re_min, re_max, im_min, im_max)
        return True

    def increase_budget(self):
        """Raise the iteration budget by budget_step. Always succeeds."""
        self.max_iter += self.budget_step
        return True

    def decrease_budget(self):
        """
        Lower the iteration budget by budget_step.

        Silently ignored if the budget would end up at or below
        budget_step.

        Returns:
            True if the budget changed
        """
        if self.max_iter - self.budget_step <= self.budget_step:
            return False
        self.max_iter -= self.budget_step
        return True

    def set_colormap(self, colormap):
        """
        Switch color mapping (ColorMapping or name).

        Only affects render(); the field does not need a recompute.
        """
        self.colormap = self._as_mapping(colormap)
        self._colormap_table = get_colormap(self.colormap)

    def cycle_colormap(self):
        """Switch to the next registered color mapping and return it."""
        self.set_colormap(next_colormap(self.colormap))
        return self.colormap

    def reset(self):
        """Restore the default viewport, budget and color mapping."""
        self.viewport = self.default_viewport
        self.max_iter = self.default_max_iter
        self.set_colormap(self.default_colormap)
