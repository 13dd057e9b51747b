"""
Escape-time computation functions using Numba JIT compilation.

This module contains all the performance-critical functions of the
explorer. They are JIT-compiled for speed and handle:
- The escape-time iteration of z² + c for a single point
- Mapping pixel coordinates to points of the complex plane
- Filling a whole field of iteration counts (parallel or serial)
- Normalizing iteration counts to 8-bit intensities
- Applying a colormap lookup table to produce RGBA pixels
"""

import numpy as np
from numba import jit, prange


ESCAPE_RADIUS_SQUARED = 4.0
OPAQUE = 255


@jit(nopython=True, cache=True)
def escape_time(c, max_iter):
    """
    Count iterations of z <- z² + c before the orbit escapes.

    The orbit starts at z = 0 and is considered escaped once |z|² >= 4.
    Only the squared magnitude is compared, so no square root is taken
    inside the loop.

    Args:
        c: Point of the complex plane (complex)
        max_iter: Iteration budget

    Returns:
        Number of iterations performed, between 0 and max_iter.
        Points that never escape return max_iter.
    """
    cr = c.real
    ci = c.imag
    zr, zi = 0.0, 0.0
    n = 0
    while n < max_iter and zr * zr + zi * zi < ESCAPE_RADIUS_SQUARED:
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        n += 1
    return n


@jit(nopython=True, cache=True)
def pixel_to_complex(x, y, re_min, re_max, im_min, im_max, resolution):
    """Map pixel (x, y) to its point; left-inclusive, right-open."""
    re = re_min + (re_max - re_min) / resolution * x
    im = im_min + (im_max - im_min) / resolution * y
    return complex(re, im)


@jit(nopython=True, parallel=True, cache=True)
def compute_field(re_min, re_max, im_min, im_max, resolution, max_iter, out):
    """
    Compute the escape time of every pixel of a square field.

    Rows are distributed over the Numba thread pool with prange. Each
    worker only writes its own rows of `out`, so no locking is needed.

    Args:
        re_min, re_max: Real axis bounds in the complex plane
        im_min, im_max: Imaginary axis bounds in the complex plane
        resolution: Side length of the field in pixels
        max_iter: Iteration budget
        out: (resolution, resolution) int32 array, row index = imaginary
            axis (modified in place)
    """
    for y in prange(resolution):
        for x in range(resolution):
            c = pixel_to_complex(x, y, re_min, re_max, im_min, im_max, resolution)
            out[y, x] = escape_time(c, max_iter)


# Same kernel without the thread pool; prange degrades to range.
# Not cached: the disk cache is keyed by function name.
compute_field_serial = jit(nopython=True)(compute_field.py_func)


@jit(nopython=True, parallel=True, cache=True)
def normalize_iterations(iterations, max_iter, out):
    """
    Rescale iteration counts from 0..max_iter to 0..255.

    Rounds half up. Since counts never exceed max_iter the result
    always fits in a byte.
    """
    height, width = iterations.shape
    for y in prange(height):
        for x in range(width):
            out[y, x] = np.uint8(np.floor(iterations[y, x] / max_iter * 255.0 + 0.5))


@jit(nopython=True, parallel=True, cache=True)
def apply_colormap(field, colormap, out):
    """
    Write RGBA pixels for a field of intensities.

    Args:
        field: 2D uint8 array of intensities
        colormap: 256x3 array of RGB colors (uint8), indexed by intensity
        out: Flat uint8 array of at least 4 * field.size bytes
            (modified in place)
    """
    height, width = field.shape
    for y in prange(height):
        for x in range(width):
            v = field[y, x]
            i = 4 * (y * width + x)
            out[i] = colormap[v, 0]
            out[i + 1] = colormap[v, 1]
            out[i + 2] = colormap[v, 2]
            out[i + 3] = OPAQUE


def warmup_jit(colormap):
    """
    Warm up JIT compilation with small dummy arrays.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on the first real frame.

    Args:
        colormap: A colormap array to use for warming up apply_colormap
    """
    iterations = np.zeros((4, 4), dtype=np.int32)
    field = np.zeros((4, 4), dtype=np.uint8)
    frame = np.zeros(4 * 4 * 4, dtype=np.uint8)
    compute_field(-2.0, 2.0, -2.0, 2.0, 4, 10, iterations)
    compute_field_serial(-2.0, 2.0, -2.0, 2.0, 4, 10, iterations)
    normalize_iterations(iterations, 10, field)
    apply_colormap(field, colormap, frame)
