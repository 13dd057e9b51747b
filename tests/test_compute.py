import numpy as np
import pytest

from mandelbrot_explorer.colormaps import create_colormap_grayscale
from mandelbrot_explorer.compute import (
    apply_colormap,
    compute_field,
    compute_field_serial,
    escape_time,
    normalize_iterations,
    pixel_to_complex,
)


@pytest.mark.parametrize("max_iter", [0, 1, 10, 255, 1000])
def test_origin_never_escapes(max_iter):
    assert escape_time(0j, max_iter) == max_iter


@pytest.mark.parametrize("c", [3 + 0j, -2.5 + 0j, 2 + 2j, 3j, -1.5 - 1.5j])
def test_points_outside_radius_two_escape_immediately(c):
    assert escape_time(c, 1000) == 1


def test_escape_boundary_is_exclusive():
    # |z|^2 == 4 counts as escaped
    assert escape_time(-2 + 0j, 100) == 1
    # 0 -> 1 -> 2
    assert escape_time(1 + 0j, 100) == 2


def test_periodic_orbit_uses_whole_budget():
    assert escape_time(-1 + 0j, 500) == 500


@pytest.mark.parametrize("c", [0.3 + 0.5j, -0.75 + 0.1j, 0.25 + 0.01j, -1.8 + 0.02j])
def test_monotonic_in_budget(c):
    counts = [escape_time(c, n) for n in range(0, 300, 7)]
    assert counts == sorted(counts)
    for n, count in zip(range(0, 300, 7), counts):
        assert 0 <= count <= n


def test_pixel_mapping_corners():
    res = 400
    assert pixel_to_complex(0, 0, -2.0, 2.0, -1.5, 0.5, res) == complex(-2.0, -1.5)
    last = pixel_to_complex(res - 1, res - 1, -2.0, 2.0, -1.5, 0.5, res)
    assert last.real < 2.0 and last.imag < 0.5
    assert last.real == pytest.approx(2.0 - 4.0 / res)
    assert last.imag == pytest.approx(0.5 - 2.0 / res)


def test_field_rows_follow_imaginary_axis():
    res = 6
    out = np.zeros((res, res), dtype=np.int32)
    compute_field(-2.0, 1.0, -1.0, 0.5, res, 50, out)
    for y in range(res):
        for x in range(res):
            c = pixel_to_complex(x, y, -2.0, 1.0, -1.0, 0.5, res)
            assert out[y, x] == escape_time(c, 50)


def test_parallel_and_serial_kernels_agree():
    res = 32
    parallel = np.zeros((res, res), dtype=np.int32)
    serial = np.zeros((res, res), dtype=np.int32)
    compute_field(-2.0, 0.5, -1.25, 1.25, res, 120, parallel)
    compute_field_serial(-2.0, 0.5, -1.25, 1.25, res, 120, serial)
    np.testing.assert_array_equal(parallel, serial)


def test_normalize_rounds_half_up():
    iterations = np.array([[0, 1], [2, 2]], dtype=np.int32)
    out = np.zeros((2, 2), dtype=np.uint8)
    normalize_iterations(iterations, 2, out)
    np.testing.assert_array_equal(out, [[0, 128], [255, 255]])


def test_normalize_is_identity_for_budget_255():
    iterations = np.arange(256, dtype=np.int32).reshape(16, 16)
    out = np.zeros((16, 16), dtype=np.uint8)
    normalize_iterations(iterations, 255, out)
    np.testing.assert_array_equal(out, iterations)


def test_apply_colormap_writes_opaque_rgba():
    field = np.array([[0, 10], [200, 255]], dtype=np.uint8)
    out = np.full(4 * 4 + 3, 7, dtype=np.uint8)
    apply_colormap(field, create_colormap_grayscale(), out)
    assert list(out[:16]) == [0, 0, 0, 255, 10, 10, 10, 255,
                              200, 200, 200, 255, 255, 255, 255, 255]
    # Bytes past the field are left alone
    assert list(out[16:]) == [7, 7, 7]
