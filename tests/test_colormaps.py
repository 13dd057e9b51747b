import numpy as np
import pytest

from mandelbrot_explorer.colormaps import (
    COLORMAPS,
    ColorMapping,
    get_colormap,
    list_colormap_names,
    next_colormap,
)


@pytest.mark.parametrize("mapping", list(ColorMapping))
def test_tables_cover_every_intensity(mapping):
    table = get_colormap(mapping)
    assert table.shape == (256, 3)
    assert table.dtype == np.uint8


def test_grayscale_is_identity():
    table = get_colormap(ColorMapping.GRAYSCALE)
    for v in range(256):
        assert tuple(table[v]) == (v, v, v)


def test_hue_sweep():
    table = get_colormap(ColorMapping.HUE)
    assert tuple(table[0]) == (255, 0, 0)
    # Points that never escaped are black
    assert tuple(table[255]) == (0, 0, 0)
    assert len({tuple(rgb) for rgb in table}) > 200


def test_lookup_by_name_is_case_insensitive():
    np.testing.assert_array_equal(get_colormap("hue"), get_colormap(ColorMapping.HUE))
    assert ColorMapping.from_name("GRAYSCALE") is ColorMapping.GRAYSCALE


def test_unknown_name_rejected():
    with pytest.raises(ValueError, match="Unknown colormap"):
        get_colormap("viridis")


def test_next_colormap_wraps():
    members = list(COLORMAPS)
    mapping = members[0]
    for _ in members:
        mapping = next_colormap(mapping)
    assert mapping is members[0]
    assert list_colormap_names() == ["Grayscale", "Hue"]
