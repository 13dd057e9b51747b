import pygame
import pytest

from mandelbrot_explorer.__main__ import build_parser, main
from mandelbrot_explorer.app import MandelbrotApp
from mandelbrot_explorer.colormaps import ColorMapping
from mandelbrot_explorer.renderer import DEFAULT_VIEWPORT, MandelbrotRenderer


@pytest.fixture
def app():
    return MandelbrotApp(MandelbrotRenderer(resolution=8))


def test_frame_is_sized_for_renderer(app):
    assert app.frame.size == 4 * 8 * 8
    assert app.window_size == (8, 8)


def test_arrow_keys_pan(app):
    assert app.handle_keys({pygame.K_RIGHT, pygame.K_UP}) == (True, True)
    assert app.renderer.viewport.as_tuple() == pytest.approx((-1.6, 2.4, -2.4, 1.6))


def test_opposite_arrows_cancel(app):
    assert app.handle_keys({pygame.K_LEFT, pygame.K_RIGHT}) == (False, False)
    assert app.renderer.viewport == DEFAULT_VIEWPORT


def test_zoom_keys(app):
    assert app.handle_keys({pygame.K_x}) == (True, True)
    assert app.renderer.viewport.re_range == pytest.approx(3.2)
    assert app.handle_keys({pygame.K_z}) == (True, True)
    assert app.renderer.viewport.re_range == pytest.approx(4.0)


def test_both_zoom_keys_cancel(app):
    assert app.handle_keys({pygame.K_x, pygame.K_z}) == (False, False)
    assert app.renderer.viewport == DEFAULT_VIEWPORT


def test_budget_keys(app):
    assert app.handle_keys({pygame.K_EQUALS}) == (True, True)
    assert app.renderer.max_iter == 265
    assert app.handle_keys({pygame.K_MINUS}) == (True, True)
    assert app.renderer.max_iter == 255


def test_budget_floor_needs_no_recompute():
    app = MandelbrotApp(MandelbrotRenderer(resolution=4, max_iter=20))
    assert app.handle_keys({pygame.K_KP_MINUS}) == (False, False)
    assert app.renderer.max_iter == 20


def test_color_key_redraws_without_recompute(app):
    assert app.handle_keys({pygame.K_c}) == (False, True)
    assert app.renderer.colormap is ColorMapping.HUE


def test_reset_key(app):
    app.handle_keys({pygame.K_LEFT, pygame.K_x, pygame.K_c})
    assert app.handle_keys({pygame.K_r}) == (True, True)
    assert app.renderer.viewport == DEFAULT_VIEWPORT
    assert app.renderer.colormap is ColorMapping.GRAYSCALE


def test_caption_describes_view(app):
    caption = app.caption()
    assert "re [-2, 2]" in caption
    assert "255 iterations" in caption


def test_cli_parser():
    args = build_parser().parse_args(["--resolution", "64", "--serial", "--colormap", "hue"])
    assert args.resolution == 64
    assert args.parallel is False
    assert args.colormap == "hue"
    defaults = build_parser().parse_args([])
    assert defaults.parallel is None
    assert defaults.max_iterations is None


def test_cli_rejects_bad_settings_before_opening_window():
    assert main(["--resolution", "0"]) == 2
    assert main(["--colormap", "plasma"]) == 2


def test_cli_survives_unusable_settings_file(tmp_path, monkeypatch):
    started = []
    monkeypatch.setattr("mandelbrot_explorer.__main__.run", started.append)
    assert main(["--settings", str(tmp_path), "--resolution", "4"]) == 0
    assert started[0].resolution == 4

    path = tmp_path / "settings.json"
    path.write_text('{"resolution": null}')
    assert main(["--settings", str(path)]) == 2
    assert len(started) == 1
