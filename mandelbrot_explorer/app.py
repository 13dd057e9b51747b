"""
Main application module for the Mandelbrot explorer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- Keyboard input (pan, zoom, reset, iteration budget, colors)
- Copying the renderer's RGBA frame to the window

The renderer does all of the math; this module only turns key presses
into renderer mutations and asks for a full recompute after each one.
"""

import logging

import pygame

from .renderer import Direction, MandelbrotRenderer
from .compute import warmup_jit

logger = logging.getLogger(__name__)


class MandelbrotApp:
    """
    Main application class for the Mandelbrot explorer.

    Handles the pygame window and event loop, and coordinates between
    the keyboard and the renderer.

    Controls:
        Arrows: pan
        X / Z: zoom in / out
        + / -: raise / lower the iteration budget
        C: next color mapping
        R: reset view, budget and colors
        ESC: quit
    """

    FPS = 60
    TITLE = "Mandelbrot"

    PAN_KEYS = {
        pygame.K_UP: Direction.UP,
        pygame.K_DOWN: Direction.DOWN,
        pygame.K_LEFT: Direction.LEFT,
        pygame.K_RIGHT: Direction.RIGHT,
    }
    BUDGET_UP_KEYS = (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS)
    BUDGET_DOWN_KEYS = (pygame.K_MINUS, pygame.K_KP_MINUS)

    def __init__(self, renderer=None):
        """
        Initialize the application.

        Args:
            renderer: MandelbrotRenderer to drive (default: a 400x400 one)
        """
        self.renderer = renderer or MandelbrotRenderer()
        self.frame = self.renderer.new_frame()

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.window_size = (self.renderer.resolution, self.renderer.resolution)

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            keys = self._poll_events()
            if keys:
                needs_recompute, needs_redraw = self.handle_keys(keys)
                if needs_recompute:
                    self.renderer.recompute()
                if needs_recompute or needs_redraw:
                    self._render_frame()
            self._draw()
            self.clock.tick(self.FPS)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create a resizable window."""
        pygame.init()
        self.screen = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
        pygame.display.set_caption(self.TITLE)
        self.clock = pygame.time.Clock()

    def _warmup_and_initial_render(self):
        """Warm up JIT and draw the first frame."""
        pygame.display.set_caption("Compiling (first run only)...")
        warmup_jit(self.renderer.colormap_table)
        self.renderer.recompute()
        self._render_frame()
        logger.info("Initial %dx%d frame ready", self.renderer.resolution,
                    self.renderer.resolution)

    def _poll_events(self):
        """
        Drain the pygame event queue.

        Returns:
            Set of keys pressed since the last frame (quit keys excluded)
        """
        keys = set()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.window_size = (max(event.w, 1), max(event.h, 1))
                self.screen = pygame.display.set_mode(self.window_size, pygame.RESIZABLE)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                else:
                    keys.add(event.key)
        return keys

    def handle_keys(self, keys):
        """
        Apply every key pressed in one frame to the renderer.

        Pans from several arrow keys add up. X and Z pressed together
        cancel out.

        Args:
            keys: Collection of pygame key codes

        Returns:
            (needs_recompute, needs_redraw)
        """
        renderer = self.renderer
        keys = set(keys)

        if pygame.K_r in keys:
            renderer.reset()
            logger.info("Reset view")
            return True, True

        directions = [d for k, d in self.PAN_KEYS.items() if k in keys]
        changed = renderer.pan(*directions)
        changed |= renderer.zoom(zoom_in=pygame.K_x in keys, zoom_out=pygame.K_z in keys)

        if keys.intersection(self.BUDGET_UP_KEYS):
            changed |= renderer.increase_budget()
            logger.info("Iteration budget: %d", renderer.max_iter)
        if keys.intersection(self.BUDGET_DOWN_KEYS):
            if renderer.decrease_budget():
                changed = True
                logger.info("Iteration budget: %d", renderer.max_iter)

        recolored = False
        if pygame.K_c in keys:
            logger.info("Color mapping: %s", renderer.cycle_colormap().value)
            recolored = True

        return changed, changed or recolored

    def caption(self):
        """Window title describing the current view."""
        re_min, re_max, im_min, im_max = self.renderer.viewport.as_tuple()
        return (f"{self.TITLE} - re [{re_min:.6g}, {re_max:.6g}] "
                f"im [{im_min:.6g}, {im_max:.6g}] - {self.renderer.max_iter} iterations")

    def _render_frame(self):
        """Color the field into the frame buffer."""
        self.renderer.render(self.frame)
        pygame.display.set_caption(self.caption())

    def _draw(self):
        """Copy the frame buffer to the window, scaled to its size."""
        size = self.renderer.resolution
        surface = pygame.image.frombuffer(self.frame, (size, size), 'RGBA')
        if self.window_size != (size, size):
            surface = pygame.transform.scale(surface, self.window_size)
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()


def run(renderer=None):
    """
    Run the Mandelbrot explorer.

    Args:
        renderer: MandelbrotRenderer to display (default 400x400)
    """
    app = MandelbrotApp(renderer)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
