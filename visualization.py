# visualization.py
"""
Handles the visualization of the emitter using Pygame.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

import pygame

from constants import (
    BACKGROUND_COLOR, FPS, FPS_FONT_SIZE, FPS_TEXT_COLOR, FPS_TEXT_POSITION,
    FULLSCREEN, WINDOW_HEIGHT, WINDOW_WIDTH
)
from geometry import Poly
from simulation import Emitter

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, params: Optional[Dict[str, Any]] = None):
#     - Inputs:
#       - params: the "visualization" section of config.json
#         ("fullscreen", "width", "height", "fps").
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - screen_size(self) -> Tuple[float, float]:
#     - Outputs: the current width and height of the display surface.
#
#   - draw(self, emitter: Emitter) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Renders every particle and the FPS counter, handles
#       Pygame events, and waits for the next frame.


def to_rgba(poly: Poly) -> Tuple[int, int, int, int]:
    """Converts a polygon's [0, 1] color to 0-255 channels for Pygame."""
    return tuple(max(0, min(255, int(round(c * 255)))) for c in poly.color())


class Visualizer:
    """
    Renders the particle population as filled polygons.
    """
    def __init__(self, params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        params = params if params is not None else {}
        pygame.init()
        pygame.font.init()

        if params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            self.screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = params.get('width', WINDOW_WIDTH)
            height = params.get('height', WINDOW_HEIGHT)
            self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        pygame.display.set_caption("Particles")
        self.clock = pygame.time.Clock()
        self.fps = params.get('fps', FPS)

        # Polygons are drawn with per-pixel alpha onto this layer.
        self.particle_surface = pygame.Surface((width, height), pygame.SRCALPHA)

        try:
            self.font = pygame.font.SysFont(None, FPS_FONT_SIZE)
        except pygame.error:
            logging.warning("System font not available, falling back to the default font.")
            self.font = pygame.font.Font(None, FPS_FONT_SIZE)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def screen_size(self) -> Tuple[float, float]:
        width, height = self.screen.get_size()
        return float(width), float(height)

    def _handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                logging.info("ESC key pressed. Shutting down visualizer.")
                return False
            if event.type == pygame.VIDEORESIZE:
                self.particle_surface = pygame.Surface(event.size, pygame.SRCALPHA)
                logging.info(f"Window resized to {event.w}x{event.h}.")
        return True

    @staticmethod
    def _polygon_points(poly: Poly) -> List[Tuple[float, float]]:
        return [(p.x, p.y) for p in poly.vertices()]

    def draw(self, emitter: Emitter) -> bool:
        """
        Draws all particles and the FPS counter, and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        if not self._handle_events():
            return False

        self.screen.fill(BACKGROUND_COLOR)
        self.particle_surface.fill((0, 0, 0, 0))
        for particle in emitter.particles:
            pygame.draw.polygon(
                self.particle_surface,
                to_rgba(particle.poly),
                self._polygon_points(particle.poly)
            )
        self.screen.blit(self.particle_surface, (0, 0))

        fps_text = str(round(self.clock.get_fps()))
        text_surf = self.font.render(fps_text, True, FPS_TEXT_COLOR)
        self.screen.blit(text_surf, FPS_TEXT_POSITION)

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
