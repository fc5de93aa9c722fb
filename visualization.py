# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.
"""
import logging
import pygame
from particle import ParticleSystem
from constants import (
    BACKGROUND_COLOR, PARTICLE_SIZE, PARTICLE_DRAW_OFFSET,
    DEFAULT_COLORS, WINDOW_TITLE
)
from typing import Optional


# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, width: float, height: float, particle_types: int,
#              colors: Optional[list] = None, scale: float = 1.0):
#     - Inputs:
#       - width, height: extents of the simulation domain.
#       - particle_types: int, the number of particle types.
#       - colors: Optional list of RGB color lists (e.g., [[255,0,0], ...])
#         from the configuration. If None, the default palette is used.
#       - scale: pixels per domain unit.
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - poll_events(self) -> bool:
#     - Outputs: False if the user asked to quit, True otherwise.
#     - Side Effects: Drains the Pygame event queue without blocking.
#
#   - draw(self, particles: ParticleSystem) -> None:
#     - Side Effects: Renders particles to the screen. Never modifies
#       the particle system.

class Visualizer:
    """
    Renders the committed particle state and relays quit requests.
    """
    QUIT_KEYS = (pygame.K_q, pygame.K_ESCAPE)

    def __init__(
        self,
        width: float,
        height: float,
        particle_types: int,
        colors: Optional[list] = None,
        scale: float = 1.0
    ):
        """
        Initializes Pygame and the display window.
        """
        if not scale > 0:
            msg = f"Configuration error: visualization scale must be positive, got {scale}."
            logging.critical(msg)
            raise ValueError(msg)

        pygame.init()

        self.scale = float(scale)
        self.window_width = max(1, int(round(width * self.scale)))
        self.window_height = max(1, int(round(height * self.scale)))
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption(WINDOW_TITLE)

        # Load or fall back to default colors for each particle type
        self.colors = self._initialize_colors(particle_types, colors)

        logging.info(f"Visualizer initialized with Pygame display ({self.window_width}x{self.window_height}).")

    def _initialize_colors(self, particle_types: int, config_colors: Optional[list]) -> list:
        """Initializes particle colors from config, falling back to the default palette."""
        def get_default_colors(n_types):
            return [pygame.Color(DEFAULT_COLORS[i % len(DEFAULT_COLORS)]) for i in range(n_types)]

        if not config_colors:
            logging.info("No colors found in config. Using default palette.")
            return get_default_colors(particle_types)

        final_colors = []
        try:
            for rgb in config_colors:
                final_colors.append(pygame.Color(*rgb))
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse colors from config due to invalid format: {e}. Falling back to default palette.")
            return get_default_colors(particle_types)

        num_loaded = len(final_colors)
        if num_loaded < particle_types:
            logging.warning(
                f"Config provides {num_loaded} colors, but {particle_types} are needed. "
                f"Filling the remaining {particle_types - num_loaded} from the default palette."
            )
            final_colors.extend(get_default_colors(particle_types)[num_loaded:])
        elif num_loaded > particle_types:
            logging.warning(
                f"Config provides {num_loaded} colors, but only {particle_types} are needed. "
                "Ignoring excess colors."
            )
            final_colors = final_colors[:particle_types]
        else:
            logging.info(f"Successfully loaded {num_loaded} particle colors from configuration.")

        return final_colors

    def poll_events(self) -> bool:
        """
        Handles all pending events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        keep_running = True
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                keep_running = False
            elif event.type == pygame.KEYDOWN and event.key in self.QUIT_KEYS:
                logging.info(f"'{pygame.key.name(event.key)}' key pressed. Shutting down visualizer.")
                keep_running = False
        return keep_running

    def draw(self, particles: ParticleSystem) -> None:
        """
        Draws every particle as a small square colored by its type.
        """
        types, positions = particles.snapshot()

        self.screen.fill(BACKGROUND_COLOR)
        for p_type, (x, y) in zip(types, positions):
            rect = pygame.Rect(
                int(x * self.scale) + PARTICLE_DRAW_OFFSET,
                int(y * self.scale) + PARTICLE_DRAW_OFFSET,
                PARTICLE_SIZE,
                PARTICLE_SIZE
            )
            self.screen.fill(self.colors[p_type % len(self.colors)], rect)

        pygame.display.flip()

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
