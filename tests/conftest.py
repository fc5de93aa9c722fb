"""Shared fixtures for the simulation tests."""
import logging
import os

# Pygame must pick the headless video driver before it is imported.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from particle import ParticleSystem
from simulation import Simulation


def make_world(positions=None, particle_count=2, matrix=None, **params):
    """Builds a ParticleSystem/Simulation pair on a 1000x1000 torus."""
    width = params.pop("width", 1000.0)
    height = params.pop("height", 1000.0)
    if positions is not None:
        particle_count = len(positions)
    sim_params = {"particle_count": particle_count, "particle_types": 3, "seed": 42}
    if matrix is not None:
        sim_params["interaction_matrix"] = matrix
    sim_params.update(params)
    particles = ParticleSystem(sim_params, width, height)
    if positions is not None:
        particles.place(positions)
    return particles, Simulation(particles, sim_params)


@pytest.fixture
def restore_root_logger():
    logger = logging.getLogger()
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
