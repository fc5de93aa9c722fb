# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which owns the fixed-length
particle population (type and position) in NumPy arrays and enforces its
invariants. Positions are only ever replaced as a whole buffer.
"""
import logging
import numpy as np
from typing import Dict, Any, Tuple
from constants import (
    DEFAULT_PARTICLE_COUNT, DEFAULT_PARTICLE_TYPES, DEFAULT_SEED
)

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, params: Dict[str, Any], width: float, height: float):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int
#         - "particle_count": int
#         - "particle_types": int
#       - width: float, width of the toroidal domain.
#       - height: float, height of the toroidal domain.
#     - Outputs: None
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a read-only NumPy array of shape (N, 2), float64.
#       - self.types is a read-only NumPy array of shape (N,), int64,
#         with types[i] == i % particle_types.
#       - 0 <= x < width and 0 <= y < height for every particle.
#
#   - commit_positions(self, new_positions: np.ndarray) -> None:
#     - Inputs: array of shape (N, 2).
#     - Side Effects: Replaces every position at once.
#     - Raises: ValueError if the shape does not match.


def _fail(msg: str) -> None:
    logging.critical(msg)
    raise ValueError(msg)


def wrap_positions(positions: np.ndarray, width: float, height: float) -> np.ndarray:
    """
    Wraps positions onto [0, width) x [0, height) in place and returns them.
    """
    # Floored modulo matches a single +/- extent correction for small steps.
    positions[:, 0] %= width
    positions[:, 1] %= height
    # A tiny negative coordinate can round up to exactly the extent.
    positions[positions[:, 0] >= width, 0] = 0.0
    positions[positions[:, 1] >= height, 1] = 0.0
    return positions


class ParticleSystem:
    """
    A container for all particles, managing their state via NumPy arrays.
    """
    def __init__(self, params: Dict[str, Any], width: float, height: float):
        """
        Initializes the particle system.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (float): The width of the simulation domain.
            height (float): The height of the simulation domain.
        """
        self.particle_count = int(params.get('particle_count', DEFAULT_PARTICLE_COUNT))
        self.particle_types = int(params.get('particle_types', DEFAULT_PARTICLE_TYPES))
        self.seed = params.get('seed', DEFAULT_SEED)

        if self.particle_count < 1:
            _fail(f"Configuration error: particle_count must be positive, got {self.particle_count}.")
        if self.particle_types < 1:
            _fail(f"Configuration error: particle_types must be positive, got {self.particle_types}.")
        if not (np.isfinite(width) and np.isfinite(height)) or width <= 0 or height <= 0:
            _fail(f"Configuration error: domain extents must be positive, got {width}x{height}.")

        self.width = float(width)
        self.height = float(height)

        # All randomness comes from a dedicated RNG built from the seed.
        self.rng = np.random.default_rng(self.seed)

        # Row-major draws: x then y for each particle, ascending index.
        positions = self.rng.uniform(
            low=[0.0, 0.0],
            high=[self.width, self.height],
            size=(self.particle_count, 2)
        )
        types = np.arange(self.particle_count, dtype=np.int64) % self.particle_types
        types.setflags(write=False)
        self.types = types

        self._positions = None
        self.commit_positions(positions)

        logging.info(
            f"ParticleSystem initialized with {self.particle_count} "
            f"particles of {self.particle_types} types on a "
            f"{self.width:g}x{self.height:g} torus (seed={self.seed})."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Types shape: {self.types.shape}"
        )

    @property
    def positions(self) -> np.ndarray:
        """The committed positions of the current frame (read-only)."""
        return self._positions

    def commit_positions(self, new_positions: np.ndarray) -> None:
        """
        Atomically replaces every particle's position.

        The incoming buffer is copied, so later writes by the caller can
        never leak into the committed frame.
        """
        buffer = np.array(new_positions, dtype=np.float64, copy=True)
        expected = (self.particle_count, 2)
        if buffer.shape != expected:
            msg = f"Position buffer shape {buffer.shape} does not match {expected}."
            logging.error(msg)
            raise ValueError(msg)
        buffer.setflags(write=False)
        self._positions = buffer

    def place(self, positions) -> None:
        """
        Overrides the particle positions, wrapping them onto the domain.

        Used to set up hand-built scenarios on top of the seeded layout.
        """
        buffer = np.array(positions, dtype=np.float64)
        if buffer.ndim != 2 or buffer.shape[1:] != (2,):
            msg = f"Expected an (N, 2) array of positions, got shape {buffer.shape}."
            logging.error(msg)
            raise ValueError(msg)
        self.commit_positions(wrap_positions(buffer, self.width, self.height))

    def snapshot(self) -> Tuple[np.ndarray, np.ndarray]:
        """Returns the (types, positions) pair of the committed frame."""
        return self.types, self._positions
