# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the Simulation class, which advances the particle
system by one frame. Every particle is displaced by the sum of pairwise
contributions from all other particles, evaluated on the torus with the
minimum-image convention. There is no velocity state: the summed force of
a frame is applied directly as a position delta.
"""
import logging
import numpy as np
from typing import Dict, Any
from particle import ParticleSystem, wrap_positions
from constants import (
    DEFAULT_COUPLING_CONSTANT, DEFAULT_MIN_SQUARED_DISTANCE,
    DEFAULT_COEFFICIENT_MAGNITUDE, REFERENCE_INTERACTION_MATRIX
)
from numba import jit, prange

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
#     - Inputs:
#       - particles: An initialized ParticleSystem object.
#       - params: Dictionary of simulation parameters from config.json.
#         - "coupling_constant": float
#         - "min_squared_distance": float
#         - "coefficient_magnitude": float
#         - "interaction_matrix": List[List[float]]
#         - "parallel": bool
#     - Outputs: None
#     - Side Effects: Stores a reference to the particles. Converts the
#       interaction matrix to a read-only NumPy array.
#     - Raises: ValueError on a malformed matrix or invalid scalars.
#
#   - step(self) -> None:
#     - Inputs: None (operates on internal state).
#     - Side Effects: Commits a complete new position buffer into the
#       ParticleSystem. Displacements are computed from the previous
#       frame only.
#     - Invariants: Particle count and types never change. Positions stay
#       inside [0, width) x [0, height).


@jit(nopython=True)
def minimum_image(d, extent):
    """
    Returns the shortest periodic separation along one axis.

    Picks whichever of d, d + extent and d - extent has the smallest
    square. Ties keep the earlier candidate.
    """
    best = d
    candidate = d + extent
    if candidate * candidate < best * best:
        best = candidate
    candidate = d - extent
    if candidate * candidate < best * best:
        best = candidate
    return best


def _displacement_kernel(
    positions, types, interaction_matrix, coefficient_magnitude,
    coupling_constant, min_squared_distance, world_width, world_height
):
    """
    Sums the displacement of every particle from all other particles.

    Reads only `positions` and writes only the returned buffer, so the
    outer loop is free of data races. The inner sum always runs over
    ascending j, which keeps serial and parallel results identical.
    """
    particle_count = positions.shape[0]
    displacement = np.zeros((particle_count, 2))

    for i in prange(particle_count):
        x_i = positions[i, 0]
        y_i = positions[i, 1]
        type_i = types[i]
        delta_x = 0.0
        delta_y = 0.0

        for j in range(particle_count):
            if i == j:
                continue

            dx = minimum_image(x_i - positions[j, 0], world_width)
            dy = minimum_image(y_i - positions[j, 1], world_height)
            r_sq = dx * dx + dy * dy

            coeff = interaction_matrix[type_i, types[j]] * coefficient_magnitude

            # Repulsive pairs closer than the cutoff contribute nothing.
            if coeff < 0.0 and r_sq < min_squared_distance:
                continue
            # Coincident particles have no direction.
            if r_sq == 0.0:
                continue

            speed = coupling_constant / r_sq
            r = np.sqrt(r_sq)
            delta_x += coeff * speed * dx / r
            delta_y += coeff * speed * dy / r

        displacement[i, 0] = delta_x
        displacement[i, 1] = delta_y

    return displacement


# Without parallel=True numba runs prange as a plain range.
_compute_displacements_numba = jit(nopython=True)(_displacement_kernel)
_compute_displacements_parallel_numba = jit(nopython=True, parallel=True)(_displacement_kernel)


class Simulation:
    """
    Advances the particle system with exhaustive pairwise evaluation.
    """
    def __init__(self, particles: ParticleSystem, params: Dict[str, Any]):
        """
        Initializes the simulation environment.

        Args:
            particles (ParticleSystem): The particle system to simulate.
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.particles = particles
        self.coupling_constant = float(params.get('coupling_constant', DEFAULT_COUPLING_CONSTANT))
        self.min_squared_distance = float(params.get('min_squared_distance', DEFAULT_MIN_SQUARED_DISTANCE))
        self.coefficient_magnitude = float(params.get('coefficient_magnitude', DEFAULT_COEFFICIENT_MAGNITUDE))
        self.parallel = bool(params.get('parallel', False))

        interaction_matrix = np.array(
            params.get('interaction_matrix', REFERENCE_INTERACTION_MATRIX), dtype=np.float64
        )

        self.world_width = particles.width
        self.world_height = particles.height

        # Enforce data contracts before any frame runs.
        num_types = self.particles.particle_types
        if interaction_matrix.shape != (num_types, num_types):
            self._reject(
                f"Configuration error: Interaction matrix shape {interaction_matrix.shape} "
                f"does not match particle_types ({num_types}). The matrix must be square "
                f"and its dimensions must equal the number of particle types."
            )
        if not np.all(np.isfinite(interaction_matrix)):
            self._reject("Configuration error: Interaction matrix contains non-finite values.")
        for name in ('coupling_constant', 'min_squared_distance', 'coefficient_magnitude'):
            value = getattr(self, name)
            if not np.isfinite(value) or value < 0:
                self._reject(f"Configuration error: {name} must be finite and non-negative, got {value}.")

        interaction_matrix.setflags(write=False)
        self.interaction_matrix = interaction_matrix

        self.frame = 0
        self.running = True

        logging.info("Simulation logic initialized and configuration validated.")
        logging.info(
            f"Exhaustive pairwise evaluation of {particles.particle_count} particles "
            f"({'parallel' if self.parallel else 'serial'} kernel), "
            f"coupling {self.coupling_constant:g}, cutoff r^2 < {self.min_squared_distance:g}."
        )

    @staticmethod
    def _reject(msg: str) -> None:
        logging.critical(msg)
        raise ValueError(msg)

    def request_stop(self) -> None:
        """Asks the main loop to stop at the next frame boundary."""
        if self.running:
            logging.info(f"Stop requested after frame {self.frame}.")
        self.running = False

    def compute_displacements(self) -> np.ndarray:
        """
        Returns the (N, 2) displacement of every particle for the committed frame.
        """
        kernel = _compute_displacements_parallel_numba if self.parallel else _compute_displacements_numba
        displacement = kernel(
            self.particles.positions, self.particles.types, self.interaction_matrix,
            self.coefficient_magnitude, self.coupling_constant, self.min_squared_distance,
            self.world_width, self.world_height
        )

        # Near-coincident pairs without a cutoff can overflow to inf or nan.
        non_finite = ~np.all(np.isfinite(displacement), axis=1)
        if non_finite.any():
            logging.warning(
                f"Frame {self.frame}: {int(non_finite.sum())} particles got a non-finite "
                f"displacement and are held in place this frame."
            )
            displacement[non_finite] = 0.0
        return displacement

    def step(self):
        """
        Executes one frame of the simulation.
        """
        # 1. Displacements from the previous frame's snapshot only
        displacement = self.compute_displacements()

        # 2. First-order position update into a separate buffer
        new_positions = self.particles.positions + displacement

        # 3. Toroidal wrap-around
        wrap_positions(new_positions, self.world_width, self.world_height)

        # 4. Swap the whole buffer in at once
        self.particles.commit_positions(new_positions)
        self.frame += 1

        if logging.getLogger().isEnabledFor(logging.DEBUG):
            magnitude = np.linalg.norm(displacement, axis=1)
            logging.debug(
                f"Frame {self.frame} | Mean displacement: {magnitude.mean():.4f}, "
                f"max: {magnitude.max():.4f}"
            )

    def run(self, steps: int) -> None:
        """Executes `steps` frames back to back, honoring stop requests."""
        for _ in range(steps):
            if not self.running:
                break
            self.step()
