# particle.py
"""
Manages the state of all particles in a scene.

This module defines ParticleState, the per-particle view used by the
scalar integrator, and the ParticleSystem class, which stores a whole
population in NumPy arrays so the batch kernels can update it in place.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from geometry import Disk, Vector2

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, positions, velocities, radii):
#     - Inputs:
#       - positions: array-like of shape (N, 2), initial particle centers.
#       - velocities: array-like of shape (N, 2).
#       - radii: array-like of shape (N,) or a scalar broadcast to N.
#     - Outputs: None
#     - Side Effects: Copies the inputs into owned float64 arrays and
#       snapshots positions into initial_positions.
#     - Invariants:
#       - self.positions, self.velocities, self.initial_positions are
#         NumPy arrays of shape (N, 2) of dtype float64.
#       - self.radii is a NumPy array of shape (N,) of dtype float64.
#       - initial_positions is never written after construction.
#       - Row order is creation order and is also the update and draw order.


@dataclass
class ParticleState:
    """Position and velocity of one point, plus where it started."""
    position: Vector2
    velocity: Vector2
    initial_position: Optional[Vector2] = None

    def __post_init__(self):
        if self.initial_position is None:
            self.initial_position = self.position


class ParticleSystem:
    """
    A container for all particles of a scene, stored as NumPy arrays.
    """
    def __init__(self, positions, velocities, radii):
        self.positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        self.velocities = np.array(velocities, dtype=np.float64).reshape(-1, 2)
        if self.positions.shape != self.velocities.shape:
            msg = (
                f"Positions shape {self.positions.shape} does not match "
                f"velocities shape {self.velocities.shape}."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.particle_count = self.positions.shape[0]
        self.radii = np.broadcast_to(
            np.asarray(radii, dtype=np.float64), (self.particle_count,)
        ).copy()
        if np.any(self.radii < 0):
            msg = "Particle radii must be non-negative."
            logging.critical(msg)
            raise ValueError(msg)

        self.initial_positions = self.positions.copy()
        self.initial_positions.setflags(write=False)

        logging.debug(
            f"ParticleSystem created with {self.particle_count} particles. "
            f"Positions shape: {self.positions.shape}"
        )

    def __len__(self) -> int:
        return self.particle_count

    def state(self, index: int) -> ParticleState:
        return ParticleState(
            position=Vector2.from_array(self.positions[index]),
            velocity=Vector2.from_array(self.velocities[index]),
            initial_position=Vector2.from_array(self.initial_positions[index]),
        )

    def states(self) -> List[ParticleState]:
        return [self.state(i) for i in range(self.particle_count)]

    def footprint(self, index: int) -> Disk:
        """The disk a particle occupies at its current position."""
        return Disk(Vector2.from_array(self.positions[index]), float(self.radii[index]))

    # Population builders

    @classmethod
    def from_states(cls, states: Iterable[ParticleState], radius: float) -> "ParticleSystem":
        states = list(states)
        positions = [(s.position.x, s.position.y) for s in states]
        velocities = [(s.velocity.x, s.velocity.y) for s in states]
        system = cls(positions, velocities, radius)
        # Honor initial positions that differ from the current position.
        system.initial_positions = np.array(
            [(s.initial_position.x, s.initial_position.y) for s in states],
            dtype=np.float64,
        ).reshape(-1, 2)
        system.initial_positions.setflags(write=False)
        return system

    @classmethod
    def fan(cls, center: Vector2, count: int, speed: float, radius: float) -> "ParticleSystem":
        """
        `count` particles stacked at `center`, particle i moving along +x at
        speed * i / count. Tiny differences in launch speed make the
        trajectories diverge quickly.
        """
        positions = np.tile([center.x, center.y], (count, 1))
        velocities = np.zeros((count, 2), dtype=np.float64)
        velocities[:, 0] = speed * np.arange(count, dtype=np.float64) / count
        return cls(positions, velocities, radius)

    @classmethod
    def interior_grid(cls, arena: Disk, width: int, height: int, radius: float) -> "ParticleSystem":
        """
        One particle at rest on every integer grid cell of the screen whose
        coordinate lies strictly inside the arena, in row-major order.
        """
        rows, cols = np.mgrid[0:height, 0:width]
        xs = cols.ravel().astype(np.float64)
        ys = rows.ravel().astype(np.float64)
        distance_sq = (xs - arena.center.x) ** 2 + (ys - arena.center.y) ** 2
        inside = distance_sq < arena.radius_squared

        positions = np.column_stack((xs[inside], ys[inside]))
        velocities = np.zeros_like(positions)
        logging.info(
            f"Interior grid population: {positions.shape[0]} particles "
            f"inside an arena of radius {arena.radius:.1f}."
        )
        return cls(positions, velocities, radius)
