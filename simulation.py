# simulation.py
"""
Handles the core simulation logic: advancing particles under constant
gravity and reflecting them off the circular arena.

The update rule lives in one Numba-jitted kernel that operates on NumPy
arrays. Both the whole-population tick and the single-particle `step`
function go through that kernel, so there is exactly one implementation
of the physics.
"""
import logging
import math

import numpy as np
from numba import jit

from geometry import Disk, Vector2
from particle import ParticleState, ParticleSystem

# --- Data Contracts ---
#
# step(state, arena, particle_radius, acceleration, dt) -> ParticleState:
#   - Inputs:
#     - state: ParticleState, left untouched.
#     - arena: Disk the particle is confined to.
#     - particle_radius: float, the particle's footprint radius.
#     - acceleration: Vector2, constant acceleration (gravity).
#     - dt: float, fixed time step.
#   - Outputs: a new ParticleState advanced by one semi-implicit Euler step.
#   - Invariants: |position - arena.center| <= arena.radius - particle_radius
#     after the step, unless the particle sits exactly on the arena center.
#
# class Integrator:
#   - step_system(self, system: ParticleSystem, dt: float) -> int:
#     - Side Effects: Mutates system.positions and system.velocities in
#       place, in row order.
#     - Outputs: number of boundary reflections during this step.


@jit(nopython=True)
def _step_numba(positions, velocities, radii, center_x, center_y, arena_radius,
                accel_x, accel_y, dt):
    """
    Numba-jitted semi-implicit Euler step with specular boundary reflection.

    A particle is corrected only when it is strictly outside the legal
    region (distance > arena_radius - radius). The reflection uses the
    outward normal. A particle exactly on the arena center has no normal
    and is left uncorrected. Fast particles may tunnel; there is no
    substepping.
    """
    reflections = 0
    for i in range(positions.shape[0]):
        velocities[i, 0] += accel_x * dt
        velocities[i, 1] += accel_y * dt

        positions[i, 0] += velocities[i, 0] * dt
        positions[i, 1] += velocities[i, 1] * dt

        dx = positions[i, 0] - center_x
        dy = positions[i, 1] - center_y
        distance_sq = dx * dx + dy * dy
        limit = arena_radius - radii[i]

        if distance_sq > limit * limit:
            distance = math.sqrt(distance_sq)
            if distance == 0.0:
                continue

            nx = dx / distance
            ny = dy / distance

            v_dot_n = velocities[i, 0] * nx + velocities[i, 1] * ny
            velocities[i, 0] -= 2.0 * v_dot_n * nx
            velocities[i, 1] -= 2.0 * v_dot_n * ny

            positions[i, 0] = center_x + limit * nx
            positions[i, 1] = center_y + limit * ny
            reflections += 1
    return reflections


def step(state: ParticleState, arena: Disk, particle_radius: float,
         acceleration: Vector2, dt: float) -> ParticleState:
    """Advance a single particle by one time step and return the new state."""
    position = state.position.as_array().reshape(1, 2)
    velocity = state.velocity.as_array().reshape(1, 2)
    radii = np.array([particle_radius], dtype=np.float64)

    _step_numba(
        position, velocity, radii,
        arena.center.x, arena.center.y, arena.radius,
        acceleration.x, acceleration.y, dt
    )
    return ParticleState(
        position=Vector2.from_array(position[0]),
        velocity=Vector2.from_array(velocity[0]),
        initial_position=state.initial_position,
    )


class Integrator:
    """
    Advances every particle of a ParticleSystem by one fixed time step.
    """
    def __init__(self, arena: Disk, acceleration: Vector2):
        self.arena = arena
        self.acceleration = acceleration
        logging.info(
            f"Integrator initialized: arena radius {arena.radius:.2f} at "
            f"({arena.center.x:.1f}, {arena.center.y:.1f}), "
            f"acceleration ({acceleration.x:.2f}, {acceleration.y:.2f})."
        )

    def step_system(self, system: ParticleSystem, dt: float) -> int:
        """
        Executes one time step for the whole population.
        """
        if system.particle_count == 0:
            return 0
        return _step_numba(
            system.positions, system.velocities, system.radii,
            self.arena.center.x, self.arena.center.y, self.arena.radius,
            self.acceleration.x, self.acceleration.y, dt
        )

    def step(self, state: ParticleState, particle_radius: float, dt: float) -> ParticleState:
        return step(state, self.arena, particle_radius, self.acceleration, dt)
