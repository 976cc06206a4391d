import math

import numpy as np
import pytest

from geometry import Disk, Vector2
from particle import ParticleState, ParticleSystem
from simulation import Integrator, step

ARENA = Disk(Vector2(0.0, 0.0), 200.0)
NO_GRAVITY = Vector2(0.0, 0.0)


def test_single_step_without_contact():
    state = ParticleState(Vector2(0.0, 0.0), Vector2(10.0, 0.0))
    result = step(state, ARENA, 4.0, Vector2(0.0, 9.8), 0.1)

    assert result.velocity.x == pytest.approx(10.0)
    assert result.velocity.y == pytest.approx(0.98)
    assert result.position.x == pytest.approx(1.0)
    assert result.position.y == pytest.approx(0.098)


def test_step_leaves_input_untouched_and_keeps_initial_position():
    state = ParticleState(Vector2(5.0, 5.0), Vector2(1.0, 0.0))
    result = step(state, ARENA, 4.0, Vector2(0.0, 9.8), 0.1)

    assert state.position == Vector2(5.0, 5.0)
    assert result.initial_position == Vector2(5.0, 5.0)


def test_radial_exit_reflects_onto_boundary():
    state = ParticleState(Vector2(196.0, 0.0), Vector2(10.0, 0.0))
    result = step(state, ARENA, 4.0, NO_GRAVITY, 0.1)

    assert result.velocity.x == pytest.approx(-10.0)
    assert result.velocity.y == pytest.approx(0.0)
    assert result.position.x == pytest.approx(196.0)
    assert result.position.y == pytest.approx(0.0)


def test_oblique_exit_flips_radial_component_and_preserves_speed():
    start = Vector2(0.6, 0.8) * 196.0
    velocity = Vector2(2.0, 11.0)
    result = step(ParticleState(start, velocity), ARENA, 4.0, NO_GRAVITY, 0.1)

    moved = start + velocity * 0.1
    normal = moved * (1.0 / moved.length)
    assert result.velocity.dot(normal) == pytest.approx(-velocity.dot(normal))
    assert result.velocity.length == pytest.approx(velocity.length)
    assert result.position.length == pytest.approx(196.0, abs=1e-9)


def test_exactly_on_limit_is_not_corrected():
    state = ParticleState(Vector2(190.0, 0.0), Vector2(12.0, 0.0))
    result = step(state, ARENA, 4.0, NO_GRAVITY, 0.5)
    # Lands exactly on the limit: the comparison is strict.
    assert result.position.x == pytest.approx(196.0)
    assert result.velocity.x == pytest.approx(12.0)


def test_particle_as_large_as_arena_at_center_stays_finite():
    state = ParticleState(Vector2(0.0, 0.0), Vector2(0.0, 0.0))
    result = step(state, Disk(Vector2(0.0, 0.0), 2.0), 2.0, NO_GRAVITY, 0.1)
    assert math.isfinite(result.position.x)
    assert math.isfinite(result.position.y)


def test_containment_holds_every_tick():
    rng = np.random.default_rng(3)
    angles = rng.uniform(0, 2 * np.pi, 200)
    radii = rng.uniform(0, 150, 200)
    positions = np.column_stack((radii * np.cos(angles), radii * np.sin(angles)))
    velocities = rng.uniform(-80, 80, (200, 2))
    system = ParticleSystem(positions, velocities, 4.0)
    integrator = Integrator(ARENA, Vector2(0.0, 9.8))

    for _ in range(300):
        integrator.step_system(system, 0.1)
        distance = np.linalg.norm(system.positions, axis=1)
        assert np.all(distance <= ARENA.radius - 4.0 + 1e-9)


def test_step_system_matches_scalar_step():
    states = [
        ParticleState(Vector2(0.0, 0.0), Vector2(10.0, 0.0)),
        ParticleState(Vector2(195.0, 10.0), Vector2(30.0, -5.0)),
    ]
    system = ParticleSystem.from_states(states, 4.0)
    integrator = Integrator(ARENA, Vector2(0.0, 9.8))

    reflections = integrator.step_system(system, 0.1)
    expected = [integrator.step(s, 4.0, 0.1) for s in states]

    assert reflections == 1
    for i, e in enumerate(expected):
        assert system.state(i).position.x == pytest.approx(e.position.x)
        assert system.state(i).position.y == pytest.approx(e.position.y)
        assert system.state(i).velocity.x == pytest.approx(e.velocity.x)
        assert system.state(i).velocity.y == pytest.approx(e.velocity.y)


def test_reflection_without_gravity_conserves_speed_over_time():
    system = ParticleSystem([[0.0, 0.0]], [[37.0, -21.0]], 4.0)
    integrator = Integrator(ARENA, NO_GRAVITY)
    speed = np.hypot(37.0, -21.0)
    for _ in range(500):
        integrator.step_system(system, 0.1)
    assert np.linalg.norm(system.velocities[0]) == pytest.approx(speed)


def test_empty_system_is_a_no_op():
    system = ParticleSystem(np.zeros((0, 2)), np.zeros((0, 2)), 1.0)
    assert Integrator(ARENA, NO_GRAVITY).step_system(system, 0.1) == 0
