# scene.py
"""
Scene orchestration: one arena, one population and one draw policy.

A Scene owns every piece of mutable simulation state for a run. The
display shell calls `tick` and then `render` once per frame; nothing
else mutates a scene.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np

import rasterizer
from constants import (
    ARENA_COLOR, BALL_COLOR, CLEAR_COLOR, DEFAULT_SCENE, GRAVITY,
    POSITION_CHANNEL_RANGE, SCREEN_HEIGHT, SCREEN_WIDTH, TIME_STEP,
    VELOCITY_CHANNEL_RANGE, VELOCITY_SPAN_FACTOR
)
from geometry import Disk, Vector2
from particle import ParticleState, ParticleSystem
from simulation import Integrator

# --- Data Contracts ---
#
# class Scene:
#   - __init__(self, config: SceneConfig):
#     - Side Effects: Builds the arena, the population and the integrator.
#     - Invariants: config is validated; an invalid config raises ValueError.
#
#   - tick(self, dt: Optional[float] = None) -> None:
#     - Side Effects: Advances every particle once, in creation order.
#
#   - render(self, buffer) -> None:
#     - Inputs: writable bytes-like RGBA buffer of width*height*4 bytes.
#     - Side Effects: Clears and redraws the buffer. No reference to the
#       buffer is kept after the call returns.

Color = Tuple[int, int, int, int]
Span = Tuple[float, float]


class DrawPolicy(Enum):
    SOLID_PARTICLES = "solid_particles"
    POSITION_PHASE_SPACE = "position_phase_space"
    VELOCITY_PHASE_SPACE = "velocity_phase_space"


class Population(Enum):
    EXPLICIT = "explicit"
    FAN = "fan"
    INTERIOR_GRID = "interior_grid"


@dataclass(frozen=True)
class SceneConfig:
    """Every per-scene constant, so each policy can be exercised on its own."""
    title: str = "Single Ball"
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    gravity: float = GRAVITY
    time_step: float = TIME_STEP
    draw_policy: DrawPolicy = DrawPolicy.SOLID_PARTICLES
    population: Population = Population.EXPLICIT
    particle_radius: float = SCREEN_WIDTH / 100.0
    # Explicit population: (x, y, vx, vy) per particle.
    particles: Tuple[Tuple[float, float, float, float], ...] = ()
    # Fan population.
    fan_count: int = 10
    fan_speed: float = 1.0
    clear_color: Color = CLEAR_COLOR
    arena_color: Color = ARENA_COLOR
    particle_color: Color = BALL_COLOR
    position_channel_range: Span = POSITION_CHANNEL_RANGE
    velocity_span: Span = (0.0, SCREEN_WIDTH * VELOCITY_SPAN_FACTOR)
    velocity_channel_range: Span = VELOCITY_CHANNEL_RANGE

    @property
    def arena(self) -> Disk:
        return Disk(Vector2(self.width / 2.0, self.height / 2.0), self.width / 2.0)

    @property
    def acceleration(self) -> Vector2:
        return Vector2(0.0, self.gravity)

    @classmethod
    def from_params(cls, preset: "SceneConfig", params: Optional[Dict[str, Any]]) -> "SceneConfig":
        """
        Overlays the `simulation_parameters` section of config.json onto a
        preset. Unknown keys are ignored with a warning.
        """
        params = params or {}
        overrides: Dict[str, Any] = {}
        if 'gravity' in params:
            overrides['gravity'] = float(params['gravity'])
        if 'time_step' in params:
            overrides['time_step'] = float(params['time_step'])
        if 'velocity_span_factor' in params:
            overrides['velocity_span'] = (0.0, preset.width * float(params['velocity_span_factor']))
        for key in ('clear_color', 'arena_color', 'particle_color'):
            if key in params:
                overrides[key] = tuple(int(c) for c in params[key])

        ignored = set(params) - {
            'gravity', 'time_step', 'velocity_span_factor', 'pixel_size',
            'clear_color', 'arena_color', 'particle_color'
        }
        if ignored:
            logging.warning(f"Ignoring unknown simulation parameters: {sorted(ignored)}")
        return replace(preset, **overrides)


def _validate(config: SceneConfig) -> None:
    problems = []
    if config.width <= 0 or config.height <= 0:
        problems.append(f"screen size must be positive, got {config.width}x{config.height}")
    if config.particle_radius < 0:
        problems.append(f"particle radius must be non-negative, got {config.particle_radius}")
    if config.velocity_span[0] == config.velocity_span[1]:
        problems.append(f"velocity span {config.velocity_span} is degenerate")
    for name in ('clear_color', 'arena_color', 'particle_color'):
        color = getattr(config, name)
        if len(color) != 4 or not all(0 <= c <= 255 for c in color):
            problems.append(f"{name} must be four values in 0..255, got {color}")
    if problems:
        msg = f"Configuration error in scene '{config.title}': " + "; ".join(problems) + "."
        logging.critical(msg)
        raise ValueError(msg)


def build_population(config: SceneConfig, arena: Disk) -> ParticleSystem:
    if config.population is Population.EXPLICIT:
        states = [
            ParticleState(Vector2(x, y), Vector2(vx, vy))
            for x, y, vx, vy in config.particles
        ]
        return ParticleSystem.from_states(states, config.particle_radius)
    if config.population is Population.FAN:
        return ParticleSystem.fan(arena.center, config.fan_count, config.fan_speed,
                                  config.particle_radius)
    if config.population is Population.INTERIOR_GRID:
        return ParticleSystem.interior_grid(arena, config.width, config.height,
                                            config.particle_radius)
    msg = f"Unknown population strategy: {config.population!r}"
    logging.critical(msg)
    raise ValueError(msg)


class Scene:
    """
    Owns the particles, the arena and the draw policy of one running scene.
    """
    def __init__(self, config: SceneConfig):
        _validate(config)
        self.config = config
        self.arena = config.arena
        self.particles = build_population(config, self.arena)
        self.integrator = Integrator(self.arena, config.acceleration)
        self.tick_count = 0
        self.last_reflections = 0

        # Phase-space pixel targets never change, so round them once.
        initial = self.particles.initial_positions
        self._plot_xs = rasterizer.round_half_up(initial[:, 0]).astype(np.int64)
        self._plot_ys = rasterizer.round_half_up(initial[:, 1]).astype(np.int64)

        logging.info(
            f"Scene '{config.title}' initialized with {len(self.particles)} particles, "
            f"policy {config.draw_policy.value}."
        )

    def tick(self, dt: Optional[float] = None) -> None:
        dt = self.config.time_step if dt is None else dt
        self.last_reflections = self.integrator.step_system(self.particles, dt)
        self.tick_count += 1

    def render(self, buffer) -> None:
        frame = rasterizer.frame_view(buffer, self.config.width, self.config.height)
        rasterizer.clear(frame, self.config.clear_color)

        policy = self.config.draw_policy
        if policy is DrawPolicy.SOLID_PARTICLES:
            self._draw_solid(frame)
        elif policy is DrawPolicy.POSITION_PHASE_SPACE:
            self._draw_position_phase_space(frame)
        elif policy is DrawPolicy.VELOCITY_PHASE_SPACE:
            self._draw_velocity_phase_space(frame)

    def _draw_solid(self, frame: np.ndarray) -> None:
        rasterizer.fill_disk(frame, self.arena, self.config.arena_color)
        rasterizer.fill_disks(frame, self.particles.positions, self.particles.radii,
                              self.config.particle_color)

    def _draw_position_phase_space(self, frame: np.ndarray) -> None:
        low, high = self.config.position_channel_range
        center, radius = self.arena.center, self.arena.radius
        positions = self.particles.positions

        colors = np.zeros((len(self.particles), 4), dtype=np.uint8)
        colors[:, 0] = rasterizer.to_channel(rasterizer.map_range(
            positions[:, 0], center.x - radius, center.x + radius, low, high))
        colors[:, 1] = rasterizer.to_channel(rasterizer.map_range(
            positions[:, 1], center.y - radius, center.y + radius, low, high))
        colors[:, 3] = 255
        rasterizer.plot_pixels(frame, self._plot_xs, self._plot_ys, colors)

    def _draw_velocity_phase_space(self, frame: np.ndarray) -> None:
        span_low, span_high = self.config.velocity_span
        low, high = self.config.velocity_channel_range
        velocities = self.particles.velocities

        colors = np.zeros((len(self.particles), 4), dtype=np.uint8)
        colors[:, 1] = rasterizer.to_channel(rasterizer.map_range(
            velocities[:, 0], span_low, span_high, low, high))
        colors[:, 2] = rasterizer.to_channel(rasterizer.map_range(
            velocities[:, 1], span_low, span_high, low, high))
        colors[:, 3] = 255
        rasterizer.plot_pixels(frame, self._plot_xs, self._plot_ys, colors)


# --- Scene Presets ---

_CENTER = (SCREEN_WIDTH / 2.0, SCREEN_HEIGHT / 2.0)

SCENES: Dict[str, SceneConfig] = {
    "1": SceneConfig(
        title="Single Ball",
        particles=((_CENTER[0], _CENTER[1], 10.0, 0.0),),
    ),
    "2": SceneConfig(
        title="Chaotic System With 10 Balls",
        population=Population.FAN,
        fan_count=10,
        fan_speed=1.0,
    ),
    "3": SceneConfig(
        title="Ball Per Pixel",
        population=Population.INTERIOR_GRID,
        particle_radius=1.0,
    ),
    "4": SceneConfig(
        title="Position Phase Space",
        population=Population.INTERIOR_GRID,
        particle_radius=1.0,
        draw_policy=DrawPolicy.POSITION_PHASE_SPACE,
    ),
    "5": SceneConfig(
        title="Velocity Phase Space",
        population=Population.INTERIOR_GRID,
        particle_radius=1.0,
        draw_policy=DrawPolicy.VELOCITY_PHASE_SPACE,
    ),
}


def resolve_scene(selector: Optional[str]) -> SceneConfig:
    """
    Maps a command-line selector to a preset. Missing or unrecognized
    selectors fall back to the default scene.
    """
    key = (selector or "").strip()
    if key not in SCENES:
        # Accept padded numerals such as "01".
        try:
            key = str(int(key))
        except ValueError:
            pass
    if key not in SCENES:
        if selector is not None:
            logging.warning(f"Unknown scene '{selector}', falling back to scene {DEFAULT_SCENE}.")
        key = DEFAULT_SCENE
    return SCENES[key]
