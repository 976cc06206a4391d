# geometry.py
"""
Minimal 2D geometry value types.

Vector2 is the only vector type used by the scalar code paths; the batch
paths in simulation.py and rasterizer.py work on (N, 2) NumPy arrays with
the same x, y column order.
"""
import math
from dataclasses import dataclass, field

import numpy as np

# --- Data Contracts ---
#
# class Vector2 (frozen):
#   - x, y: float
#   - dot(other) -> float
#   - reflect(normal) -> Vector2
#     - Inputs: normal is expected to be of unit length.
#     - Outputs: self - 2 * (self . normal) * normal
#   - Invariants: immutable; every operation returns a new Vector2.
#
# class Disk (frozen):
#   - center: Vector2, radius: float
#   - radius_squared: float, precomputed on construction.
#   - Invariants: radius >= 0, otherwise ValueError.


@dataclass(frozen=True)
class Vector2:
    x: float
    y: float

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def dot(self, other: "Vector2") -> float:
        return self.x * other.x + self.y * other.y

    def reflect(self, normal: "Vector2") -> "Vector2":
        """Specular reflection about a unit normal."""
        d = self.dot(normal)
        return Vector2(self.x - 2.0 * d * normal.x, self.y - 2.0 * d * normal.y)

    @property
    def length_squared(self) -> float:
        return self.dot(self)

    @property
    def length(self) -> float:
        return math.sqrt(self.length_squared)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> "Vector2":
        return cls(float(values[0]), float(values[1]))


@dataclass(frozen=True)
class Disk:
    """A circle: the arena boundary or the footprint of one particle."""
    center: Vector2
    radius: float
    radius_squared: float = field(init=False, repr=False)

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError(f"Disk radius must be non-negative, got {self.radius}.")
        object.__setattr__(self, 'radius_squared', self.radius ** 2)

    def contains(self, point: Vector2) -> bool:
        """Strict interior test, matching the rasterizer's coverage rule."""
        return (point - self.center).length_squared < self.radius_squared
