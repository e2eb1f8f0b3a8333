"""Small immutable 2D and 3D vectors of floats."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class Vec2:
    """A two-component vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y)[index]

    def add(self, other: Vec2) -> Vec2:
        """Component-wise sum."""
        return Vec2(self.x + other.x, self.y + other.y)

    def mul(self, scalar: float) -> Vec2:
        """Scale every component by ``scalar``."""
        return Vec2(self.x * scalar, self.y * scalar)

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    __add__ = add
    __mul__ = mul
    __rmul__ = mul


@dataclass(frozen=True, slots=True)
class Vec3:
    """A three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def add(self, other: Vec3) -> Vec3:
        """Component-wise sum."""
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: Vec3) -> Vec3:
        """Component-wise difference."""
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def mul(self, scalar: float) -> Vec3:
        """Scale every component by ``scalar``."""
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other: Vec3) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Right-handed cross product."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.dot(self))

    def normalize(self) -> Vec3:
        """Return the vector scaled to unit length.

        Raises ValueError for the zero vector, which has no direction.
        """
        length = self.length()
        if length == 0.0:
            raise ValueError("cannot normalize a zero-length vector")
        return self.mul(1.0 / length)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __rmul__ = mul