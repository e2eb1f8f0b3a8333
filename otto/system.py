"""Messages and state shared between the engine's systems."""

from __future__ import annotations

from dataclasses import dataclass

from otto.vector import Vec2, Vec3


@dataclass(frozen=True)
class Tick:
    """A simulation step of ``delta_time`` seconds."""

    delta_time: float


@dataclass(frozen=True)
class Camera:
    """Camera position, (pitch, yaw) rotation and zoom."""

    position: Vec3 = Vec3()
    rotation: Vec2 = Vec2()
    zoom: float = 0.0