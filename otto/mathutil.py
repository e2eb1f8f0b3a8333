"""Direction vectors derived from pitch/yaw rotations."""

from __future__ import annotations

import math
import struct

from otto.vector import Vec2, Vec3


def front_vector(rotation: Vec3) -> Vec3:
    """Forward direction for a rotation whose first two components are pitch and yaw."""
    pitch, yaw = rotation[0], rotation[1]
    cos_pitch = math.cos(pitch)
    return Vec3(cos_pitch * math.sin(yaw), math.sin(pitch), cos_pitch * math.cos(yaw))


def right_vector(rotation: Vec3) -> Vec3:
    """Right direction; depends on yaw only."""
    yaw = rotation[1]
    return Vec3(math.cos(yaw), 0.0, -math.sin(yaw))


def up_vector(rotation: Vec3) -> Vec3:
    """Up direction as the cross product of right and front."""
    return right_vector(rotation).cross(front_vector(rotation))


def _as_3d(rotation: Vec2) -> Vec3:
    return Vec3(rotation[0], rotation[1], 0.0)


def front_vector_2d(rotation: Vec2) -> Vec2:
    """X and Z of the front vector for a (pitch, yaw) pair."""
    front = front_vector(_as_3d(rotation))
    return Vec2(front.x, front.z)


def right_vector_2d(rotation: Vec2) -> Vec2:
    """X and Z of the right vector for a (pitch, yaw) pair."""
    right = right_vector(_as_3d(rotation))
    return Vec2(right.x, right.z)


def up_vector_2d(rotation: Vec2) -> Vec2:
    """X and Z of the up vector for a (pitch, yaw) pair."""
    up = up_vector(_as_3d(rotation))
    return Vec2(up.x, up.z)


def _float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def to_float32(vec: Vec3) -> Vec3:
    """Round each component to single precision."""
    return Vec3(*(_float32(component) for component in vec))