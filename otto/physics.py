"""Rigid-body physics system: integrates velocities on every tick."""

from __future__ import annotations

from dataclasses import dataclass, replace

from otto.actor import PID, Context, Initialized
from otto.system import Tick
from otto.vector import Vec3

MOVEMENT_SPEED = 10.0
ROTATION_SPEED = 4.0
_REST_THRESHOLD = 0.01


@dataclass(frozen=True)
class EntityRigidBody:
    """Physical state of one entity."""

    position: Vec3 = Vec3()
    velocity: Vec3 = Vec3()
    scale: Vec3 = Vec3()
    rotation: Vec3 = Vec3()
    angular_velocity: Vec3 = Vec3()
    model_name: str = ""


@dataclass(frozen=True)
class EventRigidBodyRegister:
    """Asks the physics system to simulate the body owned by ``pid``."""

    pid: PID
    entity_rigid_body: EntityRigidBody


@dataclass(frozen=True)
class EventRigidBodyUpdate:
    """Sets the linear and angular velocity of a registered body."""

    pid: PID
    velocity: Vec3 = Vec3()
    angular_velocity: Vec3 = Vec3()


@dataclass(frozen=True)
class EventRigidBodyTransform:
    """Sent to a body's owner after each integration step."""

    pid: PID
    position: Vec3
    rotation: Vec3


class Physics:
    """Actor that keeps registered bodies and moves them on each tick."""

    def __init__(self) -> None:
        self.entities: dict[PID, EntityRigidBody] = {}

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                ctx.engine.subscribe(ctx.pid)
                self.entities = {}
            case EventRigidBodyRegister() as msg:
                self.entities[msg.pid] = msg.entity_rigid_body
            case EventRigidBodyUpdate() as msg:
                body = self.entities.get(msg.pid)
                if body is None:
                    return
                self.entities[msg.pid] = replace(
                    body, velocity=msg.velocity, angular_velocity=msg.angular_velocity
                )
            case Tick() as tick:
                self.update(ctx, tick)

    def update(self, ctx: Context, tick: Tick) -> None:
        """Advance every registered body by ``tick.delta_time`` seconds."""
        for pid, entity in list(self.entities.items()):
            self.update_position(ctx, pid, entity, tick.delta_time)

    def update_position(
        self, ctx: Context, pid: PID, entity: EntityRigidBody, delta_time: float
    ) -> None:
        """Integrate one body, store it and notify its owner."""
        position = entity.position + entity.velocity * (MOVEMENT_SPEED * delta_time)
        rotation = entity.rotation + entity.angular_velocity * (ROTATION_SPEED * delta_time)

        velocity = entity.velocity
        if velocity.length() < _REST_THRESHOLD:
            velocity = Vec3()
        angular_velocity = entity.angular_velocity
        if angular_velocity.length() < _REST_THRESHOLD:
            angular_velocity = Vec3()

        self.entities[pid] = replace(
            entity,
            position=position,
            rotation=rotation,
            velocity=velocity,
            angular_velocity=angular_velocity,
        )
        ctx.send(pid, EventRigidBodyTransform(pid=pid, position=position, rotation=rotation))