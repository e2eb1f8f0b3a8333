"""Render system: keeps the latest state of every visible entity and the camera."""

from __future__ import annotations

from dataclasses import dataclass

from otto.actor import PID, Context, Initialized
from otto.physics import EntityRigidBody
from otto.system import Camera


@dataclass(frozen=True)
class EventEntityRegister:
    """Adds an entity to the set the renderer draws."""

    pid: PID
    entity_rigid_body: EntityRigidBody


@dataclass(frozen=True)
class EventEntityRenderUpdate:
    """Replaces the stored state of an entity."""

    pid: PID
    entity_rigid_body: EntityRigidBody


@dataclass(frozen=True)
class RequestEntities:
    """Asks the renderer for everything it would draw."""


@dataclass(frozen=True)
class EntitiesResponse:
    """Reply to :class:`RequestEntities`."""

    entities: tuple[EntityRigidBody, ...] = ()
    camera: Camera = Camera()


@dataclass(frozen=True)
class EventUpdateCamera:
    """Replaces the camera the renderer uses."""

    camera: Camera


class Render:
    """Actor holding the render-side view of the world."""

    def __init__(self) -> None:
        self.camera = Camera()
        self.entities: dict[PID, EntityRigidBody] = {}

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                self.entities = {}
                self.camera = Camera()
            case EventEntityRegister() | EventEntityRenderUpdate() as msg:
                self.entities[msg.pid] = msg.entity_rigid_body
            case EventUpdateCamera() as msg:
                self.camera = msg.camera
            case RequestEntities():
                ctx.respond(
                    EntitiesResponse(entities=tuple(self.entities.values()), camera=self.camera)
                )