"""Base actor for anything with a transform in the world."""

from __future__ import annotations

from otto.actor import PID, Context, Initialized
from otto.physics import EntityRigidBody, EventRigidBodyRegister, EventRigidBodyTransform
from otto.renderer import EventEntityRegister, EventEntityRenderUpdate
from otto.vector import Vec3


class Entity:
    """An actor that registers with physics and the renderer and follows physics updates."""

    def __init__(
        self,
        physics_pid: PID | None = None,
        renderer_pid: PID | None = None,
        input_pid: PID | None = None,
    ) -> None:
        self.position = Vec3()
        self.velocity = Vec3()
        self.scale = Vec3(1.0, 1.0, 1.0)
        self.rotation = Vec3()
        self.model_name = ""
        self.physics_pid = physics_pid
        self.renderer_pid = renderer_pid
        self.input_pid = input_pid

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                if self.physics_pid is not None:
                    ctx.send(
                        self.physics_pid,
                        EventRigidBodyRegister(pid=ctx.pid, entity_rigid_body=self.to_rigid_body()),
                    )
                if self.renderer_pid is not None:
                    ctx.send(
                        self.renderer_pid,
                        EventEntityRegister(pid=ctx.pid, entity_rigid_body=self.to_rigid_body()),
                    )
            case EventRigidBodyTransform() as msg:
                self.transform(ctx, msg)
                if self.renderer_pid is not None:
                    ctx.send(
                        self.renderer_pid,
                        EventEntityRenderUpdate(pid=ctx.pid, entity_rigid_body=self.to_rigid_body()),
                    )

    def to_rigid_body(self) -> EntityRigidBody:
        """Current state as a rigid body."""
        return EntityRigidBody(
            position=self.position,
            velocity=self.velocity,
            scale=self.scale,
            rotation=self.rotation,
            model_name=self.model_name,
        )

    def transform(self, ctx: Context, msg: EventRigidBodyTransform) -> None:
        """Take position and rotation from a physics update."""
        self.position = msg.position
        self.rotation = msg.rotation