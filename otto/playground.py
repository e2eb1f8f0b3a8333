"""Playground actors: a static cube and a player that moves and carries the camera."""

from __future__ import annotations

from dataclasses import dataclass

from otto.actor import PID, Context, Initialized
from otto.camera import CameraActor
from otto.entity import Entity
from otto.inputs import EventInput, InputState, Key, register_inputs
from otto.mathutil import front_vector, right_vector, up_vector
from otto.physics import EventRigidBodyTransform, EventRigidBodyUpdate
from otto.vector import Vec3

_KEY_DIRECTIONS: tuple[tuple[Key, Vec3], ...] = (
    (Key.W, Vec3(0.0, 0.0, 1.0)),
    (Key.S, Vec3(0.0, 0.0, -1.0)),
    (Key.A, Vec3(1.0, 0.0, 0.0)),
    (Key.D, Vec3(-1.0, 0.0, 0.0)),
    (Key.SPACE, Vec3(0.0, -1.0, 0.0)),
    (Key.LEFT_SHIFT, Vec3(0.0, 1.0, 0.0)),
)


class Cube(Entity):
    """A cube placed in front of the camera."""

    def __init__(
        self,
        physics_pid: PID | None = None,
        renderer_pid: PID | None = None,
        input_pid: PID | None = None,
    ) -> None:
        super().__init__(physics_pid, renderer_pid, input_pid)
        self.model_name = "cube"
        self.position = Vec3(0.0, 0.0, 2.0)


@dataclass(eq=False)
class InputPlayerMovement:
    """Reads movement keys into a camera-relative unit velocity."""

    pid: PID
    velocity: Vec3 = Vec3()

    def process(self, state: InputState, capture_keyboard: bool, capture_mouse: bool) -> bool:
        """Update the velocity; return True when the player is moving.

        Keyboard input is ignored when the UI wants to capture the keyboard.
        """
        self.velocity = Vec3()
        if capture_keyboard:
            return False

        velocity = Vec3()
        for key, direction in _KEY_DIRECTIONS:
            if state.is_key_pressed(key):
                velocity = velocity + direction
        if velocity.length() > 0:
            velocity = velocity.normalize()

        self.velocity = velocity
        return velocity != Vec3()


class Player:
    """Actor moved by keyboard input; spawns the camera as its child."""

    def __init__(
        self,
        physics_pid: PID | None,
        renderer_pid: PID | None,
        input_pid: PID | None,
    ) -> None:
        self.physics_pid = physics_pid
        self.renderer_pid = renderer_pid
        self.input_pid = input_pid
        self.camera_pid: PID | None = None
        self.entity = Entity(physics_pid, None, input_pid)

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                self.camera_pid = ctx.spawn_child(
                    lambda: CameraActor(self.physics_pid, self.renderer_pid, self.input_pid),
                    "camera",
                )
                if self.input_pid is not None:
                    register_inputs(ctx, self.input_pid, InputPlayerMovement(pid=ctx.pid))
            case EventInput() as event:
                self.handle_input(ctx, event)
            case EventRigidBodyTransform():
                if self.camera_pid is not None:
                    ctx.forward(self.camera_pid)
        self.entity.receive(ctx)

    def handle_input(self, ctx: Context, event: EventInput) -> None:
        """Turn camera-relative movement into a world-space velocity for physics."""
        context = event.context
        if not isinstance(context, InputPlayerMovement) or self.physics_pid is None:
            return
        rotation = self.entity.rotation
        local = context.velocity
        velocity = (
            right_vector(rotation) * local.x
            + up_vector(rotation) * local.y
            + front_vector(rotation) * local.z
        )
        ctx.send(
            self.physics_pid,
            EventRigidBodyUpdate(pid=ctx.pid, velocity=velocity, angular_velocity=Vec3()),
        )