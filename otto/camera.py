"""Camera actor and the input context that drives it."""

from __future__ import annotations

from dataclasses import dataclass, replace

from otto.actor import PID, Context, Initialized
from otto.entity import Entity
from otto.inputs import EventInput, InputState, MouseButton, register_inputs
from otto.physics import EventRigidBodyTransform, EventRigidBodyUpdate
from otto.renderer import EventUpdateCamera
from otto.system import Camera
from otto.vector import Vec2, Vec3

MOUSE_SENSITIVITY = 0.1
WHEEL_SENSITIVITY = 0.1


@dataclass(frozen=True)
class CameraUpdate:
    """Carries a new camera state."""

    camera: Camera


@dataclass(eq=False)
class InputCamera:
    """Reads mouse look and wheel zoom from the input state."""

    pid: PID
    rotation: Vec2 = Vec2()
    zoom: float = 0.0

    def process(self, state: InputState, capture_keyboard: bool, capture_mouse: bool) -> bool:
        """Update rotation (pitch, yaw) and zoom; return True while there is camera input.

        Mouse input is ignored when the UI wants to capture the mouse.
        """
        rotation = Vec2()
        zoom = 0.0

        right_mouse_down = not capture_mouse and state.is_mouse_button_pressed(
            MouseButton.RIGHT
        )
        if right_mouse_down:
            delta = state.mouse_delta
            rotation = Vec2(delta.y * MOUSE_SENSITIVITY, delta.x * MOUSE_SENSITIVITY)

        if not capture_mouse and state.mouse_wheel != 0:
            zoom = state.mouse_wheel * WHEEL_SENSITIVITY

        self.rotation = rotation
        self.zoom = zoom
        return right_mouse_down or rotation != Vec2() or zoom != 0.0


class CameraActor:
    """Actor that owns the camera, registers its input and reports it to the renderer."""

    def __init__(
        self,
        physics_pid: PID | None,
        renderer_pid: PID | None,
        input_pid: PID | None,
    ) -> None:
        self.physics_pid = physics_pid
        self.renderer_pid = renderer_pid
        self.input_pid = input_pid
        self.entity = Entity(None, renderer_pid, input_pid)
        self.camera = Camera(position=Vec3(0.0, 0.0, -2.0), rotation=Vec2(0.0, 0.0), zoom=1.0)

    def receive(self, ctx: Context) -> None:
        match ctx.message:
            case Initialized():
                if self.input_pid is not None:
                    register_inputs(ctx, self.input_pid, InputCamera(pid=ctx.pid))
                self._publish(ctx)
            case EventInput() as event:
                self.handle_input(ctx, event)
            case EventRigidBodyTransform() as msg:
                self.camera = replace(
                    self.camera,
                    position=msg.position,
                    rotation=Vec2(msg.rotation[0], msg.rotation[1]),
                )
                self._publish(ctx)
        self.entity.receive(ctx)

    def handle_input(self, ctx: Context, event: EventInput) -> None:
        """Turn camera input into an angular velocity for the physics system."""
        context = event.context
        if isinstance(context, InputCamera) and self.physics_pid is not None:
            ctx.send(
                self.physics_pid,
                EventRigidBodyUpdate(
                    pid=ctx.pid,
                    angular_velocity=Vec3(context.rotation[0], context.rotation[1], 0.0),
                ),
            )

    def _publish(self, ctx: Context) -> None:
        if self.renderer_pid is not None:
            ctx.send(self.renderer_pid, EventUpdateCamera(camera=self.camera))