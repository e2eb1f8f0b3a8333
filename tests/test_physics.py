import pytest

from otto.actor import Engine, Initialized
from otto.physics import (
    MOVEMENT_SPEED,
    ROTATION_SPEED,
    EntityRigidBody,
    EventRigidBodyRegister,
    EventRigidBodyTransform,
    EventRigidBodyUpdate,
    Physics,
)
from otto.system import Tick
from otto.vector import Vec3


class Recorder:
    def __init__(self):
        self.messages = []

    def receive(self, ctx):
        self.messages.append(ctx.message)

    def transforms(self):
        return [m for m in self.messages if isinstance(m, EventRigidBodyTransform)]


@pytest.fixture
def world():
    engine = Engine()
    physics = Physics()
    recorder = Recorder()
    physics_pid = engine.spawn(lambda: physics, "physics")
    probe_pid = engine.spawn(lambda: recorder, "probe")
    engine.run_until_idle()
    return engine, physics, physics_pid, recorder, probe_pid


def tick(engine, dt):
    engine.broadcast_event(Tick(delta_time=dt))
    engine.run_until_idle()


def test_movement_and_rotation_use_speed_constants(world):
    engine, _, physics_pid, recorder, probe_pid = world
    body = EntityRigidBody(
        velocity=Vec3(1.0, 0.0, 0.0), angular_velocity=Vec3(0.0, 1.0, 0.0)
    )
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, body))
    tick(engine, 0.5)
    (transform,) = recorder.transforms()
    assert transform.position.x == pytest.approx(MOVEMENT_SPEED * 0.5)
    assert transform.position.x == pytest.approx(5.0)
    assert transform.rotation.y == pytest.approx(ROTATION_SPEED * 0.5)
    assert transform.rotation.y == pytest.approx(2.0)


def test_stationary_body_keeps_position(world):
    engine, _, physics_pid, recorder, probe_pid = world
    body = EntityRigidBody(position=Vec3(3.0, -2.0, 5.0), rotation=Vec3(0.5, 0.25, 0.0))
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, body))
    tick(engine, 0.1)
    assert recorder.transforms() == [
        EventRigidBodyTransform(probe_pid, body.position, body.rotation)
    ]


def test_velocity_moves_body(world):
    engine, _, physics_pid, recorder, probe_pid = world
    body = EntityRigidBody(velocity=Vec3(1.0, 0.0, 0.0))
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, body))
    tick(engine, 0.1)
    (transform,) = recorder.transforms()
    assert transform.position.x == pytest.approx(1.0)
    assert transform.position.y == 0.0


def test_angular_velocity_rotates_body(world):
    engine, _, physics_pid, recorder, probe_pid = world
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, EntityRigidBody()))
    engine.send(
        physics_pid,
        EventRigidBodyUpdate(probe_pid, angular_velocity=Vec3(0.0, 1.0, 0.0)),
    )
    tick(engine, 0.25)
    (transform,) = recorder.transforms()
    assert transform.rotation.y == pytest.approx(1.0)
    assert transform.position == Vec3()


def test_two_ticks_move_twice_as_far(world):
    engine, _, physics_pid, recorder, probe_pid = world
    body = EntityRigidBody(velocity=Vec3(0.0, 0.0, 1.0))
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, body))
    tick(engine, 0.05)
    tick(engine, 0.05)
    first, second = recorder.transforms()
    assert second.position.z == pytest.approx(2 * first.position.z)


def test_update_for_unknown_body_is_ignored(world):
    engine, physics, physics_pid, recorder, probe_pid = world
    engine.send(physics_pid, EventRigidBodyUpdate(probe_pid, velocity=Vec3(1.0, 0.0, 0.0)))
    tick(engine, 0.1)
    assert physics.entities == {}
    assert recorder.messages == [Initialized()]


def test_tiny_velocities_are_zeroed(world):
    engine, physics, physics_pid, _, probe_pid = world
    body = EntityRigidBody(velocity=Vec3(0.001, 0.0, 0.0), angular_velocity=Vec3(0.0, 0.002, 0.0))
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, body))
    tick(engine, 0.1)
    stored = physics.entities[probe_pid]
    assert stored.velocity == Vec3()
    assert stored.angular_velocity == Vec3()


def test_large_velocity_is_kept(world):
    engine, physics, physics_pid, _, probe_pid = world
    velocity = Vec3(0.0, 1.0, 0.0)
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, EntityRigidBody(velocity=velocity)))
    tick(engine, 0.1)
    assert physics.entities[probe_pid].velocity == velocity


def test_update_preserves_other_fields(world):
    engine, physics, physics_pid, _, probe_pid = world
    body = EntityRigidBody(scale=Vec3(2.0, 2.0, 2.0), model_name="cube")
    engine.send(physics_pid, EventRigidBodyRegister(probe_pid, body))
    engine.send(physics_pid, EventRigidBodyUpdate(probe_pid, velocity=Vec3(1.0, 0.0, 0.0)))
    engine.run_until_idle()
    stored = physics.entities[probe_pid]
    assert stored.model_name == "cube"
    assert stored.scale == body.scale
    assert stored.velocity == Vec3(1.0, 0.0, 0.0)