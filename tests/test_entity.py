from otto.actor import PID, Engine, Initialized
from otto.entity import Entity
from otto.physics import (
    EventRigidBodyRegister,
    EventRigidBodyTransform,
    Physics,
)
from otto.renderer import (
    EventEntityRegister,
    EventEntityRenderUpdate,
    Render,
    RequestEntities,
)
from otto.system import Tick
from otto.vector import Vec3


class Recorder:
    def __init__(self):
        self.messages = []

    def receive(self, ctx):
        self.messages.append(ctx.message)


def test_new_entity_has_unit_scale():
    entity = Entity()
    assert entity.scale == Vec3(1.0, 1.0, 1.0)
    assert entity.position == Vec3()
    assert entity.model_name == ""


def test_to_rigid_body_copies_fields():
    entity = Entity()
    entity.position = Vec3(1.0, 2.0, 3.0)
    entity.velocity = Vec3(0.0, 1.0, 0.0)
    entity.rotation = Vec3(0.1, 0.2, 0.3)
    entity.model_name = "cube"
    body = entity.to_rigid_body()
    assert body.position == entity.position
    assert body.velocity == entity.velocity
    assert body.rotation == entity.rotation
    assert body.scale == entity.scale
    assert body.model_name == "cube"
    assert body.angular_velocity == Vec3()


def test_initialized_registers_with_physics_and_renderer():
    engine = Engine()
    physics_probe, renderer_probe = Recorder(), Recorder()
    physics_pid = engine.spawn(lambda: physics_probe, "physics")
    renderer_pid = engine.spawn(lambda: renderer_probe, "renderer")
    entity = Entity(physics_pid, renderer_pid)
    entity.model_name = "cube"
    entity_pid = engine.spawn(lambda: entity, "entity")
    engine.run_until_idle()
    assert physics_probe.messages == [
        Initialized(),
        EventRigidBodyRegister(entity_pid, entity.to_rigid_body()),
    ]
    assert renderer_probe.messages == [
        Initialized(),
        EventEntityRegister(entity_pid, entity.to_rigid_body()),
    ]


def test_missing_pids_send_nothing():
    engine = Engine()
    entity_pid = engine.spawn(Entity, "entity")
    engine.run_until_idle()
    engine.send(entity_pid, EventRigidBodyTransform(entity_pid, Vec3(1.0, 0.0, 0.0), Vec3()))
    assert engine.run_until_idle() == 1
    assert engine.dead_letters == []


def test_transform_updates_and_notifies_renderer():
    engine = Engine()
    renderer_probe = Recorder()
    renderer_pid = engine.spawn(lambda: renderer_probe, "renderer")
    entity = Entity(None, renderer_pid)
    entity_pid = engine.spawn(lambda: entity, "entity")
    engine.run_until_idle()
    position, rotation = Vec3(4.0, 5.0, 6.0), Vec3(0.5, 0.0, 0.0)
    engine.send(entity_pid, EventRigidBodyTransform(entity_pid, position, rotation))
    engine.run_until_idle()
    assert entity.position == position
    assert entity.rotation == rotation
    assert renderer_probe.messages[-1] == EventEntityRenderUpdate(
        entity_pid, entity.to_rigid_body()
    )


def test_transform_ignores_sender_pid_field():
    entity = Entity()
    msg = EventRigidBodyTransform(PID("local", "other"), Vec3(7.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    entity.transform(None, msg)
    assert entity.position == msg.position
    assert entity.rotation == msg.rotation


def test_entity_moves_through_physics_into_renderer():
    engine = Engine()
    physics = Physics()
    physics_pid = engine.spawn(lambda: physics, "physics")
    renderer_pid = engine.spawn(Render, "renderer")
    entity = Entity(physics_pid, renderer_pid)
    entity.velocity = Vec3(0.0, 0.0, 1.0)
    entity.model_name = "cube"
    entity_pid = engine.spawn(lambda: entity, "entity")
    engine.run_until_idle()

    engine.broadcast_event(Tick(delta_time=0.1))
    engine.run_until_idle()

    response = engine.request(renderer_pid, RequestEntities(), 1.0)
    (rendered,) = response.entities
    assert rendered.position == entity.position
    assert entity.position == physics.entities[entity_pid].position
    assert entity.position.z > 0.0
    assert rendered.model_name == "cube"