# otto

`otto` is the core of a small 3D engine built around actors that pass messages to each other.
Entities register with a physics actor and a renderer actor. On every `Tick` the physics actor
integrates velocities into positions and rotations and sends the result back to each entity.
The input actor polls an input provider and forwards input contexts to their owners, and the
camera follows the player.

Everything runs on a single-threaded, deterministic actor engine: messages are queued and
delivered in the order they were sent when the engine is run.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Modules

- `otto.vector`: `Vec2` and `Vec3`, immutable float vectors with `add`, `mul`, `length` and,
  on `Vec3`, `sub`, `dot`, `cross` and `normalize` (which raises `ValueError` for the zero
  vector). The usual operators `+`, `-` and `*` are supported too.
- `otto.mathutil`: `front_vector`, `right_vector` and `up_vector` compute direction vectors
  from a (pitch, yaw) rotation; `front_vector_2d`, `right_vector_2d` and `up_vector_2d` give
  their X and Z components; `to_float32` rounds a `Vec3` to single precision.
- `otto.actor`: the actor `Engine` (`spawn`, `send`, `subscribe`, `unsubscribe`,
  `broadcast_event`, `request`, `run_until_idle`, `pending`, `dead_letters`), with `PID`,
  `Context` (`send`, `respond`, `forward`, `spawn_child`) and `Initialized`, the first message
  every actor receives. `Engine.request` runs the engine until the target responds and raises
  `TimeoutError` if the queue runs dry or the timeout passes first.
- `otto.system`: the `Tick` message and the `Camera` state.
- `otto.physics`: the `Physics` actor, `EntityRigidBody` and the events
  `EventRigidBodyRegister`, `EventRigidBodyUpdate` and `EventRigidBodyTransform`.
- `otto.renderer`: the `Render` actor, which keeps the latest state of every registered entity
  and the camera and answers `RequestEntities` with an `EntitiesResponse`.
- `otto.inputs`: `Key`, `MouseButton`, `InputState`, the `InputProvider` and `InputContext`
  protocols, `ManualInputProvider` (state set directly by the caller), `InputActor` and
  `register_inputs`. An `EventInput` is sent while a context reports input, and once more on
  the tick its input stops.
- `otto.entity`: `Entity`, the base for every actor that has a rigid body.
- `otto.camera`: `CameraActor` and its input context `InputCamera` (right mouse button to
  look around, mouse wheel to zoom).
- `otto.playground`: a sample scene made of `Player`, `InputPlayerMovement` (W/A/S/D, Space,
  Left Shift) and `Cube`.
- `otto.models`: `ModelManager`, a Wavefront OBJ parser (`parse_obj`), `calculate_bounds`
  and the file-name helpers `is_obj_file`, `is_image_file` and
  `file_name_without_extension`. Load failures raise `LoadError`; unknown names raise
  `KeyError`.
- `otto.shaders`: `ShaderManager`, which treats every subfolder of a root directory as one
  shader program made of its `.glsl` files, together with `ShaderType`,
  `determine_shader_type` and `load_shaders_from_folder`. Failures raise `ShaderError`.
- `otto.bench`: the message-throughput benchmark (`run_benchmark`, `BenchmarkStats`, `main`).

## Example

```python
from otto.actor import Engine
from otto.physics import Physics
from otto.renderer import Render, RequestEntities
from otto.inputs import InputActor
from otto.playground import Player, Cube
from otto.system import Tick

engine = Engine()
input_pid = engine.spawn(InputActor, "input")
renderer_pid = engine.spawn(Render, "renderer")
physics_pid = engine.spawn(Physics, "physics")
engine.spawn(lambda: Player(physics_pid, renderer_pid, input_pid), "player")
engine.spawn(lambda: Cube(physics_pid, renderer_pid, input_pid), "test_cube")
engine.run_until_idle()

engine.broadcast_event(Tick(delta_time=1 / 64))
engine.run_until_idle()
response = engine.request(renderer_pid, RequestEntities(), timeout=0.01)
for body in response.entities:
    print(body.model_name, body.position)
```

To feed keyboard or mouse input, give `InputActor` a `ManualInputProvider` and change its
`input_state` between ticks.

## Benchmark

The benchmark spawns simulated players that send a random velocity to a mock physics actor
and a mock renderer on every tick, then prints message and tick rates:

```
otto-bench --duration 10 --tickrate 64 --players 100
```

The duration accepts plain seconds or units such as `500ms`, `10s` or `1m30s`. The tick rate
must be either 64 or 128.

## What it does not do

- It opens no window and draws nothing: the `Render` actor only keeps state to be drawn.
- It reads no real keyboard or mouse; input comes from an `InputProvider` you supply.
- `ModelManager` keeps parsed vertex data in memory and `ShaderManager` reads shader sources;
  neither uploads anything to a GPU nor compiles shaders. Program ids are plain counters.
- `ModelManager` decodes textures as JPEG only: files named `.png` or `.bmp` are picked up by
  `init` but fail to load.
- There is no command for the playground scene; it is used from Python as shown above.