"""Actor-driven 3D engine core: entities, physics, input, camera, asset managers and a benchmark."""

__version__ = "1.0.0"