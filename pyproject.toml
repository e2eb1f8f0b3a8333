[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "otto"
version = "1.0.0"
description = "A small actor-driven 3D engine core: entities, physics, input, camera and asset managers"
requires-python = ">=3.10"
keywords = ["game-engine", "actors", "physics", "3d", "obj", "glsl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Typing :: Typed",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
otto-bench = "otto.bench:main"

[tool.hatch.build.targets.wheel]
packages = ["otto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
