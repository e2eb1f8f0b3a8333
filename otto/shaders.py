"""Discovery and bookkeeping of shader programs stored as folders of GLSL files."""

from __future__ import annotations

import itertools
import os
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path


class ShaderError(Exception):
    """Shader files could not be read or assembled into a program."""


class ShaderType(IntEnum):
    """Shader stages, valued as their OpenGL enums."""

    VERTEX = 0x8B31
    FRAGMENT = 0x8B30
    GEOMETRY = 0x8DD9
    COMPUTE = 0x91B9
    TESS_CONTROL = 0x8E88
    TESS_EVALUATION = 0x8E87


_NAME_HINTS: tuple[tuple[tuple[str, ...], ShaderType], ...] = (
    (("vertex", "vert"), ShaderType.VERTEX),
    (("fragment", "frag"), ShaderType.FRAGMENT),
    (("geometry", "geom"), ShaderType.GEOMETRY),
    (("compute", "comp"), ShaderType.COMPUTE),
    (("tess_ctrl", "tesc"), ShaderType.TESS_CONTROL),
    (("tess_eval", "tese"), ShaderType.TESS_EVALUATION),
)


@dataclass(frozen=True)
class ShaderFile:
    """One GLSL source file."""

    name: str
    path: str
    content: str
    type: ShaderType


@dataclass(frozen=True)
class ShaderProgram:
    """A named program made of the shader files in one folder."""

    name: str
    pid: int
    shaders: tuple[ShaderFile, ...] = ()


def determine_shader_type(filename: str, content: str) -> ShaderType:
    """Guess the stage from the file name, then from the source; vertex by default."""
    lower = filename.lower()
    for hints, shader_type in _NAME_HINTS:
        if any(hint in lower for hint in hints):
            return shader_type
    content_lower = content.lower()
    if "gl_position" in content_lower:
        return ShaderType.VERTEX
    if "gl_fragcolor" in content_lower or "gl_fragdata" in content_lower:
        return ShaderType.FRAGMENT
    return ShaderType.VERTEX


def load_shaders_from_folder(folder_path: str | os.PathLike[str]) -> list[ShaderFile]:
    """Read every ``.glsl`` file (any case) directly inside ``folder_path``."""
    try:
        entries = sorted(os.scandir(folder_path), key=lambda entry: entry.name)
    except OSError as exc:
        raise ShaderError(f"failed to read folder {folder_path}: {exc}") from exc

    shaders = []
    for entry in entries:
        if entry.is_dir() or not entry.name.lower().endswith(".glsl"):
            continue
        file_path = os.path.join(folder_path, entry.name)
        try:
            content = Path(file_path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ShaderError(f"failed to read shader file {file_path}: {exc}") from exc
        shaders.append(
            ShaderFile(
                name=entry.name.removesuffix(".glsl"),
                path=file_path,
                content=content,
                type=determine_shader_type(entry.name, content),
            )
        )
    return shaders


class ShaderManager:
    """Holds shader programs by name; each subfolder of the root is one program."""

    def __init__(self) -> None:
        self._programs: dict[str, ShaderProgram] = {}
        self._ids = itertools.count(1)

    def program(self, name: str) -> ShaderProgram:
        """The program called ``name``; KeyError if there is none."""
        try:
            return self._programs[name]
        except KeyError:
            raise KeyError(f"shader program {name} not found") from None

    def init(self, path: str | os.PathLike[str]) -> None:
        """Create a program from every subfolder of ``path``.

        Raises ShaderError when the root cannot be read or a folder holds no
        shader files.
        """
        try:
            entries = sorted(os.scandir(path), key=lambda entry: entry.name)
        except OSError as exc:
            raise ShaderError(f"failed to read root directory {path}: {exc}") from exc

        for entry in entries:
            if not entry.is_dir():
                continue
            folder_path = os.path.join(path, entry.name)
            shader_files = load_shaders_from_folder(folder_path)
            if not shader_files:
                raise ShaderError(f"no shader files found in {folder_path}")
            self._programs[entry.name] = ShaderProgram(
                name=entry.name, pid=next(self._ids), shaders=tuple(shader_files)
            )

    def cleanup(self) -> None:
        """Forget every program."""
        self._programs = {}

    @property
    def names(self) -> list[str]:
        """Names of all programs."""
        return list(self._programs)