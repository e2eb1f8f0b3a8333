"""Loading and caching of Wavefront OBJ models and JPEG textures."""

from __future__ import annotations

import itertools
import math
import os
from array import array
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from PIL import Image, UnidentifiedImageError

from otto.vector import Vec3

FLOAT32_BYTES = 4
POSITION_FLOATS = 3
TEXCOORD_FLOATS = 2
NORMAL_FLOATS = 3

_DEFAULT_BOUNDS = Vec3(0.5, 0.5, 0.5)
_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".bmp"})


class LoadError(Exception):
    """A model, texture or asset directory could not be loaded."""


@dataclass(frozen=True)
class ObjData:
    """Interleaved vertex data parsed from an OBJ document.

    Each vertex holds its position, then its texture coordinates when the
    document has any, then its normal when the document has any.
    ``stride_size`` is the size of one vertex in bytes.
    """

    coords: array
    indices: tuple[int, ...]
    stride_size: int
    tex_coord_found: bool
    norm_coord_found: bool


def _floats(parts: Sequence[str], count: int, line_no: int) -> tuple[float, ...]:
    if len(parts) < count:
        raise ValueError(f"line {line_no}: expected {count} numbers, got {len(parts)}")
    try:
        return tuple(float(part) for part in parts[:count])
    except ValueError as exc:
        raise ValueError(f"line {line_no}: {exc}") from None


def _resolve(token: str, size: int, kind: str, line_no: int) -> int:
    try:
        index = int(token)
    except ValueError:
        raise ValueError(f"line {line_no}: bad {kind} index {token!r}") from None
    if index > 0:
        resolved = index - 1
    elif index < 0:
        resolved = size + index
    else:
        raise ValueError(f"line {line_no}: {kind} index 0 is not allowed")
    if not 0 <= resolved < size:
        raise ValueError(f"line {line_no}: {kind} index {index} out of range")
    return resolved


def parse_obj(text: str) -> ObjData:
    """Parse OBJ text into an indexed, de-duplicated vertex array.

    Polygons are split into triangle fans. Raises ValueError on malformed
    input.
    """
    positions: list[tuple[float, ...]] = []
    texcoords: list[tuple[float, ...]] = []
    normals: list[tuple[float, ...]] = []
    faces: list[tuple[int, list[str]]] = []

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        keyword, *parts = line.split()
        if keyword == "v":
            positions.append(_floats(parts, POSITION_FLOATS, line_no))
        elif keyword == "vt":
            values = _floats(parts, 1, line_no)
            u = values[0]
            v = _floats(parts[1:], 1, line_no)[0] if len(parts) > 1 else 0.0
            texcoords.append((u, v))
        elif keyword == "vn":
            normals.append(_floats(parts, NORMAL_FLOATS, line_no))
        elif keyword == "f":
            if len(parts) < 3:
                raise ValueError(f"line {line_no}: a face needs at least 3 vertices")
            faces.append((line_no, parts))

    tex_found = bool(texcoords)
    norm_found = bool(normals)
    floats_per_vertex = (
        POSITION_FLOATS
        + (TEXCOORD_FLOATS if tex_found else 0)
        + (NORMAL_FLOATS if norm_found else 0)
    )

    coords = array("f")
    indices: list[int] = []
    seen: dict[tuple[int, int | None, int | None], int] = {}

    def corner_index(token: str, line_no: int) -> int:
        pieces = token.split("/")
        vi = _resolve(pieces[0], len(positions), "vertex", line_no)
        ti = (
            _resolve(pieces[1], len(texcoords), "texture", line_no)
            if len(pieces) > 1 and pieces[1]
            else None
        )
        ni = (
            _resolve(pieces[2], len(normals), "normal", line_no)
            if len(pieces) > 2 and pieces[2]
            else None
        )
        key = (vi, ti, ni)
        existing = seen.get(key)
        if existing is not None:
            return existing
        vertex = list(positions[vi])
        if tex_found:
            vertex.extend(texcoords[ti] if ti is not None else (0.0, 0.0))
        if norm_found:
            vertex.extend(normals[ni] if ni is not None else (0.0, 0.0, 0.0))
        coords.extend(vertex)
        new_index = len(seen)
        seen[key] = new_index
        return new_index

    for line_no, corners in faces:
        resolved = [corner_index(token, line_no) for token in corners]
        first = resolved[0]
        for second, third in zip(resolved[1:], resolved[2:]):
            indices.extend((first, second, third))

    return ObjData(
        coords=coords,
        indices=tuple(indices),
        stride_size=floats_per_vertex * FLOAT32_BYTES,
        tex_coord_found=tex_found,
        norm_coord_found=norm_found,
    )


def calculate_bounds(vertices: Sequence[float], stride: int) -> Vec3:
    """Extent of the positions along each axis.

    ``stride`` is the vertex size in bytes; positions are the first three
    floats of each vertex. An empty vertex list gives a half-unit cube.
    """
    if len(vertices) == 0:
        return _DEFAULT_BOUNDS
    step = stride // FLOAT32_BYTES
    if step <= 0:
        raise ValueError("stride must be at least one float")
    mins = [math.inf] * 3
    maxs = [-math.inf] * 3
    for start in range(0, len(vertices), step):
        for axis, value in enumerate(vertices[start : start + 3]):
            value = float(value)
            mins[axis] = min(mins[axis], value)
            maxs[axis] = max(maxs[axis], value)
    return Vec3(*(high - low for low, high in zip(mins, maxs)))


@dataclass
class Model:
    """A loaded model with its vertex data, bounding extents and volume."""

    name: str
    vertices: array
    indices: tuple[int, ...]
    stride: int
    has_texcoords: bool = False
    has_normals: bool = False
    bounds: Vec3 = field(init=False)
    volume: float = field(init=False)

    def __post_init__(self) -> None:
        self.bounds = calculate_bounds(self.vertices, self.stride)
        self.volume = self.bounds.x * self.bounds.y * self.bounds.z


@dataclass(frozen=True)
class Texture:
    """A decoded texture as RGBA bytes."""

    name: str
    id: int
    width: int
    height: int
    pixels: bytes


def _extension(filename: str) -> str:
    base = filename.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def is_obj_file(filename: str) -> bool:
    """True for names longer than ``.obj`` that end in ``.obj``."""
    return len(filename) > 4 and filename.endswith(".obj")


def is_image_file(filename: str) -> bool:
    """True for .jpg, .jpeg, .png and .bmp names."""
    return _extension(filename) in _IMAGE_EXTENSIONS


def file_name_without_extension(filename: str) -> str:
    """The name with its last extension removed."""
    ext = _extension(filename)
    return filename[: len(filename) - len(ext)]


def _load_model_file(path: str | os.PathLike[str]) -> Model:
    data = parse_obj(Path(path).read_text(encoding="utf-8"))
    return Model(
        name="",
        vertices=data.coords,
        indices=data.indices,
        stride=data.stride_size,
        has_texcoords=data.tex_coord_found,
        has_normals=data.norm_coord_found,
    )


def _decode_jpeg(path: str | os.PathLike[str]) -> tuple[int, int, bytes]:
    try:
        with Image.open(path) as img:
            if img.format != "JPEG":
                raise LoadError(f"failed to decode JPEG: not a JPEG image ({img.format})")
            rgba = img.convert("RGBA")
    except FileNotFoundError as exc:
        raise LoadError(f"failed to open texture file: {exc}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise LoadError(f"failed to decode JPEG: {exc}") from exc
    return rgba.width, rgba.height, rgba.tobytes()


class ModelManager:
    """Loads and caches models and textures by name."""

    def __init__(self) -> None:
        self._models: dict[str, Model] = {}
        self._textures: dict[str, Texture] = {}
        self._texture_ids = itertools.count(1)

    def model(self, name: str) -> Model:
        """The model called ``name``; KeyError if none is loaded."""
        try:
            return self._models[name]
        except KeyError:
            raise KeyError(f"model {name} not found") from None

    def texture(self, name: str) -> Texture:
        """The texture called ``name``; KeyError if none is loaded."""
        try:
            return self._textures[name]
        except KeyError:
            raise KeyError(f"texture {name} not found") from None

    def load_model(self, name: str, path: str | os.PathLike[str]) -> Model:
        """Load an OBJ file and cache it under ``name``."""
        try:
            model = _load_model_file(path)
        except (OSError, ValueError, UnicodeDecodeError) as exc:
            raise LoadError(f"failed to load model {name} from {path}: {exc}") from exc
        model.name = name
        self._models[name] = model
        return model

    def load_texture(self, name: str, path: str | os.PathLike[str]) -> Texture:
        """Decode a JPEG file and cache it under ``name``."""
        try:
            width, height, pixels = _decode_jpeg(path)
        except LoadError as exc:
            raise LoadError(f"failed to load texture {name} from {path}: {exc}") from exc
        texture = Texture(
            name=name, id=next(self._texture_ids), width=width, height=height, pixels=pixels
        )
        self._textures[name] = texture
        return texture

    def init(
        self, models_path: str | os.PathLike[str], textures_path: str | os.PathLike[str]
    ) -> None:
        """Load every model and then every texture from the two directories."""
        try:
            self._load_directory(models_path, "models", is_obj_file, self.load_model)
        except LoadError as exc:
            raise LoadError(f"failed to load models: {exc}") from exc
        try:
            self._load_directory(textures_path, "textures", is_image_file, self.load_texture)
        except LoadError as exc:
            raise LoadError(f"failed to load textures: {exc}") from exc

    @staticmethod
    def _load_directory(path, kind, accept, load) -> None:
        try:
            entries = sorted(os.scandir(path), key=lambda entry: entry.name)
        except OSError as exc:
            raise LoadError(f"failed to read {kind} directory {path}: {exc}") from exc
        for entry in entries:
            if entry.is_dir() or not accept(entry.name):
                continue
            load(file_name_without_extension(entry.name), os.path.join(path, entry.name))

    def cleanup(self) -> None:
        """Forget every model and texture."""
        self._models = {}
        self._textures = {}

    def loaded_models(self) -> list[str]:
        """Names of all loaded models."""
        return list(self._models)

    def loaded_textures(self) -> list[str]:
        """Names of all loaded textures."""
        return list(self._textures)