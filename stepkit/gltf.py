"""Reading mesh geometry out of glTF and GLB files."""

from __future__ import annotations

import base64
import binascii
import json
import struct
import urllib.parse
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

import numpy as np

GLB_MAGIC = b"glTF"
GLB_VERSION = 2
CHUNK_JSON = 0x4E4F534A
CHUNK_BIN = 0x004E4942
U16_MAX = 0xFFFF

FLOAT = 5126
_COMPONENT_TYPES = {
    5120: np.dtype("<i1"),
    5121: np.dtype("<u1"),
    5122: np.dtype("<i2"),
    5123: np.dtype("<u2"),
    5125: np.dtype("<u4"),
    FLOAT: np.dtype("<f4"),
}
_INDEX_TYPES = (5121, 5123, 5125)
_TYPE_WIDTHS = {
    "SCALAR": 1,
    "VEC2": 2,
    "VEC3": 3,
    "VEC4": 4,
    "MAT2": 4,
    "MAT3": 9,
    "MAT4": 16,
}


class GltfError(Exception):
    """Raised when a glTF document cannot be read."""


class Mode(IntEnum):
    """Primitive topology."""

    POINTS = 0
    LINES = 1
    LINE_LOOP = 2
    LINE_STRIP = 3
    TRIANGLES = 4
    TRIANGLE_STRIP = 5
    TRIANGLE_FAN = 6


@dataclass(frozen=True, eq=False)
class Primitive:
    """A drawable piece of a mesh: positions of shape (n, 3) and raw indices."""

    mode: Mode = Mode.TRIANGLES
    positions: np.ndarray | None = None
    indices: np.ndarray | None = None


@dataclass(frozen=True, eq=False)
class Mesh:
    """A named collection of primitives."""

    name: str | None
    primitives: tuple[Primitive, ...]


@dataclass(frozen=True, eq=False)
class Document:
    """The meshes of a glTF asset with a summary of its other contents."""

    meshes: tuple[Mesh, ...]
    scene_count: int
    node_count: int
    buffer_count: int


def _items(root: dict, key: str) -> list:
    items = root.get(key, [])
    if not isinstance(items, list):
        raise GltfError(f"'{key}' must be an array")
    return items


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _ref(root: dict, key: str, index: Any) -> dict:
    items = _items(root, key)
    if not _is_int(index) or not 0 <= index < len(items):
        raise GltfError(f"invalid {key} index {index!r}")
    item = items[index]
    if not isinstance(item, dict):
        raise GltfError(f"{key}[{index}] must be an object")
    return item


def _uint(obj: dict, key: str, default: int | None = None) -> int:
    value = obj.get(key, default)
    if not _is_int(value) or value < 0:
        raise GltfError(f"'{key}' must be a non-negative integer, got {value!r}")
    return value


def _split_glb(data: bytes) -> tuple[bytes, bytes | None]:
    if len(data) < 12:
        raise GltfError("GLB header too short")
    _, version, length = struct.unpack_from("<4sII", data)
    if version != GLB_VERSION:
        raise GltfError(f"unsupported GLB version {version}")
    if length > len(data):
        raise GltfError(f"GLB declares {length} bytes but only {len(data)} are present")
    body = data[12:length]
    chunks: list[tuple[int, bytes]] = []
    offset = 0
    while offset < len(body):
        if offset + 8 > len(body):
            raise GltfError("truncated GLB chunk header")
        chunk_length, chunk_type = struct.unpack_from("<II", body, offset)
        offset += 8
        if offset + chunk_length > len(body):
            raise GltfError("truncated GLB chunk")
        chunks.append((chunk_type, body[offset:offset + chunk_length]))
        offset += chunk_length
    if not chunks or chunks[0][0] != CHUNK_JSON:
        raise GltfError("GLB must start with a JSON chunk")
    binary = chunks[1][1] if len(chunks) > 1 and chunks[1][0] == CHUNK_BIN else None
    return chunks[0][1], binary


def _load_json(raw: bytes) -> dict:
    try:
        root = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise GltfError(f"invalid glTF JSON: {exc}") from None
    if not isinstance(root, dict):
        raise GltfError("glTF root must be an object")
    asset = root.get("asset")
    if not isinstance(asset, dict) or not isinstance(asset.get("version"), str):
        raise GltfError("missing asset.version")
    return root


def _decode_data_uri(uri: str) -> bytes:
    header, comma, payload = uri[len("data:"):].partition(",")
    if not comma:
        raise GltfError("malformed data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise GltfError(f"invalid base64 in data URI: {exc}") from None
    return urllib.parse.unquote_to_bytes(payload)


def _load_buffers(root: dict, binary: bytes | None) -> list[bytes]:
    buffers = []
    for index, entry in enumerate(_items(root, "buffers")):
        if not isinstance(entry, dict):
            raise GltfError(f"buffers[{index}] must be an object")
        byte_length = _uint(entry, "byteLength")
        uri = entry.get("uri")
        if uri is None:
            if binary is None:
                raise GltfError("GLB binary chunk is missing")
            data = binary
        elif isinstance(uri, str) and uri.startswith("data:"):
            data = _decode_data_uri(uri)
        else:
            raise GltfError("external reference in slice only import")
        if len(data) < byte_length:
            raise GltfError(
                f"buffer {index}: expected {byte_length} bytes but received {len(data)}"
            )
        data += b"\x00" * (-len(data) % 4)
        buffers.append(data)
    return buffers


def _view_array(
    root: dict,
    buffers: list[bytes],
    view_index: Any,
    byte_offset: int,
    count: int,
    width: int,
    dtype: np.dtype,
    use_stride: bool = True,
) -> np.ndarray:
    view = _ref(root, "bufferViews", view_index)
    buffer_index = view.get("buffer")
    if not _is_int(buffer_index) or not 0 <= buffer_index < len(buffers):
        raise GltfError(f"invalid buffer index {buffer_index!r}")
    buffer = buffers[buffer_index]
    view_offset = _uint(view, "byteOffset", 0)
    view_length = _uint(view, "byteLength")
    if view_offset + view_length > len(buffer):
        raise GltfError(f"bufferView {view_index} exceeds its buffer")
    element = dtype.itemsize * width
    stride = view.get("byteStride") if use_stride else None
    stride = stride or element
    if not _is_int(stride) or stride < element:
        raise GltfError(f"bufferView {view_index} has an invalid byteStride")
    if count == 0:
        return np.empty((0, width), dtype=dtype)
    if byte_offset + stride * (count - 1) + element > view_length:
        raise GltfError(f"accessor data exceeds bufferView {view_index}")
    array = np.ndarray(
        (count, width),
        dtype=dtype,
        buffer=buffer,
        offset=view_offset + byte_offset,
        strides=(stride, dtype.itemsize),
    )
    return array.copy()


def _read_accessor(root: dict, buffers: list[bytes], index: Any) -> np.ndarray:
    accessor = _ref(root, "accessors", index)
    count = _uint(accessor, "count")
    dtype = _COMPONENT_TYPES.get(accessor.get("componentType"))
    width = _TYPE_WIDTHS.get(accessor.get("type"))
    if dtype is None or width is None:
        raise GltfError(f"accessor {index} has an unsupported type")
    if "bufferView" in accessor:
        values = _view_array(
            root, buffers, accessor["bufferView"],
            _uint(accessor, "byteOffset", 0), count, width, dtype,
        )
    else:
        values = np.zeros((count, width), dtype=dtype)

    sparse = accessor.get("sparse")
    if sparse is not None:
        if not isinstance(sparse, dict):
            raise GltfError(f"accessor {index} has a malformed sparse block")
        sparse_count = _uint(sparse, "count")
        index_info = sparse.get("indices")
        value_info = sparse.get("values")
        if not isinstance(index_info, dict) or not isinstance(value_info, dict):
            raise GltfError(f"accessor {index} has a malformed sparse block")
        index_type = index_info.get("componentType")
        if index_type not in _INDEX_TYPES:
            raise GltfError(f"accessor {index} has invalid sparse index type")
        targets = _view_array(
            root, buffers, index_info.get("bufferView"),
            _uint(index_info, "byteOffset", 0), sparse_count, 1,
            _COMPONENT_TYPES[index_type], use_stride=False,
        ).ravel()
        replacements = _view_array(
            root, buffers, value_info.get("bufferView"),
            _uint(value_info, "byteOffset", 0), sparse_count, width, dtype,
            use_stride=False,
        )
        if targets.size and int(targets.max()) >= count:
            raise GltfError(f"accessor {index} has a sparse index out of range")
        values[targets] = replacements
    return values


def _read_primitive(root: dict, buffers: list[bytes], entry: Any) -> Primitive:
    if not isinstance(entry, dict):
        raise GltfError("primitive must be an object")
    try:
        mode = Mode(entry.get("mode", Mode.TRIANGLES))
    except ValueError:
        raise GltfError(f"invalid primitive mode {entry.get('mode')!r}") from None
    attributes = entry.get("attributes")
    if not isinstance(attributes, dict):
        raise GltfError("primitive attributes must be an object")

    positions = None
    if "POSITION" in attributes:
        accessor = _ref(root, "accessors", attributes["POSITION"])
        if accessor.get("type") != "VEC3" or accessor.get("componentType") != FLOAT:
            raise GltfError("POSITION accessor must be VEC3 of FLOAT")
        positions = _read_accessor(root, buffers, attributes["POSITION"])

    indices = None
    if "indices" in entry:
        accessor = _ref(root, "accessors", entry["indices"])
        if accessor.get("type") != "SCALAR" or accessor.get("componentType") not in _INDEX_TYPES:
            raise GltfError("index accessor must be an unsigned SCALAR")
        indices = _read_accessor(root, buffers, entry["indices"]).ravel()

    return Primitive(mode=mode, positions=positions, indices=indices)


def parse(data: bytes) -> Document:
    """Parse a glTF JSON document or GLB container with embedded buffers."""
    data = bytes(data)
    if data[:4] == GLB_MAGIC:
        raw_json, binary = _split_glb(data)
    else:
        raw_json, binary = data, None
    root = _load_json(raw_json)
    buffers = _load_buffers(root, binary)

    meshes = []
    for index, entry in enumerate(_items(root, "meshes")):
        if not isinstance(entry, dict) or not isinstance(entry.get("primitives"), list):
            raise GltfError(f"meshes[{index}] must have a primitives array")
        name = entry.get("name")
        meshes.append(
            Mesh(
                name=name if isinstance(name, str) else None,
                primitives=tuple(
                    _read_primitive(root, buffers, p) for p in entry["primitives"]
                ),
            )
        )
    return Document(
        meshes=tuple(meshes),
        scene_count=len(_items(root, "scenes")),
        node_count=len(_items(root, "nodes")),
        buffer_count=len(buffers),
    )


def extract_primitive_geometry(
    primitive: Primitive,
) -> tuple[np.ndarray, np.ndarray] | None:
    """Return flat float32 vertices and uint16 indices, or None if nothing to draw.

    32-bit indices above 65535 are clamped; a primitive without indices gets
    sequential ones, counted in 16 bits.
    """
    if primitive.positions is None:
        return None
    positions = np.asarray(primitive.positions, dtype=np.float32).reshape(-1, 3)
    vertices = positions.reshape(-1)
    if primitive.indices is None:
        indices = np.arange(len(positions) & U16_MAX, dtype=np.uint16)
    else:
        raw = np.asarray(primitive.indices).astype(np.int64)
        indices = np.minimum(raw, U16_MAX).astype(np.uint16)
    if vertices.size == 0 or indices.size == 0:
        return None
    return vertices, indices


def merge_geometry(meshes: Iterable[Mesh]) -> tuple[np.ndarray, np.ndarray]:
    """Concatenate the geometry of every primitive, offsetting indices in 16 bits."""
    vertex_parts: list[np.ndarray] = []
    index_parts: list[np.ndarray] = []
    offset = 0
    for mesh in meshes:
        for primitive in mesh.primitives:
            geometry = extract_primitive_geometry(primitive)
            if geometry is None:
                continue
            vertices, indices = geometry
            shifted = (indices.astype(np.uint32) + offset) & U16_MAX
            vertex_parts.append(vertices)
            index_parts.append(shifted.astype(np.uint16))
            offset = (offset + vertices.size // 3) & U16_MAX
    if not vertex_parts:
        return np.empty(0, dtype=np.float32), np.empty(0, dtype=np.uint16)
    return np.concatenate(vertex_parts), np.concatenate(index_parts)