import base64
import json
import struct

import numpy as np
import pytest

from stepkit.gltf import GltfError
from stepkit.viewer import (
    CLEAR_COLOR,
    MESH_COLOR,
    Frame,
    GltfViewer,
    box_geometry,
)

TRIANGLE = np.array(
    [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]], dtype=np.float32
)


def _document(positions_list, with_buffer_uri=True):
    blob = b"".join(p.astype("<f4").tobytes() for p in positions_list)
    accessors, views, meshes = [], [], []
    offset = 0
    for i, positions in enumerate(positions_list):
        size = positions.astype("<f4").nbytes
        views.append({"buffer": 0, "byteOffset": offset, "byteLength": size})
        accessors.append(
            {"bufferView": i, "componentType": 5126, "count": len(positions), "type": "VEC3"}
        )
        meshes.append({"name": f"m{i}", "primitives": [{"attributes": {"POSITION": i}}]})
        offset += size
    buffer = {"byteLength": len(blob)}
    if with_buffer_uri:
        buffer["uri"] = "data:application/octet-stream;base64," + base64.b64encode(blob).decode()
    root = {
        "asset": {"version": "2.0"},
        "buffers": [buffer],
        "bufferViews": views,
        "accessors": accessors,
        "meshes": meshes,
    }
    return root, blob


def _gltf(*positions_list):
    root, _ = _document(list(positions_list))
    return json.dumps(root).encode()


def _glb(*positions_list):
    root, blob = _document(list(positions_list), with_buffer_uri=False)
    raw = json.dumps(root).encode()
    raw += b" " * (-len(raw) % 4)
    blob += b"\x00" * (-len(blob) % 4)
    body = struct.pack("<II", len(raw), 0x4E4F534A) + raw
    body += struct.pack("<II", len(blob), 0x004E4942) + blob
    return b"glTF" + struct.pack("<II", 2, 12 + len(body)) + body


def test_box_geometry_matches_cube():
    vertices, indices = box_geometry()
    assert vertices.dtype == np.float32 and indices.dtype == np.uint16
    assert vertices.size == 24
    assert indices.size == 36
    assert set(np.abs(vertices).tolist()) == {1.0}
    assert int(indices.max()) == 7


def test_render_without_geometry_returns_none():
    viewer = GltfViewer(800, 600)
    assert viewer.index_count == 0
    assert viewer.render() is None


def test_create_test_box_then_render():
    viewer = GltfViewer(800, 600)
    viewer.create_test_box()
    frame = viewer.render()
    assert isinstance(frame, Frame)
    assert frame.indices.size == 36
    assert frame.color == MESH_COLOR == (0.8, 0.4, 0.2)
    assert frame.clear_color == CLEAR_COLOR == (0.1, 0.1, 0.1, 1.0)
    assert frame.viewport == (0, 0, 800, 600)
    np.testing.assert_allclose(frame.mvp, viewer.camera.mvp(), rtol=1e-6, atol=1e-6)
    np.testing.assert_array_equal(frame.vertices, box_geometry()[0])


def test_buffers_are_read_only():
    viewer = GltfViewer(4, 3)
    viewer.create_test_box()
    with pytest.raises(ValueError):
        viewer.vertices[0] = 5.0
    assert float(viewer.vertices[0]) == -1.0
    np.testing.assert_array_equal(viewer.vertices, box_geometry()[0])


def test_load_gltf_too_small():
    viewer = GltfViewer(800, 600)
    with pytest.raises(GltfError, match="GLTF file too small"):
        viewer.load_gltf(b"{}")


def test_load_gltf_invalid_keeps_geometry():
    viewer = GltfViewer(800, 600)
    viewer.create_test_box()
    with pytest.raises(GltfError, match="Failed to import GLTF file"):
        viewer.load_gltf(b"not json at all")
    assert viewer.index_count == 36


def test_load_json_triangle():
    viewer = GltfViewer(800, 600)
    viewer.create_test_box()
    viewer.load_gltf(_gltf(TRIANGLE))
    np.testing.assert_array_equal(viewer.vertices, TRIANGLE.reshape(-1))
    assert viewer.indices.tolist() == [0, 1, 2]


def test_load_glb_matches_json():
    json_viewer = GltfViewer(800, 600)
    glb_viewer = GltfViewer(800, 600)
    json_viewer.load_gltf(_gltf(TRIANGLE))
    glb_viewer.load_gltf(_glb(TRIANGLE))
    np.testing.assert_array_equal(json_viewer.vertices, glb_viewer.vertices)
    np.testing.assert_array_equal(json_viewer.indices, glb_viewer.indices)


def test_load_merges_meshes_with_offsets():
    second = TRIANGLE + np.float32(2.0)
    viewer = GltfViewer(800, 600)
    viewer.load_gltf(_gltf(TRIANGLE, second))
    assert viewer.vertices.size == 18
    assert viewer.indices.tolist() == list(range(6))
    np.testing.assert_array_equal(viewer.vertices[9:], second.reshape(-1))


def test_load_without_meshes_falls_back_to_box():
    viewer = GltfViewer(800, 600)
    viewer.load_gltf(json.dumps({"asset": {"version": "2.0"}}).encode())
    np.testing.assert_array_equal(viewer.indices, box_geometry()[1])


def test_load_without_positions_falls_back_to_box():
    root = {
        "asset": {"version": "2.0"},
        "meshes": [{"primitives": [{"attributes": {}}]}],
    }
    viewer = GltfViewer(800, 600)
    viewer.load_gltf(json.dumps(root).encode())
    np.testing.assert_array_equal(viewer.vertices, box_geometry()[0])


def test_rotate_camera_keeps_distance_and_changes_frame():
    viewer = GltfViewer(800, 600)
    viewer.create_test_box()
    before = viewer.render().mvp
    distance = viewer.camera.distance
    viewer.rotate_camera(30.0, -10.0)
    after = viewer.render().mvp
    assert viewer.camera.distance == pytest.approx(distance)
    assert not np.allclose(before, after)


def test_resize_updates_viewport_and_projection():
    viewer = GltfViewer(800, 600)
    viewer.create_test_box()
    old = viewer.camera.projection.copy()
    viewer.resize(400, 400)
    frame = viewer.render()
    assert frame.viewport == (0, 0, 400, 400)
    assert viewer.camera.projection[0, 0] == pytest.approx(viewer.camera.projection[1, 1])
    assert not np.allclose(old, viewer.camera.projection)


def test_zero_height_rejected():
    with pytest.raises(ValueError):
        GltfViewer(800, 0)
    viewer = GltfViewer(800, 600)
    with pytest.raises(ValueError):
        viewer.resize(800, 0)