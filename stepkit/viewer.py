"""A headless model viewer: geometry buffers, an orbit camera and draw frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from stepkit.camera import OrbitCamera
from stepkit.gltf import GltfError, merge_geometry, parse

log = logging.getLogger(__name__)

CLEAR_COLOR = (0.1, 0.1, 0.1, 1.0)
MESH_COLOR = (0.8, 0.4, 0.2)

_BOX_VERTICES = (
    # front
    -1.0, -1.0, 1.0,
    1.0, -1.0, 1.0,
    1.0, 1.0, 1.0,
    -1.0, 1.0, 1.0,
    # back
    -1.0, -1.0, -1.0,
    -1.0, 1.0, -1.0,
    1.0, 1.0, -1.0,
    1.0, -1.0, -1.0,
)

_BOX_INDICES = (
    0, 1, 2, 0, 2, 3,  # front
    4, 5, 6, 4, 6, 7,  # back
    4, 0, 3, 4, 3, 5,  # left
    1, 7, 6, 1, 6, 2,  # right
    3, 2, 6, 3, 6, 5,  # top
    4, 7, 1, 4, 1, 0,  # bottom
)


def box_geometry() -> tuple[np.ndarray, np.ndarray]:
    """Return the flat float32 vertices and uint16 indices of a 2×2×2 cube."""
    return (
        np.array(_BOX_VERTICES, dtype=np.float32),
        np.array(_BOX_INDICES, dtype=np.uint16),
    )


@dataclass(frozen=True, eq=False)
class Frame:
    """Everything needed to draw one frame: a single indexed triangle draw."""

    viewport: tuple[int, int, int, int]
    clear_color: tuple[float, float, float, float]
    color: tuple[float, float, float]
    mvp: np.ndarray
    vertices: np.ndarray
    indices: np.ndarray


def _readonly(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class GltfViewer:
    """Holds the loaded geometry and camera state and produces draw frames."""

    def __init__(self, width: int, height: int) -> None:
        if height == 0:
            raise ValueError("viewport height must not be zero")
        log.debug("Initializing viewer %dx%d", width, height)
        self.camera = OrbitCamera(width / height)
        self.viewport = (0, 0, int(width), int(height))
        self._vertices = np.empty(0, dtype=np.float32)
        self._indices = np.empty(0, dtype=np.uint16)

    @property
    def vertices(self) -> np.ndarray:
        """The uploaded vertex positions, flattened (read-only)."""
        return _readonly(self._vertices)

    @property
    def indices(self) -> np.ndarray:
        """The uploaded triangle indices (read-only)."""
        return _readonly(self._indices)

    @property
    def index_count(self) -> int:
        """Number of indices that a frame draws."""
        return int(self._indices.size)

    def _upload(self, vertices: np.ndarray, indices: np.ndarray) -> None:
        self._vertices = np.array(vertices, dtype=np.float32).reshape(-1)
        self._indices = np.array(indices, dtype=np.uint16).reshape(-1)
        log.debug(
            "Uploaded geometry: %d vertices, %d indices",
            self._vertices.size // 3,
            self._indices.size,
        )

    def _clear(self) -> None:
        self._vertices = np.empty(0, dtype=np.float32)
        self._indices = np.empty(0, dtype=np.uint16)

    def create_test_box(self) -> None:
        """Replace the geometry with the test cube."""
        self._upload(*box_geometry())

    def load_gltf(self, gltf_data: bytes) -> None:
        """Load every mesh of a glTF or GLB file, falling back to the test cube.

        Raises GltfError if the data cannot be imported; the current geometry
        is then left as it was.
        """
        if len(gltf_data) < 4:
            raise GltfError("GLTF file too small")
        try:
            document = parse(gltf_data)
        except GltfError as exc:
            raise GltfError(f"Failed to import GLTF file: {exc}") from exc

        log.debug(
            "Imported: %d scenes, %d meshes, %d buffers, %d nodes",
            document.scene_count,
            len(document.meshes),
            document.buffer_count,
            document.node_count,
        )
        if not document.meshes:
            log.debug("No meshes found, creating fallback box")
            self.create_test_box()
            return

        self._clear()
        vertices, indices = merge_geometry(document.meshes)
        if vertices.size == 0:
            log.debug("No geometry extracted, creating fallback box")
            self.create_test_box()
            return
        self._upload(vertices, indices)

    def render(self) -> Frame | None:
        """Return the frame to draw, or None when there is no geometry."""
        if self.index_count == 0:
            return None
        return Frame(
            viewport=self.viewport,
            clear_color=CLEAR_COLOR,
            color=MESH_COLOR,
            mvp=self.camera.mvp().astype(np.float32),
            vertices=self.vertices,
            indices=self.indices,
        )

    def rotate_camera(self, delta_x: float, delta_y: float) -> None:
        """Orbit the camera by a pointer movement in pixels."""
        self.camera.rotate(delta_x, delta_y)

    def resize(self, width: int, height: int) -> None:
        """Set a new viewport size and recompute the projection."""
        self.camera.resize(width, height)
        self.viewport = (0, 0, int(width), int(height))