"""View and projection matrices and an orbiting camera."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

FIELD_OF_VIEW = math.radians(45.0)
NEAR_PLANE = 0.1
FAR_PLANE = 100.0
DEFAULT_EYE = (3.0, 3.0, 5.0)
DEFAULT_TARGET = (0.0, 0.0, 0.0)
WORLD_UP = (0.0, 1.0, 0.0)
ROTATION_SPEED = 0.01
POLAR_MARGIN = 0.1

_EPSILON = np.finfo(np.float32).eps


def _vec3(value: Sequence[float] | np.ndarray) -> np.ndarray:
    vector = np.asarray(value, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"expected a 3-component vector, got shape {vector.shape}")
    return vector


def _normalize(vector: np.ndarray) -> np.ndarray:
    length = float(np.linalg.norm(vector))
    if length == 0.0 or not math.isfinite(length):
        raise ValueError("cannot normalize a zero-length or non-finite vector")
    return vector / length


def look_at(eye, target, up) -> np.ndarray:
    """Return a right-handed view matrix looking from ``eye`` at ``target``."""
    eye, target, up = _vec3(eye), _vec3(target), _vec3(up)
    forward = _normalize(target - eye)
    side = _normalize(np.cross(forward, up))
    upward = np.cross(side, forward)
    view = np.identity(4)
    view[0, :3] = side
    view[1, :3] = upward
    view[2, :3] = -forward
    view[0, 3] = -np.dot(side, eye)
    view[1, 3] = -np.dot(upward, eye)
    view[2, 3] = np.dot(forward, eye)
    return view


def perspective(aspect: float, fovy: float, near: float, far: float) -> np.ndarray:
    """Return a right-handed perspective matrix with depth mapped to [-1, 1]."""
    if not abs(aspect) > _EPSILON:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    focal = 1.0 / math.tan(fovy / 2.0)
    projection = np.zeros((4, 4))
    projection[0, 0] = focal / aspect
    projection[1, 1] = focal
    projection[2, 2] = (far + near) / (near - far)
    projection[2, 3] = 2.0 * far * near / (near - far)
    projection[3, 2] = -1.0
    return projection


class OrbitCamera:
    """A camera that circles a fixed target on a sphere."""

    def __init__(self, aspect: float) -> None:
        self.position = np.array(DEFAULT_EYE, dtype=np.float64)
        self.target = np.array(DEFAULT_TARGET, dtype=np.float64)
        self.up = np.array(WORLD_UP, dtype=np.float64)
        self.view = look_at(self.position, self.target, self.up)
        self.projection = perspective(aspect, FIELD_OF_VIEW, NEAR_PLANE, FAR_PLANE)

    @property
    def distance(self) -> float:
        """Distance from the camera to its target."""
        return float(np.linalg.norm(self.position - self.target))

    def rotate(self, delta_x: float, delta_y: float) -> None:
        """Orbit around the target by a pointer movement in pixels."""
        offset = self.position - self.target
        distance = self.distance
        azimuth = math.atan2(offset[2], offset[0]) + delta_x * ROTATION_SPEED
        cosine = max(-1.0, min(1.0, offset[1] / distance))
        polar = math.acos(cosine) + delta_y * ROTATION_SPEED
        polar = min(max(polar, POLAR_MARGIN), math.pi - POLAR_MARGIN)
        self.position = self.target + distance * np.array(
            [
                math.sin(polar) * math.cos(azimuth),
                math.cos(polar),
                math.sin(polar) * math.sin(azimuth),
            ]
        )
        self.view = look_at(self.position, self.target, self.up)

    def resize(self, width: int, height: int) -> None:
        """Recompute the projection for a new viewport size."""
        if height == 0:
            raise ValueError("viewport height must not be zero")
        self.projection = perspective(
            width / height, FIELD_OF_VIEW, NEAR_PLANE, FAR_PLANE
        )

    def mvp(self, model: np.ndarray | None = None) -> np.ndarray:
        """Return projection × view × model; the model defaults to identity."""
        if model is None:
            model = np.identity(4)
        return self.projection @ self.view @ np.asarray(model, dtype=np.float64)