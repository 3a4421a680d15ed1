"""Camera model: view matrix, projection and screen rays."""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from simuverse.buffer import BufferHandler, BufferUsages

CAMERA_INFO_DTYPE = np.dtype(
    [("camera_matrix", "<f4", (4, 4)), ("camera_projection", "<f4", (4, 4))]
)


def _vec3(values: Sequence[float]) -> np.ndarray:
    vec = np.asarray(values, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"expected 3 components, got {vec.shape[0]}")
    return vec


def _normalize(vec: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(vec)
    if norm == 0.0:
        raise ValueError("cannot normalize a zero vector")
    return vec / norm


def _matrix(values: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    mat = np.array(values, dtype=np.float64)
    if mat.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {mat.shape}")
    return mat


def look_at_rh(
    eye: Sequence[float], center: Sequence[float], up: Sequence[float]
) -> np.ndarray:
    """Right-handed view matrix looking from ``eye`` towards ``center``."""
    eye_v = _vec3(eye)
    f = _normalize(_vec3(center) - eye_v)
    s = _normalize(np.cross(f, _vec3(up)))
    u = np.cross(s, f)
    mat = np.identity(4)
    mat[0, :3] = s
    mat[1, :3] = u
    mat[2, :3] = -f
    mat[:3, 3] = (-eye_v @ s, -eye_v @ u, eye_v @ f)
    return mat


def perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL-style perspective projection; ``fovy`` is in radians."""
    f = 1.0 / math.tan(fovy / 2.0)
    mat = np.zeros((4, 4))
    mat[0, 0] = f / aspect
    mat[1, 1] = f
    mat[2, 2] = (far + near) / (near - far)
    mat[3, 2] = -1.0
    mat[2, 3] = 2.0 * far * near / (near - far)
    return mat


def axis_angle_matrix(axis: Sequence[float], angle: float) -> np.ndarray:
    """Rotation by ``angle`` radians about the unit vector ``axis``."""
    k = _vec3(axis)
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array(
        [[0.0, -k[2], k[1]], [k[2], 0.0, -k[0]], [-k[1], k[0], 0.0]]
    )
    mat = np.identity(4)
    mat[:3, :3] = c * np.identity(3) + s * cross + (1.0 - c) * np.outer(k, k)
    return mat


def translation_matrix(vector: Sequence[float]) -> np.ndarray:
    """Translation by ``vector``."""
    mat = np.identity(4)
    mat[:3, 3] = _vec3(vector)
    return mat


def transform_point(matrix: np.ndarray, point: Sequence[float]) -> np.ndarray:
    """Apply ``matrix`` to a point, dividing by the homogeneous coordinate."""
    p = np.append(_vec3(point), 1.0)
    out = _matrix(matrix) @ p
    return out[:3] / out[3]


class ProjectionType(enum.Enum):
    """The projection type of a camera."""

    PERSPECTIVE = "perspective"
    PARALLEL = "parallel"


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray from the camera through a point on the screen."""

    origin: np.ndarray
    direction: np.ndarray


def _default_projection() -> np.ndarray:
    return perspective(math.pi / 4.0, 1.0, 0.1, 10.0)


@dataclass(eq=False)
class Camera:
    """A camera placed by ``matrix`` (camera-to-world) with a projection."""

    matrix: np.ndarray = field(default_factory=lambda: np.identity(4))
    projection_matrix: np.ndarray = field(default_factory=_default_projection)
    projection_type: ProjectionType = ProjectionType.PERSPECTIVE

    def __post_init__(self) -> None:
        self.matrix = _matrix(self.matrix)
        self.projection_matrix = _matrix(self.projection_matrix)

    @classmethod
    def perspective_camera(
        cls,
        matrix: np.ndarray,
        field_of_view: float,
        near_clip: float,
        far_clip: float,
    ) -> Camera:
        """Perspective camera with a vertical field of view in radians."""
        return cls(
            matrix=matrix,
            projection_matrix=perspective(field_of_view, 1.0, near_clip, far_clip),
            projection_type=ProjectionType.PERSPECTIVE,
        )

    def position(self) -> np.ndarray:
        """Camera position: the fourth column of the camera matrix."""
        return self.matrix[:3, 3].copy()

    def eye_direction(self) -> np.ndarray:
        """Viewing direction: the negated z-axis of the camera matrix."""
        return -self.matrix[:3, 2]

    def head_direction(self) -> np.ndarray:
        """Up direction: the y-axis of the camera matrix."""
        return self.matrix[:3, 1].copy()

    def projection(self, as_rat: float) -> np.ndarray:
        """Projection into the normalized view volume for aspect ratio ``as_rat``."""
        aspect = np.diag((1.0 / as_rat, 1.0, 1.0, 1.0))
        return aspect @ self.projection_matrix @ np.linalg.inv(self.matrix)

    def camera_info(self, as_rat: float) -> np.ndarray:
        """Uniform data: camera matrix and projection as column-major f32."""
        info = np.zeros((), dtype=CAMERA_INFO_DTYPE)
        info["camera_matrix"] = self.matrix.T
        info["camera_projection"] = self.projection(as_rat).T
        return info

    def buffer(self, as_rat: float) -> BufferHandler:
        """A uniform buffer holding the camera data."""
        return BufferHandler.from_array(
            self.camera_info(as_rat).reshape(1), BufferUsages.UNIFORM, "Camera uniform"
        )

    def ray(self, coord: Sequence[float]) -> Ray:
        """The ray through screen coordinate ``coord`` at aspect ratio 1."""
        x, y = float(coord[0]), float(coord[1])
        if self.projection_type is ProjectionType.PERSPECTIVE:
            try:
                inv = np.linalg.inv(self.projection(1.0))
            except np.linalg.LinAlgError as exc:
                raise ValueError("non-invertible projection") from exc
            near = transform_point(inv, (x, y, 0.5))
            far = transform_point(inv, (x, y, 1.0))
            return Ray(self.position(), _normalize(far - near))
        a = self.projection_matrix[0, 0]
        axis_x = self.matrix[:3, 0] / a
        axis_y = self.matrix[:3, 1] / a
        return Ray(self.position() + x * axis_x + y * axis_y, self.eye_direction())