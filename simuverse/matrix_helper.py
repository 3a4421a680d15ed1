"""Projection helpers that fit the [-1, 1] square to the viewport."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

FOVY = 75.0 / 180.0 * math.pi


def _from_cols(*cols: Sequence[float]) -> np.ndarray:
    return np.array(cols, dtype=np.float32).T


def perspective_rh(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [0, 1]."""
    half = 0.5 * fovy
    h = math.cos(half) / math.sin(half)
    w = h / aspect
    r = far / (near - far)
    return _from_cols(
        (w, 0.0, 0.0, 0.0),
        (0.0, h, 0.0, 0.0),
        (0.0, 0.0, r, -1.0),
        (0.0, 0.0, r * near, 0.0),
    )


def orthographic_rh(
    left: float, right: float, bottom: float, top: float, near: float, far: float
) -> np.ndarray:
    """Right-handed orthographic projection mapping depth to [0, 1]."""
    rcp_width = 1.0 / (right - left)
    rcp_height = 1.0 / (top - bottom)
    r = 1.0 / (near - far)
    return _from_cols(
        (2.0 * rcp_width, 0.0, 0.0, 0.0),
        (0.0, 2.0 * rcp_height, 0.0, 0.0),
        (0.0, 0.0, r, 0.0),
        (-(left + right) * rcp_width, -(top + bottom) * rcp_height, r * near, 1.0),
    )


def _translation(x: float, y: float, z: float) -> np.ndarray:
    m = np.identity(4, dtype=np.float32)
    m[:3, 3] = (x, y, z)
    return m


def _scale(x: float, y: float, z: float) -> np.ndarray:
    return np.diag(np.array((x, y, z, 1.0), dtype=np.float32))


def fullscreen_factor(viewport: Sequence[float], fovy: float) -> tuple[float, float, float]:
    """Return ``(translate_z, sx, sy)`` that make the unit square fill the viewport."""
    width, height = float(viewport[0]), float(viewport[1])
    sx = sy = 1.0
    if height > width:
        ratio = height / width
        sy = ratio
    else:
        sx = width / height
        ratio = 1.0
    translate_z = -(ratio / math.tan(fovy / 2.0))
    return translate_z, sx, sy


def perspective_mvp(
    viewport: Sequence[float],
) -> tuple[np.ndarray, np.ndarray, tuple[float, float, float]]:
    """Projection, view-model matrix and ``(sx, sy, translate_z)``."""
    width, height = float(viewport[0]), float(viewport[1])
    p_matrix = perspective_rh(FOVY, width / height, 0.1, 100.0)
    translate_z, sx, sy = fullscreen_factor(viewport, FOVY)
    vm_matrix = _translation(0.0, 0.0, translate_z)
    return p_matrix, vm_matrix, (sx, sy, translate_z)


def perspective_fullscreen_mvp(viewport: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    """Projection and view-model matrices with the fullscreen scale applied."""
    p_matrix, vm_matrix, factor = perspective_mvp(viewport)
    scale_matrix = _scale(factor[1], factor[2], 1.0)
    return p_matrix, vm_matrix @ scale_matrix


def ortho_mvp(viewport_size: Sequence[float]) -> list[list[float]]:
    """Orthographic MVP as a list of columns."""
    _, sx, sy = fullscreen_factor(viewport_size, FOVY)
    p_matrix = orthographic_rh(-sx, sx, -sy, sy, -100.0, 100.0)
    return p_matrix.T.tolist()