"""Light sources and their shader-side layout."""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np

LIGHT_MAX = 255

LIGHT_INFO_DTYPE = np.dtype(
    [
        ("light_position", "<f4", (4,)),
        ("light_color", "<f4", (4,)),
        ("light_type", "<u4", (4,)),
    ]
)


class LightType(enum.IntEnum):
    """Kind of light source."""

    POINT = 0
    UNIFORM = 1


def _triple(values) -> tuple[float, float, float]:
    result = tuple(float(v) for v in values)
    if len(result) != 3:
        raise ValueError(f"expected 3 components, got {len(result)}")
    return result


@dataclass
class Light:
    """A light with a position, a [0, 1] RGB color and a type."""

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    light_type: LightType = LightType.POINT

    def __post_init__(self) -> None:
        self.position = _triple(self.position)
        self.color = _triple(self.color)
        self.light_type = LightType(self.light_type)

    def light_info(self) -> np.ndarray:
        """Shader data: homogeneous position, RGBA color and type code."""
        info = np.zeros((), dtype=LIGHT_INFO_DTYPE)
        info["light_position"] = (*self.position, 1.0)
        info["light_color"] = (*self.color, 1.0)
        info["light_type"] = (int(self.light_type), 0, 0, 0)
        return info