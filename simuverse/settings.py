"""Parameter sets for the noise, cloth and CAD simulations."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

RGB = tuple[float, float, float]


@dataclass
class NoiseSetting:
    """Procedural-noise texture parameters; each preset type sets its own defaults."""

    simu_ty: int | None = 0
    back_color: RGB = (0.0, 0.0, 0.0)
    front_color: RGB = (0.0, 0.0, 0.0)
    noise_scale: float = 0.0
    octave: int = 0
    lacunarity: float = 0.0
    gain: float = 0.0
    hide_gain: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        self._apply_preset()

    def select_type(self, simu_ty: int | None) -> None:
        """Switch to another preset type and load its parameters."""
        self.simu_ty = simu_ty
        self._apply_preset()

    def shows_octave(self) -> bool:
        """Whether the octave parameter applies to the current type."""
        return self.simu_ty in (0, 1)

    def shows_gain(self) -> bool:
        """Whether the gain parameter applies to the current type."""
        return self.simu_ty != 1

    def _apply_preset(self) -> None:
        self.hide_gain = False
        if self.simu_ty == 1:
            # Wood: gain is not used, so the previous value is kept.
            self.back_color = (0.69, 0.498, 0.361)
            self.front_color = (0.125, 0.094, 0.067)
            self.noise_scale = 2.0
            self.octave = 3
            self.lacunarity = 0.7
            self.hide_gain = True
        elif self.simu_ty == 2:
            self.back_color = (1.0, 1.0, 1.0)
            self.front_color = (0.353, 0.120, 0.106)
            self.noise_scale = 1.0
            self.octave = 3
            self.lacunarity = 2.7
            self.gain = 0.49
        elif self.simu_ty == 3:
            self.back_color = (0.000, 0.000, 0.165)
            self.front_color = (0.667, 1.000, 1.000)
            self.noise_scale = 1.5
            self.octave = 3
            self.lacunarity = 1.8
            self.gain = 0.91
        else:
            self.back_color = (0.98, 0.98, 0.98)
            self.front_color = (0.16, 0.22, 0.5)
            self.noise_scale = 2.2
            self.octave = 6
            self.lacunarity = 2.5
            self.gain = 0.6


@dataclass
class PBDSetting:
    """Position-based-dynamics cloth parameters."""

    simu_ty: int | None = 0
    damping: float = 0.6
    gravity: float = 0.7
    compliance: float = 0.001
    stiffness: float = 0.05
    show_mesh: bool = False

    def select_type(self, simu_ty: int | None) -> None:
        """Select the simulated object; cloth is the only kind and has no presets."""
        self.simu_ty = simu_ty


@dataclass
class CADSetting:
    """CAD viewer parameters."""

    simu_ty: int = 0
    render_mode: int = 3
    texture: int = 0


class CADAppType(enum.IntEnum):
    """Which CAD demo is shown."""

    BSPLINE = 0
    OBJ = 1

    @classmethod
    def from_u32(cls, ty: int) -> CADAppType:
        """Map 0 to B-spline; any other value to the OBJ viewer."""
        return cls.BSPLINE if ty == 0 else cls.OBJ


class RenderMode(enum.IntEnum):
    """How a CAD model is drawn."""

    NAIVE_SURFACE = 0
    NAIVE_WIRE_FRAME = 1
    HIDDEN_LINE_ELIMINATE = 2
    SURFACE_AND_WIRE_FRAME = 3

    @classmethod
    def from_u32(cls, ty: int) -> RenderMode:
        """Map 0-2 to their modes; any other value to surface with wire frame."""
        if ty in (0, 1, 2):
            return cls(ty)
        return cls.SURFACE_AND_WIRE_FRAME


def texture_name(index: int) -> str:
    """Display name of a procedural texture index."""
    if index == 0:
        return "None"
    if index == 1:
        return "Wood"
    return "Marble"