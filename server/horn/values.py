"""
Immutable value types flowing through the horn geometry engine.

Every stage takes these as input and allocates fresh ones as output; arrays
held by a value are flagged read-only so a consumer cannot edit a shared
result in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

from .defaults import DEFAULT_PROFILE_SAMPLES, DEFAULT_RINGS, DEFAULT_SLICES


def frozen_array(values, dtype=float) -> np.ndarray:
    arr = np.array(values, dtype=dtype, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class ProfileParams:
    """R-OSSE guide curve parameters for one axis. Lengths in mm, angles in degrees."""

    R: float = 145.0
    r0: float = 12.7
    a0_deg: float = 7.5
    a_deg: float = 45.0
    k: float = 1.8
    rho: float = 0.3
    b: float = 0.3
    m: float = 0.8
    q: float = 3.7


@dataclass(frozen=True)
class ProfileCurve:
    t: np.ndarray
    x: np.ndarray
    y: np.ndarray
    length: float
    c1: float
    c2: float
    c3: float

    @property
    def samples(self) -> int:
        return len(self.t) - 1


@dataclass(frozen=True)
class ShapeBlendParams:
    n_mouth: float = 4.5
    shape_start: float = 0.05
    shape_end: float = 0.85
    shape_pow: float = 1.0


@dataclass(frozen=True)
class ModulationParams:
    enabled: bool = False
    base: float = 0.3
    amp: float = 0.5
    freq: float = 2.0
    exp: float = 4.0


@dataclass(frozen=True)
class ModulationBlendParams:
    mod_start: float = 0.15
    mod_end: float = 0.75
    mod_pow: float = 1.0


@dataclass(frozen=True)
class XModParams:
    """Single-pattern diagonal modulation with its own blend ramp."""

    enabled: bool = False
    base: float = 1.0
    amp: float = 0.3
    freq: float = 2.0
    exp: float = 1.5
    blend_start: float = 0.4
    blend_pow: float = 2.0


@dataclass(frozen=True)
class ModulationPrep:
    diagonal: ModulationParams
    cardinal: ModulationParams
    avg_diagonal: float
    avg_cardinal: float


@dataclass(frozen=True)
class ShellParams:
    enabled: bool = False
    thickness: float = 3.0
    throat_cap: bool = True
    mouth_cap: bool = True


@dataclass(frozen=True)
class MeshRing:
    t: float
    x_h: float
    y_h: float
    y_v: float
    n: float
    points: np.ndarray  # (slices + 1, 3); row 0 and row `slices` coincide


@dataclass(frozen=True)
class MeshData:
    rings: Tuple[MeshRing, ...]
    slices: int

    @property
    def num_rings(self) -> int:
        """Number of ring intervals (one less than the number of stored rings)."""
        return len(self.rings) - 1

    def grid(self) -> np.ndarray:
        """All ring points stacked as a (rings + 1, slices + 1, 3) array."""
        return np.stack([ring.points for ring in self.rings])


@dataclass(frozen=True)
class ShellMeshData:
    inner_rings: np.ndarray
    outer_rings: np.ndarray
    normals: np.ndarray
    slices: int
    throat_cap: bool = True
    mouth_cap: bool = True


@dataclass(frozen=True)
class HornDesign:
    """Every value the engine needs for one full computation pass."""

    horizontal: ProfileParams = field(default_factory=ProfileParams)
    vertical: ProfileParams = field(
        default_factory=lambda: ProfileParams(R=95.0, a_deg=30.0)
    )
    shape_blend: ShapeBlendParams = field(default_factory=ShapeBlendParams)
    mod_blend: ModulationBlendParams = field(default_factory=ModulationBlendParams)
    diagonal: ModulationParams = field(default_factory=ModulationParams)
    cardinal: ModulationParams = field(default_factory=ModulationParams)
    rings: int = DEFAULT_RINGS
    slices: int = DEFAULT_SLICES
    shell: ShellParams = field(default_factory=ShellParams)
    profile_samples: int = DEFAULT_PROFILE_SAMPLES
