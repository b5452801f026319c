"""
Ring-by-slice mesh assembly.

For each station t = ri / rings the cross-section extents and exponent are
taken from the guide curves, a superellipse ring is sampled at
``slices + 1`` angles, scaled by the combined modulation multiplier and
placed at the horizontal guide's axial position.

Coordinates: X horizontal, Y vertical, Z along the horn axis (throat at t=0).
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Union

import numpy as np

from .contract import (
    INVALID_RESOLUTION,
    MISSING_PROFILE,
    GeometryFailure,
    geometry_failure,
    is_failure,
)
from .defaults import DEFAULT_MOD_SAMPLES, DEFAULT_RINGS, DEFAULT_SLICES
from .modulation import combined_modulation, prep_mod_params
from .rosse import compute_rosse
from .superellipse import cross_section_at, slice_angles, superellipse_xy
from .values import (
    HornDesign,
    MeshData,
    MeshRing,
    ModulationBlendParams,
    ModulationParams,
    ProfileCurve,
    ShapeBlendParams,
    frozen_array,
)

logger = logging.getLogger(__name__)


def build_mesh(
    h_curve: Optional[Union[ProfileCurve, GeometryFailure]],
    v_curve: Optional[Union[ProfileCurve, GeometryFailure]],
    shape_blend: ShapeBlendParams,
    mod_blend: ModulationBlendParams,
    diagonal: ModulationParams,
    cardinal: ModulationParams,
    rings: int = DEFAULT_RINGS,
    slices: int = DEFAULT_SLICES,
    mod_samples: int = DEFAULT_MOD_SAMPLES,
) -> Union[MeshData, GeometryFailure]:
    """Assemble the full ring grid, or return a single failure for the whole mesh."""
    for axis, curve in (("horizontal", h_curve), ("vertical", v_curve)):
        if is_failure(curve):
            detail = curve.detail if isinstance(curve, GeometryFailure) else "profile was not solved"
            return geometry_failure(MISSING_PROFILE, "mesh", f"{axis} guide curve unavailable: {detail}")

    rings, slices = int(rings), int(slices)
    if rings < 1 or slices < 3:
        return geometry_failure(
            INVALID_RESOLUTION,
            "mesh",
            f"Mesh needs at least 1 ring interval and 3 slices, got rings={rings}, slices={slices}.",
        )

    prep = prep_mod_params(diagonal, cardinal, mod_samples)
    theta = slice_angles(slices)

    mesh_rings = []
    for ri in range(rings + 1):
        t = ri / rings
        section = cross_section_at(t, h_curve, v_curve, shape_blend)

        px, py = superellipse_xy(section.y_h, section.y_v, section.n, theta)
        scale = combined_modulation(theta, t, prep, mod_blend)

        points = np.empty((slices + 1, 3))
        points[:, 0] = px * scale
        points[:, 1] = py * scale
        points[:, 2] = section.x_h
        # theta = 2*pi does not reproduce theta = 0 bit-for-bit
        points[slices] = points[0]

        mesh_rings.append(
            MeshRing(
                t=t,
                x_h=section.x_h,
                y_h=section.y_h,
                y_v=section.y_v,
                n=section.n,
                points=frozen_array(points),
            )
        )

    logger.debug("[Mesh] Built %d rings x %d slices", rings + 1, slices + 1)
    return MeshData(rings=tuple(mesh_rings), slices=slices)


def build_horn(design: HornDesign) -> Union[MeshData, GeometryFailure]:
    """Solve both guide curves and assemble the mesh for a complete design."""
    h_curve = compute_rosse(design.horizontal, design.profile_samples)
    if is_failure(h_curve):
        return h_curve
    v_curve = compute_rosse(design.vertical, design.profile_samples)
    if is_failure(v_curve):
        return v_curve

    return build_mesh(
        h_curve,
        v_curve,
        design.shape_blend,
        design.mod_blend,
        design.diagonal,
        design.cardinal,
        rings=design.rings,
        slices=design.slices,
    )


def compute_mesh_metrics(mesh: Optional[MeshData]) -> Optional[Dict[str, float]]:
    """Throat radius, axial depth and mouth size (mm) for display."""
    if mesh is None or is_failure(mesh) or not mesh.rings:
        return None
    first, last = mesh.rings[0], mesh.rings[-1]
    return {
        "throat": first.y_h,
        "depth": last.x_h,
        "mouthWidth": 2.0 * last.y_h,
        "mouthHeight": 2.0 * last.y_v,
    }
