"""
Wall-thickness shell generation.

The assembled mesh is the inner (acoustic) surface and is never altered;
thickness is added on the exterior by offsetting each vertex along its
averaged normal.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from .contract import MISSING_PROFILE, SHELL_DISABLED, GeometryFailure, geometry_failure, is_failure
from .defaults import DEGENERATE_NORMAL, NORMAL_EPSILON
from .values import MeshData, ShellMeshData, ShellParams, frozen_array

logger = logging.getLogger(__name__)


def normalize_vectors(vectors: np.ndarray) -> np.ndarray:
    """Unit vectors along the last axis; zero-length entries become (0, 0, 1)."""
    lengths = np.linalg.norm(vectors, axis=-1, keepdims=True)
    degenerate = lengths < NORMAL_EPSILON
    unit = np.divide(vectors, lengths, out=np.zeros_like(vectors), where=~degenerate)
    return np.where(degenerate, np.asarray(DEGENERATE_NORMAL), unit)


def compute_vertex_normals(grid: np.ndarray) -> np.ndarray:
    """Per-vertex normals for a (rings + 1, slices + 1, 3) ring grid.

    Each quad contributes the unit normal of its (a, b, d) triangle to its
    four corners. The two seam copies of a vertex share their summed
    contribution before the final normalization.
    """
    v_a = grid[:-1, :-1]
    v_b = grid[:-1, 1:]
    v_d = grid[1:, :-1]
    face = normalize_vectors(np.cross(v_b - v_a, v_d - v_a))

    acc = np.zeros_like(grid, dtype=float)
    acc[:-1, :-1] += face
    acc[:-1, 1:] += face
    acc[1:, 1:] += face
    acc[1:, :-1] += face

    seam = acc[:, 0] + acc[:, -1]
    acc[:, 0] = seam
    acc[:, -1] = seam
    return normalize_vectors(acc)


def generate_shell_mesh(
    mesh: Optional[Union[MeshData, GeometryFailure]],
    shell: ShellParams,
) -> Union[ShellMeshData, GeometryFailure]:
    """Offset the inner surface outward; a failed mesh is passed straight through."""
    if isinstance(mesh, GeometryFailure):
        return mesh
    if is_failure(mesh):
        return geometry_failure(MISSING_PROFILE, "shell", "No mesh to thicken.")
    if not shell.enabled:
        return geometry_failure(SHELL_DISABLED, "shell", "Shell generation was not requested.")

    inner = mesh.grid()
    normals = compute_vertex_normals(inner)

    outer = inner + float(shell.thickness) * normals
    outer[:, -1] = outer[:, 0]

    logger.debug(
        "[Shell] Offset %d vertices by %.2f mm", inner.shape[0] * inner.shape[1], shell.thickness
    )
    return ShellMeshData(
        inner_rings=frozen_array(inner),
        outer_rings=frozen_array(outer),
        normals=frozen_array(normals),
        slices=mesh.slices,
        throat_cap=bool(shell.throat_cap),
        mouth_cap=bool(shell.mouth_cap),
    )
