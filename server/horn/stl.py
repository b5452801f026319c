"""
Binary STL encoding of a horn mesh, optionally shelled.

Layout: 80-byte header, uint32 LE triangle count, then one 50-byte record per
triangle (float32 LE normal, three float32 LE vertices, uint16 attribute).

Surfaces written:
  inner        reversed winding, normals face into the acoustic path
  outer        forward winding, normals face away from the wall (shell only)
  throat strip outer[0] <-> inner[0]   (shell with throat cap)
  mouth strip  outer[-1] <-> inner[-1] (shell with mouth cap)
The strip windings are the ones that make every edge of the closed solid
shared by exactly two triangles traversing it in opposite directions.
"""

from __future__ import annotations

import logging
import struct
from typing import Dict, Optional, Union

import numpy as np

from .contract import GeometryFailure, is_failure
from .defaults import STL_HEADER_TEXT
from .shell import generate_shell_mesh, normalize_vectors
from .values import MeshData, ShellMeshData, ShellParams

logger = logging.getLogger(__name__)

STL_HEADER_SIZE = 80
STL_COUNT_SIZE = 4
STL_RECORD_DTYPE = np.dtype(
    [
        ("normal", "<f4", (3,)),
        ("vertices", "<f4", (3, 3)),
        ("attribute", "<u2"),
    ]
)
STL_RECORD_SIZE = STL_RECORD_DTYPE.itemsize  # 50


def _quad_corners(grid: np.ndarray):
    """(v1, v2, v3, v4) corner arrays of every quad: v1=(r,s) v2=(r,s+1) v3=(r+1,s+1) v4=(r+1,s)."""
    return grid[:-1, :-1], grid[:-1, 1:], grid[1:, 1:], grid[1:, :-1]


def _pair(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Interleave two triangle sets so each quad's triangles stay adjacent."""
    return np.stack([first, second], axis=-3).reshape(-1, 3, 3)


def _surface_triangles(grid: np.ndarray, reverse: bool) -> np.ndarray:
    v1, v2, v3, v4 = _quad_corners(grid)
    if reverse:
        return _pair(np.stack([v1, v4, v3], axis=-2), np.stack([v1, v3, v2], axis=-2))
    return _pair(np.stack([v1, v2, v3], axis=-2), np.stack([v1, v3, v4], axis=-2))


def _strip_triangles(outer_ring: np.ndarray, inner_ring: np.ndarray, at_mouth: bool) -> np.ndarray:
    o1, o2 = outer_ring[:-1], outer_ring[1:]
    i1, i2 = inner_ring[:-1], inner_ring[1:]
    if at_mouth:
        return _pair(np.stack([o1, o2, i2], axis=-2), np.stack([o1, i2, i1], axis=-2))
    return _pair(np.stack([o1, i1, i2], axis=-2), np.stack([o1, i2, o2], axis=-2))


def triangulate(mesh: MeshData, shell: Optional[ShellMeshData] = None) -> np.ndarray:
    """All output triangles as an (N, 3, 3) float64 array, in file order."""
    if is_failure(mesh):
        return np.empty((0, 3, 3))
    inner = mesh.grid()
    parts = [_surface_triangles(inner, reverse=True)]

    if shell is not None and not is_failure(shell):
        outer = np.asarray(shell.outer_rings)
        inner_rings = np.asarray(shell.inner_rings)
        parts.append(_surface_triangles(outer, reverse=False))
        if shell.throat_cap:
            parts.append(_strip_triangles(outer[0], inner_rings[0], at_mouth=False))
        if shell.mouth_cap:
            parts.append(_strip_triangles(outer[-1], inner_rings[-1], at_mouth=True))

    return np.concatenate(parts, axis=0)


def count_triangles(mesh: MeshData, shell: Optional[ShellMeshData] = None) -> int:
    if is_failure(mesh):
        return 0
    quads = mesh.num_rings * mesh.slices
    count = 2 * quads
    if shell is not None and not is_failure(shell):
        count += 2 * quads
        if shell.throat_cap:
            count += 2 * mesh.slices
        if shell.mouth_cap:
            count += 2 * mesh.slices
    return count


def face_normals(triangles: np.ndarray) -> np.ndarray:
    """Unit normals of (N, 3, 3) triangles; degenerate faces get (0, 0, 1)."""
    e1 = triangles[:, 1] - triangles[:, 0]
    e2 = triangles[:, 2] - triangles[:, 0]
    return normalize_vectors(np.cross(e1, e2))


def _header_bytes(text: str) -> bytes:
    raw = str(text).encode("ascii", errors="replace")[:STL_HEADER_SIZE]
    return raw.ljust(STL_HEADER_SIZE, b"\x00")


def encode_binary_stl(
    mesh: MeshData,
    shell: Optional[ShellMeshData] = None,
    header: str = STL_HEADER_TEXT,
) -> bytes:
    """Binary STL bytes; empty when the mesh itself is a failure."""
    if is_failure(mesh):
        return b""
    triangles = triangulate(mesh, shell)
    expected = count_triangles(mesh, shell)
    if len(triangles) != expected:
        raise RuntimeError(
            f"Triangle assembly produced {len(triangles)} faces, expected {expected}."
        )

    records = np.zeros(len(triangles), dtype=STL_RECORD_DTYPE)
    records["normal"] = face_normals(triangles)
    records["vertices"] = triangles

    shelled = shell is not None and not is_failure(shell)
    logger.info("[STL] Encoded %d triangles (%s)", len(triangles), "shell" if shelled else "surface only")
    return _header_bytes(header) + struct.pack("<I", len(triangles)) + records.tobytes()


def export_to_stl(
    mesh: Optional[Union[MeshData, GeometryFailure]],
    shell_params: ShellParams,
    header: str = STL_HEADER_TEXT,
) -> bytes:
    """Encode a mesh, building the shell first when ``shell_params.enabled``.

    Returns an empty buffer when there is no mesh to encode.
    """
    if mesh is None or is_failure(mesh):
        return b""
    shell = generate_shell_mesh(mesh, shell_params) if shell_params.enabled else None
    return encode_binary_stl(mesh, shell, header=header)


def parse_binary_stl(data: bytes) -> Dict[str, object]:
    """Decode a binary STL buffer into header text, normals and vertices."""
    if len(data) < STL_HEADER_SIZE + STL_COUNT_SIZE:
        raise ValueError(f"Binary STL must be at least 84 bytes, got {len(data)}.")
    (count,) = struct.unpack_from("<I", data, STL_HEADER_SIZE)
    body = data[STL_HEADER_SIZE + STL_COUNT_SIZE:]
    if len(body) != count * STL_RECORD_SIZE:
        raise ValueError(
            f"Binary STL declares {count} triangles but carries {len(body)} record bytes "
            f"(expected {count * STL_RECORD_SIZE})."
        )
    records = np.frombuffer(body, dtype=STL_RECORD_DTYPE, count=count)
    return {
        "header": data[:STL_HEADER_SIZE].rstrip(b"\x00").decode("ascii", errors="replace"),
        "count": int(count),
        "normals": records["normal"].astype(float),
        "vertices": records["vertices"].astype(float),
    }
