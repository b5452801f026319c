"""Binary STL layout, triangle count law and shell watertightness."""

import logging
import struct
from collections import Counter

import numpy as np
import pytest

from horn.contract import GeometryFailure
from horn.mesh import build_horn
from horn.shell import generate_shell_mesh
from horn.stl import (
    STL_RECORD_SIZE,
    count_triangles,
    encode_binary_stl,
    export_to_stl,
    face_normals,
    parse_binary_stl,
    triangulate,
)
from horn.values import HornDesign, ProfileParams, ShellParams

RINGS, SLICES = 50, 72


def _directed_edges(vertices: np.ndarray) -> Counter:
    """Directed edge multiset over vertex ids merged by exact float32 position."""
    flat = vertices.reshape(-1, 3)
    _, ids = np.unique(flat, axis=0, return_inverse=True)
    ids = np.asarray(ids).reshape(-1, 3)
    edges = Counter()
    for a, b, c in ids:
        edges[(a, b)] += 1
        edges[(b, c)] += 1
        edges[(c, a)] += 1
    return edges


@pytest.fixture(scope="module")
def mesh():
    return build_horn(HornDesign(rings=RINGS, slices=SLICES))


@pytest.fixture(scope="module")
def shell(mesh):
    return generate_shell_mesh(
        mesh, ShellParams(enabled=True, thickness=3.0, throat_cap=True, mouth_cap=True)
    )


class TestLayout:
    def test_record_is_fifty_bytes(self):
        assert STL_RECORD_SIZE == 50

    def test_surface_only_count_and_length(self, mesh):
        data = encode_binary_stl(mesh)
        count = struct.unpack_from("<I", data, 80)[0]
        assert count == 2 * RINGS * SLICES
        assert count == count_triangles(mesh)
        assert len(data) == 80 + 4 + 50 * count

    def test_shell_count_and_length(self, mesh, shell):
        data = encode_binary_stl(mesh, shell)
        count = struct.unpack_from("<I", data, 80)[0]
        assert count == 4 * RINGS * SLICES + 4 * SLICES
        assert len(data) == 80 + 4 + 50 * count

    def test_header_text(self, mesh):
        data = encode_binary_stl(mesh, header="horn test")
        assert data[:9] == b"horn test"
        assert data[9:80] == b"\x00" * 71
        assert parse_binary_stl(data)["header"] == "horn test"

    def test_long_header_is_truncated(self, mesh):
        data = encode_binary_stl(mesh, header="x" * 200)
        assert data[:80] == b"x" * 80
        assert struct.unpack_from("<I", data, 80)[0] == count_triangles(mesh)

    def test_attribute_field_is_zero(self, mesh):
        data = encode_binary_stl(mesh)
        first_attr = struct.unpack_from("<H", data, 84 + 48)[0]
        assert first_attr == 0

    def test_parse_rejects_truncated_buffer(self, mesh):
        data = encode_binary_stl(mesh)
        with pytest.raises(ValueError, match="declares"):
            parse_binary_stl(data[:-10])


class TestNormals:
    def test_inner_surface_faces_inward(self, mesh):
        triangles = triangulate(mesh)
        normals = face_normals(triangles)
        centroid_xy = triangles.mean(axis=1)[:, :2]
        radial = np.einsum("ij,ij->i", normals[:, :2], centroid_xy)
        # Throat-side half of the horn: radial component points at the axis.
        throat_half = slice(0, len(triangles) // 2)
        assert np.all(radial[throat_half] < 0)

    def test_degenerate_triangle_gets_default_normal(self):
        tri = np.zeros((1, 3, 3))
        np.testing.assert_allclose(face_normals(tri)[0], [0.0, 0.0, 1.0])

    def test_written_normals_match_geometry(self, mesh, shell):
        parsed = parse_binary_stl(encode_binary_stl(mesh, shell))
        lengths = np.linalg.norm(parsed["normals"], axis=-1)
        np.testing.assert_allclose(lengths, 1.0, atol=1e-5)


class TestWatertight:
    def test_shell_is_closed_manifold(self, mesh, shell):
        parsed = parse_binary_stl(encode_binary_stl(mesh, shell))
        edges = _directed_edges(parsed["vertices"])

        assert all(a != b for a, b in edges)
        assert all(n == 1 for n in edges.values())
        for a, b in edges:
            assert (b, a) in edges

    def test_surface_only_has_open_ends(self, mesh):
        parsed = parse_binary_stl(encode_binary_stl(mesh))
        edges = _directed_edges(parsed["vertices"])
        boundary = [e for e in edges if (e[1], e[0]) not in edges]
        # Throat ring plus mouth ring.
        assert len(boundary) == 2 * SLICES

    def test_disabled_caps_leave_ends_open(self, mesh):
        open_shell = generate_shell_mesh(
            mesh, ShellParams(enabled=True, thickness=3.0, throat_cap=False, mouth_cap=True)
        )
        data = encode_binary_stl(mesh, open_shell)
        count = struct.unpack_from("<I", data, 80)[0]
        assert count == 4 * RINGS * SLICES + 2 * SLICES

        edges = _directed_edges(parse_binary_stl(data)["vertices"])
        boundary = [e for e in edges if (e[1], e[0]) not in edges]
        assert len(boundary) == 2 * SLICES


class TestExport:
    def test_export_builds_shell_when_enabled(self, mesh):
        data = export_to_stl(mesh, ShellParams(enabled=True, thickness=3.0))
        assert struct.unpack_from("<I", data, 80)[0] == 4 * RINGS * SLICES + 4 * SLICES

    def test_export_surface_only(self, mesh):
        data = export_to_stl(mesh, ShellParams(enabled=False))
        assert len(data) == 84 + 50 * 2 * RINGS * SLICES

    def test_export_without_mesh_is_empty(self):
        assert export_to_stl(None, ShellParams()) == b""


class TestFailedMesh:
    @pytest.fixture(scope="class")
    def failed(self):
        design = HornDesign(
            horizontal=ProfileParams(R=5.0, r0=12.7, a0_deg=0.1, a_deg=60.0, k=0.5)
        )
        return build_horn(design)

    def test_failure_flows_through_every_stage(self, failed):
        assert isinstance(failed, GeometryFailure)
        shell = generate_shell_mesh(failed, ShellParams(enabled=True))
        assert shell is failed
        assert count_triangles(failed) == 0
        assert count_triangles(failed, shell) == 0
        assert triangulate(failed, shell).shape == (0, 3, 3)
        assert encode_binary_stl(failed, shell) == b""

    def test_failed_shell_is_logged_as_surface_only(self, mesh, caplog):
        disabled = generate_shell_mesh(mesh, ShellParams(enabled=False))
        with caplog.at_level(logging.INFO, logger="horn.stl"):
            data = encode_binary_stl(mesh, disabled)
        assert len(data) == 84 + STL_RECORD_SIZE * 2 * RINGS * SLICES
        assert "surface only" in caplog.text
