import unittest

import numpy as np

from horn.contract import MISSING_PROFILE, SHELL_DISABLED, UNSOLVABLE_PROFILE, GeometryFailure
from horn.mesh import build_horn
from horn.shell import compute_vertex_normals, generate_shell_mesh, normalize_vectors
from horn.values import HornDesign, ProfileParams, ShellParams


class VertexNormalTest(unittest.TestCase):
    def test_degenerate_vector_falls_back_to_z(self):
        out = normalize_vectors(np.array([[0.0, 0.0, 0.0], [3.0, 0.0, 4.0]]))
        np.testing.assert_allclose(out[0], [0.0, 0.0, 1.0])
        np.testing.assert_allclose(out[1], [0.6, 0.0, 0.8])

    def test_cylinder_normals_point_outward(self):
        slices = 36
        theta = 2 * np.pi * np.arange(slices + 1) / slices
        grid = np.zeros((4, slices + 1, 3))
        for r in range(4):
            grid[r, :, 0] = 10.0 * np.cos(theta)
            grid[r, :, 1] = 10.0 * np.sin(theta)
            grid[r, :, 2] = 5.0 * r
        grid[:, -1] = grid[:, 0]

        normals = compute_vertex_normals(grid)
        radial = grid[..., :2] / 10.0
        np.testing.assert_allclose(normals[1:-1, :, :2], radial[1:-1], atol=1e-2)
        np.testing.assert_allclose(np.linalg.norm(normals, axis=-1), 1.0, atol=1e-12)

    def test_seam_copies_share_normal(self):
        mesh = build_horn(HornDesign())
        normals = compute_vertex_normals(mesh.grid())
        self.assertTrue(np.array_equal(normals[:, 0], normals[:, -1]))


class ShellMeshTest(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.mesh = build_horn(HornDesign())
        cls.shell = generate_shell_mesh(cls.mesh, ShellParams(enabled=True, thickness=3.0))

    def test_disabled_shell_is_reported(self):
        result = generate_shell_mesh(self.mesh, ShellParams(enabled=False))
        self.assertIsInstance(result, GeometryFailure)
        self.assertEqual(result.code, SHELL_DISABLED)

    def test_inner_surface_unchanged(self):
        self.assertTrue(np.array_equal(self.shell.inner_rings, self.mesh.grid()))

    def test_outer_offset_by_thickness(self):
        offset = np.linalg.norm(self.shell.outer_rings - self.shell.inner_rings, axis=-1)
        np.testing.assert_allclose(offset, 3.0, atol=1e-9)

    def test_outer_seam_closed_exactly(self):
        outer = self.shell.outer_rings
        for r in range(outer.shape[0]):
            self.assertTrue(np.array_equal(outer[r, 0], outer[r, -1]))

    def test_throat_offset_is_outward(self):
        inner_r = np.hypot(self.shell.inner_rings[0, :, 0], self.shell.inner_rings[0, :, 1])
        outer_r = np.hypot(self.shell.outer_rings[0, :, 0], self.shell.outer_rings[0, :, 1])
        self.assertTrue(np.all(outer_r > inner_r))

    def test_shapes(self):
        self.assertEqual(self.shell.outer_rings.shape, (51, 73, 3))
        self.assertEqual(self.shell.normals.shape, (51, 73, 3))
        self.assertEqual(self.shell.slices, 72)


class FailedMeshShellTest(unittest.TestCase):
    def test_profile_failure_is_passed_through(self):
        failed = build_horn(
            HornDesign(horizontal=ProfileParams(R=5.0, r0=12.7, a0_deg=0.1, a_deg=60.0, k=0.5))
        )
        result = generate_shell_mesh(failed, ShellParams(enabled=True))
        self.assertIs(result, failed)
        self.assertEqual(result.code, UNSOLVABLE_PROFILE)

    def test_missing_mesh_reports_failure(self):
        result = generate_shell_mesh(None, ShellParams(enabled=True))
        self.assertIsInstance(result, GeometryFailure)
        self.assertEqual(result.code, MISSING_PROFILE)
        self.assertEqual(result.stage, "shell")


if __name__ == "__main__":
    unittest.main()
