import unittest

import numpy as np
from scipy import sparse

from seamfield.core.assembly import assemble_energy, assemble_gradient_rhs, assemble_saddle_system
from seamfield.core.differential import build_face_differential
from seamfield.core.errors import DimensionMismatchError
from seamfield.core.maps import pin_constraints, vertex_corner_map
from seamfield.core.mass import build_edge_mass


def _square_problem():
    vertices = np.array(
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]],
        dtype=np.float64,
    )
    faces = np.array([[0, 1, 2], [0, 2, 3]], dtype=np.int32)
    face_edges = np.array([[0, 1, 2], [2, 3, 4]], dtype=np.int32)
    weights = np.array([1.0, 2.0, 0.5, 1.5, 3.0], dtype=np.float64)
    raw_field = np.array([[1.0, 0.2, 0.0], [0.3, -1.0, 0.0]], dtype=np.float64)
    d0, gamma = build_face_differential(vertices, faces, raw_field)
    mass = build_edge_mass(face_edges, weights, 1)
    corner_map = vertex_corner_map(faces, 4, 1)
    return d0, gamma, mass, corner_map


class TestEnergy(unittest.TestCase):
    def test_energy_is_symmetric_psd_with_constant_null_space(self):
        d0, _gamma, mass, corner_map = _square_problem()
        energy = assemble_energy(d0, mass, corner_map)

        self.assertEqual(energy.shape, (4, 4))
        dense = energy.toarray()
        np.testing.assert_array_equal(dense, dense.T)
        eig = np.linalg.eigvalsh(dense)
        self.assertGreaterEqual(float(eig.min()), -1e-12)
        np.testing.assert_allclose(dense @ np.ones(4), np.zeros(4), atol=1e-12)

    def test_energy_matches_dense_product(self):
        d0, _gamma, mass, corner_map = _square_problem()
        energy = assemble_energy(d0, mass, corner_map).toarray()
        p = corner_map.toarray()
        d = d0.toarray()
        m = mass.toarray()
        np.testing.assert_allclose(energy, p.T @ d.T @ m @ d @ p, atol=1e-12)

    def test_gradient_rhs_is_weighted(self):
        d0, gamma, mass, corner_map = _square_problem()
        rhs = assemble_gradient_rhs(d0, mass, gamma, corner_map)
        expected = corner_map.toarray().T @ d0.toarray().T @ mass.toarray() @ gamma
        np.testing.assert_allclose(rhs, expected, atol=1e-12)


class TestSaddleSystem(unittest.TestCase):
    def test_block_structure(self):
        d0, gamma, mass, corner_map = _square_problem()
        energy = assemble_energy(d0, mass, corner_map)
        grad = assemble_gradient_rhs(d0, mass, gamma, corner_map)
        constraints, _targets = pin_constraints([0, 2], [0.0, 0.0], 4)

        system = assemble_saddle_system(energy, grad, constraints)
        a = system.matrix.toarray()

        self.assertEqual(system.size, 6)
        self.assertEqual(a.shape, (6, 6))
        np.testing.assert_array_equal(a, a.T)
        np.testing.assert_allclose(a[:4, :4], energy.toarray())
        np.testing.assert_allclose(a[4:, :4], constraints.toarray())
        np.testing.assert_allclose(a[:4, 4:], constraints.toarray().T)
        np.testing.assert_array_equal(a[4:, 4:], np.zeros((2, 2)))
        np.testing.assert_allclose(system.rhs[:4], grad)
        np.testing.assert_array_equal(system.rhs[4:], np.zeros(2))

    def test_constraint_targets_fill_bottom_segment(self):
        d0, gamma, mass, corner_map = _square_problem()
        energy = assemble_energy(d0, mass, corner_map)
        grad = assemble_gradient_rhs(d0, mass, gamma, corner_map)
        constraints, targets = pin_constraints([1, 3], [2.5, -1.0], 4)

        system = assemble_saddle_system(energy, grad, constraints, targets)
        np.testing.assert_allclose(system.rhs[4:], [2.5, -1.0])

    def test_inputs_are_not_modified(self):
        d0, gamma, mass, corner_map = _square_problem()
        energy = assemble_energy(d0, mass, corner_map)
        grad = assemble_gradient_rhs(d0, mass, gamma, corner_map)
        constraints, targets = pin_constraints([0], [1.0], 4)
        energy_before = energy.toarray().copy()
        grad_before = grad.copy()

        assemble_saddle_system(energy, grad, constraints, targets)

        np.testing.assert_array_equal(energy.toarray(), energy_before)
        np.testing.assert_array_equal(grad, grad_before)

    def test_column_mismatch_rejected(self):
        d0, gamma, mass, corner_map = _square_problem()
        energy = assemble_energy(d0, mass, corner_map)
        grad = assemble_gradient_rhs(d0, mass, gamma, corner_map)
        with self.assertRaises(DimensionMismatchError):
            assemble_saddle_system(energy, grad, sparse.csr_matrix((1, 5)))

    def test_target_length_mismatch_rejected(self):
        d0, gamma, mass, corner_map = _square_problem()
        energy = assemble_energy(d0, mass, corner_map)
        grad = assemble_gradient_rhs(d0, mass, gamma, corner_map)
        constraints, _ = pin_constraints([0], [0.0], 4)
        with self.assertRaises(DimensionMismatchError):
            assemble_saddle_system(energy, grad, constraints, np.zeros(3))


if __name__ == "__main__":
    unittest.main()
