import unittest

import numpy as np

from seamfield.core.errors import DimensionMismatchError, InvalidInputError
from seamfield.core.maps import (
    corner_map_from_indices,
    identity_corner_map,
    pin_constraints,
    vertex_corner_map,
)


class TestCornerMaps(unittest.TestCase):
    def test_identity_corner_map_size(self):
        p = identity_corner_map(n_faces=2, degree=4)
        self.assertEqual(p.shape, (24, 24))
        self.assertEqual(p.nnz, 24)

    def test_from_indices_leaves_negative_rows_empty(self):
        p = corner_map_from_indices(np.array([2, -1, 0, 2]), n_reduced=3).toarray()
        np.testing.assert_array_equal(
            p,
            [
                [0.0, 0.0, 1.0],
                [0.0, 0.0, 0.0],
                [1.0, 0.0, 0.0],
                [0.0, 0.0, 1.0],
            ],
        )

    def test_from_indices_rejects_out_of_range(self):
        with self.assertRaises(InvalidInputError):
            corner_map_from_indices(np.array([0, 3]), n_reduced=3)

    def test_vertex_corner_map_merges_shared_corners(self):
        faces = np.array([[0, 1, 2], [0, 2, 3]], dtype=np.int32)
        p = vertex_corner_map(faces, n_vertices=4, degree=2)
        self.assertEqual(p.shape, (12, 8))

        values = np.arange(8, dtype=np.float64) * 10.0
        corner = (p @ values).reshape(2, 3, 2)
        # vertex 2 is corner 2 of face 0 and corner 1 of face 1
        np.testing.assert_array_equal(corner[0, 2], [40.0, 50.0])
        np.testing.assert_array_equal(corner[1, 1], [40.0, 50.0])
        np.testing.assert_array_equal(corner[1, 2], [60.0, 70.0])


class TestPinConstraints(unittest.TestCase):
    def test_rows_and_targets(self):
        c, targets = pin_constraints([3, 0], [1.0, -2.0], n_reduced=4)
        np.testing.assert_array_equal(
            c.toarray(),
            [
                [0.0, 0.0, 0.0, 1.0],
                [1.0, 0.0, 0.0, 0.0],
            ],
        )
        np.testing.assert_array_equal(targets, [1.0, -2.0])

    def test_scalar_value_broadcasts(self):
        _c, targets = pin_constraints([0, 1, 2], 0.5, n_reduced=3)
        np.testing.assert_array_equal(targets, [0.5, 0.5, 0.5])

    def test_mismatched_values(self):
        with self.assertRaises(DimensionMismatchError):
            pin_constraints([0, 1], [1.0, 2.0, 3.0], n_reduced=3)

    def test_out_of_range_index(self):
        with self.assertRaises(InvalidInputError):
            pin_constraints([5], [0.0], n_reduced=3)


if __name__ == "__main__":
    unittest.main()
