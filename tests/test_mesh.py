"""Tests for the uniform 1D mesh and precision helpers."""

import numpy as np
import pytest

from meshing.mesh_data import NO_CELL, create_uniform_mesh_1d, get_dtype, make_vect


class TestUniformMesh:
    """Geometry and connectivity of create_uniform_mesh_1d."""

    def test_geometry(self, unit_mesh):
        assert unit_mesh.n_cells == 10
        assert unit_mesh.n_faces == 11
        assert unit_mesh.h == pytest.approx(0.1)
        np.testing.assert_allclose(unit_mesh.cell_centers, 0.05 + 0.1 * np.arange(10))
        assert unit_mesh.face_centers[0] == 0.0
        assert unit_mesh.face_centers[-1] == 1.0
        assert unit_mesh.get_volume(3) == pytest.approx(0.1)

    def test_face_neighbours(self, unit_mesh):
        assert unit_mesh.get_neighbour_cell(0, 0) is None
        assert unit_mesh.get_neighbour_cell(0, 1) == 0
        assert unit_mesh.get_neighbour_cell(5, 0) == 4
        assert unit_mesh.get_neighbour_cell(5, 1) == 5
        assert unit_mesh.get_neighbour_cell(10, 0) == 9
        assert unit_mesh.get_neighbour_cell(10, 1) is None

    def test_cell_neighbours(self, unit_mesh):
        assert unit_mesh.get_neighbour_face(0, 0) == 0
        assert unit_mesh.get_neighbour_face(0, 1) == 1
        assert unit_mesh.get_adjacent_cell(0, 0) is None
        assert unit_mesh.get_adjacent_cell(0, 1) == 1
        assert unit_mesh.get_adjacent_cell(9, 0) == 8
        assert unit_mesh.get_adjacent_cell(9, 1) is None

    def test_boundary_face_sets(self, unit_mesh):
        np.testing.assert_array_equal(unit_mesh.left_boundary_faces, [0])
        np.testing.assert_array_equal(unit_mesh.right_boundary_faces, [10])
        np.testing.assert_array_equal(unit_mesh.internal_faces, np.arange(1, 10))
        assert unit_mesh.face_minus_cells[0] == NO_CELL
        assert unit_mesh.face_plus_cells[-1] == NO_CELL

    def test_iteration_order(self, unit_mesh):
        assert list(unit_mesh.cells()) == list(range(10))
        assert list(unit_mesh.faces()) == list(range(11))

    def test_geometry_is_read_only(self, unit_mesh):
        with pytest.raises(ValueError):
            unit_mesh.cell_centers[0] = 1.0

    def test_vector_bounds_use_first_component(self):
        mesh = create_uniform_mesh_1d((make_vect([2.0, 9.0]), make_vect([4.0, 9.0])), 4)
        assert mesh.domain == (2.0, 4.0)
        assert mesh.h == pytest.approx(0.5)

    def test_single_cell(self):
        mesh = create_uniform_mesh_1d((0.0, 1.0), 1)
        assert mesh.get_center(0) == pytest.approx(0.5)
        assert mesh.get_adjacent_cell(0, 0) is None
        assert mesh.get_adjacent_cell(0, 1) is None
        assert len(mesh.internal_faces) == 0

    @pytest.mark.parametrize("num_cells", [0, -3])
    def test_rejects_non_positive_cell_count(self, num_cells):
        with pytest.raises(ValueError):
            create_uniform_mesh_1d((0.0, 1.0), num_cells)

    def test_rejects_empty_domain(self):
        with pytest.raises(ValueError):
            create_uniform_mesh_1d((1.0, 1.0), 4)


class TestPrecision:
    """Floating dtype selection."""

    @pytest.mark.parametrize("precision,dtype", [("float64", np.float64), ("float32", np.float32)])
    def test_get_dtype(self, precision, dtype):
        assert get_dtype(precision) is dtype

    def test_unknown_precision(self):
        with pytest.raises(ValueError):
            get_dtype("float16")

    def test_make_vect(self):
        v = make_vect([1.5, 2.0], "float32")
        assert v.dtype == np.float32
        assert v.shape == (1,)

    def test_float32_mesh(self):
        mesh = create_uniform_mesh_1d((0.0, 1.0), 8, dtype=np.float32)
        assert mesh.cell_centers.dtype == np.float32
