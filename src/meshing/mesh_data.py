"""
MeshData1D: Core data layout for the 1D finite volume heat storage solver.

This class defines static geometry and connectivity of a uniform 1D mesh.

Indexing Conventions:
- Cells are numbered 0 to n_cells-1 from left to right.
- Faces are numbered 0 to n_faces-1 (n_faces = n_cells + 1) from left to right.
- Face f separates cell f-1 (minus side, side 0) and cell f (plus side, side 1).
- Cell c is bounded by face c (minus side) and face c+1 (plus side).

Boundary Metadata:
- face_minus_cells[0] and face_plus_cells[-1] hold the sentinel -1 in the
  vector views; the scalar accessors return None instead.
"""

from typing import Optional, Sequence

import numpy as np

NO_CELL = -1

_PRECISIONS = {
    "float64": np.float64,
    "float32": np.float32,
}


def get_dtype(precision: str):
    """Return the NumPy floating type for a precision name."""
    try:
        return _PRECISIONS[precision]
    except KeyError:
        raise ValueError(
            f"Unknown precision: {precision}. Use one of {sorted(_PRECISIONS)}"
        ) from None


def make_vect(values: Sequence[float], precision: str = "float64") -> np.ndarray:
    """Build a 1D coordinate vector from the first component of ``values``."""
    return np.asarray(values[:1], dtype=get_dtype(precision))


class MeshData1D:
    def __init__(self, cell_centers, face_centers, cell_volume, dtype=np.float64):
        # --- Geometry ---
        self.dtype = dtype
        self.cell_centers = np.asarray(cell_centers, dtype=dtype)
        self.face_centers = np.asarray(face_centers, dtype=dtype)
        self.h = dtype(cell_volume)

        self.n_cells = self.cell_centers.shape[0]
        self.n_faces = self.face_centers.shape[0]
        if self.n_faces != self.n_cells + 1:
            raise ValueError(
                f"A 1D mesh with {self.n_cells} cells needs {self.n_cells + 1} faces, "
                f"got {self.n_faces}"
            )

        # --- Connectivity ---
        faces = np.arange(self.n_faces)
        self.face_minus_cells = faces - 1
        self.face_plus_cells = np.where(faces < self.n_cells, faces, NO_CELL)
        cells = np.arange(self.n_cells)
        self.cell_minus_faces = cells
        self.cell_plus_faces = cells + 1

        # --- Topological Info ---
        self.left_boundary_faces = np.flatnonzero(self.face_minus_cells == NO_CELL)
        self.right_boundary_faces = np.flatnonzero(self.face_plus_cells == NO_CELL)
        self.internal_faces = np.flatnonzero(
            (self.face_minus_cells != NO_CELL) & (self.face_plus_cells != NO_CELL)
        )

        for array in (self.cell_centers, self.face_centers):
            array.flags.writeable = False

    @property
    def dim(self) -> int:
        return 1

    @property
    def domain(self):
        return self.face_centers[0], self.face_centers[-1]

    def cells(self) -> range:
        return range(self.n_cells)

    def faces(self) -> range:
        return range(self.n_faces)

    def get_center(self, cell: int) -> float:
        return self.cell_centers[cell]

    def get_volume(self, cell: int) -> float:
        """Cell volume; equal to the spacing h on a uniform 1D mesh."""
        return self.h

    def get_neighbour_cell(self, face: int, side: int) -> Optional[int]:
        """Cell on the minus (side=0) or plus (side=1) side of a face, None at a boundary."""
        cell = self.face_minus_cells[face] if side == 0 else self.face_plus_cells[face]
        return None if cell == NO_CELL else int(cell)

    def get_neighbour_face(self, cell: int, side: int) -> int:
        """Face on the minus (side=0) or plus (side=1) side of a cell."""
        return int(self.cell_minus_faces[cell] if side == 0 else self.cell_plus_faces[cell])

    def get_adjacent_cell(self, cell: int, side: int) -> Optional[int]:
        """Cell across the minus (side=0) or plus (side=1) face of a cell."""
        face = self.get_neighbour_face(cell, side)
        return self.get_neighbour_cell(face, side)

    def __repr__(self):
        x0, x1 = self.domain
        return f"MeshData1D(n_cells={self.n_cells}, domain=({x0}, {x1}), h={self.h})"


def create_uniform_mesh_1d(domain, num_cells: int, dtype=np.float64) -> MeshData1D:
    """Create a uniform 1D mesh over ``domain = (x_start, x_end)``.

    Parameters
    ----------
    domain : tuple
        Domain bounds; each bound may be a scalar or a coordinate vector
        (only the first component is used).
    num_cells : int
        Number of cells.
    dtype : numpy floating type
        Precision of the geometry.
    """
    if num_cells < 1:
        raise ValueError(f"num_cells must be positive, got {num_cells}")

    x_start, x_end = (float(np.ravel(bound)[0]) for bound in domain)
    if not x_end > x_start:
        raise ValueError(f"Empty domain: ({x_start}, {x_end})")

    h = (x_end - x_start) / num_cells
    face_centers = x_start + h * np.arange(num_cells + 1)
    face_centers[-1] = x_end
    cell_centers = x_start + h * (np.arange(num_cells) + 0.5)

    return MeshData1D(cell_centers, face_centers, h, dtype=dtype)
