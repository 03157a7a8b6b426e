"""Linear interpolation of cell fields between 1D meshes.

Used to compare solutions of successive refinement levels on a common mesh.

Edge policy: destination centers beyond the last source center are clamped
to the last source value, and destination centers before the first source
center are clamped to the first source value. This is a boundary-case choice,
not an extrapolation.
"""

import numpy as np

from meshing.mesh_data import MeshData1D


def interpolate_point(x, x_left, x_right, u_left, u_right):
    """Linear interpolant through (x_left, u_left) and (x_right, u_right) at x."""
    return ((x - x_left) * u_right + (x_right - x) * u_left) / (x_right - x_left)


def interpolate_field(
    fc_src: np.ndarray, mesh_src: MeshData1D, mesh_dest: MeshData1D
) -> np.ndarray:
    """Interpolate a cell field from ``mesh_src`` onto the cell centers of ``mesh_dest``.

    A single sweep over destination cells in ascending order moves a
    (left, right) pair of source cells forward until the right one is no
    longer left of the target.

    Parameters
    ----------
    fc_src : np.ndarray
        Cell field on the source mesh.
    mesh_src, mesh_dest : MeshData1D
        Source and destination meshes.

    Returns
    -------
    np.ndarray
        Cell field on the destination mesh.
    """
    if mesh_src.dim != 1 or mesh_dest.dim != 1:
        raise ValueError("interpolate_field() requires 1D meshes")

    res = np.empty(mesh_dest.n_cells, dtype=fc_src.dtype)
    idx_left_src = 0
    idx_right_src = idx_left_src
    for idx_dest in mesh_dest.cells():
        x_dest = mesh_dest.get_center(idx_dest)
        while mesh_src.get_center(idx_right_src) < x_dest:
            idx_new_src = mesh_src.get_adjacent_cell(idx_right_src, 1)
            if idx_new_src is None:
                # Right edge of the source: collapse onto the last cell
                idx_left_src = idx_right_src
                break
            idx_left_src = idx_right_src
            idx_right_src = idx_new_src

        if idx_left_src == idx_right_src:
            res[idx_dest] = fc_src[idx_left_src]
        else:
            res[idx_dest] = interpolate_point(
                x_dest,
                mesh_src.get_center(idx_left_src),
                mesh_src.get_center(idx_right_src),
                fc_src[idx_left_src],
                fc_src[idx_right_src],
            )
    return res
