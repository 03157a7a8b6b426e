"""Uniform 1D finite volume mesh."""

from .mesh_data import MeshData1D, create_uniform_mesh_1d, get_dtype, make_vect

__all__ = [
    "MeshData1D",
    "create_uniform_mesh_1d",
    "get_dtype",
    "make_vect",
]
