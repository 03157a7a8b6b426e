"""Explicit finite volume solver for a 1D two-phase heat storage.

Fluid temperature Tf is advected with the fluid velocity and diffuses;
solid temperature Ts only diffuses:

    dTf/dt + d/dx (u Tf - k_f dTf/dx) = S_f
    dTs/dt + d/dx (    - k_s dTs/dx) = S_s

Discretization:
- Forward Euler in time
- First order upwind convection (u >= 0, upstream is the minus side)
- Second order central diffusion
- Left boundary: fluid inflow at the hot temperature, insulated solid
- Right boundary: zero-gradient fluid outflow, insulated solid

The fluid/solid exchange coefficients are stored but no exchange term is
applied.
"""

import logging
from typing import Callable, Optional

import numpy as np

from meshing.mesh_data import MeshData1D, get_dtype
from utilities.io import write_field

from .datastructures import HeatStorageParameters, Layers, LayersData

log = logging.getLogger(__name__)

FuncTX = Callable[[float, np.ndarray], np.ndarray]


class HeatStorageSolver:
    """Explicit two-phase heat storage solver on a 1D mesh.

    Step lifecycle: ``start_step()``, ``calc_step()``, ``finish_step()``.

    Parameters
    ----------
    mesh : MeshData1D
        Uniform 1D mesh (not owned; must outlive the solver).
    params : HeatStorageParameters, optional
        Solver parameters. If not provided, kwargs are used to create params.
    rhs_fluid, rhs_solid : np.ndarray, optional
        Per-cell source terms. ``None`` means no source.
    **kwargs
        Passed to HeatStorageParameters if params is None.
    """

    Parameters = HeatStorageParameters

    def __init__(
        self,
        mesh: MeshData1D,
        params: Optional[HeatStorageParameters] = None,
        rhs_fluid: Optional[np.ndarray] = None,
        rhs_solid: Optional[np.ndarray] = None,
        **kwargs,
    ):
        if params is None:
            params = self.Parameters(**kwargs)

        self.params = params
        self._mesh = mesh
        self.dtype = get_dtype(params.precision)
        self.rhs_fluid = self._check_source(rhs_fluid, "rhs_fluid")
        self.rhs_solid = self._check_source(rhs_solid, "rhs_solid")

        # Time bookkeeping
        self.t = 0.0
        self.iteration = 0

        # Init fields
        self.fc_temperature_fluid = LayersData.allocate(
            mesh.n_cells, params.temperature_cold, dtype=self.dtype
        )
        self.fc_temperature_solid = LayersData.allocate(
            mesh.n_cells, params.temperature_cold, dtype=self.dtype
        )

        # Face flux work buffers
        self.ff_flux_fluid = np.zeros(mesh.n_faces, dtype=self.dtype)
        self.ff_flux_solid = np.zeros(mesh.n_faces, dtype=self.dtype)

        if params.exchange_fluid != 0.0 or params.exchange_solid != 0.0:
            log.warning(
                f"Exchange coefficients (fluid={params.exchange_fluid}, "
                f"solid={params.exchange_solid}) are not applied by this solver"
            )

    def _check_source(self, rhs, name):
        if rhs is None:
            return None
        rhs = np.asarray(rhs, dtype=self.dtype)
        if rhs.shape != (self._mesh.n_cells,):
            raise ValueError(
                f"{name} must have one value per cell ({self._mesh.n_cells}), got shape {rhs.shape}"
            )
        return rhs

    @property
    def mesh(self) -> MeshData1D:
        return self._mesh

    @property
    def time_step(self) -> float:
        return self.params.time_step

    @staticmethod
    def evaluate(func: FuncTX, t: float, mesh: MeshData1D) -> np.ndarray:
        """Sample ``func(t, x)`` at every cell center."""
        values = func(t, mesh.cell_centers)
        return np.broadcast_to(np.asarray(values, dtype=mesh.dtype), (mesh.n_cells,)).copy()

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_fluid_temperature(self, layer: Layers = Layers.TIME_CURR) -> np.ndarray:
        return self.fc_temperature_fluid.get(layer)

    def get_solid_temperature(self, layer: Layers = Layers.TIME_CURR) -> np.ndarray:
        return self.fc_temperature_solid.get(layer)

    def write_field(self, fc_u: np.ndarray, filename):
        """Write a cell field as (x, u) columns. Raises OSError if the file cannot be written."""
        write_field(self._mesh.cell_centers, fc_u, filename)

    # =========================================================================
    # Step lifecycle
    # =========================================================================

    def start_step(self):
        pass

    def calc_step(self):
        """Advance both temperature fields by one explicit step."""
        self.fc_temperature_fluid.swap()
        self.fc_temperature_solid.swap()
        Tf = self.fc_temperature_fluid.time_prev
        Tf_new = self.fc_temperature_fluid.time_curr
        Ts = self.fc_temperature_solid.time_prev
        Ts_new = self.fc_temperature_solid.time_curr

        mesh = self._mesh
        h = mesh.get_volume(0)  # uniform mesh assumed
        dt = self.params.time_step
        uf = self.params.fluid_velocity
        alpha_f = self.params.conductivity_fluid
        alpha_s = self.params.conductivity_solid
        T_in = self.params.temperature_hot

        # Equation: dT/dt + div(fluxes) = 0
        flux_fluid = self.ff_flux_fluid
        flux_solid = self.ff_flux_solid
        cm = mesh.face_minus_cells
        cp = mesh.face_plus_cells

        # Left boundary
        f = mesh.left_boundary_faces
        flux_fluid[f] = uf * T_in
        flux_solid[f] = 0.0

        # Right boundary
        f = mesh.right_boundary_faces
        flux_fluid[f] = uf * Tf[cm[f]]
        flux_solid[f] = 0.0

        # Interior: first order upwind convection, central second order diffusion
        f = mesh.internal_faces
        flux_fluid[f] = uf * Tf[cm[f]] - alpha_f * (Tf[cp[f]] - Tf[cm[f]]) / h
        flux_solid[f] = -alpha_s * (Ts[cp[f]] - Ts[cm[f]]) / h

        # Time integration of flux terms
        fm = mesh.cell_minus_faces
        fp = mesh.cell_plus_faces
        np.subtract(Tf, dt / h * (flux_fluid[fp] - flux_fluid[fm]), out=Tf_new)
        np.subtract(Ts, dt / h * (flux_solid[fp] - flux_solid[fm]), out=Ts_new)

        # Time integration of source terms
        if self.rhs_fluid is not None:
            Tf_new += dt * self.rhs_fluid
        if self.rhs_solid is not None:
            Ts_new += dt * self.rhs_solid

    def finish_step(self):
        self.t += self.params.time_step
        self.iteration += 1

    def step(self):
        """Run one full lifecycle: start, calc and finish."""
        self.start_step()
        self.calc_step()
        self.finish_step()
