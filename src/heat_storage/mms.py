"""Method of manufactured solutions (MMS) convergence study.

A steady exact fluid temperature is chosen, the matching source term is
derived analytically and the solver is run to steady state on a sequence of
refined meshes. Each level reports its max-norm error against the exact
solution and its max-norm difference to the previous (interpolated) level.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import numpy as np
import pandas as pd

from meshing.mesh_data import create_uniform_mesh_1d, get_dtype, make_vect
from utilities.io import ensure_output_dir, write_table

from .datastructures import Layers, MMSParameters, RefinementLevel
from .interpolation import interpolate_field
from .metrics import calc_diff, convergence_orders, fitted_order
from .solver import FuncTX, HeatStorageSolver

log = logging.getLogger(__name__)

STATISTICS_FILENAME = "mms_statistics.dat"


# =============================================================================
# Manufactured solutions
# =============================================================================


def manufactured_solution(
    name: str, fluid_velocity: float, alpha: float, wavenumber: float
) -> Tuple[FuncTX, FuncTX]:
    """Return ``(exact, rhs)`` for a named steady fluid temperature profile.

    The source satisfies ``u dT/dx - alpha d2T/dx2 = rhs`` for the exact
    profile ``T``.

    Parameters
    ----------
    name : str
        ``"cos(kx)"`` or ``"cos(kx^2)"``.
    fluid_velocity, alpha, wavenumber : float
        Velocity ``u``, conductivity ``alpha`` and wavenumber ``k``.

    Raises
    ------
    ValueError
        If ``name`` is not a known profile.
    """
    u, k = fluid_velocity, wavenumber

    if name == "cos(kx)":

        def exact(t, x):
            return np.cos(k * x)

        def rhs(t, x):
            return -u * k * np.sin(k * x) + alpha * k**2 * np.cos(k * x)

    elif name == "cos(kx^2)":

        def exact(t, x):
            return np.cos(k * x**2)

        def rhs(t, x):
            return -u * k * 2 * x * np.sin(k * x**2) + alpha * (
                k**2 * 4 * x**2 * np.cos(k * x**2) + 2 * k * np.sin(k * x**2)
            )

    else:
        raise ValueError(f"Unknown MMS exact solution: {name!r}")

    return exact, rhs


# =============================================================================
# Convergence harness
# =============================================================================


class MMSTester:
    """Runs the solver on successively refined meshes against an exact solution.

    Parameters
    ----------
    params : MMSParameters, optional
        Study parameters. If not provided, kwargs are used to create params.
    func_rhs_fluid, func_exact_fluid_temperature : callable, optional
        Source and exact solution as ``f(t, x)``. Default to the profile
        named by ``params.exact_solution``.
    precision : str
        Floating dtype of meshes and fields.
    **kwargs
        Passed to MMSParameters if params is None.
    """

    Parameters = MMSParameters

    def __init__(
        self,
        params: Optional[MMSParameters] = None,
        func_rhs_fluid: Optional[FuncTX] = None,
        func_exact_fluid_temperature: Optional[FuncTX] = None,
        precision: str = "float64",
        **kwargs,
    ):
        if params is None:
            params = self.Parameters(**kwargs)
        self.params = params
        self.precision = precision

        if func_rhs_fluid is None or func_exact_fluid_temperature is None:
            exact, rhs = manufactured_solution(
                params.exact_solution, params.fluid_velocity, params.alpha, params.wavenumber
            )
            func_rhs_fluid = func_rhs_fluid or rhs
            func_exact_fluid_temperature = func_exact_fluid_temperature or exact
        self.func_rhs_fluid: Callable = func_rhs_fluid
        self.func_exact_fluid_temperature: Callable = func_exact_fluid_temperature

        self.levels: List[RefinementLevel] = []

    @property
    def output_dir(self) -> Path:
        return Path(self.params.output_dir)

    @property
    def statistics_path(self) -> Path:
        return self.output_dir / STATISTICS_FILENAME

    def field_path(self, suffix) -> Path:
        return self.output_dir / f"{self.params.field_name_prefix}{suffix}.dat"

    def mesh_sizes(self) -> List[int]:
        p = self.params
        return [p.mesh_initial * p.factor**i for i in range(p.num_stages)]

    # -------------------------------------------------------------------------
    # Study
    # -------------------------------------------------------------------------

    def run(self) -> List[RefinementLevel]:
        """Run every refinement level in sequence and write the statistics."""
        p = self.params
        ensure_output_dir(self.output_dir)
        self.levels = []

        log.info(
            f"MMS study: {p.exact_solution}, cells={self.mesh_sizes()}, "
            f"dt={p.time_step}, max steps={p.num_steps}"
        )
        for num_cells in self.mesh_sizes():
            level = self._run_level(num_cells)
            # Header with the first row, one row per level after that
            write_table(
                pd.DataFrame([level.to_row()]), self.statistics_path, append=bool(self.levels)
            )
            self.levels.append(level)
            level.solver.write_field(level.fluid_temperature, self.field_path(num_cells))
            log.info(
                f"N={num_cells}: error={level.error:.6e}, diff={level.diff_prev:.6e}, "
                f"steps={level.num_steps}, step_diff={level.step_diff:.3e}"
            )

        finest = self.levels[-1]
        finest.solver.write_field(finest.exact_fluid_temperature, self.field_path("exact"))

        orders = self.convergence_orders()
        if orders:
            log.info(f"Observed orders: {', '.join(f'{o:.3f}' for o in orders)}")
        return self.levels

    def _run_level(self, num_cells: int) -> RefinementLevel:
        p = self.params
        dtype = get_dtype(self.precision)
        domain = (make_vect([0.0], self.precision), make_vect([p.domain_length], self.precision))
        mesh = create_uniform_mesh_1d(domain, num_cells, dtype=dtype)

        rhs_fluid = HeatStorageSolver.evaluate(self.func_rhs_fluid, 0.0, mesh)
        rhs_solid = np.zeros(mesh.n_cells, dtype=dtype)
        solver = HeatStorageSolver(
            mesh,
            rhs_fluid=rhs_fluid,
            rhs_solid=rhs_solid,
            time_step=p.time_step,
            fluid_velocity=p.fluid_velocity,
            conductivity_fluid=p.alpha,
            conductivity_solid=p.alpha,
            temperature_hot=p.T_left,
            temperature_cold=p.T_left,
            exchange_fluid=0.0,
            exchange_solid=0.0,
            precision=self.precision,
        )

        num_steps = 0
        step_diff = float("inf")
        for _ in range(p.num_steps):
            solver.step()
            num_steps += 1
            step_diff = calc_diff(
                solver.get_fluid_temperature(Layers.TIME_CURR),
                solver.get_fluid_temperature(Layers.TIME_PREV),
            )
            if step_diff < p.step_threshold:
                break
        if num_steps == p.num_steps and step_diff >= p.step_threshold:
            log.warning(
                f"N={num_cells}: steady state not reached in {num_steps} steps "
                f"(step_diff={step_diff:.3e})"
            )

        fluid_temperature = solver.get_fluid_temperature().copy()
        # Steady profile: exact and source are both sampled at t = 0
        exact = HeatStorageSolver.evaluate(self.func_exact_fluid_temperature, 0.0, mesh)
        error = calc_diff(exact, fluid_temperature)

        if self.levels:
            prev = self.levels[-1]
            diff_prev = calc_diff(
                fluid_temperature, interpolate_field(prev.fluid_temperature, prev.mesh, mesh)
            )
        else:
            diff_prev = 0.0

        return RefinementLevel(
            num_cells=num_cells,
            mesh=mesh,
            solver=solver,
            fluid_temperature=fluid_temperature,
            exact_fluid_temperature=exact,
            error=error,
            diff_prev=diff_prev,
            time_step=p.time_step,
            num_steps=num_steps,
            step_diff=step_diff,
        )

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def to_dataframe(self) -> pd.DataFrame:
        """Statistics table, one row per completed level."""
        return pd.DataFrame([level.to_row() for level in self.levels])

    def convergence_orders(self) -> List[float]:
        return convergence_orders(
            [level.num_cells for level in self.levels], [level.error for level in self.levels]
        )

    def fitted_order(self) -> float:
        return fitted_order(
            [level.num_cells for level in self.levels], [level.error for level in self.levels]
        )

    def to_mlflow_batch(self) -> dict:
        """Per-level metrics keyed by metric name, as lists of (step, value)."""
        batch = {"error": [], "diff": [], "num_steps": []}
        for i, level in enumerate(self.levels):
            batch["error"].append((i, level.error))
            batch["diff"].append((i, level.diff_prev))
            batch["num_steps"].append((i, float(level.num_steps)))
        return batch
