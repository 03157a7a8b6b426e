"""Simulation driver: advances the solver to a final time and writes frames.

Field frames (``x Tf Ts``) and scalar rows (``time n`` plus ``status`` when
a schedule is configured) are written at fixed time intervals of
``total_time / max_frame_index`` and ``total_time / max_frame_scalar_index``.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from meshing.mesh_data import create_uniform_mesh_1d, get_dtype, make_vect
from utilities.io import PlainSession, ScalarSession, ensure_output_dir

from .config import SimulationConfig
from .datastructures import SimulationMetrics
from .scheduler import Scheduler
from .solver import HeatStorageSolver

log = logging.getLogger(__name__)


class HeatStorageSimulation:
    """Wires a :class:`SimulationConfig` into a mesh, a solver and output sessions.

    Parameters
    ----------
    config : SimulationConfig
        Validated configuration (see :func:`heat_storage.config.load_config`).
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.run_params = config.run
        precision = config.physics.precision

        domain = (
            make_vect(config.mesh.domain_start, precision),
            make_vect(config.mesh.domain_end, precision),
        )
        self.mesh = create_uniform_mesh_1d(domain, config.mesh.num_cells, dtype=get_dtype(precision))
        self.solver = HeatStorageSolver(self.mesh, config.physics)
        self.scheduler: Optional[Scheduler] = (
            Scheduler.from_parameters(config.schedule) if config.schedule is not None else None
        )

        self.n = 0
        self.frame_index = 0
        self.frame_scalar_index = 0
        self.output_files = []
        self._last_field_time = None
        self._last_scalar_time = None

        self.session = None
        self.session_scalar = None
        if not self.run_params.no_output:
            self._open_sessions()
            self.write_results(force=True)

    def _open_sessions(self):
        run = self.run_params
        output_dir = ensure_output_dir(run.output_dir)
        name = self.config.experiment_name
        filename_field = Path(output_dir) / (run.filename_field or f"{name}.field.dat")
        filename_scalar = Path(output_dir) / (run.filename_scalar or f"{name}.scalar.dat")

        # Opened even with no_mesh_output: the initial and final frames are forced
        self.session = PlainSession(
            [
                ("x", lambda: self.mesh.cell_centers),
                ("Tf", lambda: self.solver.get_fluid_temperature()),
                ("Ts", lambda: self.solver.get_solid_temperature()),
            ],
            filename_field,
        )
        self.output_files.append(filename_field)

        content = [("time", lambda: self.solver.t), ("n", lambda: self.n)]
        if self.scheduler is not None:
            content.append(("status", lambda: self.scheduler.get_state_idx(self.solver.t)))
        self.session_scalar = ScalarSession(content, filename_scalar)
        self.output_files.append(filename_scalar)

    @property
    def t(self) -> float:
        return self.solver.t

    @property
    def frame_interval(self) -> float:
        return self.run_params.total_time / self.run_params.max_frame_index

    @property
    def frame_scalar_interval(self) -> float:
        return self.run_params.total_time / self.run_params.max_frame_scalar_index

    def _reached(self, t: float, index: int, interval: float) -> bool:
        # Tolerate round-off in the accumulated time
        return t >= index * interval - 1e-10 * self.run_params.total_time

    def step(self):
        self.solver.step()
        self.n += 1

    def write_results(self, force: bool = False):
        """Write the frames that are due at the current time (all of them if forced)."""
        if self.run_params.no_output:
            return

        t = self.solver.t
        due = not self.run_params.no_mesh_output and self._reached(
            t, self.frame_index, self.frame_interval
        )
        if due or (force and self._last_field_time != t):
            title = f"frame {self.frame_index}"
            self.session.write(t, title)
            self._last_field_time = t
            log.info(f"Field {title}: t={t:.6g}, n={self.n}")
            while self._reached(t, self.frame_index, self.frame_interval):
                self.frame_index += 1

        due = self._reached(t, self.frame_scalar_index, self.frame_scalar_interval)
        if due or (force and self._last_scalar_time != t):
            self.session_scalar.write()
            self._last_scalar_time = t
            while self._reached(t, self.frame_scalar_index, self.frame_scalar_interval):
                self.frame_scalar_index += 1

    def run(self) -> SimulationMetrics:
        """Step until ``total_time`` and return summary metrics."""
        total_time = self.run_params.total_time
        log.info(
            f"Running {self.config.experiment_name}: {self.mesh}, dt={self.solver.time_step}, "
            f"total_time={total_time}"
        )
        t_start = time.time()
        while not self._reached(self.solver.t, 1, total_time):
            self.step()
            self.write_results()
        self.write_results(force=True)
        wall_time = time.time() - t_start

        Tf = self.solver.get_fluid_temperature()
        Ts = self.solver.get_solid_temperature()
        metrics = SimulationMetrics(
            steps=self.n,
            final_time=float(self.solver.t),
            wall_time_seconds=wall_time,
            min_fluid_temperature=float(Tf.min()),
            max_fluid_temperature=float(Tf.max()),
            min_solid_temperature=float(Ts.min()),
            max_solid_temperature=float(Ts.max()),
        )
        log.info(f"Done: {metrics.steps} steps, t={metrics.final_time:.6g}, time={wall_time:.2f}s")
        return metrics
