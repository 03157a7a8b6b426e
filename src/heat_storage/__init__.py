"""Two-phase (fluid + solid) 1D heat storage simulator.

Components:
-----------
HeatStorageSolver      explicit finite volume solver (upwind + central diffusion)
interpolate_field      cross-mesh linear interpolation
Scheduler              charging / idle / discharging / idle cycle
MMSTester              manufactured solution convergence study
HeatStorageSimulation  configured run with field and scalar output
"""

from .config import MLflowParameters, SimulationConfig, load_config
from .datastructures import (
    HeatStorageParameters,
    Layers,
    LayersData,
    MeshParameters,
    MMSParameters,
    RefinementLevel,
    RunParameters,
    ScheduleParameters,
    SimulationMetrics,
)
from .interpolation import interpolate_field, interpolate_point
from .mms import MMSTester, manufactured_solution
from .scheduler import Scheduler, State
from .simulation import HeatStorageSimulation
from .solver import HeatStorageSolver

__all__ = [
    # Configuration
    "SimulationConfig",
    "MLflowParameters",
    "load_config",
    # Data structures
    "HeatStorageParameters",
    "MeshParameters",
    "RunParameters",
    "ScheduleParameters",
    "MMSParameters",
    "SimulationMetrics",
    "RefinementLevel",
    "Layers",
    "LayersData",
    # Components
    "HeatStorageSolver",
    "interpolate_field",
    "interpolate_point",
    "Scheduler",
    "State",
    "MMSTester",
    "manufactured_solution",
    "HeatStorageSimulation",
]
