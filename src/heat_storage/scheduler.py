"""Cyclic operating schedule: Charging -> Idle -> Discharging -> Idle.

The phase is a pure function of elapsed time. The solver does not consume
it yet; the simulation driver only reports it.
"""

import math
from enum import Enum


class State(Enum):
    CHARGING = "charging"
    IDLE = "idle"
    DISCHARGING = "discharging"


class Scheduler:
    """Four-phase cyclic schedule with durations d1..d4.

    Parameters
    ----------
    d1, d2, d3, d4 : float
        Durations of charging, idle, discharging and idle phases.
    """

    def __init__(self, d1: float, d2: float, d3: float, d4: float):
        durations = (d1, d2, d3, d4)
        if any(d < 0 for d in durations):
            raise ValueError(f"Phase durations must be non-negative, got {durations}")
        if sum(durations) <= 0:
            raise ValueError(f"Cycle duration must be positive, got {durations}")
        self.d1, self.d2, self.d3, self.d4 = durations

    @classmethod
    def from_parameters(cls, params):
        return cls(params.duration_1, params.duration_2, params.duration_3, params.duration_4)

    @property
    def cycle_duration(self) -> float:
        return self.d1 + self.d2 + self.d3 + self.d4

    def get_state(self, t: float) -> State:
        cycle_duration = self.cycle_duration
        offset = t - math.floor(t / cycle_duration) * cycle_duration
        if offset < self.d1:
            return State.CHARGING
        if offset < self.d1 + self.d2:
            return State.IDLE
        if offset < self.d1 + self.d2 + self.d3:
            return State.DISCHARGING
        return State.IDLE

    def get_state_idx(self, t: float) -> int:
        state = self.get_state(t)
        if state is State.CHARGING:
            return 1
        if state is State.DISCHARGING:
            return 2
        if state is State.IDLE:
            return 3
        raise AssertionError(f"Unreachable scheduler state: {state}")
