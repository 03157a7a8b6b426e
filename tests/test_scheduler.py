"""Tests for the four-phase operating schedule."""

import pytest

from heat_storage import scheduler as scheduler_module
from heat_storage.datastructures import ScheduleParameters
from heat_storage.scheduler import Scheduler, State


@pytest.fixture
def schedule():
    return Scheduler(1.0, 2.0, 3.0, 4.0)


class TestPhases:
    """Phase boundaries within the first cycle."""

    @pytest.mark.parametrize(
        "t,state",
        [
            (0.0, State.CHARGING),
            (0.5, State.CHARGING),
            (1.0, State.IDLE),
            (2.9, State.IDLE),
            (3.0, State.DISCHARGING),
            (5.99, State.DISCHARGING),
            (6.0, State.IDLE),
            (9.99, State.IDLE),
        ],
    )
    def test_state(self, schedule, t, state):
        assert schedule.get_state(t) is state

    @pytest.mark.parametrize(
        "t,idx", [(0.5, 1), (1.5, 3), (4.0, 2), (7.0, 3)]
    )
    def test_state_idx(self, schedule, t, idx):
        assert schedule.get_state_idx(t) == idx

    def test_zero_length_phase_is_skipped(self):
        s = Scheduler(0.0, 1.0, 1.0, 0.0)
        assert s.get_state(0.0) is State.IDLE
        assert s.get_state(1.0) is State.DISCHARGING


class TestPeriodicity:
    """get_state(t) == get_state(t + k * cycle)."""

    @pytest.mark.parametrize("t", [0.0, 0.5, 1.5, 3.5, 6.5, 9.5])
    @pytest.mark.parametrize("k", [1, 2, 7])
    def test_periodic(self, schedule, t, k):
        assert schedule.get_state(t + k * schedule.cycle_duration) is schedule.get_state(t)

    def test_cycle_start_is_charging(self, schedule):
        assert schedule.get_state(10.0) is State.CHARGING
        assert schedule.get_state(20.0) is State.CHARGING

    def test_negative_time_wraps(self, schedule):
        # -1 is 9 into the previous cycle
        assert schedule.get_state(-1.0) is State.IDLE
        assert schedule.get_state(-9.5) is State.CHARGING


class TestValidation:
    @pytest.mark.parametrize("durations", [(-1.0, 1.0, 1.0, 1.0), (1.0, 1.0, 1.0, -0.5)])
    def test_negative_duration(self, durations):
        with pytest.raises(ValueError):
            Scheduler(*durations)

    def test_zero_cycle(self):
        with pytest.raises(ValueError):
            Scheduler(0.0, 0.0, 0.0, 0.0)

    def test_from_parameters(self):
        s = Scheduler.from_parameters(ScheduleParameters(1.0, 2.0, 3.0, 4.0))
        assert s.cycle_duration == 10.0

    def test_unknown_state_index(self, schedule, monkeypatch):
        monkeypatch.setattr(scheduler_module.Scheduler, "get_state", lambda self, t: "flooding")
        with pytest.raises(AssertionError):
            schedule.get_state_idx(0.0)
