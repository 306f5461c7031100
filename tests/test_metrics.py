import pytest

from schedsim.algorithms import schedule_fcfs, schedule_rr
from schedsim.metrics import calculate_waiting_turnaround, summarize_process_metrics
from schedsim.models import Process, SchedulingError


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=7),
        Process(2, arrival_time=2, burst_time=3),
        Process(3, arrival_time=4, burst_time=6),
    ]


def test_metrics_idempotent():
    res = schedule_rr(_procs(), quantum=2)
    first = calculate_waiting_turnaround(res.processes)
    second = calculate_waiting_turnaround(res.processes)
    assert first == second
    assert first == res.totals


def test_metrics_leave_static_fields_alone():
    res = schedule_fcfs(_procs())
    calculate_waiting_turnaround(res.processes)
    assert [(p.pid, p.arrival_time, p.burst_time) for p in res.processes] == [(1, 0, 7), (2, 2, 3), (3, 4, 6)]


def test_metrics_on_incomplete_schedule():
    with pytest.raises(SchedulingError):
        calculate_waiting_turnaround(_procs())


def test_averages():
    res = schedule_fcfs(_procs())
    assert res.totals.avg_waiting == pytest.approx(11 / 3)
    assert res.totals.avg_turnaround == pytest.approx(9.0)
    summary = summarize_process_metrics(res.processes)
    assert summary["avg_waiting"] == pytest.approx(11 / 3)
    assert summary["avg_response"] == pytest.approx(11 / 3)


def test_system_metrics_fcfs():
    res = schedule_fcfs(_procs())
    assert res.system.cpu_busy_time == 16
    assert res.system.makespan == 16
    assert res.system.cpu_utilization == pytest.approx(1.0)
    assert res.system.throughput == pytest.approx(3 / 16)


def test_summary_of_nothing():
    assert summarize_process_metrics([]) == {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"pid": 0, "arrival_time": 0, "burst_time": 1},
        {"pid": 1, "arrival_time": -1, "burst_time": 1},
        {"pid": 1, "arrival_time": 0, "burst_time": 0},
    ],
)
def test_process_validation(kwargs):
    with pytest.raises(ValueError):
        Process(**kwargs)


def test_process_fresh_resets_state():
    p = Process(3, arrival_time=1, burst_time=4)
    p.remaining_time = 0
    p.finish_time = 9
    copy = p.fresh()
    assert copy.remaining_time == 4
    assert copy.finish_time == 0
    assert copy.first_start_time is None
