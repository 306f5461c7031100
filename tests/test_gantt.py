from rich.panel import Panel

from schedsim.algorithms import schedule_fcfs, schedule_srt
from schedsim.gantt import build_rich_gantt, render_gantt
from schedsim.models import Process, ScheduledSlice


def _procs():
    return [
        Process(1, arrival_time=0, burst_time=7),
        Process(2, arrival_time=2, burst_time=3),
        Process(3, arrival_time=4, burst_time=6),
    ]


def _labels(bar: str):
    return [cell.strip() for cell in bar.strip("|").split("|")]


def test_render_fcfs():
    lines = render_gantt(schedule_fcfs(_procs()).timeline).splitlines()
    title, top, bar, ruler, bottom = lines
    assert title == "Gantt Chart:"
    assert top == bottom
    assert len(top) == len(bar) - 1
    assert _labels(bar) == ["P1", "P2", "P3"]
    assert ruler == "0       7       10      16"


def test_render_shows_preemption_slices():
    lines = render_gantt(schedule_srt(_procs()).timeline).splitlines()
    assert _labels(lines[2]) == ["P1", "P2", "P1", "P3"]
    assert lines[3].split() == ["0", "2", "5", "10", "16"]


def test_render_idle_gap():
    lines = render_gantt([ScheduledSlice(1, 0, 1), ScheduledSlice(2, 3, 5)]).splitlines()
    assert _labels(lines[2]) == ["P1", "idle", "P2"]
    assert lines[3].split() == ["0", "1", "3", "5"]


def test_render_empty():
    assert render_gantt([]) == "(no execution)"


def test_rich_gantt():
    panel, marks = build_rich_gantt(schedule_fcfs(_procs()).timeline)
    assert isinstance(panel, Panel)
    assert marks.split() == ["0", "7", "10", "16"]


def test_rich_gantt_empty():
    panel, marks = build_rich_gantt([])
    assert isinstance(panel, Panel)
    assert marks == ""
