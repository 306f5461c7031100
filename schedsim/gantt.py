from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

CELL_WIDTH = 7


def _cells(slices: List[ScheduledSlice]) -> List[Tuple[Optional[int], int, int]]:
    """
    (pid, start, end) per chart cell in time order; pid is None for idle gaps.
    """
    cells: List[Tuple[Optional[int], int, int]] = []
    last_time = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.end_time)):
        if sl.start_time > last_time:
            cells.append((None, last_time, sl.start_time))
        cells.append((sl.pid, sl.start_time, sl.end_time))
        last_time = sl.end_time
    return cells


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart with one fixed-width cell per execution slice and
    a time ruler under the cell borders.
    """
    if not slices:
        return "(no execution)"

    cells = _cells(slices)
    step = CELL_WIDTH + 1

    rule = " " + "-" * (step * len(cells) - 1)
    bar = "|" + "".join(("idle" if pid is None else f"P{pid}").center(CELL_WIDTH) + "|" for pid, _, _ in cells)

    ruler = "0"
    for i, (_, _, end) in enumerate(cells, start=1):
        ruler = ruler.ljust(i * step)
        if len(ruler) > i * step:
            ruler += " "
        ruler += str(end)

    return "\n".join(
        [
            "Gantt Chart:",
            rule,
            bar,
            ruler,
            rule,
        ]
    )


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = colors[len(pid_to_color) % len(colors)]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"

    for pid, start, end in _cells(slices):
        width = max(3, end - start)
        if pid is None:
            timeline.append(" " * width)
            labels.append("-" * width, style="dim")
        else:
            timeline.append(" " * width, style=f"on {pid_color(pid)}")
            labels.append(f"P{pid}"[:width].ljust(width), style="bold")
        column = len(timeline.plain)
        time_marks = time_marks.ljust(column) if len(time_marks) < column else time_marks + " "
        time_marks += str(end)

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
