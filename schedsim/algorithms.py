from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from .metrics import calculate_waiting_turnaround, compute_system_metrics
from .models import Process, ReadyEntry, ScheduleResult, ScheduledSlice, SchedulingError

logger = logging.getLogger(__name__)


def _canonical(processes: List[Process]) -> Tuple[List[Process], Dict[int, int]]:
    """
    Fresh copies of the input records plus a pid -> list position mapping.

    The copies are the canonical store for one run; the caller's records are
    left untouched.
    """
    store = [p.fresh() for p in processes]
    index_by_pid: Dict[int, int] = {}
    for idx, p in enumerate(store):
        if p.pid in index_by_pid:
            raise ValueError(f"Duplicate pid {p.pid} in workload")
        index_by_pid[p.pid] = idx
    return store, index_by_pid


def _admission_order(store: List[Process]) -> List[int]:
    # Stable: equal arrivals keep their input order.
    return sorted(range(len(store)), key=lambda i: (store[i].arrival_time, i))


def _loop_ceiling(store: List[Process]) -> int:
    if not store:
        return 0
    return max(p.arrival_time for p in store) + sum(p.burst_time for p in store) + len(store) + 1


def _all_completed(store: List[Process]) -> bool:
    return all(p.completed for p in store)


def _write_back(store: List[Process], index_by_pid: Dict[int, int], entry: ReadyEntry) -> None:
    idx = index_by_pid.get(entry.pid)
    if idx is None:
        raise SchedulingError(f"P{entry.pid} is not part of this schedule")
    if entry.remaining_time != 0:
        raise SchedulingError(f"P{entry.pid} written back with {entry.remaining_time} units remaining")

    p = store[idx]
    p.remaining_time = 0
    p.start_time = entry.start_time
    p.finish_time = entry.finish_time
    p.first_start_time = entry.first_start_time
    logger.debug("P%d completed at t=%d", p.pid, p.finish_time)


def _append_slice(timeline: List[ScheduledSlice], pid: int, start_time: int, end_time: int) -> None:
    # Back-to-back units of the same process form one slice.
    if timeline and timeline[-1].pid == pid and timeline[-1].end_time == start_time:
        timeline[-1].end_time = end_time
    else:
        timeline.append(ScheduledSlice(pid=pid, start_time=start_time, end_time=end_time))


def _finish(algorithm: str, quantum: Optional[int], store: List[Process], timeline: List[ScheduledSlice]) -> ScheduleResult:
    result = ScheduleResult(algorithm=algorithm, quantum=quantum, processes=store, timeline=timeline)
    result.totals = calculate_waiting_turnaround(store)
    compute_system_metrics(result)
    return result


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes are served in the order given; the caller is expected to pass
    them sorted by arrival time.
    """
    store, index_by_pid = _canonical(processes)

    time = 0
    timeline: List[ScheduledSlice] = []

    for p in store:
        start_time = max(time, p.arrival_time)
        entry = ReadyEntry.of(p).run(start_time, p.burst_time)
        _append_slice(timeline, entry.pid, entry.start_time, entry.finish_time)
        _write_back(store, index_by_pid, entry)
        time = entry.finish_time

    return _finish("FCFS", quantum, store, timeline)


def schedule_srt(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Remaining Time (preemptive SJF).

    Time advances one unit per decision. Every unit, newly arrived processes
    join the ready set and the process with the least remaining time runs for
    one unit. Ties go to the process listed first in the input.
    """
    store, index_by_pid = _canonical(processes)
    pending = _admission_order(store)
    ceiling = _loop_ceiling(store)

    time = 0
    cursor = 0
    timeline: List[ScheduledSlice] = []
    # Heap of (remaining_time, input position, snapshot); each pid is in it at most once.
    ready: List[Tuple[int, int, ReadyEntry]] = []
    running: Optional[int] = None

    while not _all_completed(store):
        if time > ceiling:
            raise SchedulingError(f"SRT did not finish within {ceiling} time units")

        while cursor < len(pending) and store[pending[cursor]].arrival_time <= time:
            idx = pending[cursor]
            heapq.heappush(ready, (store[idx].remaining_time, idx, ReadyEntry.of(store[idx])))
            logger.debug("t=%d: P%d admitted", time, store[idx].pid)
            cursor += 1

        if not ready:
            logger.debug("t=%d: idle", time)
            running = None
            time += 1
            continue

        _, idx, entry = heapq.heappop(ready)
        if running is not None and running != entry.pid:
            logger.debug("t=%d: P%d preempts P%d", time, entry.pid, running)
        running = entry.pid

        entry = entry.run(time, 1)
        _append_slice(timeline, entry.pid, entry.start_time, entry.finish_time)
        time = entry.finish_time

        if entry.remaining_time == 0:
            _write_back(store, index_by_pid, entry)
            running = None
        else:
            heapq.heappush(ready, (entry.remaining_time, idx, entry))

    return _finish("SRT", quantum, store, timeline)


def schedule_rr(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    A process preempted at time t goes to the tail of the queue behind every
    process that arrived at or before t.
    """
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    store, index_by_pid = _canonical(processes)
    pending = _admission_order(store)
    ceiling = _loop_ceiling(store)

    time = 0
    cursor = 0
    iterations = 0
    timeline: List[ScheduledSlice] = []
    ready: Deque[ReadyEntry] = deque()

    def enqueue_new_arrivals(current_time: int) -> None:
        nonlocal cursor
        while cursor < len(pending) and store[pending[cursor]].arrival_time <= current_time:
            p = store[pending[cursor]]
            ready.append(ReadyEntry.of(p))
            logger.debug("t=%d: P%d admitted", current_time, p.pid)
            cursor += 1

    while not _all_completed(store):
        iterations += 1
        if iterations > ceiling:
            raise SchedulingError(f"Round Robin did not finish within {ceiling} iterations")

        enqueue_new_arrivals(time)

        if not ready:
            if cursor >= len(pending):
                raise SchedulingError("Ready queue drained while processes are still incomplete")
            # Nothing can become ready before the next arrival.
            time = max(time, store[pending[cursor]].arrival_time)
            logger.debug("CPU idle, jumping to t=%d", time)
            continue

        entry = ready.popleft()
        run_time = min(quantum, entry.remaining_time)
        entry = entry.run(time, run_time)
        timeline.append(ScheduledSlice(pid=entry.pid, start_time=entry.start_time, end_time=entry.finish_time))
        time = entry.finish_time

        enqueue_new_arrivals(time)

        if entry.remaining_time > 0:
            ready.append(entry)
        else:
            _write_back(store, index_by_pid, entry)

    return _finish("Round Robin", quantum, store, timeline)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "srt": schedule_srt,
    "rr": schedule_rr,
}

# Numeric choices offered by the interactive prompt.
MENU_CHOICES = {
    "1": "fcfs",
    "2": "srt",
    "3": "rr",
}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm by name or menu number. Quantum is
    only used by round-robin.
    """
    name = MENU_CHOICES.get(name.strip(), name.strip().lower())
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose fcfs, srt or rr)")

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum if name == "rr" else None)
