from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


class SchedulingError(RuntimeError):
    """
    Raised when a scheduling precondition is violated. This always points at a
    programming error, never at bad user input.
    """


@dataclass
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    remaining_time: int = field(init=False, default=0)
    start_time: int = 0
    finish_time: int = 0
    waiting_time: int = 0
    turnaround_time: int = 0
    first_start_time: Optional[int] = None

    def __post_init__(self) -> None:
        if self.pid <= 0:
            raise ValueError(f"pid must be a positive integer, got {self.pid}")
        if self.arrival_time < 0:
            raise ValueError(f"P{self.pid}: arrival_time must be >= 0, got {self.arrival_time}")
        if self.burst_time <= 0:
            raise ValueError(f"P{self.pid}: burst_time must be > 0, got {self.burst_time}")
        self.remaining_time = self.burst_time

    def fresh(self) -> "Process":
        """
        Copy of the static attributes with all scheduling state reset.
        """
        return Process(pid=self.pid, arrival_time=self.arrival_time, burst_time=self.burst_time)

    @property
    def completed(self) -> bool:
        return self.remaining_time == 0

    @property
    def response_time(self) -> int:
        if self.first_start_time is None:
            return 0
        return self.first_start_time - self.arrival_time


@dataclass(frozen=True)
class ReadyEntry:
    """
    Immutable snapshot of a process sitting in a ready queue.

    Queues never hold the canonical record itself; the snapshot is written
    back only when the process completes.
    """

    pid: int
    arrival_time: int
    burst_time: int
    remaining_time: int
    start_time: int = 0
    finish_time: int = 0
    first_start_time: Optional[int] = None

    @classmethod
    def of(cls, process: Process) -> "ReadyEntry":
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            remaining_time=process.remaining_time,
            start_time=process.start_time,
            finish_time=process.finish_time,
            first_start_time=process.first_start_time,
        )

    def run(self, now: int, units: int) -> "ReadyEntry":
        """
        Snapshot after executing for `units` time units starting at `now`.
        """
        if not 0 < units <= self.remaining_time:
            raise SchedulingError(f"P{self.pid}: cannot run {units} units with {self.remaining_time} remaining")
        return ReadyEntry(
            pid=self.pid,
            arrival_time=self.arrival_time,
            burst_time=self.burst_time,
            remaining_time=self.remaining_time - units,
            start_time=now,
            finish_time=now + units,
            first_start_time=now if self.first_start_time is None else self.first_start_time,
        )


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def length(self) -> int:
        return self.end_time - self.start_time


@dataclass
class MetricsTotals:
    count: int
    total_waiting: int
    total_turnaround: int

    @property
    def avg_waiting(self) -> float:
        return self.total_waiting / self.count if self.count else 0.0

    @property
    def avg_turnaround(self) -> float:
        return self.total_turnaround / self.count if self.count else 0.0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[Process] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    totals: Optional[MetricsTotals] = None
    system: Optional[SystemMetrics] = None
