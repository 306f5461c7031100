from __future__ import annotations

from typing import List

from .models import MetricsTotals, Process, ScheduleResult, SchedulingError, SystemMetrics


def calculate_waiting_turnaround(processes: List[Process]) -> MetricsTotals:
    """
    Fill turnaround and waiting time for every process of a completed schedule
    and return the totals.

    Only the two derived fields are written, so calling this again on the same
    list gives the same answer.
    """
    incomplete = [p.pid for p in processes if not p.completed]
    if incomplete:
        raise SchedulingError(f"Metrics requested before completion of: {', '.join(f'P{pid}' for pid in incomplete)}")

    total_waiting = 0
    total_turnaround = 0
    for p in processes:
        p.turnaround_time = p.finish_time - p.arrival_time
        p.waiting_time = p.turnaround_time - p.burst_time
        total_waiting += p.waiting_time
        total_turnaround += p.turnaround_time

    return MetricsTotals(count=len(processes), total_waiting=total_waiting, total_turnaround=total_turnaround)


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given a completed process list
    and timeline slices.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(p.finish_time for p in result.processes)
    cpu_busy_time = sum(slice_.length for slice_ in result.timeline)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[Process]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }
