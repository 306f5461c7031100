"""
Uniprocessor CPU scheduling simulator.

Runs FCFS, SRT and Round-Robin over a fixed list of processes and reports
per-process timing metrics alongside a Gantt chart.
"""

__all__ = ["cli"]
