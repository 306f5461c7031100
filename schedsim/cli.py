from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, MENU_CHOICES, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import Process, ScheduleResult
from .workload_io import load_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2
DEFAULT_WORKLOAD = "processes.txt"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Uniprocessor CPU scheduling simulator (FCFS, SRT, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log admissions, preemptions and completions.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, srt, rr or 1, 2, 3).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        default=DEFAULT_WORKLOAD,
        help=f"Path to a text, JSON or CSV workload file (default: {DEFAULT_WORKLOAD}).",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the fixed-width text Gantt chart instead of the colored one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several algorithms on the same workload and compare metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        default=DEFAULT_WORKLOAD,
        help=f"Path to a text, JSON or CSV workload file (default: {DEFAULT_WORKLOAD}).",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs srt rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum used for RR when included (default: {DEFAULT_QUANTUM}).",
    )

    subparsers.add_parser(
        "prompt",
        help="Ask for the workload file, algorithm and quantum interactively.",
    )

    return parser


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "First run",
        "Last slice",
        "Finish",
        "Wait",
        "Turnaround",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            "" if p.first_start_time is None else str(p.first_start_time),
            str(p.start_time),
            str(p.finish_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_process_metrics(result.processes)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    if result.totals:
        sys_table.add_row("Total waiting time", str(result.totals.total_waiting))
        sys_table.add_row("Total turnaround time", str(result.totals.total_turnaround))
    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    if result.system:
        sys_table.add_row("Throughput (proc/time)", f"{result.system.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{result.system.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _load(workload: str, console: Console) -> List[Process]:
    processes = load_workload(Path(workload))
    if not processes:
        console.print(f"[yellow]No process data in {workload}. Add 'pid arrival burst' lines and run again.[/yellow]")
    return processes


def _run_compare(processes: List[Process], algorithms: List[str], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Total waiting", justify="right")
    summary_table.add_column("Total turnaround", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for alg in algorithms:
        result = run_algorithm(alg, processes, quantum=quantum)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            str(result.totals.total_waiting),
            str(result.totals.total_turnaround),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)


def _interactive_prompt(console: Console) -> int:
    """
    Filename, algorithm number, then quantum for RR. Any invalid answer ends
    the run with status 1.
    """
    filename = input("Enter the filename containing the processes: ").strip() or DEFAULT_WORKLOAD
    processes = _load(filename, console)
    if not processes:
        return 0

    console.print("Choose the scheduling algorithm:")
    for number, alg in MENU_CHOICES.items():
        console.print(f"  [yellow]{number}[/yellow]. {alg.upper()}")
    choice = input("Enter your choice: ").strip()
    if choice not in MENU_CHOICES:
        console.print("[red]Invalid choice. Exiting...[/red]")
        return 1

    quantum: Optional[int] = None
    if MENU_CHOICES[choice] == "rr":
        q_in = input("Enter the time quantum for RR: ").strip()
        try:
            quantum = int(q_in)
        except ValueError:
            console.print(f"[red]Invalid quantum: {q_in!r}[/red]")
            return 1

    result = run_algorithm(choice, processes, quantum=quantum)
    _print_result(result, console, plain=True)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            processes = _load(args.workload, console)
            if not processes:
                return 0
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum)
            _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "compare":
            processes = _load(args.workload, console)
            if not processes:
                return 0
            _run_compare(processes, args.algorithms, args.quantum, console)
            return 0

        if args.command == "prompt":
            return _interactive_prompt(console)
    except (OSError, ValueError) as exc:
        logger.debug("Run aborted", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
