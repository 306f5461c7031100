from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List

from .models import Process

logger = logging.getLogger(__name__)

# Written to a text workload that does not exist yet.
DEFAULT_SAMPLE = (
    (4, 0, 7),
    (2, 2, 3),
    (3, 4, 6),
)


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload into a list of Process objects.

    `.json` and `.csv` files are parsed as structured records; anything else
    is read as whitespace-separated `pid arrival burst` lines. A missing text
    workload is created with a small sample and an empty list is returned so
    the caller knows there is nothing to schedule yet.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    if not path.exists():
        create_default_workload(path)
        return []
    return _load_text(path)


def create_default_workload(path: Path) -> None:
    """
    Write the default sample to `path`. Any OSError (permissions, missing
    directory) is left to the caller.
    """
    with path.open("w", encoding="utf-8") as f:
        for pid, arrival_time, burst_time in DEFAULT_SAMPLE:
            f.write(f"{pid} {arrival_time} {burst_time}\n")
    logger.warning("Workload %s not found; created it with sample data. Add process data and run again.", path)


def _load_text(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            content = line.split("#", 1)[0].strip()
            if not content:
                continue
            fields = content.split()
            if len(fields) != 3:
                raise ValueError(f"{path}:{lineno}: expected 'pid arrival burst', got {line.strip()!r}")
            try:
                pid, arrival_time, burst_time = (int(x) for x in fields)
                processes.append(Process(pid=pid, arrival_time=arrival_time, burst_time=burst_time))
            except ValueError as exc:
                raise ValueError(f"{path}:{lineno}: {exc}") from exc

    logger.info("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise ValueError("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for entry in raw:
        processes.append(_process_from_mapping(entry))

    return processes


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        return Process(
            pid=int(mapping["pid"]),
            arrival_time=int(mapping["arrival_time"]),
            burst_time=int(mapping["burst_time"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc
