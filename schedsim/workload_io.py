from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .errors import EmptyWorkload, InvalidArgs, MalformedInput
from .models import Process

logger = logging.getLogger(__name__)

# Accepted names for each field in JSON objects and headed CSV files.
FIELD_ALIASES = {
    "pid": ("pid", "id"),
    "burst_time": ("burst_time", "burst"),
    "arrival_time": ("arrival_time", "arrival"),
    "priority": ("priority",),
}

# Column order of headerless CSV rows.
POSITIONAL_FIELDS = ("pid", "burst_time", "arrival_time", "priority")

HEADER_NAMES = {name for aliases in FIELD_ALIASES.values() for name in aliases}


def load_workload(path: Optional[str | Path]) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a validated list of Process
    objects.
    """
    if path is None or str(path) == "":
        raise InvalidArgs("must give a scheduling file to process")

    path = Path(path)
    if path.suffix.lower() == ".json":
        processes = _load_json(path)
    else:
        processes = _load_csv(path)

    logger.info("loaded %d processes from %s", len(processes), path)
    return validate_workload(processes)


def validate_workload(processes: Sequence[Process]) -> List[Process]:
    """
    Check the invariants every scheduling engine relies on.

    Raises EmptyWorkload for an empty batch and MalformedInput for the first
    process that breaks a field constraint or reuses an id.
    """
    if not processes:
        raise EmptyWorkload("workload contains no processes")

    seen: set[int] = set()
    for p in processes:
        if p.pid <= 0:
            raise MalformedInput(f"process id must be positive: {p!r}")
        if p.pid in seen:
            raise MalformedInput(f"duplicate process id {p.pid}")
        if p.arrival_time < 0:
            raise MalformedInput(f"arrival time must not be negative: {p!r}")
        if p.burst_time <= 0:
            raise MalformedInput(f"burst time must be positive: {p!r}")
        if p.priority < 0:
            raise MalformedInput(f"priority must not be negative: {p!r}")
        seen.add(p.pid)

    return list(processes)


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except UnicodeDecodeError as exc:
            raise MalformedInput(f"{path}: not valid UTF-8") from exc
        except json.JSONDecodeError as exc:
            raise MalformedInput(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(raw, list):
        raise MalformedInput("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            raise MalformedInput(f"Invalid process entry: {entry!r}")
        processes.append(_process_from_mapping(entry))

    return processes


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        try:
            rows = [[cell.strip() for cell in row] for row in csv.reader(f)]
        except UnicodeDecodeError as exc:
            raise MalformedInput(f"{path}: not valid UTF-8") from exc
    rows = [row for row in rows if any(row)]

    if not rows:
        return []

    if _is_header(rows[0]):
        header = [name.lower() for name in rows[0]]
        return [_process_from_mapping(dict(zip(header, row))) for row in rows[1:]]

    return [_process_from_row(row, line) for line, row in enumerate(rows, start=1)]


def _is_header(row: List[str]) -> bool:
    return all(cell.lower() in HEADER_NAMES for cell in row)


def _process_from_row(row: List[str], line: int) -> Process:
    if len(row) not in (3, 4):
        raise MalformedInput(f"row {line}: expected 3 or 4 fields, got {len(row)}: {row!r}")
    return _process_from_mapping(dict(zip(POSITIONAL_FIELDS, row)))


def _lookup(mapping: Mapping, field: str):
    for key in FIELD_ALIASES[field]:
        if key in mapping:
            return mapping[key]
    return None


def _to_int(value) -> int:
    # bool is an int subclass; 'true' is not a process field
    if isinstance(value, bool):
        raise TypeError(value)
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(value)
    return int(value)


def _process_from_mapping(mapping: Mapping) -> Process:
    try:
        pid = _to_int(_require(mapping, "pid"))
        burst_time = _to_int(_require(mapping, "burst_time"))
        arrival_time = _to_int(_require(mapping, "arrival_time"))
        priority_val = _lookup(mapping, "priority")
        priority = _to_int(priority_val) if priority_val not in (None, "") else 0
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedInput(f"Invalid process entry: {dict(mapping)!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )


def _require(mapping: Mapping, field: str):
    value = _lookup(mapping, field)
    if value is None:
        raise KeyError(field)
    return value
