from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

CELL_WIDTH = 8
IDLE_LABEL = "idle"

# (pid or None for an idle gap, start, stop)
Cell = Tuple[Optional[int], int, int]


class TimelineRecorder:
    """
    Collects execution slices in dispatch order.
    """

    def __init__(self) -> None:
        self._slices: List[ScheduledSlice] = []

    def record(self, pid: int, start_time: int, stop_time: int) -> ScheduledSlice:
        if start_time >= stop_time:
            raise ValueError(f"empty or inverted slice for process {pid}: [{start_time}, {stop_time}]")
        slice_ = ScheduledSlice(pid=pid, start_time=start_time, stop_time=stop_time)
        self._slices.append(slice_)
        return slice_

    @property
    def slices(self) -> List[ScheduledSlice]:
        return list(self._slices)

    def __len__(self) -> int:
        return len(self._slices)


def _cells(slices: List[ScheduledSlice]) -> List[Cell]:
    """Slices in time order, with an idle cell wherever the CPU sat unused."""
    cells: List[Cell] = []
    last_time = 0
    for sl in sorted(slices, key=lambda s: (s.start_time, s.stop_time)):
        if sl.start_time > last_time:
            cells.append((None, last_time, sl.start_time))
        cells.append((sl.pid, sl.start_time, sl.stop_time))
        last_time = sl.stop_time
    return cells


def _label(pid: Optional[int]) -> str:
    text = IDLE_LABEL if pid is None else str(pid)
    return f"{text[:CELL_WIDTH]:^{CELL_WIDTH}}"


def _marks(cells: List[Cell]) -> str:
    boundaries = [start for _, start, _ in cells] + [cells[-1][2]]
    marks = ""
    for i, mark in enumerate(boundaries):
        # each mark sits under the '|' opening its cell, never touching the previous one
        column = i * (CELL_WIDTH + 1)
        gap = max(column - len(marks), 1 if marks else 0)
        marks += " " * gap + str(mark)
    return marks


def time_marks(slices: List[ScheduledSlice]) -> str:
    """The time row printed under a Gantt chart, one mark per cell boundary."""
    return _marks(_cells(slices)) if slices else ""


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one centred cell per slice (and per idle gap),
    with the boundary times lined up under the separators.
    """
    if not slices:
        return "Gantt schedule\n(no execution)"

    cells = _cells(slices)
    bar = "|" + "".join(f"{_label(pid)}|" for pid, _, _ in cells)

    return "\n".join(["Gantt schedule", bar, _marks(cells)])


def build_rich_gantt(slices: List[ScheduledSlice]) -> Panel:
    """
    Build a Rich Panel holding the same chart as render_gantt, with one
    background color per process and the time row inside the panel.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart")

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = colors[len(pid_to_color) % len(colors)]
        return pid_to_color[pid]

    cells = _cells(slices)
    bar = Text("|")
    for pid, _, _ in cells:
        style = "dim" if pid is None else f"bold on {pid_color(pid)}"
        bar.append(_label(pid), style=style)
        bar.append("|")

    table = Table.grid(padding=(0, 0))
    table.add_row(bar)
    table.add_row(Text(_marks(cells)))

    return Panel.fit(table, title="Gantt Chart")
