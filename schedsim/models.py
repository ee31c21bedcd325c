from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    stop_time: int


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: int = 0


@dataclass
class SystemMetrics:
    process_count: int
    avg_waiting: float
    avg_turnaround: float
    avg_response: float
    throughput: float
    last_completion: int
    cpu_busy_time: int
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def metrics_for(self, pid: int) -> ProcessMetrics:
        for row in self.processes:
            if row.pid == pid:
                return row
        raise KeyError(pid)
