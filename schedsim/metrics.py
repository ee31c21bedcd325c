from __future__ import annotations

from typing import Iterable, List

from .models import ProcessMetrics, ScheduleResult, SystemMetrics


class MetricAggregator:
    """
    Running sums of per-process wait, turnaround and response times.

    Averages are plain ``sum / count`` so they match the per-row values
    exactly; throughput is measured against the latest completion seen.
    """

    def __init__(self) -> None:
        self.count = 0
        self.total_wait = 0
        self.total_turnaround = 0
        self.total_response = 0
        self.last_completion = 0

    def record(self, row: ProcessMetrics) -> None:
        self.count += 1
        self.total_wait += row.waiting_time
        self.total_turnaround += row.turnaround_time
        self.total_response += row.response_time
        self.last_completion = max(self.last_completion, row.completion_time)

    def extend(self, rows: Iterable[ProcessMetrics]) -> "MetricAggregator":
        for row in rows:
            self.record(row)
        return self

    @property
    def average_wait(self) -> float:
        return self.total_wait / self.count if self.count else 0.0

    @property
    def average_turnaround(self) -> float:
        return self.total_turnaround / self.count if self.count else 0.0

    @property
    def average_response(self) -> float:
        return self.total_response / self.count if self.count else 0.0

    @property
    def throughput(self) -> float:
        return self.count / self.last_completion if self.last_completion > 0 else 0.0


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute averages, throughput and CPU utilization given populated
    per-process metrics and timeline slices.
    """
    totals = MetricAggregator().extend(result.processes)
    cpu_busy_time = sum(slice_.stop_time - slice_.start_time for slice_ in result.timeline)
    makespan = totals.last_completion

    system = SystemMetrics(
        process_count=totals.count,
        avg_waiting=totals.average_wait,
        avg_turnaround=totals.average_turnaround,
        avg_response=totals.average_response,
        throughput=totals.throughput,
        last_completion=makespan,
        cpu_busy_time=cpu_busy_time,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> dict:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    totals = MetricAggregator().extend(processes)
    return {
        "avg_waiting": totals.average_wait,
        "avg_turnaround": totals.average_turnaround,
        "avg_response": totals.average_response,
    }
