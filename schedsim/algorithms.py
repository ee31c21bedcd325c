from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from .errors import InvalidArgs
from .gantt import TimelineRecorder
from .metrics import compute_system_metrics
from .models import Process, ProcessMetrics, ScheduleResult
from .ready_queue import ReadyQueue
from .workload_io import validate_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2

TITLES = {
    "fcfs": "First-come, first-serve",
    "sjf": "Shortest-job-first",
    "priority": "Priority",
    "rr": "Round-robin",
}


def _by_arrival(processes: Iterable[Process]) -> List[Process]:
    # validate_workload hands back a fresh list, so callers' storage is never reordered
    return sorted(validate_workload(list(processes)), key=lambda p: p.arrival_time)


def _finish(
    p: Process,
    start_time: int,
    completion_time: int,
    response_time: Optional[int] = None,
) -> ProcessMetrics:
    turnaround_time = completion_time - p.arrival_time
    waiting_time = turnaround_time - p.burst_time
    return ProcessMetrics(
        pid=p.pid,
        arrival_time=p.arrival_time,
        burst_time=p.burst_time,
        start_time=start_time,
        completion_time=completion_time,
        waiting_time=waiting_time,
        turnaround_time=turnaround_time,
        response_time=waiting_time if response_time is None else response_time,
        priority=p.priority,
    )


def _build_result(
    title: str,
    quantum: Optional[int],
    metrics: List[ProcessMetrics],
    recorder: TimelineRecorder,
) -> ScheduleResult:
    result = ScheduleResult(algorithm=title, quantum=quantum, processes=metrics, timeline=recorder.slices)
    system = compute_system_metrics(result)
    logger.info(
        "%s: %d processes, avg wait %.2f, avg turnaround %.2f, last completion %d",
        title,
        system.process_count,
        system.avg_waiting,
        system.avg_turnaround,
        system.last_completion,
    )
    return result


def _run_in_order(ordered: List[Process], title: str) -> ScheduleResult:
    """
    Dispatch each process once, in the given order, to completion.

    If the next process has not arrived yet the CPU idles and the clock jumps
    to its arrival, so waiting time is never negative.
    """
    clock = 0
    recorder = TimelineRecorder()
    metrics: List[ProcessMetrics] = []

    for p in ordered:
        if clock < p.arrival_time:
            logger.debug("t=%d: cpu idle until %d", clock, p.arrival_time)
            clock = p.arrival_time

        start_time = clock
        clock += p.burst_time
        logger.debug("t=%d: dispatch %d for %d", start_time, p.pid, p.burst_time)

        recorder.record(p.pid, start_time, clock)
        metrics.append(_finish(p, start_time, clock))

    return _build_result(title, None, metrics, recorder)


def schedule_fcfs(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    title: str = TITLES["fcfs"],
) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run in arrival order; equal arrivals keep their input order.
    """
    return _run_in_order(_by_arrival(processes), title)


def schedule_sjf(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    title: str = TITLES["sjf"],
) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive, static ordering).

    The batch is ranked once by (arrival, burst) and then dispatched like
    FCFS. A short job arriving later does not overtake a longer one that
    arrived earlier.
    """
    ranked = sorted(validate_workload(list(processes)), key=lambda p: (p.arrival_time, p.burst_time))
    return _run_in_order(ranked, title)


def _admit(remaining: Deque[Process], clock: int, enqueue: Callable[[Process], None]) -> None:
    """Move every process that has arrived by ``clock`` out of ``remaining``."""
    while remaining and remaining[0].arrival_time <= clock:
        p = remaining.popleft()
        logger.debug("t=%d: admit %d", clock, p.pid)
        enqueue(p)


def schedule_priority_sjf(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    title: str = TITLES["priority"],
) -> ScheduleResult:
    """
    Priority scheduling with dynamic admission (non-preemptive).

    Among the processes that have arrived, the one with the smallest priority
    value runs to completion; equal priorities run in admission order. After
    each dispatch every process that arrived meanwhile joins the ready queue.
    When nothing is ready the clock moves to the next arrival and all
    processes arriving at that instant are admitted together.
    """
    remaining: Deque[Process] = deque(_by_arrival(processes))
    ready = ReadyQueue()
    recorder = TimelineRecorder()
    rows: Dict[int, ProcessMetrics] = {}
    clock = 0

    while remaining or not ready.is_empty():
        if ready.is_empty():
            if clock < remaining[0].arrival_time:
                logger.debug("t=%d: cpu idle until %d", clock, remaining[0].arrival_time)
                clock = remaining[0].arrival_time
            _admit(remaining, clock, ready.enqueue)
            continue

        p = ready.dequeue()
        start_time = clock
        clock += p.burst_time
        logger.debug("t=%d: dispatch %d (priority %d) for %d", start_time, p.pid, p.priority, p.burst_time)

        recorder.record(p.pid, start_time, clock)
        rows[p.pid] = _finish(p, start_time, clock)

        _admit(remaining, clock, ready.enqueue)

    return _build_result(title, None, list(rows.values()), recorder)


def schedule_rr(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    title: str = TITLES["rr"],
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum (2 unless overridden).

    A process that still needs more than one quantum is sent back to the
    tail of the ready queue before newly arrived processes are admitted.
    Response time is taken at the first dispatch of each process.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if quantum <= 0:
        raise InvalidArgs(f"Round Robin requires a positive quantum, got {quantum}")

    remaining: Deque[Process] = deque(_by_arrival(processes))
    # (process, burst still to run)
    ready: Deque[Tuple[Process, int]] = deque()
    recorder = TimelineRecorder()
    first_start: Dict[int, int] = {}
    metrics: List[ProcessMetrics] = []
    clock = 0

    while remaining or ready:
        _admit(remaining, clock, lambda p: ready.append((p, p.burst_time)))

        if not ready:
            logger.debug("t=%d: cpu idle until %d", clock, remaining[0].arrival_time)
            clock = remaining[0].arrival_time
            continue

        p, left = ready.popleft()
        first_start.setdefault(p.pid, clock)

        run_time = min(quantum, left)
        start_time = clock
        clock += run_time
        logger.debug("t=%d: dispatch %d for %d (%d left)", start_time, p.pid, run_time, left - run_time)
        recorder.record(p.pid, start_time, clock)

        if left > quantum:
            ready.append((p, left - quantum))
        else:
            started = first_start[p.pid]
            metrics.append(_finish(p, started, clock, response_time=started - p.arrival_time))

    return _build_result(title, quantum, metrics, recorder)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority_sjf,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise InvalidArgs(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    return ALGORITHMS[name](processes, quantum=quantum if name == "rr" else None)


def run_all(processes: Iterable[Process], quantum: int = DEFAULT_QUANTUM) -> List[ScheduleResult]:
    """
    Run every algorithm, in registry order, against the same workload.

    The batch is validated once up front so a bad workload fails before any
    engine produces output.
    """
    batch = validate_workload(list(processes))
    return [run_algorithm(name, batch, quantum=quantum) for name in ALGORITHMS]
