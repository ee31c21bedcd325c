"""
Scheduling simulator package.

Runs a fixed batch of processes through classical CPU-scheduling
disciplines (FCFS, SJF, priority, round-robin) and reports per-process
timing metrics and a Gantt timeline.
"""

__all__ = ["algorithms", "cli", "workload_io"]
