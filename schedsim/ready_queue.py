"""
Ready queue ordered by process priority.

Lower priority value means higher priority. Processes with equal priority
leave in the order they were enqueued.

Data structure: min-heap of (priority, sequence, process)
- enqueue: heappush -> O(log n)
- dequeue: heappop  -> O(log n)
"""

from __future__ import annotations

import heapq
from itertools import count
from typing import Iterator, List, Optional, Tuple

from .models import Process


class ReadyQueue:
    def __init__(self) -> None:
        self._heap: List[Tuple[int, int, Process]] = []
        self._sequence: Iterator[int] = count()

    def enqueue(self, process: Process) -> None:
        heapq.heappush(self._heap, (process.priority, next(self._sequence), process))

    def dequeue(self) -> Process:
        if not self._heap:
            raise IndexError("dequeue from an empty ready queue")
        _, _, process = heapq.heappop(self._heap)
        return process

    def peek(self) -> Optional[Process]:
        return self._heap[0][2] if self._heap else None

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)
