"""
Ordered job queue shared by the arrivals stream and the ready queue
"""

from collections import deque
from typing import Callable, Deque, Iterator, Optional

from .job import Job

# less_than(a, b) is True when a must run strictly ahead of b
LessThan = Callable[[Job, Job], bool]


class ReadyQueue:
    """
    Queue of job references, FIFO or ordered by a caller-supplied predicate

    The queue never owns copies: the same Job object moves between the
    arrivals queue, the ready queue and the CPU slot.
    """

    def __init__(self):
        self._jobs: Deque[Job] = deque()

    def push_fifo(self, job: Job):
        """Append to the tail"""
        self._jobs.append(job)

    def push_ordered(self, job: Job, less_than: LessThan):
        """
        Insert before the first queued job that `job` strictly precedes

        Jobs with equal keys end up behind every job already queued with
        that key, so insertion is stable.
        """
        for index, queued in enumerate(self._jobs):
            if less_than(job, queued):
                self._jobs.insert(index, job)
                return
        self._jobs.append(job)

    def pop(self) -> Optional[Job]:
        """Remove and return the head, or None when the queue is empty"""
        if not self._jobs:
            return None
        return self._jobs.popleft()

    def peek(self) -> Job:
        """
        Head of the queue without removing it

        Raises:
            IndexError: the queue is empty
        """
        if not self._jobs:
            raise IndexError("peek from an empty ReadyQueue")
        return self._jobs[0]

    def is_empty(self) -> bool:
        return not self._jobs

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        return iter(self._jobs)

    def __repr__(self):
        return f"ReadyQueue({list(self._jobs)!r})"
