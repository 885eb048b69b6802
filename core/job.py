"""
Job records and their simulation state
"""

from enum import Enum
from typing import Optional
from copy import deepcopy


class JobState(Enum):
    """Lifecycle of a job inside one simulation run"""
    PENDING = "Pending"
    READY = "Ready"
    RUNNING = "Running"
    TERMINATED = "Terminated"


class Job:
    """
    A unit of CPU work

    name, arrival, service and priority are the input record and are never
    modified by the engine. remaining is the only field the dispatcher
    mutates while simulating.
    """

    def __init__(self, name: str, arrival: int, service: int, priority: int = 0):
        """
        Args:
            name: label shown in completion records
            arrival: tick at which the job becomes eligible to run
            service: total CPU ticks required
            priority: policy-interpreted priority value
        """
        if arrival < 0:
            raise ValueError(f"arrival must be non-negative: {arrival}")
        if service <= 0:
            raise ValueError(f"service must be positive: {service}")

        self.name = name
        self.arrival = arrival
        self.service = service
        self.priority = priority

        # set when the job is admitted to the ready queue
        self.remaining: Optional[int] = None
        self.state = JobState.PENDING

        # statistics
        self.start_time: Optional[int] = None
        self.finish_time: Optional[int] = None
        self.waiting_time = 0
        self.turnaround_time = 0

    def admit(self):
        """Make the job runnable: full service time still owed"""
        self.remaining = self.service
        self.state = JobState.READY

    def execute(self, ticks: int = 1) -> bool:
        """
        Consume CPU time

        Returns:
            True when the job has no service left
        """
        if self.remaining is None:
            raise ValueError(f"{self.name} was never admitted to a ready queue")
        self.remaining -= ticks
        return self.remaining <= 0

    def __repr__(self):
        return f"{self.name}[{self.state.value}]"

    def __str__(self):
        return f"Job {self.name}: arrival={self.arrival}, service={self.service}, " \
               f"priority={self.priority}, remaining={self.remaining}"


def create_job_copy(job: Job) -> Job:
    """
    Deep copy of a job so each policy run owns its own remaining counter
    """
    return deepcopy(job)
