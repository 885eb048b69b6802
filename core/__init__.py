"""
Core modules for the CPU scheduler comparison
"""

from .job import Job, JobState, create_job_copy
from .ready_queue import ReadyQueue
from .dispatcher import (Dispatcher, SchedulingPolicy, CompletionRecord, GanttEntry,
                         SchedulerStats, EmptyWorkloadError)

__all__ = [
    'Job',
    'JobState',
    'create_job_copy',
    'ReadyQueue',
    'Dispatcher',
    'SchedulingPolicy',
    'CompletionRecord',
    'GanttEntry',
    'SchedulerStats',
    'EmptyWorkloadError'
]
