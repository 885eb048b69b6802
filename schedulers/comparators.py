"""
Ready-queue ordering predicates

Each predicate answers "must a run strictly ahead of b?".
"""

from core.job import Job


def by_service(a: Job, b: Job) -> bool:
    """Shorter total service first"""
    return a.service < b.service


def by_remaining(a: Job, b: Job) -> bool:
    """Less service left first (live counter, falls back to service before admission)"""
    a_left = a.remaining if a.remaining is not None else a.service
    b_left = b.remaining if b.remaining is not None else b.service
    return a_left < b_left


def by_priority(a: Job, b: Job) -> bool:
    """Higher priority value first"""
    return a.priority > b.priority
