"""
Scheduling policies

Every policy is the same Dispatcher driven by a different
(ordering predicate, preemptive flag, quantum) triple.
"""

from typing import Dict, List

from core.dispatcher import SchedulingPolicy
from .comparators import by_priority, by_remaining, by_service

DEFAULT_QUANTUM = 10


def round_robin(quantum: int = DEFAULT_QUANTUM) -> SchedulingPolicy:
    """FIFO ready queue with a fixed time slice"""
    if quantum <= 0:
        raise ValueError(f"quantum must be positive: {quantum}")
    return SchedulingPolicy(
        key='rr',
        name=f"Round Robin (q={quantum})",
        quantum=quantum,
        results_file="roundRobinResults.txt"
    )


def first_come_first_served() -> SchedulingPolicy:
    return SchedulingPolicy(
        key='fcfs',
        name="FCFS",
        results_file="firstComeResults.txt"
    )


def shortest_job_first() -> SchedulingPolicy:
    return SchedulingPolicy(
        key='sjf',
        name="Shortest Job First",
        less_than=by_service,
        results_file="shortestJobResults.txt"
    )


def shortest_remaining_time_first(live_remaining: bool = False) -> SchedulingPolicy:
    """
    Preemptive shortest-job policy

    By default both the ready-queue order and the preemption check compare
    total service time, so a job that is nearly done can still be preempted
    by a shorter newcomer. live_remaining=True compares the live remaining
    counters instead.
    """
    if live_remaining:
        return SchedulingPolicy(
            key='srtf',
            name="Shortest Remaining Time First (live)",
            less_than=by_remaining,
            preemptive=True,
            results_file="shortestRemainingResults.txt"
        )
    return SchedulingPolicy(
        key='srtf',
        name="Shortest Remaining Time First",
        less_than=by_service,
        preemptive=True,
        results_file="shortestRemainingResults.txt"
    )


def highest_priority_first() -> SchedulingPolicy:
    return SchedulingPolicy(
        key='priority',
        name="Highest Priority First",
        less_than=by_priority,
        results_file="highestPriorityResults.txt"
    )


def preemptive_priority() -> SchedulingPolicy:
    return SchedulingPolicy(
        key='ppriority',
        name="Highest Priority First (Preemptive)",
        less_than=by_priority,
        preemptive=True,
        results_file="preemptivePriorityResults.txt"
    )


# key -> display name, factory, default parameters
POLICIES = {
    'rr': {
        'name': 'Round Robin',
        'factory': round_robin,
        'params': {'quantum': DEFAULT_QUANTUM}
    },
    'sjf': {
        'name': 'Shortest Job First',
        'factory': shortest_job_first,
        'params': {}
    },
    'srtf': {
        'name': 'Shortest Remaining Time First',
        'factory': shortest_remaining_time_first,
        'params': {'live_remaining': False}
    },
    'priority': {
        'name': 'Highest Priority First',
        'factory': highest_priority_first,
        'params': {}
    },
    'ppriority': {
        'name': 'Highest Priority First (Preemptive)',
        'factory': preemptive_priority,
        'params': {}
    },
    'fcfs': {
        'name': 'FCFS (First-Come, First-Served)',
        'factory': first_come_first_served,
        'params': {}
    }
}

DEFAULT_POLICY_KEYS = ['rr', 'sjf', 'srtf', 'priority', 'ppriority']


def build_policy(key: str, **overrides) -> SchedulingPolicy:
    """
    Instantiate a registered policy

    Overrides for parameters the policy does not take are ignored, so one
    set of options (quantum, live_remaining) can be applied to every key.
    """
    if key not in POLICIES:
        raise ValueError(f"Unknown policy: {key}")
    info = POLICIES[key]
    params = dict(info['params'])
    for param, value in overrides.items():
        if param in params and value is not None:
            params[param] = value
    return info['factory'](**params)


def build_policies(keys: List[str], **overrides) -> List[SchedulingPolicy]:
    """One policy per distinct key, in first-seen order"""
    return [build_policy(key, **overrides) for key in dict.fromkeys(keys)]


def describe_policies() -> List[Dict]:
    """Registry summary for listings"""
    descriptions = []
    for key, info in POLICIES.items():
        policy = build_policy(key)
        descriptions.append({
            'id': key,
            'name': info['name'],
            'preemptive': policy.preemptive,
            'time_sliced': policy.quantum is not None
        })
    return descriptions
