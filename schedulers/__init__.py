"""
CPU Scheduling Policies
"""

from .policies import (POLICIES, DEFAULT_POLICY_KEYS, DEFAULT_QUANTUM, build_policy, build_policies,
                       round_robin, first_come_first_served, shortest_job_first,
                       shortest_remaining_time_first, highest_priority_first, preemptive_priority)
from .comparison import ComparisonReport, run_policy, run_comparison, best_policies

__all__ = [
    'POLICIES',
    'DEFAULT_POLICY_KEYS',
    'DEFAULT_QUANTUM',
    'build_policy',
    'build_policies',
    'round_robin',
    'first_come_first_served',
    'shortest_job_first',
    'shortest_remaining_time_first',
    'highest_priority_first',
    'preemptive_priority',
    'ComparisonReport',
    'run_policy',
    'run_comparison',
    'best_policies'
]
