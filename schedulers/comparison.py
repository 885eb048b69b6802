"""
Run coordinator: one workload through every policy
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.dispatcher import Dispatcher, EmptyWorkloadError, SchedulingPolicy
from core.job import Job
from utils.completion_log import calculate_wait, write_completion_records


@dataclass
class ComparisonReport:
    """Outcome of running one workload under several policies"""
    results: List[Dict] = field(default_factory=list)
    averages: Dict[str, float] = field(default_factory=dict)
    best: List[str] = field(default_factory=list)
    result_files: Dict[str, str] = field(default_factory=dict)


def run_policy(policy: SchedulingPolicy, jobs: List[Job], verbose: bool = False) -> Dict:
    """Simulate one policy on private copies of the jobs"""
    return Dispatcher(jobs, policy).run(verbose=verbose)


def best_policies(averages: Dict[str, float]) -> List[str]:
    """Every policy whose average wait equals the minimum, in input order"""
    if not averages:
        return []
    lowest = min(averages.values())
    return [name for name, average in averages.items() if average == lowest]


def run_comparison(jobs: List[Job], policies: List[SchedulingPolicy],
                   output_dir: Optional[str] = None, verbose: bool = False) -> ComparisonReport:
    """
    Run every policy, persist its completion records and aggregate

    With an output_dir the averages are read back from the written record
    files; without one they are computed from the in-memory records.

    Raises:
        EmptyWorkloadError: jobs is empty
        ValueError: two policies share a name
        OSError: a record file cannot be written or read
    """
    if not jobs:
        raise EmptyWorkloadError("no jobs to schedule")
    names = [policy.name for policy in policies]
    if len(set(names)) != len(names):
        raise ValueError(f"duplicate policies: {', '.join(names)}")

    report = ComparisonReport()
    if output_dir is not None:
        os.makedirs(output_dir, exist_ok=True)

    for policy in policies:
        result = run_policy(policy, jobs, verbose=verbose)
        report.results.append(result)

        if output_dir is not None:
            path = os.path.join(output_dir, policy.results_file)
            write_completion_records(result['records'], path)
            report.result_files[policy.name] = path
            report.averages[policy.name] = calculate_wait(path, len(jobs))
        else:
            report.averages[policy.name] = result['statistics']['avg_waiting_time']

    report.best = best_policies(report.averages)
    return report
