"""
Workload file parser and random workload generator
"""

import random
from typing import List, Optional, Tuple
from core.job import Job


class InputParser:
    """Workload file reader/writer"""

    @staticmethod
    def parse_file(filename: str) -> List[Job]:
        """
        Read jobs from a workload file

        File format: name arrival service priority
        e.g.: A 0 5 1

        Blank lines are skipped. The first record that does not parse ends
        the input; the jobs read before it are returned.

        Args:
            filename: workload file path

        Returns:
            job list

        Raises:
            OSError: the file cannot be opened
        """
        jobs = []

        with open(filename, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()

                if not line:
                    continue

                try:
                    job = InputParser._create_job_from_parts(line.split())
                except ValueError as e:
                    print(f"Warning: stopped reading {filename} at line {line_number}: {e}")
                    break
                jobs.append(job)

        print(f"Loaded {len(jobs)} jobs from {filename}")
        return jobs

    @staticmethod
    def _create_job_from_parts(parts: List[str]) -> Job:
        """Build a job from the four fields of a record"""
        if len(parts) != 4:
            raise ValueError(f"expected 4 fields, got {len(parts)}")

        name = parts[0]
        try:
            arrival = int(parts[1])
            service = int(parts[2])
            priority = int(parts[3])
        except ValueError as e:
            raise ValueError(f"numeric field conversion error: {e}")

        return Job(name, arrival, service, priority)

    @staticmethod
    def generate_random_jobs(num_jobs: Optional[int] = None,
                             count_range: Tuple[int, int] = (5, 20),
                             arrival_range: Tuple[int, int] = (0, 30),
                             service_range: Tuple[int, int] = (1, 20),
                             priority_range: Tuple[int, int] = (1, 10),
                             seed: Optional[int] = None) -> List[Job]:
        """
        Random workload

        All ranges are inclusive.

        Args:
            num_jobs: fixed job count (drawn from count_range when None)
            count_range: bounds for the job count
            arrival_range: bounds for arrival ticks
            service_range: bounds for service times
            priority_range: bounds for priorities
            seed: random seed

        Returns:
            job list sorted by arrival
        """
        if count_range[0] < 1 or count_range[0] > count_range[1]:
            raise ValueError(f"invalid job count range: {count_range}")
        if arrival_range[0] < 0 or arrival_range[0] > arrival_range[1]:
            raise ValueError(f"invalid arrival range: {arrival_range}")
        if service_range[0] < 1 or service_range[0] > service_range[1]:
            raise ValueError(f"invalid service range: {service_range}")
        if priority_range[0] > priority_range[1]:
            raise ValueError(f"invalid priority range: {priority_range}")

        rng = random.Random(seed)
        if num_jobs is None:
            num_jobs = rng.randint(*count_range)
        elif num_jobs < 1:
            raise ValueError(f"num_jobs must be positive: {num_jobs}")

        jobs = []
        for i in range(1, num_jobs + 1):
            jobs.append(Job(
                f"P{i}",
                rng.randint(*arrival_range),
                rng.randint(*service_range),
                rng.randint(*priority_range)
            ))
        jobs.sort(key=lambda job: job.arrival)

        print(f"Generated {num_jobs} random jobs")
        return jobs

    @staticmethod
    def save_jobs_to_file(jobs: List[Job], filename: str):
        """
        Write jobs in the workload file format

        Raises:
            OSError: the file cannot be created
        """
        with open(filename, 'w', encoding='utf-8') as f:
            for job in jobs:
                f.write(f"{job.name} {job.arrival} {job.service} {job.priority}\n")

        print(f"Saved {len(jobs)} jobs to {filename}")

    @staticmethod
    def print_job_summary(jobs: List[Job]):
        print("\n" + "="*60)
        print("Workload summary")
        print("="*60)
        print(f"{'Name':<8} {'Arrival':>8} {'Service':>8} {'Priority':>10}")
        print("-"*60)

        for job in sorted(jobs, key=lambda x: x.arrival):
            print(f"{job.name:<8} {job.arrival:>8} {job.service:>8} {job.priority:>10}")

        print("="*60)
        print(f"Total jobs: {len(jobs)}")
        print(f"Total service time: {sum(job.service for job in jobs)}")
        print()
