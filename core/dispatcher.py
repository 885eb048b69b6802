"""
Clock-driven dispatcher: the single-CPU tick loop shared by every policy
"""

from typing import Callable, List, Dict, Optional
from dataclasses import dataclass

from .job import Job, JobState, create_job_copy
from .ready_queue import ReadyQueue


class EmptyWorkloadError(ValueError):
    """Raised when a simulation is asked to run without any jobs"""


def by_arrival(a: Job, b: Job) -> bool:
    """Ordering of the arrivals queue"""
    return a.arrival < b.arrival


@dataclass(frozen=True)
class SchedulingPolicy:
    """
    Everything that distinguishes one scheduling policy from another

    less_than orders the ready queue (None means plain FIFO), preemptive
    enables the arrival-time preemption check and quantum turns on time
    slicing.
    """
    key: str
    name: str
    less_than: Optional[Callable[[Job, Job], bool]] = None
    preemptive: bool = False
    quantum: Optional[int] = None
    results_file: str = "results.txt"


@dataclass(frozen=True)
class CompletionRecord:
    """One finished job: wait = completion_tick - service - arrival"""
    name: str
    arrival: int
    wait: int
    completion_tick: int

    def to_line(self) -> str:
        return f"{self.name} {self.arrival} {self.wait} {self.completion_tick}\n"


@dataclass
class GanttEntry:
    """A stretch of ticks during which one job held the CPU"""
    name: str
    start_time: int
    end_time: int
    state: JobState


class SchedulerStats:
    """Per-run statistics"""

    def __init__(self):
        self.total_waiting_time = 0
        self.total_turnaround_time = 0
        self.context_switches = 0
        self.preemptions = 0
        self.cpu_busy_time = 0
        self.total_simulation_time = 0
        self.job_count = 0

    def calculate_averages(self) -> Dict:
        if self.job_count == 0:
            return {
                'avg_waiting_time': 0.0,
                'avg_turnaround_time': 0.0,
                'cpu_utilization': 0.0,
                'context_switches': 0,
                'preemptions': 0,
                'total_time': 0
            }

        return {
            'avg_waiting_time': self.total_waiting_time / self.job_count,
            'avg_turnaround_time': self.total_turnaround_time / self.job_count,
            'cpu_utilization': (self.cpu_busy_time / self.total_simulation_time * 100)
                               if self.total_simulation_time > 0 else 0.0,
            'context_switches': self.context_switches,
            'preemptions': self.preemptions,
            'total_time': self.total_simulation_time
        }


class Dispatcher:
    """
    Discrete-time single-CPU simulator

    Each call to step() advances the clock by one tick and applies, in
    order: service of the running job, quantum expiry, admission of newly
    arrived jobs, arrival preemption and dispatch onto an idle CPU.
    """

    def __init__(self, jobs: List[Job], policy: SchedulingPolicy):
        self.policy = policy
        self.name = policy.name
        self.jobs = [create_job_copy(job) for job in jobs]

        # one tick before the earliest possible arrival
        self.current_time = -1
        self.steps = 0
        self.finished = False

        self.arrivals = ReadyQueue()
        for job in self.jobs:
            self.arrivals.push_ordered(job, by_arrival)
        self.ready_queue = ReadyQueue()

        self.running_job: Optional[Job] = None
        self.previous_job: Optional[Job] = None
        self.quantum_remaining: Optional[int] = None
        self.execution_start: Optional[int] = None

        self.records: List[CompletionRecord] = []
        self.terminated_jobs: List[Job] = []
        self.gantt_chart: List[GanttEntry] = []
        self.stats = SchedulerStats()
        self.event_log: List[str] = []

    def log_event(self, message: str):
        log_entry = f"[T={self.current_time:3d}] {message}"
        self.event_log.append(log_entry)

    def add_to_gantt_chart(self, name: str, start: int, end: int, state: JobState):
        if start >= end:
            return
        # a job that keeps the CPU across a quantum expiry stays one bar
        if self.gantt_chart:
            last = self.gantt_chart[-1]
            if last.name == name and last.end_time == start and last.state == state:
                last.end_time = end
                return
        self.gantt_chart.append(GanttEntry(name, start, end, state))

    def step(self) -> bool:
        """
        Simulate one tick

        Returns:
            True once every job has completed

        Raises:
            EmptyWorkloadError: the dispatcher was built without jobs
        """
        if self.finished:
            return True
        if not self.jobs:
            raise EmptyWorkloadError(f"{self.name}: no jobs to schedule")

        self.current_time += 1
        self.steps += 1

        # 1. serve the running job
        if self.running_job is not None:
            self.stats.cpu_busy_time += 1
            if self.quantum_remaining is not None:
                self.quantum_remaining -= 1
            if self.running_job.execute(1):
                self.complete_running_job()

        # 2. time slice expiry
        if (self.policy.quantum is not None and self.running_job is not None
                and self.quantum_remaining == 0):
            self.expire_quantum()

        # 3. admit arrivals
        admitted = self.admit_arrivals()

        # 4. arrival preemption
        if self.policy.preemptive and admitted and self.running_job is not None:
            self.check_preemption()

        # 5. dispatch onto an idle CPU
        if self.running_job is None:
            if not self.ready_queue.is_empty():
                self.dispatch(self.ready_queue.pop())
            elif self.arrivals.is_empty():
                self.finished = True

        return self.finished

    def complete_running_job(self):
        job = self.running_job
        job.state = JobState.TERMINATED
        job.finish_time = self.current_time
        job.turnaround_time = job.finish_time - job.arrival
        job.waiting_time = job.finish_time - job.service - job.arrival

        self.add_to_gantt_chart(job.name, self.execution_start, self.current_time, JobState.RUNNING)
        self.execution_start = None

        self.records.append(CompletionRecord(job.name, job.arrival, job.waiting_time, job.finish_time))
        self.terminated_jobs.append(job)
        self.running_job = None
        self.quantum_remaining = None
        self.log_event(f"{job.name} → Terminated (WT={job.waiting_time}, TT={job.turnaround_time})")

    def expire_quantum(self):
        job = self.running_job
        self.log_event(f"{job.name} time slice expired → Ready Queue")
        self.suspend_running_job()
        self.ready_queue.push_fifo(job)
        self.dispatch(self.ready_queue.pop())

    def admit_arrivals(self) -> int:
        admitted = 0
        while not self.arrivals.is_empty() and self.arrivals.peek().arrival <= self.current_time:
            job = self.arrivals.pop()
            job.admit()
            self.enqueue(job)
            admitted += 1
            self.log_event(f"{job.name} arrived → Ready Queue")
        return admitted

    def check_preemption(self):
        head = self.ready_queue.peek()
        if self.policy.less_than(head, self.running_job):
            job = self.running_job
            self.suspend_running_job()
            self.ready_queue.push_ordered(job, self.policy.less_than)
            self.stats.preemptions += 1
            self.log_event(f"{job.name} preempted by {head.name} → Ready Queue")

    def enqueue(self, job: Job):
        if self.policy.less_than is None:
            self.ready_queue.push_fifo(job)
        else:
            self.ready_queue.push_ordered(job, self.policy.less_than)

    def suspend_running_job(self):
        job = self.running_job
        self.add_to_gantt_chart(job.name, self.execution_start, self.current_time, JobState.RUNNING)
        self.execution_start = None
        job.state = JobState.READY
        self.running_job = None
        self.quantum_remaining = None

    def dispatch(self, job: Job):
        """Put a job on the CPU, resetting the time slice"""
        if self.previous_job is not None and self.previous_job is not job:
            self.stats.context_switches += 1
            self.log_event(f"Context Switch: {self.previous_job.name} → {job.name}")
        self.previous_job = job

        self.running_job = job
        self.quantum_remaining = self.policy.quantum
        if self.execution_start is None:
            self.execution_start = self.current_time

        job.state = JobState.RUNNING
        if job.start_time is None:
            job.start_time = self.current_time
        self.log_event(f"{job.name} → Running")

    def update_statistics(self):
        self.stats.total_simulation_time = self.current_time
        self.stats.job_count = len(self.terminated_jobs)
        self.stats.total_waiting_time = sum(job.waiting_time for job in self.terminated_jobs)
        self.stats.total_turnaround_time = sum(job.turnaround_time for job in self.terminated_jobs)

    def get_current_snapshot(self) -> Dict:
        """State of the simulation after the latest tick"""
        running = None
        if self.running_job is not None:
            running = {
                'name': self.running_job.name,
                'remaining': self.running_job.remaining,
                'priority': self.running_job.priority
            }
        return {
            'time': self.current_time,
            'running': running,
            'ready_queue': [{'name': job.name, 'remaining': job.remaining} for job in self.ready_queue],
            'pending': [job.name for job in self.arrivals],
            'completed': len(self.records),
            'total': len(self.jobs),
            'context_switches': self.stats.context_switches,
            'cpu_busy_time': self.stats.cpu_busy_time,
            'latest_log': self.event_log[-1] if self.event_log else ""
        }

    def run(self, verbose: bool = False) -> Dict:
        """
        Run the simulation to completion

        Args:
            verbose: print the event log when done

        Returns:
            result dictionary (statistics, completion records, Gantt chart, log)
        """
        self.log_event(f"===== {self.name} Scheduling Started =====")

        while not self.step():
            pass

        self.log_event(f"===== {self.name} Scheduling Completed =====")

        if verbose:
            for log in self.event_log:
                print(log)

        return self.get_results()

    def get_results(self) -> Dict:
        self.update_statistics()

        return {
            'algorithm': self.name,
            'policy': self.policy.key,
            'statistics': self.stats.calculate_averages(),
            'records': list(self.records),
            'gantt_chart': self.gantt_chart,
            'event_log': self.event_log,
            'jobs': self.terminated_jobs
        }
