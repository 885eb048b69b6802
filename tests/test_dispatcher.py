"""Tests for the tick-driven dispatcher.

Expected traces follow the per-tick order: serve the running job, expire
the quantum, admit arrivals, check preemption, dispatch.
"""

import random

import pytest

from core.dispatcher import CompletionRecord, Dispatcher, EmptyWorkloadError
from core.job import Job
from schedulers.policies import (
    build_policies,
    first_come_first_served,
    highest_priority_first,
    preemptive_priority,
    round_robin,
    shortest_job_first,
    shortest_remaining_time_first,
)

ALL_POLICY_KEYS = ['rr', 'sjf', 'srtf', 'priority', 'ppriority', 'fcfs']


def record_tuples(result):
    """(name, arrival, wait, completion) per record, in completion order."""
    return [(r.name, r.arrival, r.wait, r.completion_tick) for r in result['records']]


def random_workload(seed, count=15):
    """Seeded jobs arriving in [0, 20] with service in [1, 8]."""
    rng = random.Random(seed)
    return [Job(f"J{i}", rng.randint(0, 20), rng.randint(1, 8), rng.randint(0, 5))
            for i in range(count)]


class TestSingleJob:
    """Verify the trivial one-job workload under every policy."""

    @pytest.mark.parametrize("key", ALL_POLICY_KEYS)
    def test_single_job_has_no_wait(self, key):
        """A lone job arriving at 0 should finish at its service time with no wait."""
        policy = build_policies([key], quantum=2)[0]
        result = Dispatcher([Job("X", 0, 4, 0)], policy).run()
        assert record_tuples(result) == [("X", 0, 0, 4)]
        assert result['statistics']['avg_waiting_time'] == 0.0

    def test_record_line_format(self):
        """A completion record should render as one space-separated line."""
        result = Dispatcher([Job("X", 0, 4, 0)], shortest_job_first()).run()
        assert result['records'][0].to_line() == "X 0 0 4\n"


class TestRoundRobin:
    """Verify time slicing."""

    def test_quantum_expiry_trace(self):
        """Two jobs with q=2 should interleave as traced by hand."""
        jobs = [Job("A", 0, 5, 1), Job("B", 2, 3, 2)]
        result = Dispatcher(jobs, round_robin(2)).run()
        assert record_tuples(result) == [("A", 0, 2, 7), ("B", 2, 3, 8)]

    def test_requeue_happens_before_same_tick_arrival(self, sample_jobs):
        """An expired job should rejoin the queue ahead of jobs arriving on the same tick."""
        result = Dispatcher(sample_jobs, round_robin(2)).run()
        assert record_tuples(result) == [("B", 1, 1, 4), ("C", 2, 4, 7), ("A", 0, 3, 8)]
        assert result['statistics']['context_switches'] == 4

    def test_large_quantum_degenerates_to_fifo(self):
        """A quantum no job can exhaust should reproduce FCFS."""
        jobs = [Job("A", 0, 3), Job("B", 1, 6), Job("C", 1, 2), Job("D", 4, 1)]
        result = Dispatcher(jobs, round_robin(6)).run()
        assert [r.name for r in result['records']] == ["A", "B", "C", "D"]
        fcfs = Dispatcher(jobs, first_come_first_served()).run()
        assert record_tuples(result) == record_tuples(fcfs)

    def test_event_log_mentions_expiry(self):
        """Quantum expiry should be recorded in the event log."""
        jobs = [Job("A", 0, 5, 1), Job("B", 2, 3, 2)]
        dispatcher = Dispatcher(jobs, round_robin(2))
        dispatcher.run()
        assert any("time slice expired" in line for line in dispatcher.event_log)

    def test_gantt_merges_consecutive_slices_of_same_job(self):
        """A job that keeps the CPU across an expiry should stay one Gantt bar."""
        jobs = [Job("A", 0, 5, 1), Job("B", 2, 3, 2)]
        result = Dispatcher(jobs, round_robin(2)).run()
        segments = [(e.name, e.start_time, e.end_time) for e in result['gantt_chart']]
        assert segments == [("A", 0, 4), ("B", 4, 6), ("A", 6, 7), ("B", 7, 8)]


class TestShortestJob:
    """Verify shortest-job ordering with and without preemption."""

    def test_non_preemptive_order(self, sample_jobs):
        """SJF should never interrupt the running job."""
        result = Dispatcher(sample_jobs, shortest_job_first()).run()
        assert record_tuples(result) == [("A", 0, 0, 5), ("C", 2, 3, 6), ("B", 1, 5, 8)]

    def test_preemptive_order(self, sample_jobs):
        """SRTF should preempt on each shorter arrival."""
        result = Dispatcher(sample_jobs, shortest_remaining_time_first()).run()
        assert record_tuples(result) == [("C", 2, 0, 3), ("B", 1, 1, 4), ("A", 0, 3, 8)]
        assert result['statistics']['preemptions'] == 2

    def test_preemption_compares_service_not_remaining(self):
        """By default a nearly finished job is preempted by a shorter newcomer."""
        jobs = [Job("A", 0, 5, 0), Job("B", 3, 3, 0)]
        result = Dispatcher(jobs, shortest_remaining_time_first()).run()
        assert record_tuples(result) == [("B", 3, 0, 6), ("A", 0, 3, 8)]

    def test_live_remaining_variant(self):
        """The live variant should compare remaining time and keep the nearly finished job."""
        jobs = [Job("A", 0, 5, 0), Job("B", 3, 3, 0)]
        result = Dispatcher(jobs, shortest_remaining_time_first(live_remaining=True)).run()
        assert record_tuples(result) == [("A", 0, 0, 5), ("B", 3, 2, 8)]


class TestPriority:
    """Verify highest-priority-first ordering."""

    def test_non_preemptive_order(self, sample_jobs):
        """Priority should pick the highest value only when the CPU is free."""
        result = Dispatcher(sample_jobs, highest_priority_first()).run()
        assert record_tuples(result) == [("A", 0, 0, 5), ("B", 1, 4, 7), ("C", 2, 5, 8)]

    def test_preemptive_order(self, sample_jobs):
        """A higher-priority arrival should take the CPU immediately."""
        result = Dispatcher(sample_jobs, preemptive_priority()).run()
        assert record_tuples(result) == [("B", 1, 0, 3), ("C", 2, 1, 4), ("A", 0, 3, 8)]

    def test_lower_priority_arrival_does_not_preempt(self):
        """A lower-priority arrival should wait for the running job."""
        jobs = [Job("A", 0, 3, 5), Job("C", 1, 1, 1)]
        result = Dispatcher(jobs, preemptive_priority()).run()
        assert [r.name for r in result['records']] == ["A", "C"]
        assert result['statistics']['preemptions'] == 0


class TestIdleAndTermination:
    """Verify idle ticks, empty input and the end of a run."""

    def test_idle_gap_before_late_arrival(self):
        """The CPU should idle until the next arrival and count it against utilization."""
        jobs = [Job("A", 0, 1), Job("B", 5, 2)]
        result = Dispatcher(jobs, shortest_job_first()).run()
        assert record_tuples(result) == [("A", 0, 0, 1), ("B", 5, 0, 7)]
        assert result['statistics']['total_time'] == 7
        assert result['statistics']['cpu_utilization'] == pytest.approx(3 / 7 * 100)

    def test_first_arrival_after_zero(self):
        """A workload starting late should have no wait."""
        result = Dispatcher([Job("A", 3, 2)], round_robin(1)).run()
        assert record_tuples(result) == [("A", 3, 0, 5)]

    def test_empty_workload_raises(self):
        """Running with no jobs should raise EmptyWorkloadError."""
        with pytest.raises(EmptyWorkloadError):
            Dispatcher([], round_robin(2)).run()

    def test_unsorted_input_is_ordered_by_arrival(self):
        """Input order should not matter, only arrival ticks."""
        jobs = [Job("late", 4, 1), Job("early", 0, 2)]
        result = Dispatcher(jobs, first_come_first_served()).run()
        assert [r.name for r in result['records']] == ["early", "late"]

    def test_input_jobs_are_not_mutated(self, sample_jobs):
        """The dispatcher should simulate on copies of the caller's jobs."""
        Dispatcher(sample_jobs, round_robin(2)).run()
        assert all(job.remaining is None for job in sample_jobs)

    def test_step_after_finish_is_noop(self):
        """Stepping a finished run should neither advance the clock nor fail."""
        dispatcher = Dispatcher([Job("X", 0, 1)], shortest_job_first())
        dispatcher.run()
        steps = dispatcher.steps
        assert dispatcher.step() is True
        assert dispatcher.steps == steps


class TestInvariants:
    """Properties that must hold for any workload and policy."""

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("key", ALL_POLICY_KEYS)
    def test_conservation_wait_and_termination_bound(self, seed, key):
        """Every job should complete once, never wait negatively, and finish within the tick bound."""
        jobs = random_workload(seed)
        policy = build_policies([key], quantum=3)[0]
        dispatcher = Dispatcher(jobs, policy)
        result = dispatcher.run()

        assert sorted(r.name for r in result['records']) == sorted(job.name for job in jobs)
        assert all(r.wait >= 0 for r in result['records'])
        total_service = sum(job.service for job in jobs)
        assert dispatcher.steps <= total_service + max(job.arrival for job in jobs) + 1
        assert dispatcher.arrivals.is_empty()
        assert dispatcher.ready_queue.is_empty()
        assert dispatcher.stats.cpu_busy_time == total_service

    @pytest.mark.parametrize("live_remaining", [False, True])
    @pytest.mark.parametrize("seed", range(3))
    @pytest.mark.parametrize("key", ALL_POLICY_KEYS)
    def test_each_job_in_one_place_every_tick(self, key, seed, live_remaining):
        """After every tick each job should sit in exactly one place with sane remaining time."""
        jobs = random_workload(seed)
        policy = build_policies([key], quantum=3, live_remaining=live_remaining)[0]
        dispatcher = Dispatcher(jobs, policy)

        while not dispatcher.step():
            running = dispatcher.running_job
            held = [id(job) for job in dispatcher.arrivals] + [id(job) for job in dispatcher.ready_queue]
            if running is not None:
                held.append(id(running))
                assert 0 < running.remaining <= running.service
            done = [id(job) for job in dispatcher.terminated_jobs]
            assert len(set(held)) == len(held)
            assert not set(held) & set(done)
            assert len(held) + len(done) == len(jobs)
            for job in dispatcher.ready_queue:
                assert 0 < job.remaining <= job.service

        assert len(dispatcher.terminated_jobs) == len(jobs)

    def test_wait_matches_definition(self, sample_jobs):
        """Wait should equal completion minus service minus arrival."""
        services = {job.name: job.service for job in sample_jobs}
        for key in ALL_POLICY_KEYS:
            policy = build_policies([key], quantum=2)[0]
            for record in Dispatcher(sample_jobs, policy).run()['records']:
                assert isinstance(record, CompletionRecord)
                assert record.wait == record.completion_tick - services[record.name] - record.arrival
