#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CPU scheduler comparison - command line entry point
"""

import argparse
import os
import re
import sys
from typing import List, Optional, Sequence

from core.dispatcher import EmptyWorkloadError
from schedulers.comparison import ComparisonReport, run_comparison
from schedulers.policies import DEFAULT_POLICY_KEYS, DEFAULT_QUANTUM, POLICIES, build_policies
from utils.input_parser import InputParser
from utils.visualization import Visualizer


def print_banner():
    print("\n" + "="*60)
    print(" "*18 + "Scheduler Comparison")
    print("="*60 + "\n")


def parse_policy_keys(raw: str) -> List[str]:
    keys = [item.strip() for item in raw.split(',') if item.strip()]
    if not keys:
        raise argparse.ArgumentTypeError("at least one policy is required")
    unknown = [key for key in keys if key not in POLICIES]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown policy {', '.join(unknown)} (choose from {', '.join(POLICIES)})")
    # repeated keys would run the same policy twice under one name
    return list(dict.fromkeys(keys))


def positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {raw}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {raw}")
    return value


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare the average wait time of CPU scheduling policies on one workload.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("-f", "--file", help="Workload file (name arrival service priority per line).")
    source.add_argument("-r", "--random", action="store_true", help="Generate a random workload.")
    parser.add_argument("-q", "--quantum", type=positive_int, default=DEFAULT_QUANTUM,
                        help=f"Round robin time slice (default {DEFAULT_QUANTUM}).")
    parser.add_argument("-n", "--jobs", type=positive_int, default=None,
                        help="Job count for --random (random when omitted).")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --random.")
    parser.add_argument("-o", "--output-dir", default="simulation_results",
                        help="Directory for completion records and charts.")
    parser.add_argument("-p", "--policies", type=parse_policy_keys, default=list(DEFAULT_POLICY_KEYS),
                        help=f"Comma-separated policy keys ({', '.join(POLICIES)}).")
    parser.add_argument("--live-remaining", action="store_true",
                        help="Shortest remaining time compares live remaining time instead of service.")
    parser.add_argument("--charts", action="store_true", help="Save Gantt and comparison charts.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print each policy's event log and completion records.")
    return parser.parse_args(argv)


def generate_jobs(args: argparse.Namespace):
    """Random workload, saved next to the results; OSError propagates"""
    jobs = InputParser.generate_random_jobs(num_jobs=args.jobs, seed=args.seed)
    os.makedirs(args.output_dir, exist_ok=True)
    InputParser.save_jobs_to_file(jobs, os.path.join(args.output_dir, "generated_input.txt"))
    return jobs


def safe_file_name(name: str) -> str:
    safe = re.sub(r'[^A-Za-z0-9]+', '_', name)
    return safe.strip('_')


def save_charts(report: ComparisonReport, output_dir: str):
    visualizer = Visualizer()
    for result in report.results:
        save_path = os.path.join(output_dir, f"gantt_{safe_file_name(result['algorithm'])}.png")
        visualizer.draw_gantt_chart(result['gantt_chart'], result['algorithm'],
                                    save_path=save_path, show=False)
    if len(report.results) > 1:
        visualizer.compare_algorithms(report.results,
                                      save_path=os.path.join(output_dir, "comparison.png"), show=False)


def print_report(report: ComparisonReport, verbose: bool = False):
    visualizer = Visualizer()
    if verbose:
        for result in report.results:
            visualizer.print_record_details(result)
    visualizer.print_statistics_table(report.results)
    for name, average in report.averages.items():
        print(f"{name} wait time average: {average:f}")
    print(f"\nThe best scheduler for the data set was {' / '.join(report.best)}.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    print_banner()

    if args.random:
        try:
            jobs = generate_jobs(args)
        except OSError as e:
            print(f"[Error] Could not save generated workload: {e}", file=sys.stderr)
            return 1
    else:
        print(f"Reading '{args.file}'...")
        try:
            jobs = InputParser.parse_file(args.file)
        except OSError as e:
            print(f"[Error] Could not open input file: {e}", file=sys.stderr)
            return 1

    if not jobs:
        print("[Error] No jobs to schedule.", file=sys.stderr)
        return 1

    InputParser.print_job_summary(jobs)

    policies = build_policies(args.policies, quantum=args.quantum, live_remaining=args.live_remaining)
    print(f"Scheduling {len(jobs)} jobs:")
    try:
        report = run_comparison(jobs, policies, output_dir=args.output_dir, verbose=args.verbose)
    except EmptyWorkloadError as e:
        print(f"[Error] {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"[Error] Could not write results: {e}", file=sys.stderr)
        return 1

    for result in report.results:
        print(f"\t{result['algorithm']} complete.")

    print_report(report, verbose=args.verbose)

    if args.charts:
        save_charts(report, args.output_dir)

    print(f"\nCompletion records saved in '{args.output_dir}/'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
