"""
Completion-record files and wait-time aggregation
"""

from typing import Iterable, List

from core.dispatcher import CompletionRecord, EmptyWorkloadError


def write_completion_records(records: Iterable[CompletionRecord], filename: str):
    """
    Write one `name arrival wait completion_tick` line per record,
    in completion order

    Raises:
        OSError: the file cannot be created
    """
    with open(filename, 'w', encoding='utf-8') as f:
        for record in records:
            f.write(record.to_line())


def read_completion_records(filename: str, job_count: int) -> List[CompletionRecord]:
    """
    Read exactly job_count records back

    Raises:
        OSError: the file cannot be opened
        ValueError: fewer than job_count well-formed records
    """
    records = []
    with open(filename, 'r', encoding='utf-8') as f:
        for line in f:
            if len(records) == job_count:
                break
            parts = line.split()
            if not parts:
                continue
            if len(parts) != 4:
                raise ValueError(f"malformed completion record in {filename}: {line.strip()!r}")
            name, arrival, wait, completion = parts
            records.append(CompletionRecord(name, int(arrival), int(wait), int(completion)))

    if len(records) < job_count:
        raise ValueError(f"{filename} holds {len(records)} records, expected {job_count}")
    return records


def calculate_wait(filename: str, job_count: int) -> float:
    """Average of the wait field over the first job_count records"""
    if job_count <= 0:
        raise EmptyWorkloadError("cannot average the wait time of zero jobs")
    records = read_completion_records(filename, job_count)
    return sum(record.wait for record in records) / job_count
