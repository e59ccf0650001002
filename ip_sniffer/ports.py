from __future__ import annotations

from typing import List

MIN_PORT = 1
MAX_PORT = 65535


def check_worker_count(num_workers: int) -> int:
    if num_workers < 1 or num_workers > MAX_PORT:
        raise ValueError(f"Worker count must be between 1 and {MAX_PORT}: {num_workers}")
    return num_workers


def worker_ports(worker_id: int, num_workers: int) -> range:
    """
    Candidate ports for one worker:
    worker_id+1, worker_id+1+num_workers, ... while <= MAX_PORT.

    Port 0 is never scanned. Workers whose first candidate is above
    MAX_PORT get an empty range.
    """
    check_worker_count(num_workers)
    if worker_id < 0 or worker_id >= num_workers:
        raise ValueError(f"Worker id must be in [0, {num_workers}): {worker_id}")

    return range(worker_id + MIN_PORT, MAX_PORT + 1, num_workers)


def partition(num_workers: int) -> List[range]:
    check_worker_count(num_workers)
    return [worker_ports(i, num_workers) for i in range(num_workers)]
