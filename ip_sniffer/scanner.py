from __future__ import annotations

import ipaddress
import logging
import socket
import sys
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, TextIO, Tuple, Union

from .collector import Intake, ResultCollector
from .models import DEFAULT_WORKERS, IPAddress, ScanConfig, ScanReport
from .ports import check_worker_count, worker_ports


class ProgressOutputError(RuntimeError):
    """Raised when the progress marker cannot be written."""


class ProgressMarker:
    """
    Writes one marker per discovered port, flushed immediately.
    Markers from different workers may interleave in any order.
    """

    def __init__(self, stream: Optional[TextIO] = None, marker: str = ".", enabled: bool = True):
        self.stream = stream
        self.marker = marker
        self.enabled = enabled

    def mark(self) -> None:
        if not self.enabled:
            return
        # stdout is looked up per call so redirected streams are honoured
        stream = self.stream if self.stream is not None else sys.stdout
        try:
            stream.write(self.marker)
            stream.flush()
        except (OSError, ValueError) as e:
            raise ProgressOutputError(f"failed to write progress marker: {e}") from e


def probe_port(target: IPAddress, port: int, timeout_s: Optional[float] = None) -> bool:
    """
    One TCP connect attempt. Without timeout_s the platform connect
    timeout applies. Socket creation errors propagate.
    """
    family = socket.AF_INET6 if target.version == 6 else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        if timeout_s is not None:
            sock.settimeout(timeout_s)
        sock.connect((str(target), port))
        return True
    except OSError:
        # refused, unreachable, timed out
        return False
    finally:
        sock.close()


def scan_worker(
    target: IPAddress,
    worker_id: int,
    num_workers: int,
    intake: Intake,
    progress: Optional[ProgressMarker] = None,
    timeout_s: Optional[float] = None,
) -> int:
    """
    Scan every port assigned to worker_id and push open ones into intake,
    marking each on stdout unless a disabled ProgressMarker is given.
    The intake handle is released on return or error. Returns the number
    of ports attempted.
    """
    if progress is None:
        progress = ProgressMarker()

    with intake:
        ports = worker_ports(worker_id, num_workers)
        logging.debug("worker %d: %d ports", worker_id, len(ports))

        for port in ports:
            if probe_port(target, port, timeout_s):
                progress.mark()
                intake.send(port)

        logging.debug("worker %d: done", worker_id)
        return len(ports)


def scan(
    target: Union[IPAddress, str],
    num_workers: int = DEFAULT_WORKERS,
    timeout_s: Optional[float] = None,
    max_threads: Optional[int] = None,
    progress: Optional[ProgressMarker] = None,
) -> Tuple[int, ...]:
    """
    Scan ports 1-65535 of target with num_workers concurrent workers.

    Every worker is submitted before any is awaited. With max_threads set,
    at most that many run at once and the rest wait their turn. The first
    worker failure is re-raised once all workers have finished. Each open
    port prints a marker to stdout; pass ProgressMarker(enabled=False)
    to scan silently.
    """
    addr = ipaddress.ip_address(str(target))
    check_worker_count(num_workers)

    if progress is None:
        progress = ProgressMarker()

    threads = num_workers if max_threads is None else min(num_workers, max_threads)
    collector = ResultCollector()
    futures: List[Future] = []

    with ThreadPoolExecutor(max_workers=threads, thread_name_prefix="scan-worker") as pool:
        with collector.intake() as intake:
            for worker_id in range(num_workers):
                futures.append(
                    pool.submit(
                        scan_worker,
                        addr,
                        worker_id,
                        num_workers,
                        intake.clone(),
                        progress,
                        timeout_s,
                    )
                )

        open_ports = collector.collect()

    # raise the first worker failure, if any
    for fut in futures:
        fut.result()

    return open_ports


def run_scan(config: ScanConfig, progress: Optional[ProgressMarker] = None) -> ScanReport:
    logging.info(
        "Scanning %s with %d workers%s",
        config.target,
        config.num_workers,
        f" (max {config.max_threads} threads)" if config.max_threads else "",
    )

    start = time.perf_counter()
    open_ports = scan(
        config.target,
        num_workers=config.num_workers,
        timeout_s=config.timeout_s,
        max_threads=config.max_threads,
        progress=progress,
    )
    elapsed = time.perf_counter() - start

    logging.info("Found %d open ports in %.2fs", len(open_ports), elapsed)
    return ScanReport(
        target=config.target,
        num_workers=config.num_workers,
        open_ports=open_ports,
        elapsed_s=round(elapsed, 4),
    )
