from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address
from typing import Optional, Tuple, Union

from .ports import check_worker_count

IPAddress = Union[IPv4Address, IPv6Address]

DEFAULT_WORKERS = 4


@dataclass(frozen=True)
class ScanConfig:
    target: IPAddress
    num_workers: int = DEFAULT_WORKERS
    timeout_s: Optional[float] = None
    max_threads: Optional[int] = None

    def __post_init__(self):
        check_worker_count(self.num_workers)
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ValueError(f"Timeout must be positive: {self.timeout_s}")
        if self.max_threads is not None and self.max_threads < 1:
            raise ValueError(f"Thread cap must be >= 1: {self.max_threads}")


@dataclass(frozen=True)
class ScanReport:
    target: IPAddress
    num_workers: int
    open_ports: Tuple[int, ...]
    elapsed_s: float
