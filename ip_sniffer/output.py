from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .models import ScanReport


def format_row(port: int) -> str:
    return f"{port} is open"


def format_report(report: ScanReport) -> List[str]:
    return [format_row(p) for p in report.open_ports]


def print_results(report: ScanReport, stream: Optional[TextIO] = None) -> None:
    stream = stream if stream is not None else sys.stdout

    # blank line ends the progress marker row
    print("", file=stream)
    for line in format_report(report):
        print(line, file=stream)
