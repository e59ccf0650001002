from __future__ import annotations

import io
import ipaddress

from ip_sniffer.models import ScanReport
from ip_sniffer.output import format_report, print_results


def _report(ports):
    return ScanReport(
        target=ipaddress.ip_address("10.0.0.1"), num_workers=4, open_ports=tuple(ports), elapsed_s=1.0
    )


def test_format_report_lines():
    assert format_report(_report([22, 80])) == ["22 is open", "80 is open"]


def test_print_results_starts_with_blank_line():
    buf = io.StringIO()
    print_results(_report([443]), stream=buf)
    assert buf.getvalue() == "\n443 is open\n"


def test_print_results_empty_scan():
    buf = io.StringIO()
    print_results(_report([]), stream=buf)
    assert buf.getvalue() == "\n"
