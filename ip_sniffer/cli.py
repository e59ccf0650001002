"""
Command-line entry point.

Usage:
  ip-sniffer -h
  ip-sniffer -j 100 192.168.1.1
  ip-sniffer 192.168.1.1
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .models import DEFAULT_WORKERS, ScanConfig
from .output import print_results
from .ports import MAX_PORT
from .scanner import ProgressMarker, run_scan
from .targets import parse_target

EXIT_OK = 0
EXIT_SCAN_FAILED = 1
EXIT_USAGE = 2


class UsageError(ValueError):
    """Raised instead of exiting when the command line cannot be parsed."""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def _worker_count(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("failed to parse thread number")
    if n < 1 or n > MAX_PORT:
        raise argparse.ArgumentTypeError(f"thread number must be between 1 and {MAX_PORT}")
    return n


def _target(value: str):
    try:
        return parse_target(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _positive_float(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout: {value}")
    if f <= 0:
        raise argparse.ArgumentTypeError("timeout must be > 0")
    return f


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value}")
    if n < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return n


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog=prog,
        description="Concurrent TCP connect scan of ports 1-65535 on one IP address",
        add_help=False,
    )
    p.add_argument("ipaddr", type=_target, help="Target IPv4 or IPv6 address")
    p.add_argument(
        "-j",
        "--threads",
        type=_worker_count,
        default=DEFAULT_WORKERS,
        help=f"How many workers to scan with (default: {DEFAULT_WORKERS})",
    )
    p.add_argument("--timeout", type=_positive_float, help="Connect timeout seconds (default: platform)")
    p.add_argument("--max-threads", type=_positive_int, help="Cap on concurrently running workers")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("-h", "--help", action="store_true", help="Show this help message")
    return p


def _wants_help(argv: List[str]) -> bool:
    # only a leading help flag counts; a later -h is ignored by the scan
    return bool(argv) and argv[0] in ("-h", "--help", "-help")


def parse_arguments(argv: List[str], prog: Optional[str] = None) -> Optional[argparse.Namespace]:
    """
    Returns the parsed namespace, or None when help was requested.
    Raises UsageError on bad input; never exits the process.
    """
    if _wants_help(argv):
        if len(argv) > 1:
            raise UsageError("too many arguments")
        return None
    if not argv:
        raise UsageError("not enough arguments")

    return build_parser(prog).parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    prog = build_parser().prog

    try:
        args = parse_arguments(argv, prog)
    except UsageError as e:
        print(f"{prog} problem parsing arguments: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args is None:
        build_parser(prog).print_help()
        return EXIT_OK

    setup_logging(args.verbose)
    config = ScanConfig(
        target=args.ipaddr,
        num_workers=args.threads,
        timeout_s=args.timeout,
        max_threads=args.max_threads,
    )

    # ChannelBroken, ProgressOutputError and thread start failures are RuntimeErrors
    try:
        report = run_scan(config, progress=ProgressMarker())
    except (RuntimeError, OSError) as e:
        logging.error("Scan of %s failed: %s", config.target, e)
        return EXIT_SCAN_FAILED

    print_results(report)
    return EXIT_OK


def main_entry():
    raise SystemExit(main())
