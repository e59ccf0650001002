from __future__ import annotations

import ipaddress

from .models import IPAddress


def parse_target(target: str) -> IPAddress:
    """
    Parses a literal IPv4 or IPv6 address ("192.168.1.1", "::1").
    Hostnames and CIDR blocks are rejected.
    """
    target = target.strip()
    if not target:
        raise ValueError("Empty target")

    try:
        return ipaddress.ip_address(target)
    except ValueError as e:
        raise ValueError(f"not a valid IPADDR; must be IPv4 or IPv6: '{target}'") from e
