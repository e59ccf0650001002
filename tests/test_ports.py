from __future__ import annotations

import pytest

from ip_sniffer import ports


def _covered(num_workers):
    seen = []
    for r in ports.partition(num_workers):
        seen.extend(r)
    return seen


def test_single_worker_covers_whole_range():
    (only,) = ports.partition(1)
    assert list(only) == list(range(1, 65536))


def test_two_workers_split_odd_and_even():
    odd, even = ports.partition(2)
    assert odd[0] == 1 and odd[-1] == 65535
    assert even[0] == 2 and even[-1] == 65534
    assert set(odd) == set(range(1, 65536, 2))
    assert set(even) == set(range(2, 65536, 2))


@pytest.mark.parametrize("num_workers", [3, 4, 7, 100, 1000, 65534])
def test_workers_cover_every_port_once(num_workers):
    seen = _covered(num_workers)
    assert len(seen) == 65535
    assert set(seen) == set(range(1, 65536))


def test_port_zero_is_never_scanned():
    assert 0 not in _covered(5)


def test_candidates_stop_at_max_port():
    # worker 3 of 4 would step 65532 -> 65536
    r = ports.worker_ports(3, 4)
    assert r[-1] == 65532
    assert max(r) <= ports.MAX_PORT
    assert list(ports.worker_ports(2, 4))[-1] == 65535


def test_max_workers_each_scan_one_port():
    assert ports.worker_ports(0, 65535) == range(1, 2)
    assert list(ports.worker_ports(65534, 65535)) == [65535]
    assert all(len(r) == 1 for r in ports.partition(65535))


def test_loopback_8080_belongs_to_worker_three():
    owners = [i for i, r in enumerate(ports.partition(4)) if 8080 in r]
    assert owners == [(8080 - 1) % 4] == [3]


@pytest.mark.parametrize("num_workers", [0, -1, 65536])
def test_invalid_worker_count(num_workers):
    with pytest.raises(ValueError):
        ports.partition(num_workers)


@pytest.mark.parametrize("worker_id", [-1, 4])
def test_invalid_worker_id(worker_id):
    with pytest.raises(ValueError):
        ports.worker_ports(worker_id, 4)
