import math

import pytest

from vcpu_balancer.core.bootstrap import block_sizes, bootstrap_assign
from vcpu_balancer.core.sample import PinCommand, VcpuRecord


def vcpus_for(*counts):
    """vCPUs of several domains, in enumeration order."""
    return [
        VcpuRecord(f"dom-{d}", n, 0, 0)
        for d, count in enumerate(counts)
        for n in range(count)
    ]


def test_four_vcpus_on_two_pcpus():
    pins = bootstrap_assign(vcpus_for(4), 2)
    assert pins == (
        PinCommand("dom-0", 0, 0),
        PinCommand("dom-0", 1, 0),
        PinCommand("dom-0", 2, 1),
        PinCommand("dom-0", 3, 1),
    )


def test_blocks_follow_enumeration_order_across_domains():
    pins = bootstrap_assign(vcpus_for(2, 3, 1), 3)
    assert [(p.domain_id, p.vcpu_number, p.target_pcpu) for p in pins] == [
        ("dom-0", 0, 0),
        ("dom-0", 1, 0),
        ("dom-1", 0, 1),
        ("dom-1", 1, 1),
        ("dom-1", 2, 2),
        ("dom-2", 0, 2),
    ]


@pytest.mark.parametrize("total,pcpus", [(4, 2), (6, 3), (7, 4), (3, 2), (3, 8), (1, 1), (12, 4)])
def test_block_index_is_floor_of_position_over_average(total, pcpus):
    """Where ceil-sized blocks reach every pCPU, vCPU i lands on i // avg."""
    avg = math.ceil(total / pcpus)
    pins = bootstrap_assign(vcpus_for(total), pcpus)
    assert [p.target_pcpu for p in pins] == [i // avg for i in range(total)]


def test_uneven_split_still_covers_every_pcpu():
    assert block_sizes(5, 4) == [2, 1, 1, 1]
    pins = bootstrap_assign(vcpus_for(5), 4)
    assert [p.target_pcpu for p in pins] == [0, 0, 1, 2, 3]


@pytest.mark.parametrize("pcpus", range(1, 9))
def test_coverage_and_single_assignment(pcpus):
    for total in range(0, 25):
        vcpus = vcpus_for(total)
        pins = bootstrap_assign(vcpus, pcpus)
        assert sorted((p.domain_id, p.vcpu_number) for p in pins) == sorted(v.key for v in vcpus)
        targets = [p.target_pcpu for p in pins]
        assert targets == sorted(targets)
        assert all(0 <= t < pcpus for t in targets)
        if total >= pcpus:
            assert set(targets) == set(range(pcpus))


def test_no_vcpus():
    assert bootstrap_assign([], 4) == ()


def test_requires_pcpus():
    with pytest.raises(ValueError):
        bootstrap_assign(vcpus_for(2), 0)
