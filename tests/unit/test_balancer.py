import random

import pytest

from vcpu_balancer.core.balancer import balance, placement_order
from vcpu_balancer.core.sample import PcpuRecord, PinCommand, VcpuRecord


def vcpu(domain, number, cpu, usage):
    return VcpuRecord(domain, number, cpu, 0, usage)


def idle_pcpus(count):
    return [PcpuRecord(index=i) for i in range(count)]


def test_skewed_pair_is_spread_heaviest_first():
    """[30, 10, 5, 5] on two pCPUs ends with loads [30, 20]."""
    vcpus = [
        vcpu("dom", 0, 0, 30.0),
        vcpu("dom", 1, 0, 10.0),
        vcpu("dom", 2, 1, 5.0),
        vcpu("dom", 3, 1, 5.0),
    ]
    pcpus = [PcpuRecord(0, usage_percent=40.0), PcpuRecord(1, usage_percent=10.0)]

    plan = balance(vcpus, pcpus)

    assert plan.pins == (
        PinCommand("dom", 0, 0),
        PinCommand("dom", 1, 1),
        PinCommand("dom", 2, 1),
        PinCommand("dom", 3, 1),
    )
    assert plan.assigned_loads == pytest.approx([30.0, 20.0])
    # interval usage is reported as measured, not recomputed
    assert [p.usage_percent for p in plan.pcpus] == [40.0, 10.0]


def test_every_vcpu_gets_a_pin_even_when_unchanged():
    vcpus = [vcpu("a", 0, 0, 50.0), vcpu("a", 1, 1, 50.0)]
    plan = balance(vcpus, idle_pcpus(2))
    assert plan.pins == (PinCommand("a", 0, 0), PinCommand("a", 1, 1))


def test_ties_break_on_domain_then_vcpu_then_lowest_pcpu():
    vcpus = [
        vcpu("b", 0, 0, 10.0),
        vcpu("a", 1, 0, 10.0),
        vcpu("a", 0, 0, 10.0),
    ]
    assert [v.key for v in placement_order(vcpus)] == [("a", 0), ("a", 1), ("b", 0)]
    plan = balance(vcpus, idle_pcpus(3))
    assert plan.pins == (
        PinCommand("a", 0, 0),
        PinCommand("a", 1, 1),
        PinCommand("b", 0, 2),
    )


def test_scratch_load_starts_at_zero():
    """Stale assigned_load on the input never leaks into the pass."""
    pcpus = [PcpuRecord(0, assigned_load=99.0), PcpuRecord(1)]
    plan = balance([vcpu("a", 0, 1, 5.0)], pcpus)
    assert plan.pins == (PinCommand("a", 0, 0),)
    assert plan.assigned_loads == [5.0, 0.0]


def test_missing_usage_counts_as_idle():
    vcpus = [vcpu("a", 0, 0, None), vcpu("a", 1, 0, 40.0)]
    plan = balance(vcpus, idle_pcpus(2))
    assert plan.pins[0] == PinCommand("a", 1, 0)
    assert plan.pins[1] == PinCommand("a", 0, 1)


def test_no_vcpus_is_a_noop():
    plan = balance([], idle_pcpus(4))
    assert plan.pins == ()
    assert plan.assigned_loads == [0.0] * 4


def test_requires_pcpus():
    with pytest.raises(ValueError):
        balance([vcpu("a", 0, 0, 1.0)], [])


def test_identical_input_gives_identical_assignment():
    rng = random.Random(7)
    vcpus = [
        vcpu(f"dom-{i % 5}", i, rng.randrange(8), float(rng.choice([0, 5, 10, 12.5, 40])))
        for i in range(40)
    ]
    first = balance(vcpus, idle_pcpus(8))
    shuffled = list(vcpus)
    rng.shuffle(shuffled)
    second = balance(shuffled, idle_pcpus(8))
    assert first == second


@pytest.mark.parametrize("seed", range(20))
def test_final_spread_is_bounded_by_largest_vcpu(seed):
    rng = random.Random(seed)
    pcpu_count = rng.randint(1, 12)
    vcpus = [
        vcpu(f"dom-{rng.randrange(6)}", i, rng.randrange(pcpu_count), rng.uniform(0, 120))
        for i in range(rng.randint(0, 60))
    ]
    plan = balance(vcpus, idle_pcpus(pcpu_count))

    loads = plan.assigned_loads
    largest = max((v.usage_percent for v in vcpus), default=0.0)
    assert max(loads) - min(loads) <= largest + 1e-9
    assert sum(loads) == pytest.approx(sum(v.usage_percent for v in vcpus))
    assert sorted(p.vcpu_number for p in plan.pins) == [v.vcpu_number for v in vcpus]
