from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .sample import PinCommand, VcpuRecord


def block_sizes(total_vcpus: int, max_pcpus: int) -> List[int]:
    """Number of consecutive vCPUs handed to each pCPU.

    Blocks hold ``ceil(total / max_pcpus)`` vCPUs. When full-size blocks would
    run out before the last pCPU, sizes are evened out so they differ by at
    most one and no pCPU is left empty.
    """
    if max_pcpus <= 0:
        raise ValueError("At least one physical CPU is required")
    if total_vcpus <= 0:
        return [0] * max_pcpus

    avg = math.ceil(total_vcpus / max_pcpus)
    full, rest = divmod(total_vcpus, avg)
    sizes = [avg] * full + ([rest] if rest else [])
    if len(sizes) < max_pcpus and total_vcpus >= max_pcpus:
        base, extra = divmod(total_vcpus, max_pcpus)
        return [base + 1 if i < extra else base for i in range(max_pcpus)]
    return sizes + [0] * (max_pcpus - len(sizes))


def bootstrap_assign(vcpus: Sequence[VcpuRecord], max_pcpus: int) -> Tuple[PinCommand, ...]:
    """Spread vCPUs over pCPUs in contiguous blocks, in enumeration order.

    Used on the first tick and whenever the set of domains changes, when no
    usable usage history exists.

    vCPU ``i`` normally lands on ``floor(i / ceil(total / max_pcpus))``. When
    those blocks would leave trailing pCPUs empty (5 vCPUs on 4 pCPUs gives
    ``[0, 0, 1, 1, 2]``) the blocks are evened out instead, here to
    ``[0, 0, 1, 2, 3]``, so every pCPU receives at least one vCPU.
    """
    pins: List[PinCommand] = []
    ordered = iter(vcpus)
    for pcpu, size in enumerate(block_sizes(len(vcpus), max_pcpus)):
        for _ in range(size):
            vcpu = next(ordered)
            pins.append(PinCommand(vcpu.domain_id, vcpu.vcpu_number, pcpu))
    return tuple(pins)
