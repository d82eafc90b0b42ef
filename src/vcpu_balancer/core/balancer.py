"""
Greedy longest-usage-first placement of vCPUs onto pCPUs.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from .sample import PcpuRecord, PinCommand, VcpuRecord

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalancePlan:
    pins: Tuple[PinCommand, ...]
    pcpus: Tuple[PcpuRecord, ...]

    @property
    def assigned_loads(self) -> List[float]:
        return [pcpu.assigned_load for pcpu in self.pcpus]


def placement_order(vcpus: Sequence[VcpuRecord]) -> List[VcpuRecord]:
    """Heaviest first; equal usage falls back to domain then vCPU number."""
    return sorted(
        vcpus, key=lambda vcpu: (-vcpu.effective_usage, vcpu.domain_id, vcpu.vcpu_number)
    )


def balance(vcpus: Sequence[VcpuRecord], pcpus: Sequence[PcpuRecord]) -> BalancePlan:
    """Assign every vCPU to the pCPU with the least load placed so far.

    ``assigned_load`` restarts at zero for every pass; ``usage_percent`` of the
    input pCPUs is carried through untouched. A pin is emitted for every vCPU,
    including those that stay where they are.
    """
    if not pcpus:
        raise ValueError("At least one physical CPU is required")

    # (load, index) so ties resolve to the lowest pCPU index
    heap: List[Tuple[float, int]] = [(0.0, i) for i in range(len(pcpus))]
    loads = [0.0] * len(pcpus)
    pins: List[PinCommand] = []

    for vcpu in placement_order(vcpus):
        load, index = heapq.heappop(heap)
        load += vcpu.effective_usage
        loads[index] = load
        heapq.heappush(heap, (load, index))
        pins.append(PinCommand(vcpu.domain_id, vcpu.vcpu_number, index))
        LOG.debug(
            "vCPU %s/%d (%.2f%%) -> pCPU %d",
            vcpu.domain_id,
            vcpu.vcpu_number,
            vcpu.effective_usage,
            index,
        )

    placed = tuple(
        replace(pcpu, index=i, assigned_load=loads[i]) for i, pcpu in enumerate(pcpus)
    )
    return BalancePlan(pins=tuple(pins), pcpus=placed)
