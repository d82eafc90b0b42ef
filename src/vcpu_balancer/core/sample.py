"""
Per-tick snapshots of vCPU and pCPU state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Optional, Tuple

VcpuKey = Tuple[str, int]


@dataclass(frozen=True)
class VcpuRecord:
    domain_id: str
    vcpu_number: int
    assigned_pcpu: int
    cumulative_time_ns: int
    usage_percent: Optional[float] = None

    @property
    def key(self) -> VcpuKey:
        return (self.domain_id, self.vcpu_number)

    @property
    def effective_usage(self) -> float:
        # vCPUs without a valid previous sample count as idle
        return self.usage_percent if self.usage_percent is not None else 0.0


@dataclass(frozen=True)
class PcpuRecord:
    index: int
    usage_percent: float = 0.0
    assigned_load: float = 0.0


@dataclass(frozen=True)
class PinCommand:
    domain_id: str
    vcpu_number: int
    target_pcpu: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "domain": self.domain_id,
            "vcpu": self.vcpu_number,
            "pcpu": self.target_pcpu,
        }


@dataclass(frozen=True)
class Sample:
    """Counters captured at the start of one tick.

    ``domain_ids`` keeps the enumeration order reported by the hypervisor,
    including domains whose counters could not be read this tick. Those are
    also listed in ``skipped_ids``.
    """

    vcpus: Tuple[VcpuRecord, ...]
    pcpus: Tuple[PcpuRecord, ...]
    domain_ids: Tuple[str, ...]
    captured_at_ns: int = 0
    skipped_ids: Tuple[str, ...] = ()
    _index: Dict[VcpuKey, VcpuRecord] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    @classmethod
    def empty_pcpus(cls, max_pcpus: int) -> Tuple[PcpuRecord, ...]:
        return tuple(PcpuRecord(index=i) for i in range(max_pcpus))

    @property
    def domain_count(self) -> int:
        return len(self.domain_ids)

    @property
    def max_pcpus(self) -> int:
        return len(self.pcpus)

    @property
    def signature(self) -> FrozenSet[str]:
        return frozenset(self.domain_ids)

    def collected(self) -> "Sample":
        """This sample restricted to the domains whose counters were read."""
        if not self.skipped_ids:
            return self
        skipped = set(self.skipped_ids)
        return replace(
            self,
            domain_ids=tuple(d for d in self.domain_ids if d not in skipped),
            skipped_ids=(),
        )

    def by_key(self) -> Dict[VcpuKey, VcpuRecord]:
        if not self._index and self.vcpus:
            self._index.update((vcpu.key, vcpu) for vcpu in self.vcpus)
        return self._index


def topology_changed(current: Sample, previous: Optional[Sample]) -> bool:
    """True when bootstrap placement must run instead of rebalancing."""
    if previous is None:
        return True
    return current.signature != previous.signature
