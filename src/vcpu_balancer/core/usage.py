"""
Interval usage of vCPUs and the per-pCPU load derived from it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

import numpy as np

from .sample import PcpuRecord, Sample, VcpuRecord

LOG = logging.getLogger(__name__)

NANOSECONDS_PER_SECOND = 1_000_000_000


def calculate_usage(
    time_current: int, time_previous: int, interval_seconds: float
) -> Optional[float]:
    """Percentage of ``interval_seconds`` spent executing between two samples.

    Returns ``None`` when the counter went backwards, which means the vCPU
    identity was reused by a recreated domain. The result is not clamped: a
    burst can transiently exceed 100.
    """
    if interval_seconds <= 0:
        raise ValueError("Interval must be positive")
    if time_current < time_previous:
        return None
    return (time_current - time_previous) / (interval_seconds * NANOSECONDS_PER_SECOND) * 100.0


def aggregate_pcpu_usage(
    vcpus: Sequence[VcpuRecord], max_pcpus: int
) -> Tuple[PcpuRecord, ...]:
    """Sum vCPU usage onto the pCPU each vCPU currently runs on."""
    if max_pcpus <= 0:
        raise ValueError("At least one physical CPU is required")
    if not vcpus:
        return Sample.empty_pcpus(max_pcpus)

    cpus = np.fromiter((vcpu.assigned_pcpu for vcpu in vcpus), dtype=np.int64, count=len(vcpus))
    if cpus.min() < 0 or cpus.max() >= max_pcpus:
        raise ValueError(
            f"vCPU reported on pCPU outside [0, {max_pcpus}): {sorted(set(cpus.tolist()))}"
        )
    weights = np.fromiter(
        (vcpu.effective_usage for vcpu in vcpus), dtype=np.float64, count=len(vcpus)
    )
    totals = np.bincount(cpus, weights=weights, minlength=max_pcpus)
    return tuple(
        PcpuRecord(index=i, usage_percent=float(total)) for i, total in enumerate(totals)
    )


def compute_vcpu_usage(current: Sample, previous: Sample, interval_seconds: float) -> Sample:
    """Return ``current`` with vCPU usage and pCPU usage filled in.

    Only vCPUs present in ``previous`` under the same (domain, vCPU) key with a
    non-decreasing counter get a usage value; the rest keep ``None``.
    """
    history = previous.by_key()
    vcpus = []
    stale = 0
    for vcpu in current.vcpus:
        before = history.get(vcpu.key)
        usage = None
        if before is not None:
            usage = calculate_usage(
                vcpu.cumulative_time_ns, before.cumulative_time_ns, interval_seconds
            )
            if usage is None:
                stale += 1
        vcpus.append(replace(vcpu, usage_percent=usage))
    if stale:
        LOG.debug("Ignoring %d vCPUs with counters that went backwards", stale)

    # every vCPU usage is final before aggregation reads any of them
    pcpus = aggregate_pcpu_usage(vcpus, current.max_pcpus)
    return replace(current, vcpus=tuple(vcpus), pcpus=pcpus)
