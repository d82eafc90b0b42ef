"""
Pure planning step of one tick: previous sample in, pins and new state out.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..core.balancer import balance
from ..core.bootstrap import bootstrap_assign
from ..core.config import BalancerConfig
from ..core.decision import RebalanceDecision
from ..core.sample import PcpuRecord, PinCommand, Sample, topology_changed
from ..core.usage import compute_vcpu_usage

LOG = logging.getLogger(__name__)


class TickMode(enum.Enum):
    BOOTSTRAP = "bootstrap"
    STEADY = "steady"
    DRAINED = "drained"


@dataclass(frozen=True)
class TickResult:
    mode: TickMode
    sample: Optional[Sample]
    decision: Optional[RebalanceDecision] = None
    pins: Tuple[PinCommand, ...] = ()
    balanced_pcpus: Tuple[PcpuRecord, ...] = ()

    @property
    def rebalanced(self) -> bool:
        return self.decision is not None and self.decision.rebalance

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"mode": self.mode.value, "pins": [pin.to_dict() for pin in self.pins]}
        if self.sample is not None:
            payload["domains"] = self.sample.domain_count
            payload["vcpus"] = len(self.sample.vcpus)
            payload["pcpu_usage"] = [pcpu.usage_percent for pcpu in self.sample.pcpus]
        if self.decision is not None:
            payload["decision"] = self.decision.to_dict()
        if self.balanced_pcpus:
            payload["assigned_load"] = [pcpu.assigned_load for pcpu in self.balanced_pcpus]
        return payload


def plan_tick(current: Sample, previous: Optional[Sample], config: BalancerConfig) -> TickResult:
    """Decide the pins for ``current`` given the sample kept from the last tick."""
    if previous is None or topology_changed(current, previous):
        LOG.info(
            "Domain set changed (%d domains, %d vCPUs); spreading vCPUs evenly",
            current.domain_count,
            len(current.vcpus),
        )
        pins = bootstrap_assign(current.vcpus, current.max_pcpus)
        # skipped domains stay out of the signature so they bootstrap once readable
        return TickResult(mode=TickMode.BOOTSTRAP, sample=current.collected(), pins=pins)

    measured = compute_vcpu_usage(current, previous, config.interval_seconds)
    decision = RebalanceDecision.evaluate(measured.pcpus, config.threshold, config.max_diff)
    if not decision.rebalance:
        return TickResult(mode=TickMode.STEADY, sample=measured, decision=decision)

    LOG.info(
        "Rebalancing: pCPU usage spread %.2f%% (max %.2f%%, min %.2f%%)",
        decision.spread,
        decision.max_usage,
        decision.min_usage,
    )
    plan = balance(measured.vcpus, measured.pcpus)
    return TickResult(
        mode=TickMode.STEADY,
        sample=measured,
        decision=decision,
        pins=plan.pins,
        balanced_pcpus=plan.pcpus,
    )
