from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence

from .config import DEFAULT_MAX_DIFF, DEFAULT_THRESHOLD
from .sample import PcpuRecord


@dataclass(frozen=True)
class RebalanceDecision:
    """Whether the current pCPU usage is skewed enough to re-pin.

    Rebalance only when some pCPU is above ``threshold`` and the gap between
    the busiest and idlest pCPU exceeds ``max_diff``.
    """

    max_usage: float
    min_usage: float
    above_threshold: bool
    rebalance: bool

    @property
    def spread(self) -> float:
        return self.max_usage - self.min_usage

    @classmethod
    def evaluate(
        cls,
        pcpus: Sequence[PcpuRecord],
        threshold: float = DEFAULT_THRESHOLD,
        max_diff: float = DEFAULT_MAX_DIFF,
    ) -> "RebalanceDecision":
        if not pcpus:
            raise ValueError("At least one physical CPU is required")
        usages = [pcpu.usage_percent for pcpu in pcpus]
        max_usage = max(usages)
        min_usage = min(usages)
        above_threshold = max_usage > threshold
        return cls(
            max_usage=max_usage,
            min_usage=min_usage,
            above_threshold=above_threshold,
            rebalance=above_threshold and (max_usage - min_usage) > max_diff,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_usage": self.max_usage,
            "min_usage": self.min_usage,
            "above_threshold": self.above_threshold,
            "rebalance": self.rebalance,
        }
