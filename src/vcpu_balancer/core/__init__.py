from .balancer import BalancePlan, balance
from .bootstrap import bootstrap_assign
from .config import BalancerConfig
from .decision import RebalanceDecision
from .sample import PcpuRecord, PinCommand, Sample, VcpuRecord, topology_changed
from .usage import aggregate_pcpu_usage, calculate_usage, compute_vcpu_usage

__all__ = [
    "BalancePlan",
    "BalancerConfig",
    "PcpuRecord",
    "PinCommand",
    "RebalanceDecision",
    "Sample",
    "VcpuRecord",
    "aggregate_pcpu_usage",
    "balance",
    "bootstrap_assign",
    "calculate_usage",
    "compute_vcpu_usage",
    "topology_changed",
]
