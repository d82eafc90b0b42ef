"""
vcpu-balancer: periodic vCPU to pCPU rebalancing for libvirt hosts.

Converts cumulative vCPU execution counters into interval usage, sums it per
physical CPU and re-pins vCPUs with a greedy longest-usage-first pass when the
load is skewed.
"""

from vcpu_balancer.core.config import BalancerConfig
from vcpu_balancer.core.decision import RebalanceDecision
from vcpu_balancer.hypervisor.libvirt_client import LibvirtClient
from vcpu_balancer.scheduler.loop import SchedulerLoop
from vcpu_balancer.scheduler.tick import TickMode, TickResult, plan_tick

__version__ = "0.1.0"

__all__ = [
    "BalancerConfig",
    "LibvirtClient",
    "RebalanceDecision",
    "SchedulerLoop",
    "TickMode",
    "TickResult",
    "plan_tick",
    "__version__",
]
