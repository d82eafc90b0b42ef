from vcpu_balancer.core.config import BalancerConfig
from vcpu_balancer.core.sample import Sample, VcpuRecord
from vcpu_balancer.scheduler.tick import plan_tick

SECOND = 1_000_000_000

# Polling every 5 seconds on a host with 2 physical CPUs
config = BalancerConfig(interval_seconds=5)

# First tick: one domain with four vCPUs, no history yet
first = Sample(
    vcpus=tuple(VcpuRecord("guest-0", n, 0, 0) for n in range(4)),
    pcpus=Sample.empty_pcpus(2),
    domain_ids=("guest-0",),
)
bootstrap = plan_tick(first, None, config)
print(bootstrap.mode.value, [pin.to_dict() for pin in bootstrap.pins])

# Second tick: vCPU 0 ran 30% of the interval, vCPU 1 10%, vCPUs 2 and 3 5%
busy = [int(1.5 * SECOND), int(0.5 * SECOND), int(0.25 * SECOND), int(0.25 * SECOND)]
second = Sample(
    vcpus=tuple(
        VcpuRecord("guest-0", n, n // 2, busy[n]) for n in range(4)
    ),
    pcpus=Sample.empty_pcpus(2),
    domain_ids=("guest-0",),
)
result = plan_tick(second, bootstrap.sample, config)
print(result.to_dict())
