"""Custom exceptions used by the vcpu_balancer package."""


class BalancerError(RuntimeError):
    """Base class for balancer errors."""


class HypervisorError(BalancerError):
    """Base class for failures reported by the hypervisor."""


class HypervisorConnectionError(HypervisorError, ConnectionError):
    """Raised when the hypervisor cannot be reached."""


class HypervisorUnavailableError(HypervisorError):
    """Raised when the libvirt python binding is missing."""


class DomainQueryError(HypervisorError):
    """Raised when a single domain's vCPU counters cannot be read."""


class PinError(HypervisorError):
    """Raised when a pin command is rejected for one vCPU."""


class ConfigError(BalancerError, ValueError):
    """Raised for invalid startup configuration."""
