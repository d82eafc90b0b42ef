"""Hypervisor telemetry and control used by the balancing loop."""

from .base import DomainHandle, HypervisorClient, VcpuCounter
from .exceptions import (
    BalancerError,
    ConfigError,
    DomainQueryError,
    HypervisorConnectionError,
    HypervisorError,
    HypervisorUnavailableError,
    PinError,
)
from .libvirt_client import LibvirtClient

__all__ = [
    "BalancerError",
    "ConfigError",
    "DomainHandle",
    "DomainQueryError",
    "HypervisorClient",
    "HypervisorConnectionError",
    "HypervisorError",
    "HypervisorUnavailableError",
    "LibvirtClient",
    "PinError",
    "VcpuCounter",
]
