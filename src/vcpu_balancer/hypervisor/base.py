"""
Base classes for hypervisor telemetry and control.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class DomainHandle:
    """Stable identity of an active domain plus the native handle behind it."""

    id: str
    name: str = ""
    native: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class VcpuCounter:
    number: int
    cpu: int
    cumulative_time_ns: int


class HypervisorClient(abc.ABC):
    """Contract for the hypervisor the balancer reads from and pins through."""

    NAME: str = ""

    def open(self) -> None:
        """Establish the connection. No-op for clients that need none."""

    def close(self) -> None:
        """Release the connection."""

    def __enter__(self) -> "HypervisorClient":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None

    @abc.abstractmethod
    def list_active_domains(self) -> List[DomainHandle]:
        """Return running domains in enumeration order."""

    @abc.abstractmethod
    def max_physical_cpus(self) -> int:
        """Return the number of physical CPUs on the host."""

    @abc.abstractmethod
    def vcpu_counters(self, domain: DomainHandle) -> List[VcpuCounter]:
        """Return per-vCPU counters of ``domain`` in vCPU index order."""

    @abc.abstractmethod
    def pin_vcpu(self, domain: DomainHandle, vcpu_number: int, target_pcpu: int) -> None:
        """Restrict one vCPU of ``domain`` to ``target_pcpu``."""
