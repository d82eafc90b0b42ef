"""
libvirt-backed hypervisor client.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, List, Optional, Tuple

from .base import DomainHandle, HypervisorClient, VcpuCounter
from .exceptions import (
    DomainQueryError,
    HypervisorConnectionError,
    HypervisorUnavailableError,
    PinError,
)

LOG = logging.getLogger(__name__)


def load_libvirt_module() -> Any:
    """Import the libvirt binding only when a connection is really needed."""
    try:
        return importlib.import_module("libvirt")
    except ImportError as exc:  # pragma: no cover - dependent on system availability
        raise HypervisorUnavailableError(
            "Unable to import libvirt. Install libvirt-python (e.g., `pip install "
            "vcpu-balancer[libvirt]` or `sudo apt-get install python3-libvirt`)."
        ) from exc


def cpumap_for(target_pcpu: int, max_pcpus: int) -> Tuple[bool, ...]:
    """One-hot affinity map, the form ``virDomain.pinVcpu`` expects."""
    if not 0 <= target_pcpu < max_pcpus:
        raise ValueError(f"pCPU {target_pcpu} outside [0, {max_pcpus})")
    return tuple(i == target_pcpu for i in range(max_pcpus))


class LibvirtClient(HypervisorClient):
    """Reads vCPU counters and pins vCPUs through a libvirt connection."""

    NAME = "libvirt"

    def __init__(self, uri: str = "qemu:///system") -> None:
        self.uri = uri
        self._libvirt: Optional[Any] = None
        self._conn: Optional[Any] = None
        self._max_cpus: Optional[int] = None

    @property
    def conn(self) -> Any:
        if self._conn is None:
            raise RuntimeError("Client not connected yet")
        return self._conn

    def open(self) -> None:
        if self._conn is not None:
            return
        self._libvirt = load_libvirt_module()
        try:
            conn = self._libvirt.open(self.uri)
        except self._libvirt.libvirtError as exc:
            raise HypervisorConnectionError(f"Can't connect to hypervisor {self.uri}: {exc}") from exc
        if conn is None:
            raise HypervisorConnectionError(f"Can't connect to hypervisor {self.uri}")
        self._conn = conn
        LOG.info("Connected to %s", self.uri)

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        except self._libvirt.libvirtError as exc:
            LOG.warning("Can't close connection to hypervisor: %s", exc)
        finally:
            self._conn = None

    def list_active_domains(self) -> List[DomainHandle]:
        flags = (
            self._libvirt.VIR_CONNECT_LIST_DOMAINS_ACTIVE
            | self._libvirt.VIR_CONNECT_LIST_DOMAINS_RUNNING
        )
        try:
            domains = self.conn.listAllDomains(flags)
        except self._libvirt.libvirtError as exc:
            raise HypervisorConnectionError(f"Can't list domains: {exc}") from exc
        return [DomainHandle(id=dom.UUIDString(), name=dom.name(), native=dom) for dom in domains]

    def max_physical_cpus(self) -> int:
        if self._max_cpus is None:
            try:
                self._max_cpus = int(self.conn.getCPUMap()[0])
            except self._libvirt.libvirtError as exc:
                raise HypervisorConnectionError(f"Can't read host CPU map: {exc}") from exc
        return self._max_cpus

    def vcpu_counters(self, domain: DomainHandle) -> List[VcpuCounter]:
        try:
            info, _cpumaps = domain.native.vcpus()
        except self._libvirt.libvirtError as exc:
            raise DomainQueryError(f"Can't access vCPU info of {domain.name or domain.id}: {exc}") from exc
        counters = []
        for number, _state, cpu_time, cpu in info:
            if cpu < 0:
                LOG.debug("Skipping offline vCPU %d of %s", number, domain.name)
                continue
            counters.append(VcpuCounter(number=int(number), cpu=int(cpu), cumulative_time_ns=int(cpu_time)))
        return counters

    def pin_vcpu(self, domain: DomainHandle, vcpu_number: int, target_pcpu: int) -> None:
        cpumap = cpumap_for(target_pcpu, self.max_physical_cpus())
        try:
            domain.native.pinVcpu(vcpu_number, cpumap)
        except self._libvirt.libvirtError as exc:
            raise PinError(
                f"Can't pin vCPU {vcpu_number} of {domain.name or domain.id} to pCPU {target_pcpu}: {exc}"
            ) from exc
