from __future__ import annotations

import logging
import time
from typing import List, Sequence

from ..core.sample import Sample, VcpuRecord
from ..hypervisor.base import DomainHandle, HypervisorClient
from ..hypervisor.exceptions import DomainQueryError

LOG = logging.getLogger(__name__)


class SampleCollector:
    """Turns raw hypervisor counters into a :class:`Sample`."""

    def __init__(self, client: HypervisorClient, max_pcpus: int) -> None:
        self.client = client
        self.max_pcpus = max_pcpus

    def collect(self, domains: Sequence[DomainHandle]) -> Sample:
        captured_at = time.monotonic_ns()
        vcpus: List[VcpuRecord] = []
        skipped: List[str] = []
        for domain in domains:
            try:
                vcpus.extend(self._read_domain(domain))
            except DomainQueryError as exc:
                LOG.warning("Skipping domain %s this tick: %s", domain.name or domain.id, exc)
                skipped.append(domain.id)
        return Sample(
            vcpus=tuple(vcpus),
            pcpus=Sample.empty_pcpus(self.max_pcpus),
            domain_ids=tuple(domain.id for domain in domains),
            captured_at_ns=captured_at,
            skipped_ids=tuple(skipped),
        )

    def _read_domain(self, domain: DomainHandle) -> List[VcpuRecord]:
        records = []
        for counter in self.client.vcpu_counters(domain):
            if not 0 <= counter.cpu < self.max_pcpus:
                raise DomainQueryError(
                    f"vCPU {counter.number} reported on unknown pCPU {counter.cpu}"
                )
            records.append(
                VcpuRecord(
                    domain_id=domain.id,
                    vcpu_number=counter.number,
                    assigned_pcpu=counter.cpu,
                    cumulative_time_ns=counter.cumulative_time_ns,
                )
            )
        return records
