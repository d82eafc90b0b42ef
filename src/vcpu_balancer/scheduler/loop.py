"""
Polling loop that measures, plans and applies vCPU pins once per interval.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Dict, Iterable, Optional

from ..core.config import BalancerConfig
from ..core.sample import PinCommand, Sample
from ..hypervisor.base import DomainHandle, HypervisorClient
from ..hypervisor.exceptions import ConfigError, PinError
from .collector import SampleCollector
from .tick import TickMode, TickResult, plan_tick

LOG = logging.getLogger(__name__)


class SchedulerLoop:
    def __init__(self, client: HypervisorClient, config: BalancerConfig) -> None:
        self.client = client
        self.config = config
        self._stop = threading.Event()
        self._collector: Optional[SampleCollector] = None

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        """Cancel the current sleep and end the loop after the running tick."""
        self._stop.set()

    @property
    def collector(self) -> SampleCollector:
        if self._collector is None:
            # host topology is read once per process
            max_pcpus = self.client.max_physical_cpus()
            if max_pcpus <= 0:
                raise ConfigError(f"Hypervisor reported {max_pcpus} physical CPUs")
            self._collector = SampleCollector(self.client, max_pcpus)
        return self._collector

    def tick(self, previous: Optional[Sample]) -> TickResult:
        domains = self.client.list_active_domains()
        if not domains:
            return TickResult(mode=TickMode.DRAINED, sample=None)

        current = self.collector.collect(domains)
        result = plan_tick(current, previous, self.config)
        failed = self.apply(result.pins, domains)
        if failed:
            LOG.warning("%d of %d pin commands failed", failed, len(result.pins))
        if LOG.isEnabledFor(logging.DEBUG):
            LOG.debug("tick %s", json.dumps(result.to_dict(), separators=(",", ":"), sort_keys=True))
        return result

    def apply(self, pins: Iterable[PinCommand], domains: Iterable[DomainHandle]) -> int:
        """Issue pins one by one; a rejected pin never blocks the rest.

        Returns the number of pins that failed.
        """
        by_id: Dict[str, DomainHandle] = {domain.id: domain for domain in domains}
        failed = 0
        for pin in pins:
            try:
                self.client.pin_vcpu(by_id[pin.domain_id], pin.vcpu_number, pin.target_pcpu)
            except PinError as exc:
                failed += 1
                LOG.warning("%s", exc)
        return failed

    def run_forever(self, previous: Optional[Sample] = None) -> Optional[TickResult]:
        """Tick until no domain is active or :meth:`stop` is called.

        Returns the last tick result, ``None`` when stopped before the first
        tick.
        """
        result: Optional[TickResult] = None
        while not self._stop.is_set():
            result = self.tick(previous)
            if result.mode is TickMode.DRAINED:
                LOG.info("No active domains left, exiting")
                break
            previous = result.sample
            if self._stop.wait(self.config.interval_seconds):
                break
        return result
