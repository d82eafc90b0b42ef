"""
`vcpu-balancer` command line interface that runs the rebalancing loop.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import NoReturn, Optional, Sequence

from ..core.config import BalancerConfig
from ..hypervisor.exceptions import BalancerError, ConfigError
from ..hypervisor.libvirt_client import LibvirtClient
from ..scheduler.loop import SchedulerLoop


LOG = logging.getLogger("vcpu_balancer")


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        # usage errors share the exit code of a bad interval
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = _ArgumentParser(
        prog="vcpu-balancer",
        description="Rebalance vCPU pinning across physical CPUs of a libvirt host.",
    )
    parser.add_argument("interval", help="Polling interval in whole seconds.")
    return parser.parse_args(argv)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging()

    try:
        config = BalancerConfig.from_argument(args.interval)
    except ConfigError as exc:
        LOG.error("%s", exc)
        return 1

    client = LibvirtClient(config.uri)
    try:
        with client:
            loop = SchedulerLoop(client, config)
            previous = signal.signal(signal.SIGTERM, lambda *_: loop.stop())
            try:
                loop.run_forever()
            except KeyboardInterrupt:
                LOG.info("Shutting down balancer...")
                loop.stop()
            finally:
                signal.signal(signal.SIGTERM, previous)
    except BalancerError as exc:
        LOG.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
