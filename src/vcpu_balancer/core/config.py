from dataclasses import dataclass

from ..hypervisor.exceptions import ConfigError

DEFAULT_URI = "qemu:///system"
DEFAULT_THRESHOLD = 20.0
DEFAULT_MAX_DIFF = 1.0


@dataclass
class BalancerConfig:
    """Configuration for the vCPU balancing loop."""

    interval_seconds: int
    threshold: float = DEFAULT_THRESHOLD
    max_diff: float = DEFAULT_MAX_DIFF
    uri: str = DEFAULT_URI

    def __post_init__(self):
        if isinstance(self.interval_seconds, bool) or not isinstance(self.interval_seconds, int):
            raise ConfigError("Interval must be a whole number of seconds")
        if self.interval_seconds <= 0:
            raise ConfigError("Interval must be greater than zero")
        if self.threshold < 0:
            raise ConfigError("Threshold must not be negative")
        if self.max_diff < 0:
            raise ConfigError("Max difference must not be negative")

    @classmethod
    def from_argument(cls, raw: str) -> "BalancerConfig":
        """Build a config from the command line interval argument.

        Args:
            raw: Polling interval in whole seconds, as typed by the user

        Returns:
            BalancerConfig with default thresholds

        Raises:
            ConfigError: If the value is not a positive integer
        """
        try:
            interval = int(str(raw).strip())
        except ValueError:
            raise ConfigError(f"Invalid time interval: {raw!r}") from None
        return cls(interval_seconds=interval)

    def with_threshold(self, threshold: float) -> "BalancerConfig":
        """Override the busy threshold.

        Args:
            threshold: Usage percentage a pCPU must exceed to allow rebalancing

        Returns:
            Self for method chaining
        """
        if threshold < 0:
            raise ConfigError("Threshold must not be negative")
        self.threshold = threshold
        return self

    def with_max_diff(self, max_diff: float) -> "BalancerConfig":
        """Override the spread threshold.

        Args:
            max_diff: Percentage points between busiest and idlest pCPU

        Returns:
            Self for method chaining
        """
        if max_diff < 0:
            raise ConfigError("Max difference must not be negative")
        self.max_diff = max_diff
        return self
