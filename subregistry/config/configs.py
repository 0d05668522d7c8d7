"""
Configuration types for the subscription registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from subregistry.errors.errors import ConfigurationError


class FailurePolicy(str, Enum):
    """What notify_all does when a subscriber's receive() raises."""

    FAIL_FAST = "fail_fast"  # stop the round, raise NotificationError
    BEST_EFFORT = "best_effort"  # finish the round, raise one NotificationError
    COLLECT = "collect"  # finish the round, report failures without raising


@dataclass(frozen=True)
class RegistryConfig:
    # name used in log records and telemetry events
    name: str = "registry"
    failure_policy: FailurePolicy = FailurePolicy.BEST_EFFORT
    # guard the subscriber sequence with an RLock
    thread_safe: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError(
                "name must be a non-empty string",
                field="name",
                value=self.name,
            )
        if not isinstance(self.thread_safe, bool):
            raise ConfigurationError(
                "thread_safe must be a bool",
                field="thread_safe",
                value=self.thread_safe,
            )
        if not isinstance(self.failure_policy, FailurePolicy):
            try:
                # frozen: bypass __setattr__ to normalise plain strings
                object.__setattr__(self, "failure_policy", FailurePolicy(self.failure_policy))
            except ValueError:
                raise ConfigurationError(
                    "failure_policy must be one of "
                    + ", ".join(p.value for p in FailurePolicy),
                    field="failure_policy",
                    value=self.failure_policy,
                ) from None
