from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

# -------- Aliases (clarify intent) --------
SubscriptionId = int  # issued by register(), starts at 1, never reused
UnixSeconds = float


# --- Delivery results ---


@dataclass(frozen=True)
class SubscriberFailure:
    """One failed delivery inside a notify_all round."""

    sub_id: SubscriptionId
    handle: Any
    position: int  # index in the dispatch snapshot
    error: Exception

    def describe(self) -> str:
        return f"#{self.sub_id} at position {self.position}: {self.error!r}"


@dataclass(frozen=True)
class DeliveryReport:
    """Outcome of a single notify_all call."""

    event: Any
    attempted: int  # receive() calls made
    delivered: int  # receive() calls that returned normally
    failures: tuple[SubscriberFailure, ...] = ()
    skipped: int = 0  # handles never reached (fail fast)

    @property
    def ok(self) -> bool:
        return not self.failures


# --- Stats ---


@dataclass
class RegistryStats:
    """Snapshot of a registry's size and activity."""

    name: str
    subscribers: int
    notify_count: int  # notify_all calls since the registry was created
    delivered_total: int
    failures_total: int
    last_notify_utc: Optional[UnixSeconds] = None
    subscriber_ids: list[SubscriptionId] = field(default_factory=list)
