from __future__ import annotations

import logging
import threading
import time
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from subregistry.adapters.callback import CallbackSubscriber
from subregistry.config.configs import FailurePolicy, RegistryConfig
from subregistry.errors.errors import NotificationError
from subregistry.ports.telemetry import Telemetry
from subregistry.types.types import (
    DeliveryReport,
    RegistryStats,
    SubscriberFailure,
    SubscriptionId,
)

logger = logging.getLogger(__name__)

ErrorHook = Callable[[SubscriberFailure], None]


# --- Data structures ---


@dataclass(frozen=True, slots=True)
class _Entry:
    """One registration: the token issued by register() and the handle it names."""

    sub_id: SubscriptionId
    handle: Any


# --- Registry object ---


class SubscriptionRegistry:
    """
    Ordered collection of subscriber handles with synchronous broadcast.

    - register() appends; duplicates are allowed and receive duplicate deliveries
    - remove() drops the first registration whose handle *is* the given object
    - remove_id() drops exactly the registration named by a SubscriptionId
    - notify_all() calls handle.receive(event) for every handle, in registration order

    Dispatch runs over a snapshot taken at the start of notify_all(): subscribers may register
    or remove handles (themselves included) from inside receive(), the change applies from the
    next round. The lock, when enabled, is never held while subscribers run.
    """

    def __init__(
        self,
        cfg: Optional[RegistryConfig] = None,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        self._cfg = cfg if cfg is not None else RegistryConfig()
        self._telemetry = telemetry
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if self._cfg.thread_safe else nullcontext()
        )

        self._entries: list[_Entry] = []
        self._next_id: SubscriptionId = 1
        self._on_error: list[ErrorHook] = []

        # Observability
        self._notify_count: int = 0
        self._delivered_total: int = 0
        self._failures_total: int = 0
        self._last_notify_utc: Optional[float] = None

    @property
    def name(self) -> str:
        return self._cfg.name

    @property
    def config(self) -> RegistryConfig:
        return self._cfg

    # --- helpers ---

    def _emit(self, event: str, **fields: Any) -> None:
        if self._telemetry is None:
            return
        try:
            self._telemetry.log(event, registry=self._cfg.name, **fields)
        except Exception as e:
            logger.error(f"[{self._cfg.name}] Telemetry failed on {event}: {e!r}")

    def _record_failure(self, failure: SubscriberFailure) -> None:
        logger.warning(
            f"[{self._cfg.name}] Subscriber {failure.describe()} failed to receive event"
        )
        for cb in list(self._on_error):
            try:
                cb(failure)
            except Exception:
                logger.exception(f"[{self._cfg.name}] on_error hook raised")
        self._emit(
            "REGISTRY_SUBSCRIBER_FAILED",
            sub_id=failure.sub_id,
            position=failure.position,
            error=repr(failure.error),
        )

    # --- Public hook registration ---

    def on_error(self, callback: ErrorHook) -> None:
        """
        Register an error hook: callback(failure), called for each failed delivery before the
        failure policy is applied.
        """
        self._on_error.append(callback)

    # --- Register / Remove ---

    def register(self, handle: Any) -> SubscriptionId:
        """
        Append handle to the end of the sequence and return its token.
        No uniqueness check; always succeeds.
        """
        with self._lock:
            sub_id = self._next_id
            self._next_id += 1
            self._entries.append(_Entry(sub_id=sub_id, handle=handle))
            size = len(self._entries)

        logger.debug(f"[{self._cfg.name}] Registered #{sub_id} ({size} subscribers)")
        self._emit("REGISTRY_SUBSCRIBER_ATTACHED", sub_id=sub_id, subscribers=size)
        return sub_id

    def register_callback(
        self, fn: Callable[[Any], Any], name: Optional[str] = None
    ) -> SubscriptionId:
        """Wrap a plain callable in a CallbackSubscriber and register it."""
        return self.register(CallbackSubscriber(fn, name=name))

    def remove(self, handle: Any) -> bool:
        """
        Remove the first registration of handle (identity match), keeping the order of the rest.
        Returns False and leaves the registry untouched if handle is not registered.
        """
        with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.handle is handle:
                    del self._entries[i]
                    break
            else:
                return False
            size = len(self._entries)

        self._log_removed(entry.sub_id, size, reason="remove")
        return True

    def remove_id(self, sub_id: SubscriptionId) -> bool:
        """Remove the registration named by sub_id. Unknown ids are a silent no-op."""
        with self._lock:
            for i, entry in enumerate(self._entries):
                if entry.sub_id == sub_id:
                    del self._entries[i]
                    break
            else:
                return False
            size = len(self._entries)

        self._log_removed(sub_id, size, reason="remove_id")
        return True

    def clear(self) -> int:
        """Drop every registration. Returns how many were removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()

        logger.debug(f"[{self._cfg.name}] Cleared {removed} subscribers")
        self._emit("REGISTRY_CLEARED", removed=removed)
        return removed

    def _log_removed(self, sub_id: SubscriptionId, size: int, reason: str) -> None:
        logger.debug(f"[{self._cfg.name}] Removed #{sub_id} via {reason} ({size} subscribers)")
        self._emit("REGISTRY_SUBSCRIBER_DETACHED", sub_id=sub_id, subscribers=size, reason=reason)

    # --- Notify ---

    def notify_all(self, event: Any) -> DeliveryReport:
        """
        Deliver event to every handle registered at the start of the call, in order.

        Failure handling follows cfg.failure_policy:
        - FAIL_FAST: stop at the first failing subscriber and raise NotificationError
        - BEST_EFFORT: call every subscriber, then raise one NotificationError
        - COLLECT: call every subscriber, return the failures in the report
        """
        with self._lock:
            snapshot = list(self._entries)
            self._notify_count += 1
            self._last_notify_utc = time.time()

        policy = self._cfg.failure_policy
        attempted = 0
        delivered = 0
        failures: list[SubscriberFailure] = []

        try:
            for position, entry in enumerate(snapshot):
                attempted += 1
                try:
                    entry.handle.receive(event)
                except Exception as e:
                    failure = SubscriberFailure(
                        sub_id=entry.sub_id, handle=entry.handle, position=position, error=e
                    )
                    failures.append(failure)
                    self._record_failure(failure)
                    if policy == FailurePolicy.FAIL_FAST:
                        break
                else:
                    delivered += 1
        finally:
            # totals stay consistent with notify_count even if a BaseException escapes
            with self._lock:
                self._delivered_total += delivered
                self._failures_total += len(failures)

        report = DeliveryReport(
            event=event,
            attempted=attempted,
            delivered=delivered,
            failures=tuple(failures),
            skipped=len(snapshot) - attempted,
        )

        logger.debug(
            f"[{self._cfg.name}] Notified {delivered}/{len(snapshot)} subscribers "
            f"of {type(event).__name__}"
        )
        self._emit(
            "REGISTRY_NOTIFY",
            event_type=type(event).__name__,
            subscribers=len(snapshot),
            delivered=delivered,
            failed=len(failures),
            skipped=report.skipped,
        )

        if failures and policy != FailurePolicy.COLLECT:
            raise NotificationError(
                f"{len(failures)} of {attempted} subscribers failed to receive "
                f"{type(event).__name__}",
                report=report,
                component=self._cfg.name,
                details={"policy": policy.value},
            ) from failures[0].error
        return report

    # --- Introspection ---

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, handle: Any) -> bool:
        with self._lock:
            return any(entry.handle is handle for entry in self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.handles())

    def __repr__(self) -> str:
        return f"SubscriptionRegistry(name={self._cfg.name!r}, subscribers={len(self)})"

    def handles(self) -> list[Any]:
        """Registered handles in delivery order (a copy)."""
        with self._lock:
            return [entry.handle for entry in self._entries]

    def ids(self) -> list[SubscriptionId]:
        """Registration tokens in delivery order."""
        with self._lock:
            return [entry.sub_id for entry in self._entries]

    def count(self, handle: Any) -> int:
        """How many times handle is registered."""
        with self._lock:
            return sum(1 for entry in self._entries if entry.handle is handle)

    def stats(self) -> RegistryStats:
        with self._lock:
            return RegistryStats(
                name=self._cfg.name,
                subscribers=len(self._entries),
                notify_count=self._notify_count,
                delivered_total=self._delivered_total,
                failures_total=self._failures_total,
                last_notify_utc=self._last_notify_utc,
                subscriber_ids=[entry.sub_id for entry in self._entries],
            )
