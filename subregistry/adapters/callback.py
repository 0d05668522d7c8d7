from __future__ import annotations

from typing import Any, Callable, Optional


class CallbackSubscriber:
    """
    Adapts a plain callable fn(event) into a subscriber.

    Identity is that of the adapter, not of the wrapped callable: keep the adapter (or the
    SubscriptionId returned by register) to remove it later.
    """

    __slots__ = ("_fn", "name")

    def __init__(self, fn: Callable[[Any], Any], name: Optional[str] = None) -> None:
        if not callable(fn):
            raise TypeError(f"CallbackSubscriber expects a callable, got {type(fn).__name__}")
        self._fn = fn
        self.name = name or getattr(fn, "__name__", type(fn).__name__)

    @property
    def fn(self) -> Callable[[Any], Any]:
        return self._fn

    def receive(self, event: Any) -> None:
        self._fn(event)

    def __repr__(self) -> str:
        return f"CallbackSubscriber(name={self.name!r})"
