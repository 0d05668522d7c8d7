"""Subscriber Port Interface.

Contract: anything exposing receive(event) can be registered. Handles are compared by identity,
never by equality.
"""
from __future__ import annotations
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Subscriber(Protocol):
    def receive(self, event: Any) -> None:
        """Handle one broadcast event. Raising marks this delivery as failed."""
        ...
