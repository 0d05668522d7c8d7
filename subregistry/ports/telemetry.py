"""Telemetry Port Interface.

Contract: Log structured registry events (attach, detach, notify, failures) as
log(event, **fields). Field values should be JSON serializable.
"""
from __future__ import annotations
from typing import Protocol, Any

class Telemetry(Protocol):
    def log(self, event: str, **fields: Any) -> None: ...
