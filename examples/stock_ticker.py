#!/usr/bin/env python3
"""
Subscription Registry - Stock Ticker Demo

A stock publishes price changes; traders subscribe, receive updates and leave.
Shows attach/detach/notify, callable subscribers, failure policies and telemetry.

Usage:
    python examples/stock_ticker.py
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

from subregistry import (
    FailurePolicy,
    NotificationError,
    RegistryConfig,
    Subject,
)
from subregistry.adapters.telemetry.jsonl import JsonlTelemetry
from subregistry.ports.telemetry import Telemetry

# =============================================================================
# PART 1: Domain
# =============================================================================


@dataclass(frozen=True)
class PriceChanged:
    symbol: str
    price: float


class Stock(Subject):
    def __init__(
        self,
        symbol: str,
        cfg: RegistryConfig | None = None,
        telemetry: Telemetry | None = None,
    ) -> None:
        super().__init__(cfg, telemetry=telemetry)
        self.symbol = symbol
        self._price = 0.0

    @property
    def price(self) -> float:
        return self._price

    def set_price(self, price: float) -> None:
        print(f"Stock {self.symbol} new price: {price}")
        self._price = price
        self.notify(PriceChanged(self.symbol, price))


class Trader:
    def __init__(self, name: str) -> None:
        self.name = name

    def receive(self, event: PriceChanged) -> None:
        print(f"  {self.name} notified: {event.symbol} changed to {event.price}")


class BrokenTrader:
    def receive(self, event: PriceChanged) -> None:
        raise RuntimeError(f"cannot handle {event.symbol}")


# =============================================================================
# PART 2: Scenarios
# =============================================================================


def basic_round_trip() -> None:
    print("\n--- attach / notify / detach ---")
    stock = Stock("INFY")
    ram, laxman = Trader("Ram"), Trader("Laxman")

    stock.attach(ram)
    stock.attach(laxman)
    stock.set_price(100.0)
    stock.set_price(110.0)
    stock.detach(laxman)
    stock.set_price(200.0)


def callables_and_tokens() -> None:
    print("\n--- callables and subscription ids ---")
    stock = Stock("TCS")
    audit_id = stock.registry.register_callback(
        lambda e: print(f"  audit: {e.symbol}@{e.price}"), name="audit"
    )
    stock.attach(Trader("Sita"))
    stock.set_price(3500.0)
    stock.registry.remove_id(audit_id)
    stock.set_price(3510.0)


def failure_policies() -> None:
    print("\n--- failure policies ---")
    for policy in FailurePolicy:
        cfg = RegistryConfig(name=f"wipro-{policy.value}", failure_policy=policy)
        stock = Stock("WIPRO", cfg=cfg)
        stock.attach(Trader("Before"))
        stock.attach(BrokenTrader())
        stock.attach(Trader("After"))
        print(f"[{policy.value}]")
        try:
            stock.set_price(420.0)
        except NotificationError as e:
            print(f"  raised: {e}")


def with_telemetry() -> None:
    print("\n--- telemetry ---")
    with tempfile.TemporaryDirectory() as tmp:
        sink = Path(tmp) / "registry.jsonl"
        stock = Stock("HDFC", telemetry=JsonlTelemetry(source="demo", sink_path=sink))
        trader = Trader("Arjun")
        stock.attach(trader)
        stock.set_price(1600.0)
        stock.detach(trader)
        for line in sink.read_text(encoding="utf-8").splitlines():
            print(f"  {line}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    basic_round_trip()
    callables_and_tokens()
    failure_policies()
    with_telemetry()


if __name__ == "__main__":
    main()
