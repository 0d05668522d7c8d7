from __future__ import annotations

from typing import Any, Optional

from subregistry.config.configs import RegistryConfig
from subregistry.core.registry import SubscriptionRegistry
from subregistry.errors.errors import ConfigurationError
from subregistry.ports.telemetry import Telemetry
from subregistry.types.types import DeliveryReport, SubscriptionId


class Subject:
    """
    Observer-pattern subject: owns a SubscriptionRegistry and forwards to it.

    Subclasses call notify() from their own state-changing methods.
    """

    def __init__(
        self,
        cfg: Optional[RegistryConfig] = None,
        telemetry: Optional[Telemetry] = None,
        *,
        registry: Optional[SubscriptionRegistry] = None,
    ) -> None:
        if registry is not None and (cfg is not None or telemetry is not None):
            raise ConfigurationError(
                "Pass either an existing registry or cfg/telemetry, not both",
                field="registry",
            )
        self._registry = (
            registry if registry is not None else SubscriptionRegistry(cfg, telemetry=telemetry)
        )

    @property
    def registry(self) -> SubscriptionRegistry:
        return self._registry

    @property
    def observers(self) -> tuple[Any, ...]:
        return tuple(self._registry.handles())

    def attach(self, observer: Any) -> SubscriptionId:
        return self._registry.register(observer)

    def detach(self, observer: Any) -> bool:
        return self._registry.remove(observer)

    def notify(self, event: Any) -> DeliveryReport:
        return self._registry.notify_all(event)
