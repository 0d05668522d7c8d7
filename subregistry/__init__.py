"""
In-process subscription registry: ordered subscribers, synchronous broadcast.

Public API:
- SubscriptionRegistry: register / remove / remove_id / notify_all
- Subject: observer-pattern wrapper around a registry
- CallbackSubscriber: plain callables as subscribers
- RegistryConfig, FailurePolicy, ConfigLoader: configuration
"""

from subregistry.adapters.callback import CallbackSubscriber
from subregistry.config.config_loader import ConfigLoader, load_registry_config_from_mapping
from subregistry.config.configs import FailurePolicy, RegistryConfig
from subregistry.core.registry import SubscriptionRegistry
from subregistry.core.subject import Subject
from subregistry.errors.errors import ConfigurationError, NotificationError, RegistryError
from subregistry.ports.subscriber import Subscriber
from subregistry.types.types import (
    DeliveryReport,
    RegistryStats,
    SubscriberFailure,
    SubscriptionId,
)

__all__ = [
    # Core
    "SubscriptionRegistry",
    "Subject",
    "Subscriber",
    "CallbackSubscriber",
    # Config
    "RegistryConfig",
    "FailurePolicy",
    "ConfigLoader",
    "load_registry_config_from_mapping",
    # Types
    "SubscriptionId",
    "DeliveryReport",
    "SubscriberFailure",
    "RegistryStats",
    # Errors
    "RegistryError",
    "NotificationError",
    "ConfigurationError",
]
