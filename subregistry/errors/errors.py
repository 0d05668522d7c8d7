"""
Custom exceptions for the subscription registry.

Exception hierarchy:
- RegistryError (base)
  - NotificationError: one or more subscribers failed during notify_all
  - ConfigurationError: Invalid configuration
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from subregistry.types.types import DeliveryReport, SubscriberFailure


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(
        self,
        message: str,
        *,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.component = component
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.component:
            parts.append(f"[component={self.component}]")
        if self.details:
            parts.append(f"[details={self.details}]")
        return " ".join(parts)


class NotificationError(RegistryError):
    """Raised when at least one subscriber failed to receive an event."""

    def __init__(
        self,
        message: str,
        *,
        report: DeliveryReport,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.report = report
        details = details or {}
        details["attempted"] = report.attempted
        details["delivered"] = report.delivered
        details["failed"] = len(report.failures)
        super().__init__(message, component=component, details=details)

    @property
    def failures(self) -> tuple[SubscriberFailure, ...]:
        return self.report.failures


class ConfigurationError(RegistryError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        component: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.field = field
        self.value = value
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, component=component, details=details)
