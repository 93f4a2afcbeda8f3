"""Optional provider capabilities.

A provider opts into a capability simply by implementing its methods;
services check support with ``isinstance(provider, Capability)`` and fall back
to a default behavior (or a PROVIDER_NOT_FOUND error) when it is missing.

Usage:
    from notification_dispatch.providers.capabilities import DeviceRegistry

    if isinstance(provider, DeviceRegistry):
        provider.register_device(token, "ios")
"""

from typing import List, Mapping, Optional, Protocol, runtime_checkable

from notification_dispatch.models import (
    CountryInfo,
    DeliveryStatus,
    DeviceInfo,
    Template,
)


@runtime_checkable
class TemplateRenderer(Protocol):
    """Provider owning a template catalog that it can render."""

    def get_template(self, template_id: str) -> Template: ...

    def add_template(self, template: Template) -> Template: ...

    def render_template(
        self, template_id: str, data: Mapping[str, str]
    ) -> Template: ...


@runtime_checkable
class CountryCatalog(Protocol):
    """SMS provider that can list the countries it delivers to."""

    def get_supported_countries(self) -> List[CountryInfo]: ...


@runtime_checkable
class DeviceRegistry(Protocol):
    """Push provider that tracks registered devices."""

    def register_device(
        self, token: str, platform: str, metadata: Optional[Mapping[str, str]] = None
    ) -> DeviceInfo: ...

    def unregister_device(self, token: str) -> None: ...

    def get_device_info(self, token: str) -> DeviceInfo: ...


@runtime_checkable
class DeliveryReporter(Protocol):
    """Provider able to report the delivery state of a sent notification."""

    def get_delivery_report(self, notification_id: str) -> DeliveryStatus: ...


@runtime_checkable
class PlatformCatalog(Protocol):
    """Push provider that can list its supported platforms."""

    def get_supported_platforms(self) -> List[str]: ...
