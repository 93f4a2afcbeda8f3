"""Provider contracts: plain dataclasses describing provider configuration.

Data only, no behavior:
  - ProviderConfig / RateLimitConfig: what ``provider.get_config()`` reports
  - PlatformConfig: per-platform push limits and feature flags
"""

from dataclasses import dataclass, field
from typing import Dict

__all__ = ["RateLimitConfig", "ProviderConfig", "PlatformConfig"]


@dataclass(frozen=True)
class RateLimitConfig:
    """Advertised provider rate limit.

    Attributes:
        enabled: Whether the provider enforces a limit.
        requests_per_min: Sustained requests per minute.
        burst_size: Requests allowed in a burst.
    """

    enabled: bool = False
    requests_per_min: int = 0
    burst_size: int = 0


@dataclass
class ProviderConfig:
    """Summary of a provider's configuration.

    Attributes:
        name: Display name (e.g. "Mock SMS Provider").
        type: Channel served ("email", "sms", "push").
        enabled: Enabled flag taken from the channel settings.
        priority: Lower numbers are preferred when several providers exist.
        max_retries: Retries a scheduler may attempt.
        timeout: Per-request timeout in seconds.
        rate_limit: Advertised rate limit.
        settings: Free-form provider settings.
    """

    name: str
    type: str
    enabled: bool = True
    priority: int = 1
    max_retries: int = 3
    timeout: int = 30
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    settings: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PlatformConfig:
    """Limits and features of one push platform.

    Attributes:
        platform: Platform name ("ios", "android", "web").
        max_payload: Maximum payload size in bytes.
        max_title_length: Longest title before truncation.
        max_body_length: Longest body before truncation.
        supports_badge: Whether a numeric badge is delivered.
        supports_sound: Whether a sound is played.
        default_sound: Sound used when none is given.
        settings: Transport-specific settings.
    """

    platform: str
    max_payload: int = 4096
    max_title_length: int = 50
    max_body_length: int = 200
    supports_badge: bool = False
    supports_sound: bool = False
    supports_image: bool = False
    supports_actions: bool = False
    default_sound: str = ""
    settings: Dict[str, str] = field(default_factory=dict)
