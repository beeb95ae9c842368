"""Smart link configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from crosslink.domain.links.selection import DEFAULT_PROVIDER_PREFERENCE

from .env import env_list, optional_env_var

DEFAULT_BASE_URL = "http://localhost:3000"


@dataclass(frozen=True, slots=True)
class SmartLinkConfig:
    base_url: str = DEFAULT_BASE_URL
    provider_preference: tuple[str, ...] = field(
        default_factory=lambda: tuple(DEFAULT_PROVIDER_PREFERENCE)
    )


def get_smart_link_config() -> SmartLinkConfig:
    return SmartLinkConfig(
        base_url=optional_env_var("CROSSLINK_BASE_URL") or DEFAULT_BASE_URL,
        provider_preference=env_list(
            "CROSSLINK_PROVIDER_PREFERENCE",
            tuple(DEFAULT_PROVIDER_PREFERENCE),
        ),
    )
