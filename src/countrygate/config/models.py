"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, countrygate.toml only contains
overrides.  A working gate needs only ``[gate] blocked_countries``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from countrygate.domain.country import normalize_blocklist

DEFAULT_CACHE_TTL_MS = 86_400_000
DEFAULT_PROVIDER_TIMEOUT = 5.0

ProviderKind = Literal["ipapi", "ip-api"]


# --- countrygate.toml sections ---


class GateSectionConfig(BaseModel):
    """[gate] section."""

    model_config = {"frozen": True}

    blocked_countries: tuple[str, ...] = ()
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS

    @field_validator("blocked_countries", mode="before")
    @classmethod
    def _normalize(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        return normalize_blocklist(value)  # type: ignore[arg-type]


class EndpointConfig(BaseModel):
    """[providers.primary] / [providers.fallback] section."""

    model_config = {"frozen": True}

    url: str
    kind: ProviderKind
    timeout_seconds: float = Field(default=DEFAULT_PROVIDER_TIMEOUT, gt=0)


class ProvidersConfig(BaseModel):
    """[providers] section."""

    model_config = {"frozen": True}

    primary: EndpointConfig = Field(
        default_factory=lambda: EndpointConfig(url="https://ipapi.co/json/", kind="ipapi")
    )
    fallback: EndpointConfig = Field(
        default_factory=lambda: EndpointConfig(url="https://ip-api.com/json/", kind="ip-api")
    )


class CacheConfig(BaseModel):
    """[cache] section.

    ``path`` is resolved against the project root when relative.
    """

    model_config = {"frozen": True}

    key: str = "visitor_country_data"
    path: str = ".countrygate/storage.json"


class BlockPageConfig(BaseModel):
    """[block_page] section — copy and colours of the block notice."""

    model_config = {"frozen": True}

    title: str = "访问受限 / Access Restricted"
    message_zh: str = "抱歉，我们暂时无法为您所在的地区提供服务。"
    message_en: str = "Sorry, we are currently unable to provide services to your region."
    show_contact_info: bool = False
    contact_email: str = "support@example.com"
    background_color: str = "#f5f5f5"
    text_color: str = "#333333"
    accent_color: str = "#e74c3c"
    lang: str = "zh-CN"


# --- Runtime pipeline configuration ---


class GateConfig(BaseModel):
    """Immutable configuration handed to the gate at construction time.

    Attributes:
        blocked_countries: Ordered, normalized blocklist (possibly empty).
        cache_ttl_ms: Cache lifetime; ``0`` or less disables caching.
        providers: Primary and fallback geolocation endpoints.
        on_block: Block action, called once with the resolved code.
    """

    model_config = {"frozen": True}

    blocked_countries: tuple[str, ...] = ()
    cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    on_block: Callable[[str], None]

    @field_validator("blocked_countries", mode="before")
    @classmethod
    def _normalize(cls, value: object) -> tuple[str, ...]:
        return normalize_blocklist(value)  # type: ignore[arg-type]
