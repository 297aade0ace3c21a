from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Self

import httpx

from osclient.config import Settings
from osclient.errors import ConfigError
from osclient.http import ApiClient


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoneConfig:
    name: str
    endpoint: str
    token: str | None = None
    timeout: float = 10.0
    retry_attempts: int = 3

    def open_client(self, *, transport: httpx.BaseTransport | None = None) -> ApiClient:
        return ApiClient(
            base_url=self.endpoint,
            token=self.token,
            timeout=self.timeout,
            retry_attempts=self.retry_attempts,
            transport=transport,
        )


def zones_from_settings(settings: Settings, service: str) -> dict[str, ZoneConfig]:
    return {
        zone: ZoneConfig(
            name=zone,
            endpoint=endpoint,
            token=settings.os_auth_token,
            timeout=settings.os_timeout_seconds,
            retry_attempts=settings.os_retry_attempts,
        )
        for zone, endpoint in settings.zone_endpoints(service).items()
    }


def resolve_zone(zones: Mapping[str, ZoneConfig], zone: str | None, *, default: str | None = None) -> ZoneConfig:
    if not zones:
        raise ConfigError("No zones configured")
    name = zone or default
    if name is None:
        if len(zones) != 1:
            raise ConfigError(f"Zone required, configured zones: {sorted(zones)}")
        name = next(iter(zones))
    try:
        return zones[name]
    except KeyError:
        raise ConfigError(f"Unknown zone {name!r}, configured zones: {sorted(zones)}") from None


class ZonedApi:
    """Base for the per-service facades: one lazily opened ApiClient per zone."""

    service: str = ""

    def __init__(
        self,
        zones: Mapping[str, ZoneConfig],
        *,
        default_zone: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._zones = dict(zones)
        self._default_zone = default_zone
        self._transport = transport
        self._clients: dict[str, ApiClient] = {}

    @classmethod
    def from_settings(cls, settings: Settings, *, transport: httpx.BaseTransport | None = None) -> Self:
        return cls(
            zones_from_settings(settings, cls.service),
            default_zone=settings.os_default_zone,
            transport=transport,
        )

    @property
    def configured_zones(self) -> set[str]:
        return set(self._zones)

    def client_for_zone(self, zone: str | None = None) -> ApiClient:
        config = resolve_zone(self._zones, zone, default=self._default_zone)
        client = self._clients.get(config.name)
        if client is None:
            log.debug("ZONE_CLIENT service=%s zone=%s endpoint=%s", self.service, config.name, config.endpoint)
            client = config.open_client(transport=self._transport)
            self._clients[config.name] = client
        return client

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
