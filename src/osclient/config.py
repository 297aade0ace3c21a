from __future__ import annotations

import logging

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from osclient.errors import ConfigError


SERVICES = ("glance", "neutron", "autoscale")


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # Auth / transport
    os_auth_token: str | None = Field(default=None, validation_alias="OS_AUTH_TOKEN")
    os_default_zone: str | None = Field(default=None, validation_alias="OS_DEFAULT_ZONE")
    os_timeout_seconds: float = Field(default=10.0, validation_alias="OS_TIMEOUT_SECONDS")
    os_retry_attempts: int = Field(default=3, validation_alias="OS_RETRY_ATTEMPTS")

    # Endpoints, "zone=url,zone=url"
    glance_endpoints_raw: str | None = Field(default=None, validation_alias="GLANCE_ENDPOINTS")
    neutron_endpoints_raw: str | None = Field(default=None, validation_alias="NEUTRON_ENDPOINTS")
    autoscale_endpoints_raw: str | None = Field(default=None, validation_alias="AUTOSCALE_ENDPOINTS")

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }

    def zone_endpoints(self, service: str) -> dict[str, str]:
        if service not in SERVICES:
            raise ConfigError(f"Unknown service: {service}")
        raw = (getattr(self, f"{service}_endpoints_raw") or "").strip()
        return parse_zone_endpoints(raw)

    @classmethod
    def load(cls) -> "Settings":
        load_dotenv(override=False)
        return cls()


def parse_zone_endpoints(raw: str) -> dict[str, str]:
    endpoints: dict[str, str] = {}
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        zone, sep, url = chunk.partition("=")
        zone, url = zone.strip(), url.strip()
        if not sep or not zone or not url:
            raise ConfigError(f"Bad zone endpoint entry (expected zone=url): {chunk!r}")
        endpoints[zone] = url.rstrip("/")
    return endpoints


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
