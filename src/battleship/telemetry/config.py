"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

from .logger import init_logging
from .metrics import init_metrics
from .tracer import init_tracing

_TRUTHY = {"1", "true", "yes", "on"}

_FLAG_ENV = {
    "enable_tracing": ("BATTLESHIP_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
    "enable_metrics": ("BATTLESHIP_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
    "enable_logging": ("BATTLESHIP_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
}

_ENDPOINT_ENV = {
    "otlp_traces_endpoint": ("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "v1/traces"),
    "otlp_metrics_endpoint": ("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT", "v1/metrics"),
    "otlp_logs_endpoint": ("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", "v1/logs"),
}


class TelemetryConfig(BaseModel):
    """Runtime configuration for telemetry exporters. Everything is off by default."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "battleship"
    service_namespace: str = "game"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    def resource_dict(self) -> dict[str, str]:
        """Attributes attached to every exported resource."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Construct config from env vars (`BATTLESHIP_*` + `OTEL_*`)."""

        data: Dict[str, Any] = {}

        for field, env_names in _FLAG_ENV.items():
            for name in env_names:
                value = os.getenv(name)
                if value is not None:
                    data[field] = value.strip().lower() in _TRUTHY
                    break

        base_endpoint = (os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or "").rstrip("/")
        for field, (env_name, suffix) in _ENDPOINT_ENV.items():
            endpoint = os.getenv(env_name) or (f"{base_endpoint}/{suffix}" if base_endpoint else None)
            if endpoint:
                data[field] = endpoint

        if os.getenv("OTEL_SERVICE_NAME"):
            data["service_name"] = os.environ["OTEL_SERVICE_NAME"]
        if os.getenv("OTEL_SERVICE_NAMESPACE"):
            data["service_namespace"] = os.environ["OTEL_SERVICE_NAMESPACE"]

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES", "")
        attrs: dict[str, str] = {}
        for part in resource_env.split(","):
            key, sep, value = part.partition("=")
            if sep:
                attrs[key.strip()] = value.strip()
        if attrs:
            data["resource_attributes"] = attrs

        # A configured endpoint switches its exporter on unless a flag said otherwise.
        for flag, endpoint_field in (
            ("enable_tracing", "otlp_traces_endpoint"),
            ("enable_metrics", "otlp_metrics_endpoint"),
            ("enable_logging", "otlp_logs_endpoint"),
        ):
            if data.get(endpoint_field) and flag not in data:
                data[flag] = True

        data.update(overrides)
        return cls(**data)


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Switch on the telemetry subsystems enabled in ``config``."""

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
