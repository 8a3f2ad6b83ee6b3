"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

ENV_PREFIX = "BATTLESHIP_MCMC_"


class TelemetryConfig(BaseModel):
    """Runtime configuration for telemetry exporters."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "battleship-mcmc"
    service_namespace: str = "inference"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Construct config from env vars (`BATTLESHIP_MCMC_*` + `OTEL_*`)."""

        data: Dict[str, Any] = cls().model_dump()
        data.update(overrides)

        for signal in ("tracing", "metrics", "logging"):
            value = os.getenv(f"{ENV_PREFIX}ENABLE_{signal.upper()}")
            if value is not None:
                data[f"enable_{signal}"] = value.strip().lower() in {"1", "true", "yes", "on"}

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for signal, field in (
            ("traces", "otlp_traces_endpoint"),
            ("metrics", "otlp_metrics_endpoint"),
            ("logs", "otlp_logs_endpoint"),
        ):
            if data.get(field):
                continue
            explicit = os.getenv(f"OTEL_EXPORTER_OTLP_{signal.upper()}_ENDPOINT")
            if explicit:
                data[field] = explicit
            elif base_endpoint:
                data[field] = f"{base_endpoint.rstrip('/')}/v1/{signal}"

        service_name = os.getenv("OTEL_SERVICE_NAME")
        if service_name:
            data["service_name"] = service_name

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            attrs = {**data.get("resource_attributes", {})}
            for part in resource_env.split(","):
                if "=" not in part:
                    continue
                key, value = part.split("=", 1)
                attrs[key.strip()] = value.strip()
            data["resource_attributes"] = attrs

        # Exporters with an endpoint are switched on.
        if data.get("otlp_traces_endpoint"):
            data["enable_tracing"] = True
        if data.get("otlp_metrics_endpoint"):
            data["enable_metrics"] = True
        if data.get("otlp_logs_endpoint"):
            data["enable_logging"] = True

        return cls(**data)

    def resource(self) -> dict[str, str]:
        """Return the OpenTelemetry resource attributes for this service."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Initialise the enabled telemetry signals."""

    from .logger import init_logging
    from .metrics import init_metrics
    from .tracer import init_tracing

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
