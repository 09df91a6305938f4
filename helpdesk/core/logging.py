"""Logging and tracing utilities for the helpdesk core."""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import Settings

_ACTIVE_PROVIDER: TracerProvider | None = None


def _parse_headers(header_string: str | None) -> dict[str, str]:
    headers: dict[str, str] = {}
    for item in (header_string or "").split(","):
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            continue
        headers[key.strip()] = value.strip()
    return headers


def _logging_config(settings: Settings, level: int) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": settings.log_format}},
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
            }
        },
        "loggers": {
            "helpdesk": {"level": level, "propagate": True},
        },
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(settings: Settings) -> logging.Logger:
    """Configure the ``helpdesk`` loggers from settings."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    dictConfig(_logging_config(settings, level))

    logger = logging.getLogger(settings.app_name)
    logger.setLevel(level)
    return logger


def init_tracer(settings: Settings) -> TracerProvider | None:
    """Install an OpenTelemetry tracer provider when tracing is enabled."""

    global _ACTIVE_PROVIDER

    if _ACTIVE_PROVIDER is not None or not settings.otel_enabled:
        return None

    exporter_kwargs: dict[str, object] = {}
    if settings.otel_exporter_otlp_endpoint:
        exporter_kwargs["endpoint"] = settings.otel_exporter_otlp_endpoint
    headers = _parse_headers(settings.otel_exporter_otlp_headers)
    if headers:
        exporter_kwargs["headers"] = headers

    provider = TracerProvider(
        resource=Resource(
            attributes={
                "service.name": settings.otel_service_name,
                "deployment.environment": settings.environment,
            }
        )
    )
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**exporter_kwargs)))

    trace.set_tracer_provider(provider)
    _ACTIVE_PROVIDER = provider
    return provider


def shutdown_tracer(provider: TracerProvider | None) -> None:
    """Flush and shut down a provider returned by :func:`init_tracer`."""

    global _ACTIVE_PROVIDER

    if provider is None:
        return
    provider.shutdown()
    if provider is _ACTIVE_PROVIDER:
        _ACTIVE_PROVIDER = None
