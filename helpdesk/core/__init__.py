"""Configuration and logging for the helpdesk core."""

from .config import Settings, get_settings
from .logging import configure_logging, init_tracer, shutdown_tracer

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "init_tracer",
    "shutdown_tracer",
]
