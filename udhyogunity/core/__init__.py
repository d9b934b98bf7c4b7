"""Core: config and application bootstrap (lifespan, exception handlers)."""

from udhyogunity.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
