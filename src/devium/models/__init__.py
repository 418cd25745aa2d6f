"""Configuration models for devium."""

from devium.models.config_models import DeviumConfig

__all__ = ["DeviumConfig"]
