"""Configuration data models."""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

ENV_PREFIX = "DEVIUM_"


@dataclass
class DeviumConfig:
    """Centralized configuration for page resolution and its adapters."""

    # Storage layout (relative paths are resolved against the working directory)
    APPS_ROOT: str = "apps"
    PAGES_FILE: str = "pages.yaml"
    UI_MAP_DIR: str = "ui_map"
    SECRETS_FILE: str = "secrets.yaml"
    PERMISSIONS_FILE: str = "permissions.yaml"

    # Device detection
    TV_MARKERS: Tuple[str, ...] = field(
        default_factory=lambda: (
            "mibox", "bravia", "afft", "aquos", "shield", "aftmm", "sony",
        )
    )

    # Adapter behavior
    CACHE_DOCUMENTS: bool = True

    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_dict(cls, config: Dict) -> 'DeviumConfig':
        """Create configuration from dictionary."""
        instance = cls()
        for key, value in config.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        return instance

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'DeviumConfig':
        """Create configuration from ``DEVIUM_*`` environment variables.

        ``DEVIUM_TV_MARKERS`` is a comma-separated list and
        ``DEVIUM_CACHE_DOCUMENTS`` accepts 1/true/yes.
        """
        environ = os.environ if environ is None else environ
        instance = cls()
        for key in instance.to_dict():
            raw = environ.get(f"{ENV_PREFIX}{key}")
            if raw is None:
                continue
            if key == "TV_MARKERS":
                instance.TV_MARKERS = tuple(
                    marker.strip().lower() for marker in raw.split(",") if marker.strip()
                )
            elif key == "CACHE_DOCUMENTS":
                instance.CACHE_DOCUMENTS = raw.strip().lower() in {"1", "true", "yes"}
            else:
                setattr(instance, key, raw.strip())
        return instance

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return {
            key: value for key, value in self.__dict__.items()
            if not key.startswith('_')
        }

    def update(self, **kwargs) -> None:
        """Update configuration values."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration key: {key}")

    def validate(self) -> List[str]:
        """Validate configuration values and return any errors."""
        errors = []

        if not self.APPS_ROOT:
            errors.append("APPS_ROOT must not be empty")

        for key in ("PAGES_FILE", "SECRETS_FILE", "PERMISSIONS_FILE"):
            if not str(getattr(self, key)).endswith((".yaml", ".yml")):
                errors.append(f"{key} must be a .yaml or .yml file")

        if not self.UI_MAP_DIR:
            errors.append("UI_MAP_DIR must not be empty")

        if self.LOG_LEVEL.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            errors.append("LOG_LEVEL must be a standard logging level name")

        return errors

    def app_dir(self, app: str) -> str:
        """Directory holding the declarations and documents of an app."""
        return os.path.join(self.APPS_ROOT, app)
