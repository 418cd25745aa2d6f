"""Pytest configuration for the devium test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from devium.container import ServiceContainer, reset_container, set_container
from devium.models.config_models import DeviumConfig
from tests.app_fixtures import SHOP_FILES, write_app


@pytest.fixture
def apps_root(tmp_path: Path) -> Path:
    """Apps directory holding the ``Shop`` app."""
    root = tmp_path / "apps"
    write_app(root, "Shop", SHOP_FILES)
    return root


@pytest.fixture
def container(apps_root: Path) -> ServiceContainer:
    """Container reading the ``Shop`` app, installed as the shared container."""
    config = DeviumConfig(APPS_ROOT=str(apps_root))
    configured = ServiceContainer(config=config)
    set_container(configured)
    yield configured
    reset_container()


@pytest.fixture
def android_12_info() -> Dict[str, str]:
    return {
        "app": "Shop",
        "version": "2.1",
        "platform": "android",
        "platform_version": "12.1",
    }


@pytest.fixture
def samsung_11_info() -> Dict[str, str]:
    return {
        "app": "Shop",
        "version": "3.0",
        "platform": "android",
        "platform_version": "11",
        "vendor": "Samsung",
        "vendor_version": "4.5",
    }
