"""Pytest fixtures for SpaceBeacon tests."""

import sys
from pathlib import Path

import pytest
import yaml

# Ensure project root is in path for spacebeacon imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from spacebeacon.config.settings import parse_config  # noqa: E402
from spacebeacon.core.clock import ManualClock  # noqa: E402

API_KEY = "sesame-open"


def sample_config_dict(admin_enabled: bool = True, **admin_overrides) -> dict:
    admin = {"enable": admin_enabled}
    if admin_enabled:
        admin["api_key"] = API_KEY
    admin.update(admin_overrides)
    return {
        "publish": {
            "space": "test",
            "logo": "some_logo",
            "url": "http://localhost",
            "contact": {},
            "location": {},
        },
        "admin": admin,
    }


@pytest.fixture
def project_root() -> Path:
    return _project_root


@pytest.fixture
def example_config(project_root: Path) -> dict:
    """Load the shipped example config as a dict."""
    with open(project_root / "config" / "config.yaml.example", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=1_700_000_000.0)


@pytest.fixture
def admin_config():
    return parse_config(sample_config_dict(admin_enabled=True))


@pytest.fixture
def public_config():
    return parse_config(sample_config_dict(admin_enabled=False))


@pytest.fixture
def api_key() -> str:
    return API_KEY


@pytest.fixture
def config_dict():
    """Factory for raw config mappings: config_dict(admin_enabled=True, tick_interval="3")."""
    return sample_config_dict
