"""YAML configuration loading."""

from spacebeacon.config.settings import (
    AdminConfig,
    ServerConfig,
    SpaceConfig,
    StatusDisplay,
    StatusDisplayTypes,
    parse_config,
    read_config,
)

__all__ = [
    "AdminConfig",
    "ServerConfig",
    "SpaceConfig",
    "StatusDisplay",
    "StatusDisplayTypes",
    "parse_config",
    "read_config",
]
