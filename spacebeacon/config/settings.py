"""Space config from YAML: publish template, admin block, status display strings, server bind.

read_config() loads and validates a file; parse_config() is the pure dict -> SpaceConfig step.
Any problem raises ConfigInvalid, which is fatal at startup.
"""

import logging
import os
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from spacebeacon.errors import ConfigInvalid
from spacebeacon.sensors import SensorError, Sensors

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"
DEFAULT_KEEP_OPEN_INTERVAL_SEC = 300
DEFAULT_TICK_INTERVAL_MS = 100
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000

# Fields the SpaceAPI v14 document cannot do without
_REQUIRED_PUBLISH_FIELDS = ("space", "logo", "url")


def generate_api_key() -> str:
    """Random 32-hex-char key."""
    return secrets.token_hex(16)


@dataclass
class AdminConfig:
    api_key: Optional[str] = None
    enabled: bool = False
    keep_open_interval: float = float(DEFAULT_KEEP_OPEN_INTERVAL_SEC)  # seconds
    tick_interval: float = DEFAULT_TICK_INTERVAL_MS / 1000.0  # seconds


@dataclass
class StatusDisplay:
    open: str = "open"
    closed: str = "closed"

    def pick(self, is_open: bool) -> str:
        return self.open if is_open else self.closed


@dataclass
class StatusDisplayTypes:
    text: StatusDisplay = field(default_factory=StatusDisplay)
    html: StatusDisplay = field(default_factory=StatusDisplay)


@dataclass
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class SpaceConfig:
    publish: Dict[str, Any]
    admin: AdminConfig = field(default_factory=AdminConfig)
    status_display: StatusDisplayTypes = field(default_factory=StatusDisplayTypes)
    server: ServerConfig = field(default_factory=ServerConfig)

    @property
    def space_name(self) -> str:
        return str(self.publish.get("space", ""))

    @property
    def logo(self) -> str:
        return str(self.publish.get("logo", ""))


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Get a mapping section; missing or null means empty."""
    value = cfg.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigInvalid(f"`{name}` must be a mapping")
    return value


def _parse_uint(value: Any, key: str) -> int:
    """Non-negative integer from a YAML string or int (e.g. "300" or 300)."""
    if isinstance(value, bool):
        raise ConfigInvalid(f"`{key}` must be a non-negative integer, got {value!r}")
    if isinstance(value, int):
        n = value
    else:
        raw = str(value).strip()
        if not (raw.isascii() and raw.isdigit()):
            raise ConfigInvalid(f"`{key}` must be a non-negative integer, got {value!r}")
        n = int(raw)
    if n < 0:
        raise ConfigInvalid(f"`{key}` must be a non-negative integer, got {value!r}")
    return n


def _parse_admin(section: Dict[str, Any]) -> AdminConfig:
    admin = AdminConfig()
    enabled = section.get("enable", False)
    if not isinstance(enabled, bool):
        raise ConfigInvalid(f"`admin.enable` must be a boolean, got {enabled!r}")
    admin.enabled = enabled

    api_key = section.get("api_key")
    # Blank key counts as unset so a usable one is generated
    if api_key is not None and str(api_key).strip():
        admin.api_key = str(api_key)

    if section.get("keep_open_interval") is not None:
        admin.keep_open_interval = float(_parse_uint(section["keep_open_interval"], "admin.keep_open_interval"))
    if section.get("tick_interval") is not None:
        tick_ms = _parse_uint(section["tick_interval"], "admin.tick_interval")
        if tick_ms == 0:
            raise ConfigInvalid("`admin.tick_interval` must be > 0 milliseconds")
        admin.tick_interval = tick_ms / 1000.0
    return admin


def _parse_display(section: Dict[str, Any], name: str) -> StatusDisplay:
    display = StatusDisplay()
    for key in ("open", "closed"):
        if key in section and section[key] is not None:
            if not isinstance(section[key], str):
                raise ConfigInvalid(f"`status_display.{name}.{key}` must be a string")
            setattr(display, key, section[key])
    return display


def _parse_server(section: Dict[str, Any]) -> ServerConfig:
    server = ServerConfig()
    if section.get("host"):
        server.host = str(section["host"])
    if section.get("port") is not None:
        server.port = _parse_uint(section["port"], "server.port")
    return server


def _parse_publish(section: Dict[str, Any]) -> Dict[str, Any]:
    publish = dict(section)
    missing = [k for k in _REQUIRED_PUBLISH_FIELDS if not publish.get(k)]
    if missing:
        raise ConfigInvalid(f"`publish` is missing required field(s): {', '.join(missing)}")
    # Live state is owned by the status store, never by the template
    publish.pop("state", None)
    if "sensors" in publish:
        try:
            sensors = Sensors.from_dict(publish["sensors"])
        except SensorError as e:
            raise ConfigInvalid(f"`publish.sensors` is invalid: {e}") from e
        if sensors.is_empty():
            publish.pop("sensors")
        else:
            publish["sensors"] = sensors.to_dict()
    return publish


def parse_config(cfg: Dict[str, Any]) -> SpaceConfig:
    """Validate a loaded YAML mapping into SpaceConfig. Generates an API key when none is set."""
    if not isinstance(cfg, dict):
        raise ConfigInvalid("Config root must be a mapping")
    if "publish" not in cfg:
        raise ConfigInvalid("Config is missing the `publish` block")

    publish = _parse_publish(_section(cfg, "publish"))
    admin = _parse_admin(_section(cfg, "admin"))
    display_cfg = _section(cfg, "status_display")
    display = StatusDisplayTypes(
        text=_parse_display(_section(display_cfg, "text"), "text"),
        html=_parse_display(_section(display_cfg, "html"), "html"),
    )
    server = _parse_server(_section(cfg, "server"))

    if admin.api_key is None:
        admin.api_key = generate_api_key()
        if admin.enabled:
            logger.warning("API key isn't set. Generated a random one: %s", admin.api_key)

    return SpaceConfig(publish=publish, admin=admin, status_display=display, server=server)


def read_config(config_path: Optional[str] = None) -> Tuple[SpaceConfig, str]:
    """Load YAML config. Path: argument, else env CONFIG_FILE, else config/config.yaml. Returns (config, resolved_path)."""
    config_path = config_path or os.environ.get("CONFIG_FILE", DEFAULT_CONFIG_PATH)
    resolved = str(Path(config_path).resolve())
    logger.info("Read config file `%s`", resolved)
    try:
        with open(resolved, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigInvalid(f"Can't open file {resolved}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigInvalid(f"Can't parse space config: {e}") from e
    return parse_config(raw or {}), resolved
