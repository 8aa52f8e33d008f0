"""Exceptions raised by config loading and the admin auth gate."""


class SpaceBeaconError(Exception):
    """Base class for all SpaceBeacon errors."""


class ConfigInvalid(SpaceBeaconError, ValueError):
    """Persisted configuration is missing or malformed. Fatal at startup."""


class Unauthorized(SpaceBeaconError):
    """Presented API key is absent or does not match the configured one."""

    def __init__(self, reason: str = "Api key missing"):
        super().__init__(reason)
        self.reason = reason
