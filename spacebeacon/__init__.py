"""SpaceBeacon: SpaceAPI open/closed status server with a keep-open timer."""

from importlib.metadata import PackageNotFoundError, version

SOFTWARE = "spacebeacon"

try:
    __version__ = version(SOFTWARE)
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
