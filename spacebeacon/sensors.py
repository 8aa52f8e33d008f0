"""SpaceAPI sensor data model.

A sensor template carries everything about a sensor except its value. Turning a
template plus a raw value string into a sensor is a pure parse step, one per
sensor kind. The set of kinds is closed:

    people_now_present   int value, location optional, optional list of names
    temperature          float value + unit, location required
    humidity             float value + unit, location required
    power_consumption    float value + unit, location required
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class SensorError(ValueError):
    """A template or value could not be turned into a sensor."""


class SensorKind(str, enum.Enum):
    PEOPLE_NOW_PRESENT = "people_now_present"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    POWER_CONSUMPTION = "power_consumption"


@dataclass(frozen=True)
class SensorMetadata:
    """Common information describing any sensor."""

    name: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None

    def localised(self) -> "LocalisedSensorMetadata":
        if self.location is None:
            raise SensorError("No location specified when one is required")
        return LocalisedSensorMetadata(location=self.location, name=self.name, description=self.description)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"name": self.name, "location": self.location, "description": self.description})


@dataclass(frozen=True)
class LocalisedSensorMetadata:
    """Sensor metadata where the location is mandatory."""

    location: str
    name: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"name": self.name, "location": self.location, "description": self.description})


@dataclass(frozen=True)
class PeopleNowPresentSensor:
    value: int
    metadata: SensorMetadata = field(default_factory=SensorMetadata)
    names: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        out = self.metadata.to_dict()
        if self.names is not None:
            out["names"] = list(self.names)
        out["value"] = self.value
        return out


@dataclass(frozen=True)
class MeasurementSensor:
    """Float-valued sensor with a unit (temperature, humidity, power consumption)."""

    kind: SensorKind
    value: float
    unit: str
    metadata: LocalisedSensorMetadata

    def to_dict(self) -> Dict[str, Any]:
        out = self.metadata.to_dict()
        out["unit"] = self.unit
        out["value"] = self.value
        return out


Sensor = Union[PeopleNowPresentSensor, MeasurementSensor]


@dataclass(frozen=True)
class SensorTemplate:
    """A sensor without its value."""

    kind: SensorKind
    metadata: SensorMetadata = field(default_factory=SensorMetadata)
    unit: Optional[str] = None
    names: Optional[List[str]] = None

    def try_to_sensor(self, value_str: str) -> Sensor:
        """Parse value_str into a sensor of this template's kind. Raises SensorError."""
        return _PARSERS[self.kind](self, value_str)

    def to_sensor(self, value_str: str) -> Optional[Sensor]:
        """Like try_to_sensor, but logs and returns None on failure."""
        try:
            return self.try_to_sensor(value_str)
        except SensorError as e:
            logger.warning("Omitting sensor. Reason: %s", e)
            return None


def _parse_people_now_present(template: SensorTemplate, value_str: str) -> PeopleNowPresentSensor:
    raw = str(value_str).strip()
    if not (raw.isascii() and raw.isdigit()):
        raise SensorError(f"people_now_present value must be a non-negative integer, got {value_str!r}")
    return PeopleNowPresentSensor(
        value=int(raw),
        metadata=template.metadata,
        names=list(template.names) if template.names is not None else None,
    )


def _parse_measurement(template: SensorTemplate, value_str: str) -> MeasurementSensor:
    if template.unit is None:
        raise SensorError(f"{template.kind.value} sensor requires a unit")
    metadata = template.metadata.localised()
    try:
        value = float(str(value_str).strip())
    except ValueError as e:
        raise SensorError(f"{template.kind.value} value must be a number, got {value_str!r}") from e
    return MeasurementSensor(kind=template.kind, value=value, unit=template.unit, metadata=metadata)


_PARSERS: Dict[SensorKind, Callable[[SensorTemplate, str], Sensor]] = {
    SensorKind.PEOPLE_NOW_PRESENT: _parse_people_now_present,
    SensorKind.TEMPERATURE: _parse_measurement,
    SensorKind.HUMIDITY: _parse_measurement,
    SensorKind.POWER_CONSUMPTION: _parse_measurement,
}


@dataclass
class Sensors:
    """Container for instances of all sensor kinds. Empty kinds are omitted when serialized."""

    people_now_present: List[PeopleNowPresentSensor] = field(default_factory=list)
    temperature: List[MeasurementSensor] = field(default_factory=list)
    humidity: List[MeasurementSensor] = field(default_factory=list)
    power_consumption: List[MeasurementSensor] = field(default_factory=list)

    def add(self, sensor: Sensor) -> None:
        if isinstance(sensor, PeopleNowPresentSensor):
            self.people_now_present.append(sensor)
        else:
            getattr(self, sensor.kind.value).append(sensor)

    def is_empty(self) -> bool:
        return not (self.people_now_present or self.temperature or self.humidity or self.power_consumption)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for kind in SensorKind:
            items = getattr(self, kind.value)
            if items:
                out[kind.value] = [s.to_dict() for s in items]
        return out

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Sensors":
        """Build from a SpaceAPI `sensors` mapping. Unknown kinds or bad entries raise SensorError."""
        sensors = cls()
        if not data:
            return sensors
        if not isinstance(data, dict):
            raise SensorError("sensors must be a mapping of kind -> list")
        for key, entries in data.items():
            try:
                kind = SensorKind(key)
            except ValueError as e:
                raise SensorError(f"Unknown sensor kind: {key}") from e
            if not isinstance(entries, list):
                raise SensorError(f"sensors.{key} must be a list")
            for entry in entries:
                if not isinstance(entry, dict) or "value" not in entry:
                    raise SensorError(f"sensors.{key} entries must be mappings with a value")
                sensors.add(template_from_dict(kind, entry).try_to_sensor(str(entry["value"])))
        return sensors


def template_from_dict(kind: SensorKind, data: Dict[str, Any]) -> SensorTemplate:
    """Template for kind from a mapping; any `value` key is ignored."""
    names = data.get("names")
    if names is not None and not isinstance(names, list):
        raise SensorError("names must be a list of strings")
    unit = data.get("unit")
    return SensorTemplate(
        kind=kind,
        metadata=SensorMetadata(
            name=data.get("name"),
            location=data.get("location"),
            description=data.get("description"),
        ),
        unit=str(unit) if unit is not None else None,
        names=[str(n) for n in names] if names is not None else None,
    )


def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}
