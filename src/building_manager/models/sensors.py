"""Hazard sensors attached to rooms.

Every sensor replays a fixed, non-empty list of readings. The current reading
moves one position every ``update_frequency`` simulated minutes and wraps
around at the end of the list, so a sensor is itself a tick-consumer.

The sensor kinds form a closed set discriminated by ``kind``; the enum value
is also the type id written to save files.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Protocol, Union

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator


class SensorKind(str, Enum):
    """Sensor type ids. Rooms keep their sensors sorted by these values."""

    CARBON_DIOXIDE = "CarbonDioxideSensor"
    NOISE = "NoiseSensor"
    OCCUPANCY = "OccupancySensor"
    TEMPERATURE = "TemperatureSensor"


# Temperature (°C) at which a temperature sensor reports a fire
TEMPERATURE_FIRE_THRESHOLD = 68

# Reference loudness (dB) for the relative loudness of a noise sensor
NOISE_REFERENCE_DB = 70

# Upper bounds (exclusive, ppm) of the CO2 hazard bands and their levels
CO2_HAZARD_BANDS: list[tuple[int, int]] = [
    (1000, 0),
    (2000, 25),
    (5000, 50),
]

MIN_UPDATE_FREQUENCY = 1
MAX_UPDATE_FREQUENCY = 5


class HazardSensor(Protocol):
    """What the core needs from a sensor."""

    kind: SensorKind

    def hazard_level(self) -> int: ...


class TimedSensor(BaseModel):
    """Shared reading buffer for all sensor kinds."""

    readings: list[int] = Field(
        min_length=1, description="Readings replayed in order, wrapping at the end"
    )
    update_frequency: int = Field(
        default=1,
        ge=MIN_UPDATE_FREQUENCY,
        le=MAX_UPDATE_FREQUENCY,
        description="Minutes between reading changes",
    )
    _minutes_elapsed: int = PrivateAttr(default=0)

    @field_validator("readings")
    @classmethod
    def readings_not_negative(cls, v: list[int]) -> list[int]:
        if any(r < 0 for r in v):
            raise ValueError("Sensor readings cannot be negative")
        return v

    @property
    def current_reading(self) -> int:
        index = (self._minutes_elapsed // self.update_frequency) % len(self.readings)
        return self.readings[index]

    @property
    def minutes_elapsed(self) -> int:
        return self._minutes_elapsed

    def per_minute_tick(self) -> None:
        self._minutes_elapsed += 1

    def __eq__(self, other: object) -> bool:
        # Configuration equality; how far the buffer has been replayed is ignored.
        if not isinstance(other, TimedSensor):
            return NotImplemented
        return type(self) is type(other) and self.model_dump() == other.model_dump()

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}: freq={self.update_frequency}, "
            f"reading={self.current_reading}"
        )


class TemperatureSensor(TimedSensor):
    """Ambient temperature in °C. Reads a fire at or above 68 °C."""

    kind: Literal[SensorKind.TEMPERATURE] = SensorKind.TEMPERATURE
    update_frequency: int = Field(default=1, ge=1, le=1)

    def hazard_level(self) -> int:
        reading = self.current_reading
        if reading >= TEMPERATURE_FIRE_THRESHOLD:
            return 100
        return reading * 100 // TEMPERATURE_FIRE_THRESHOLD


class NoiseSensor(TimedSensor):
    """Sound level in dB."""

    kind: Literal[SensorKind.NOISE] = SensorKind.NOISE

    def relative_loudness(self) -> float:
        """Loudness relative to 70 dB; doubles every 10 dB."""
        return 2 ** ((self.current_reading - NOISE_REFERENCE_DB) / 10)

    def hazard_level(self) -> int:
        return min(100, int(self.relative_loudness() * 100))

    def comfort_level(self) -> int:
        loudness = self.relative_loudness()
        if loudness >= 1:
            return 0
        return int((1 - loudness) * 100)


class OccupancySensor(TimedSensor):
    """Head count against the room's capacity."""

    kind: Literal[SensorKind.OCCUPANCY] = SensorKind.OCCUPANCY
    capacity: int = Field(ge=0, description="Maximum number of occupants")

    def hazard_level(self) -> int:
        reading = self.current_reading
        if reading >= self.capacity:
            return 100
        return reading * 100 // self.capacity

    def comfort_level(self) -> int:
        return 100 - self.hazard_level()


class CarbonDioxideSensor(TimedSensor):
    """CO2 concentration in ppm, with an ideal value and tolerated variation."""

    kind: Literal[SensorKind.CARBON_DIOXIDE] = SensorKind.CARBON_DIOXIDE
    ideal_value: int = Field(gt=0, description="Ideal CO2 level (ppm)")
    variation_limit: int = Field(gt=0, description="Tolerated deviation from ideal (ppm)")

    @model_validator(mode="after")
    def limit_within_ideal(self) -> CarbonDioxideSensor:
        if self.ideal_value - self.variation_limit < 0:
            raise ValueError("Variation limit cannot exceed the ideal value")
        return self

    def hazard_level(self) -> int:
        reading = self.current_reading
        for upper, level in CO2_HAZARD_BANDS:
            if reading < upper:
                return level
        return 100

    def comfort_level(self) -> int:
        deviation = abs(self.current_reading - self.ideal_value)
        if deviation >= self.variation_limit:
            return 0
        return int((1 - deviation / self.variation_limit) * 100)


Sensor = Annotated[
    Union[CarbonDioxideSensor, NoiseSensor, OccupancySensor, TemperatureSensor],
    Field(discriminator="kind"),
]


def comfort_level(sensor: Sensor) -> int | None:
    """Comfort level of a sensor, or None for kinds that don't measure comfort."""
    match sensor:
        case NoiseSensor() | OccupancySensor() | CarbonDioxideSensor():
            return sensor.comfort_level()
        case _:
            return None
