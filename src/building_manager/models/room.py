"""Rooms: the leaves of the building hierarchy.

A room knows its purpose, its area and the sensors installed in it (at most
one per sensor kind). Whether it is open, under maintenance or being
evacuated is derived on every query from its sensors and its drill and
maintenance flags; it is never stored.
"""

from __future__ import annotations

import logging
import math
from enum import Enum

from pydantic import BaseModel, Field, PrivateAttr

from building_manager.models.errors import DuplicateSensorError, InvalidArgumentError
from building_manager.models.evaluators import HazardEvaluator
from building_manager.models.sensors import HazardSensor, Sensor, SensorKind

logger = logging.getLogger(__name__)

# Minimum area of any room (m²). Room dimensions are not modelled.
MIN_ROOM_AREA = 5


class RoomType(str, Enum):
    """Intended purpose of a room."""

    STUDY = "STUDY"
    OFFICE = "OFFICE"
    LABORATORY = "LABORATORY"


class RoomState(str, Enum):
    """Operational state of a room.

    ERROR is part of the observable set but no current rule produces it.
    """

    ERROR = "ERROR"
    EVACUATE = "EVACUATE"
    MAINTENANCE = "MAINTENANCE"
    OPEN = "OPEN"


class Room(BaseModel):
    """A room on a floor.

    Room numbers are unique per floor only. Areas are checked against
    ``MIN_ROOM_AREA`` when the room is added to a floor.
    """

    room_number: int = Field(description="Room number, unique on its floor")
    room_type: RoomType = Field(description="Intended purpose of the room")
    area: float = Field(description="Room area in m²")
    sensors: list[Sensor] = Field(
        default_factory=list, description="Installed sensors, sorted by type id"
    )
    fire_drill: bool = Field(default=False, description="Fire drill in progress")
    maintenance: bool = Field(default=False, description="Maintenance in progress")
    _hazard_evaluator: HazardEvaluator | None = PrivateAttr(default=None)

    # ── Sensors ───────────────────────────────────────────────────────

    def get_sensor(self, kind: SensorKind) -> Sensor | None:
        """Find the sensor of a given kind, if installed."""
        return next((s for s in self.sensors if s.kind == kind), None)

    def sensor_map(self) -> dict[SensorKind, HazardSensor]:
        """Installed sensors keyed by kind."""
        return {s.kind: s for s in self.sensors}

    def add_sensor(self, sensor: Sensor) -> None:
        """Install a sensor, keeping the list sorted by type id.

        Installing a sensor always discards the room's hazard evaluator: it
        was configured for the previous sensor set and must be set again.

        Raises:
            DuplicateSensorError: a sensor of the same kind is installed.
        """
        if self.get_sensor(sensor.kind) is not None:
            raise DuplicateSensorError(
                f"Room {self.room_number} already has a {sensor.kind.value}"
            )
        self.sensors.append(sensor)
        self.sensors.sort(key=lambda s: s.kind.value)
        if self._hazard_evaluator is not None:
            logger.debug(
                "Room %d: %s installed, hazard evaluator reset",
                self.room_number, sensor.kind.value,
            )
        self._hazard_evaluator = None

    # ── Hazard evaluation ─────────────────────────────────────────────

    @property
    def hazard_evaluator(self) -> HazardEvaluator | None:
        return self._hazard_evaluator

    def set_hazard_evaluator(self, evaluator: HazardEvaluator | None) -> None:
        """Replace the room's hazard evaluator (None removes it).

        Raises:
            InvalidArgumentError: the evaluator uses a sensor kind that is
                not installed in this room.
        """
        if evaluator is not None:
            installed = {s.kind for s in self.sensors}
            missing = [k.value for k in evaluator.sensor_kinds if k not in installed]
            if missing:
                raise InvalidArgumentError(
                    f"Room {self.room_number} has no sensor(s) {missing} "
                    f"for a {evaluator.kind} evaluator"
                )
        self._hazard_evaluator = evaluator

    def hazard_level(self) -> int | None:
        """Current hazard level from the evaluator, or None without one."""
        if self._hazard_evaluator is None:
            return None
        return self._hazard_evaluator.evaluate(self.sensor_map())

    # ── State ─────────────────────────────────────────────────────────

    def evaluate_state(self) -> RoomState:
        """Derive the room's state from its sensors and flags.

        A fire reading on the temperature sensor or an active fire drill
        means EVACUATE, which overrides maintenance.
        """
        temperature = self.get_sensor(SensorKind.TEMPERATURE)
        if temperature is not None and temperature.hazard_level() == 100:
            return RoomState.EVACUATE
        if self.fire_drill:
            return RoomState.EVACUATE
        if self.maintenance:
            return RoomState.MAINTENANCE
        return RoomState.OPEN

    # ── Value semantics ───────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Room):
            return NotImplemented
        return (
            self.room_number == other.room_number
            and self.room_type == other.room_type
            and math.isclose(self.area, other.area, abs_tol=1e-3)
            and len(self.sensors) == len(other.sensors)
            and all(s in other.sensors for s in self.sensors)
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return (
            f"Room #{self.room_number}: type={self.room_type.value}, "
            f"area={self.area:.2f}m^2, sensors={len(self.sensors)}"
        )
