"""Load and save buildings in the text save format.

The loader only uses the models' public construction and mutation methods,
so a file is accepted exactly when replaying it through the models raises no
error. Any failure (syntax, value, or a violated building rule) is reported
as a single ``FileFormatError``; the underlying error is kept as ``__cause__``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from pathlib import Path

from building_manager.models.building import Building
from building_manager.models.evaluators import (
    EVALUATOR_KINDS,
    RuleBasedEvaluator,
    WeightingBasedEvaluator,
)
from building_manager.models.floor import Floor
from building_manager.models.room import Room, RoomType
from building_manager.models.sensors import (
    CarbonDioxideSensor,
    NoiseSensor,
    OccupancySensor,
    Sensor,
    SensorKind,
    TemperatureSensor,
)
from building_manager.persistence.encoding import LINE_SEPARATOR, encode_buildings
from building_manager.simulation.clock import SimulationClock

logger = logging.getLogger(__name__)


class FileFormatError(Exception):
    """A save file is not a valid encoding of buildings."""


class _LineReader:
    """Sequential access to the lines of a save file."""

    def __init__(self, text: str) -> None:
        self._lines = text.splitlines()
        self._pos = 0

    @property
    def line_number(self) -> int:
        return self._pos

    def has_more(self) -> bool:
        return self._pos < len(self._lines)

    def next_line(self) -> str:
        if not self.has_more():
            raise FileFormatError(f"Unexpected end of file after line {self._pos}")
        line = self._lines[self._pos]
        self._pos += 1
        if not line.strip():
            raise FileFormatError(f"Line {self._pos} is empty")
        return line


def _parse_readings(field: str) -> list[int]:
    return [int(r) for r in field.split(",")]


def _parse_dimension(field: str) -> float:
    value = float(field)
    if not math.isfinite(value):
        raise ValueError(f"Not a finite number: {field}")
    return value


def _parse_sensor(line: str) -> Sensor:
    fields = line.split(":")
    kind = SensorKind(fields[0])
    readings = _parse_readings(fields[1])
    expected = {
        SensorKind.TEMPERATURE: 2,
        SensorKind.NOISE: 3,
        SensorKind.OCCUPANCY: 4,
        SensorKind.CARBON_DIOXIDE: 5,
    }[kind]
    if len(fields) != expected:
        raise ValueError(f"{kind.value} needs {expected} fields, got {len(fields)}")
    match kind:
        case SensorKind.TEMPERATURE:
            return TemperatureSensor(readings=readings)
        case SensorKind.NOISE:
            return NoiseSensor(readings=readings, update_frequency=int(fields[2]))
        case SensorKind.OCCUPANCY:
            return OccupancySensor(
                readings=readings,
                update_frequency=int(fields[2]),
                capacity=int(fields[3]),
            )
        case SensorKind.CARBON_DIOXIDE:
            return CarbonDioxideSensor(
                readings=readings,
                update_frequency=int(fields[2]),
                ideal_value=int(fields[3]),
                variation_limit=int(fields[4]),
            )


def _parse_room(reader: _LineReader, clock: SimulationClock | None) -> Room:
    fields = reader.next_line().split(":")
    if len(fields) not in (4, 5):
        raise ValueError(f"Room line needs 4 or 5 fields, got {len(fields)}")
    room = Room(
        room_number=int(fields[0]),
        room_type=RoomType[fields[1]],
        area=_parse_dimension(fields[2]),
    )
    sensor_count = int(fields[3])
    if sensor_count < 0:
        raise ValueError("Sensor count cannot be negative")
    evaluator_kind = fields[4] if len(fields) == 5 else None
    weighted = evaluator_kind == WeightingBasedEvaluator.kind
    if evaluator_kind is not None and evaluator_kind not in EVALUATOR_KINDS:
        raise ValueError(f"Unknown hazard evaluator '{evaluator_kind}'")

    weights: dict[SensorKind, int] = {}
    for _ in range(sensor_count):
        line = reader.next_line()
        if weighted:
            line, _, weighting = line.partition("@")
            sensor = _parse_sensor(line)
            weights[sensor.kind] = int(weighting)
        else:
            sensor = _parse_sensor(line)
        room.add_sensor(sensor)
        if clock is not None:
            clock.register(sensor)

    if evaluator_kind == RuleBasedEvaluator.kind:
        room.set_hazard_evaluator(
            RuleBasedEvaluator(sensor_kinds=tuple(s.kind for s in room.sensors))
        )
    elif weighted:
        room.set_hazard_evaluator(WeightingBasedEvaluator(weights=weights))
    return room


def _parse_floor(reader: _LineReader, clock: SimulationClock | None) -> Floor:
    fields = reader.next_line().split(":")
    if len(fields) not in (4, 5):
        raise ValueError(f"Floor line needs 4 or 5 fields, got {len(fields)}")
    floor = Floor(
        floor_number=int(fields[0]),
        width=_parse_dimension(fields[1]),
        length=_parse_dimension(fields[2]),
    )
    room_count = int(fields[3])
    if room_count < 0:
        raise ValueError("Room count cannot be negative")
    for _ in range(room_count):
        floor.add_room(_parse_room(reader, clock))
    if len(fields) == 5:
        order = [int(n) for n in fields[4].split(",")]
        floor.create_maintenance_schedule(order, clock=clock)
    return floor


def _parse_building(reader: _LineReader, clock: SimulationClock | None) -> Building:
    building = Building(name=reader.next_line())
    floor_count = int(reader.next_line())
    if floor_count < 0:
        raise ValueError("Floor count cannot be negative")
    for _ in range(floor_count):
        building.add_floor(_parse_floor(reader, clock))
    return building


def parse_buildings(text: str, clock: SimulationClock | None = None) -> list[Building]:
    """Parse every building in ``text``.

    Sensors and maintenance schedules register with ``clock`` when given.

    Raises:
        FileFormatError: the text is not a valid encoding.
    """
    reader = _LineReader(text)
    buildings: list[Building] = []
    while reader.has_more():
        try:
            buildings.append(_parse_building(reader, clock))
        except (ValueError, LookupError) as e:
            # ValueError also covers pydantic's ValidationError and the model errors
            raise FileFormatError(
                f"Invalid save file near line {reader.line_number}"
            ) from e
    logger.debug("Parsed %d building(s)", len(buildings))
    return buildings


def load_buildings(path: str | Path, clock: SimulationClock | None = None) -> list[Building]:
    """Load every building from a save file.

    Raises:
        FileNotFoundError: the file does not exist.
        FileFormatError: the file is not a valid encoding.
    """
    path = Path(path)
    return parse_buildings(path.read_text(), clock=clock)


def save_buildings(buildings: Iterable[Building], path: str | Path) -> Path:
    """Write buildings to a save file. Creates parent dirs if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode_buildings(buildings) + LINE_SEPARATOR)
    return path
