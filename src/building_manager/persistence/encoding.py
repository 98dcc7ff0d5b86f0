"""Canonical text encoding of buildings, floors, rooms and sensors."""

from __future__ import annotations

from collections.abc import Iterable

from building_manager.models.building import Building
from building_manager.models.evaluators import WeightingBasedEvaluator
from building_manager.models.floor import Floor
from building_manager.models.room import Room
from building_manager.models.sensors import (
    CarbonDioxideSensor,
    NoiseSensor,
    OccupancySensor,
    Sensor,
    TemperatureSensor,
)

LINE_SEPARATOR = "\n"


def encode_sensor(sensor: Sensor) -> str:
    """``<SensorType>:<r1,r2,...>`` followed by the kind's own fields."""
    readings = ",".join(str(r) for r in sensor.readings)
    prefix = f"{sensor.kind.value}:{readings}"
    match sensor:
        case TemperatureSensor():
            return prefix
        case NoiseSensor():
            return f"{prefix}:{sensor.update_frequency}"
        case OccupancySensor():
            return f"{prefix}:{sensor.update_frequency}:{sensor.capacity}"
        case CarbonDioxideSensor():
            return (
                f"{prefix}:{sensor.update_frequency}:"
                f"{sensor.ideal_value}:{sensor.variation_limit}"
            )
    raise TypeError(f"Cannot encode sensor of type {type(sensor).__name__}")


def encode_room(room: Room) -> str:
    """Room header line, then one line per sensor.

    Under a weighting-based evaluator each sensor line ends in ``@<weighting>``;
    sensors the evaluator does not weigh are written with weighting 0.
    """
    header = f"{room.room_number}:{room.room_type.value}:{room.area:.2f}:{len(room.sensors)}"
    evaluator = room.hazard_evaluator
    if evaluator is not None:
        header += f":{evaluator.kind}"
    lines = [header]
    for sensor in room.sensors:
        line = encode_sensor(sensor)
        if isinstance(evaluator, WeightingBasedEvaluator):
            line += f"@{evaluator.weights.get(sensor.kind, 0)}"
        lines.append(line)
    return LINE_SEPARATOR.join(lines)


def encode_floor(floor: Floor) -> str:
    """Floor header line (with the maintenance order, if any), then its rooms."""
    header = (
        f"{floor.floor_number}:{floor.width:.2f}:{floor.length:.2f}:{len(floor.rooms)}"
    )
    schedule = floor.maintenance_schedule
    if schedule is not None:
        header += ":" + ",".join(str(n) for n in schedule.room_order)
    return LINE_SEPARATOR.join([header, *(encode_room(r) for r in floor.rooms)])


def encode_building(building: Building) -> str:
    """Name line, floor count line, then every floor."""
    return LINE_SEPARATOR.join(
        [building.name, str(len(building.floors)), *(encode_floor(f) for f in building.floors)]
    )


def encode_buildings(buildings: Iterable[Building]) -> str:
    return LINE_SEPARATOR.join(encode_building(b) for b in buildings)
