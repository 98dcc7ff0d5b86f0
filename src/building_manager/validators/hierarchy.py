"""Invariant audit for an existing building.

The mutators refuse anything that would break the hierarchy, but a model can
also be assembled by hand (or edited field by field). These checks re-derive
every structural rule from the current state and report each violation
instead of stopping at the first one.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from building_manager.models.building import Building
from building_manager.models.floor import MIN_FLOOR_LENGTH, MIN_FLOOR_WIDTH, Floor
from building_manager.models.room import MIN_ROOM_AREA, Room

# Slack for float comparisons of areas and dimensions
TOLERANCE = 1e-6


@dataclass
class ValidationError:
    """A single validation issue."""

    severity: str  # "error" | "warning"
    element_type: str
    element_id: str
    message: str


def validate_building(building: Building) -> list[ValidationError]:
    """Run all hierarchy validators. Returns list of errors."""
    errors: list[ValidationError] = []
    errors.extend(validate_floor_numbers(building))
    errors.extend(validate_floor_stack(building))
    for floor in building.floors:
        errors.extend(validate_floor(floor))
    return errors


def validate_floor(floor: Floor) -> list[ValidationError]:
    """Per-floor checks: dimensions, rooms, occupancy and maintenance order."""
    errors: list[ValidationError] = []
    errors.extend(validate_floor_dimensions(floor))
    errors.extend(validate_rooms(floor))
    errors.extend(validate_occupied_area(floor))
    errors.extend(validate_maintenance_order(floor))
    return errors


def _floor_id(floor: Floor) -> str:
    return f"floor-{floor.floor_number}"


def _room_id(floor: Floor, room: Room) -> str:
    return f"floor-{floor.floor_number}/room-{room.room_number}"


def validate_floor_numbers(building: Building) -> list[ValidationError]:
    """Floor numbers are positive and unique."""
    errors: list[ValidationError] = []
    counts = Counter(f.floor_number for f in building.floors)
    for number, count in counts.items():
        if number < 1:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Floor",
                    element_id=f"floor-{number}",
                    message=f"Floor number {number} must be 1 or higher",
                )
            )
        if count > 1:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Floor",
                    element_id=f"floor-{number}",
                    message=f"Floor number {number} appears {count} times",
                )
            )
    return errors


def validate_floor_stack(building: Building) -> list[ValidationError]:
    """Floor N >= 2 stands on floor N-1 and fits within it in both dimensions."""
    errors: list[ValidationError] = []
    for floor in building.floors:
        if floor.floor_number < 2:
            continue
        below = building.get_floor_by_number(floor.floor_number - 1)
        if below is None:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Floor",
                    element_id=_floor_id(floor),
                    message=f"Floor {floor.floor_number} has no floor below it",
                )
            )
            continue
        if (
            floor.width > below.width + TOLERANCE
            or floor.length > below.length + TOLERANCE
        ):
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Floor",
                    element_id=_floor_id(floor),
                    message=(
                        f"Floor {floor.floor_number} ({floor.width:.2f}x{floor.length:.2f}) "
                        f"overhangs floor {below.floor_number} "
                        f"({below.width:.2f}x{below.length:.2f})"
                    ),
                )
            )
    return errors


def validate_floor_dimensions(floor: Floor) -> list[ValidationError]:
    """Width and length meet their minimums."""
    if floor.width >= MIN_FLOOR_WIDTH and floor.length >= MIN_FLOOR_LENGTH:
        return []
    return [
        ValidationError(
            severity="error",
            element_type="Floor",
            element_id=_floor_id(floor),
            message=(
                f"Floor {floor.floor_number} is {floor.width:.2f}x{floor.length:.2f}, "
                f"minimum is {MIN_FLOOR_WIDTH}x{MIN_FLOOR_LENGTH}"
            ),
        )
    ]


def validate_occupied_area(floor: Floor) -> list[ValidationError]:
    """Rooms fit within the floor's footprint."""
    occupied = floor.occupied_area()
    footprint = floor.footprint_area()
    if occupied <= footprint + TOLERANCE:
        return []
    return [
        ValidationError(
            severity="error",
            element_type="Floor",
            element_id=_floor_id(floor),
            message=(
                f"Rooms on floor {floor.floor_number} occupy {occupied:.2f}m², "
                f"more than the {footprint:.2f}m² footprint"
            ),
        )
    ]


def validate_rooms(floor: Floor) -> list[ValidationError]:
    """Room numbers are unique, areas meet the minimum, one sensor per kind,
    and hazard evaluators only use installed sensors."""
    errors: list[ValidationError] = []

    counts = Counter(r.room_number for r in floor.rooms)
    for number, count in counts.items():
        if count > 1:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Room",
                    element_id=f"floor-{floor.floor_number}/room-{number}",
                    message=f"Room number {number} appears {count} times on floor {floor.floor_number}",
                )
            )

    for room in floor.rooms:
        if room.area < MIN_ROOM_AREA:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="Room",
                    element_id=_room_id(floor, room),
                    message=(
                        f"Room {room.room_number} is {room.area:.2f}m², "
                        f"minimum is {MIN_ROOM_AREA}m²"
                    ),
                )
            )

        kinds = Counter(s.kind for s in room.sensors)
        for kind, count in kinds.items():
            if count > 1:
                errors.append(
                    ValidationError(
                        severity="error",
                        element_type="Sensor",
                        element_id=_room_id(floor, room),
                        message=f"Room {room.room_number} has {count} sensors of type {kind.value}",
                    )
                )

        evaluator = room.hazard_evaluator
        if evaluator is not None:
            missing = [k.value for k in evaluator.sensor_kinds if k not in kinds]
            if missing:
                errors.append(
                    ValidationError(
                        severity="error",
                        element_type="HazardEvaluator",
                        element_id=_room_id(floor, room),
                        message=(
                            f"{evaluator.kind} evaluator of room {room.room_number} "
                            f"uses missing sensor(s) {missing}"
                        ),
                    )
                )
    return errors


def validate_maintenance_order(floor: Floor) -> list[ValidationError]:
    """Maintenance rooms exist on the floor, no room repeats back to back
    (circularly), and exactly the current room is flagged for maintenance."""
    schedule = floor.maintenance_schedule
    if schedule is None:
        return []
    errors: list[ValidationError] = []
    order = schedule.room_order

    for number in order:
        if floor.get_room_by_number(number) is None:
            errors.append(
                ValidationError(
                    severity="error",
                    element_type="MaintenanceSchedule",
                    element_id=_floor_id(floor),
                    message=f"Maintenance order names room {number}, which is not on the floor",
                )
            )
    if len(order) > 1:
        for i, number in enumerate(order):
            if number == order[i - 1]:
                errors.append(
                    ValidationError(
                        severity="error",
                        element_type="MaintenanceSchedule",
                        element_id=_floor_id(floor),
                        message=f"Room {number} is maintained twice in a row",
                    )
                )

    if errors:
        return errors

    current = order[schedule.current_index]
    flagged = [r.room_number for r in floor.rooms if r.maintenance]
    if flagged != [current]:
        errors.append(
            ValidationError(
                severity="warning",
                element_type="MaintenanceSchedule",
                element_id=_floor_id(floor),
                message=(
                    f"Room {current} is scheduled for maintenance but "
                    f"rooms {flagged} are flagged"
                ),
            )
        )
    return errors
