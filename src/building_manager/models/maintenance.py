"""Maintenance rotation over a floor's rooms.

A schedule walks a fixed, circular order of rooms. The room at the cursor is
flagged as under maintenance; once it has received its required minutes of
work the flag moves on to the next room. Nothing advances while the current
room is being evacuated.

Schedules hold room numbers, not rooms: the floor stays the single owner of
its rooms and the schedule looks them up when it needs them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from building_manager.models.errors import InvalidArgumentError
from building_manager.models.evaluators import round_half_up
from building_manager.models.room import MIN_ROOM_AREA, Room, RoomState, RoomType

if TYPE_CHECKING:
    from building_manager.models.floor import Floor
    from building_manager.simulation.clock import SimulationClock

logger = logging.getLogger(__name__)

# Minutes of maintenance for a minimum-area room, before the type factor
BASE_MAINTENANCE_MINUTES = 5

# Extra minutes per m² above the minimum room area
MINUTES_PER_EXTRA_AREA = 0.2

MAINTENANCE_TYPE_FACTORS: dict[RoomType, float] = {
    RoomType.STUDY: 1.0,
    RoomType.OFFICE: 1.5,
}
DEFAULT_TYPE_FACTOR = 2.0


def required_minutes(room: Room) -> int:
    """Minutes of maintenance a room needs before the rotation moves on."""
    base = BASE_MAINTENANCE_MINUTES
    if room.area > MIN_ROOM_AREA:
        base += MINUTES_PER_EXTRA_AREA * (room.area - MIN_ROOM_AREA)
    factor = MAINTENANCE_TYPE_FACTORS.get(room.room_type, DEFAULT_TYPE_FACTOR)
    return round_half_up(base * factor)


def room_numbers_on(floor: Floor, rooms: Sequence[Room | int]) -> list[int]:
    """Accept rooms or room numbers; return room numbers.

    Room numbers are only unique within a floor, so a room object must equal
    the room of that number on ``floor``.

    Raises:
        InvalidArgumentError: a room object is not one of the floor's rooms.
    """
    numbers = []
    for r in rooms:
        if isinstance(r, Room):
            if floor.get_room_by_number(r.room_number) != r:
                raise InvalidArgumentError(
                    f"Room {r.room_number} given for maintenance is not a room of "
                    f"floor {floor.floor_number}"
                )
            numbers.append(r.room_number)
        else:
            numbers.append(r)
    return numbers


def validate_room_order(floor: Floor, room_order: Sequence[int]) -> None:
    """Check that a room order can drive a schedule on ``floor``.

    The order must be non-empty, name only rooms on the floor, and never
    repeat a room in two adjacent positions. The order is circular, so the
    last and first entries are adjacent as well (a single room is fine).

    Raises:
        InvalidArgumentError: any of the above is violated.
    """
    if not room_order:
        raise InvalidArgumentError("Maintenance room order cannot be empty")
    for number in room_order:
        if floor.get_room_by_number(number) is None:
            raise InvalidArgumentError(
                f"Room {number} is not on floor {floor.floor_number}"
            )
    if len(room_order) > 1:
        for i, number in enumerate(room_order):
            if number == room_order[i - 1]:
                raise InvalidArgumentError(
                    f"Room {number} appears twice in a row in the maintenance order"
                )


class MaintenanceSchedule:
    """Round-robin maintenance cursor over a floor's rooms.

    Create schedules through ``Floor.create_maintenance_schedule``; the floor
    clears the previous schedule's maintenance flag and detaches it.
    """

    def __init__(
        self,
        floor: Floor,
        room_order: Sequence[Room | int],
        clock: SimulationClock | None = None,
    ) -> None:
        order = room_numbers_on(floor, room_order)
        validate_room_order(floor, order)
        self._floor: Floor | None = floor
        self._room_order: tuple[int, ...] = tuple(order)
        self._current_index = 0
        self._minutes_elapsed = 0
        self.current_room.maintenance = True
        if clock is not None:
            clock.register(self)

    @property
    def room_order(self) -> tuple[int, ...]:
        return self._room_order

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def minutes_elapsed(self) -> int:
        """Minutes spent on the current room so far."""
        return self._minutes_elapsed

    @property
    def is_detached(self) -> bool:
        return self._floor is None

    @property
    def current_room(self) -> Room:
        return self._room_at(self._current_index)

    def _room_at(self, index: int) -> Room:
        number = self._room_order[index]
        if self._floor is None:
            raise InvalidArgumentError("Maintenance schedule is no longer attached to a floor")
        room = self._floor.get_room_by_number(number)
        if room is None:
            raise InvalidArgumentError(
                f"Room {number} is no longer on floor {self._floor.floor_number}"
            )
        return room

    def rooms(self) -> list[Room]:
        """The rooms of the order, resolved on the owning floor."""
        if self._floor is None:
            return []
        return [r for n in self._room_order if (r := self._floor.get_room_by_number(n))]

    def detach(self) -> None:
        """Stop this schedule from touching the floor again."""
        self._floor = None

    def per_minute_tick(self) -> None:
        """Spend one minute on the current room unless it is being evacuated."""
        if self._floor is None:
            logger.debug("Tick on a detached maintenance schedule ignored")
            return
        room = self.current_room
        if room.evaluate_state() == RoomState.EVACUATE:
            return
        if self._minutes_elapsed + 1 == required_minutes(room):
            self._rotate(room)
        else:
            self._minutes_elapsed += 1

    def skip_current_maintenance(self) -> None:
        """Abandon the current room and move to the next one immediately.

        Operator override: ignores evacuation.
        """
        self._rotate(self.current_room)

    def _rotate(self, room: Room) -> None:
        next_index = (self._current_index + 1) % len(self._room_order)
        next_room = self._room_at(next_index)
        room.maintenance = False
        next_room.maintenance = True
        self._current_index = next_index
        self._minutes_elapsed = 0
        logger.debug(
            "Maintenance moved from room %d to room %d",
            room.room_number, next_room.room_number,
        )

    def __str__(self) -> str:
        return (
            f"MaintenanceSchedule: currentRoom={self._room_order[self._current_index]}, "
            f"currentElapsed={self._minutes_elapsed}"
        )
