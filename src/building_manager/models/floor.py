"""Floors: an ordered set of rooms within a fixed footprint.

Rooms never overlap in this model, so the only capacity rule is that the sum
of room areas (occupied area) stays within width × length (footprint area).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, PrivateAttr

from building_manager.models.errors import (
    DuplicateRoomError,
    FloorTooSmallError,
    InsufficientSpaceError,
    InvalidArgumentError,
)
from building_manager.models.maintenance import (
    MaintenanceSchedule,
    room_numbers_on,
    validate_room_order,
)
from building_manager.models.room import MIN_ROOM_AREA, Room, RoomType

if TYPE_CHECKING:
    from building_manager.simulation.clock import SimulationClock

logger = logging.getLogger(__name__)

# Minimum floor dimensions (m)
MIN_FLOOR_WIDTH = 5
MIN_FLOOR_LENGTH = 5


def check_dimensions(width: float, length: float) -> None:
    """Raise InvalidArgumentError unless both dimensions are finite and at
    least their minimums."""
    if not (math.isfinite(width) and math.isfinite(length)):
        raise InvalidArgumentError(f"Floor dimensions must be finite, got {width}x{length}")
    if width < MIN_FLOOR_WIDTH:
        raise InvalidArgumentError(f"Width cannot be less than {MIN_FLOOR_WIDTH}")
    if length < MIN_FLOOR_LENGTH:
        raise InvalidArgumentError(f"Length cannot be less than {MIN_FLOOR_LENGTH}")


class Floor(BaseModel):
    """A floor of a building.

    Floor 1 is the ground floor. Dimensions are checked against the minimums
    when the floor is added to a building or renovated.
    """

    floor_number: int = Field(description="Floor level, ground floor is 1")
    width: float = Field(description="Floor width in metres")
    length: float = Field(description="Floor length in metres")
    rooms: list[Room] = Field(default_factory=list, description="Rooms in insertion order")
    _maintenance_schedule: MaintenanceSchedule | None = PrivateAttr(default=None)

    # ── Lookups ───────────────────────────────────────────────────────

    def get_room_by_number(self, room_number: int) -> Room | None:
        """Find a room by its number."""
        return next((r for r in self.rooms if r.room_number == room_number), None)

    @property
    def maintenance_schedule(self) -> MaintenanceSchedule | None:
        return self._maintenance_schedule

    # ── Areas ─────────────────────────────────────────────────────────

    def footprint_area(self) -> float:
        """Width × length (m²)."""
        return self.width * self.length

    def occupied_area(self) -> float:
        """Sum of all room areas (m²)."""
        return sum(r.area for r in self.rooms)

    def free_area(self) -> float:
        return self.footprint_area() - self.occupied_area()

    # ── Mutations ─────────────────────────────────────────────────────

    def add_room(self, room: Room) -> Room:
        """Add a room to the floor. Returns the added room.

        Raises:
            InvalidArgumentError: area not finite or below ``MIN_ROOM_AREA``.
            DuplicateRoomError: room number already taken on this floor.
            InsufficientSpaceError: the room does not fit in the free area.
        """
        self._check_room(room, self.rooms)
        self.rooms.append(room)
        return room

    def check_rooms(self) -> None:
        """Replay the ``add_room`` rules over the rooms the floor already holds.

        Raises:
            InvalidArgumentError, DuplicateRoomError, InsufficientSpaceError:
                as for ``add_room``, for the first offending room.
        """
        for i, room in enumerate(self.rooms):
            self._check_room(room, self.rooms[:i])

    def _check_room(self, room: Room, existing: list[Room]) -> None:
        if not math.isfinite(room.area):
            raise InvalidArgumentError(f"Room area must be finite, got {room.area}")
        if room.area < MIN_ROOM_AREA:
            raise InvalidArgumentError(f"Room area cannot be less than {MIN_ROOM_AREA}")
        if any(r.room_number == room.room_number for r in existing):
            raise DuplicateRoomError(
                f"Room number {room.room_number} is already taken on floor {self.floor_number}"
            )
        occupied = sum(r.area for r in existing)
        if occupied + room.area > self.footprint_area():
            raise InsufficientSpaceError(
                f"Insufficient space to add room. Floor area: {self.footprint_area():.2f}m^2, "
                f"occupied area: {occupied:.2f}m^2, "
                f"this room: {room.area:.2f}m^2"
            )

    def change_dimensions(self, new_width: float, new_length: float) -> None:
        """Resize the floor in place. Rooms are unaffected.

        Only the floor's own constraints are checked here; the floors above
        and below are the building's concern (see ``Building.renovate_floor``).

        Raises:
            InvalidArgumentError: a dimension not finite or below its minimum.
            FloorTooSmallError: the rooms would no longer fit.
        """
        check_dimensions(new_width, new_length)
        if new_width * new_length < self.occupied_area():
            raise FloorTooSmallError(
                f"Floor {self.floor_number} at {new_width:.2f}x{new_length:.2f} "
                f"cannot hold its rooms ({self.occupied_area():.2f}m^2)"
            )
        self.width = new_width
        self.length = new_length

    def fire_drill(self, room_type: RoomType | None = None) -> None:
        """Start a fire drill in every room of ``room_type`` (all rooms if None)."""
        for room in self.rooms:
            if room_type is None or room.room_type == room_type:
                room.fire_drill = True

    def cancel_fire_drill(self) -> None:
        """End the fire drill in every room, whatever its type."""
        for room in self.rooms:
            room.fire_drill = False

    def create_maintenance_schedule(
        self,
        room_order: Sequence[Room | int],
        clock: SimulationClock | None = None,
    ) -> MaintenanceSchedule:
        """Replace the floor's maintenance schedule.

        The replaced schedule's current room leaves maintenance and the old
        schedule is detached, so a lingering clock registration does nothing.
        The new schedule registers with ``clock`` when one is given.

        Raises:
            InvalidArgumentError: the room order is empty, names a room not on
                this floor, passes a room object that is not this floor's
                room of that number, or repeats a room in adjacent (circular)
                positions.
        """
        order = room_numbers_on(self, room_order)
        validate_room_order(self, order)
        previous = self._maintenance_schedule
        if previous is not None:
            previous.current_room.maintenance = False
            previous.detach()
            logger.debug("Floor %d: maintenance schedule replaced", self.floor_number)
        self._maintenance_schedule = MaintenanceSchedule(self, order, clock=clock)
        return self._maintenance_schedule

    # ── Value semantics ───────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Floor):
            return NotImplemented
        return (
            self.floor_number == other.floor_number
            and math.isclose(self.width, other.width, abs_tol=1e-3)
            and math.isclose(self.length, other.length, abs_tol=1e-3)
            and len(self.rooms) == len(other.rooms)
            and all(r in other.rooms for r in self.rooms)
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return (
            f"Floor #{self.floor_number}: width={self.width:.2f}m, "
            f"length={self.length:.2f}m, rooms={len(self.rooms)}"
        )
