"""Top-level building model: Building contains Floors, which contain Rooms.

The building keeps the stack physically consistent: floor N >= 2 needs floor
N-1 below it, and an upper floor's footprint may never exceed the floor it
stands on, in either dimension.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from pydantic import BaseModel, Field

from building_manager.models.errors import (
    DuplicateFloorError,
    FloorTooSmallError,
    InvalidArgumentError,
    NoFloorBelowError,
    NoRoomsAvailableError,
)
from building_manager.models.floor import Floor, check_dimensions
from building_manager.models.room import Room, RoomState, RoomType


class Building(BaseModel):
    """A building made of floors.

    Floors are kept in insertion order, not in floor-number order.
    """

    name: str = Field(description="Building name, e.g. 'General Purpose South'")
    floors: list[Floor] = Field(default_factory=list)

    # ── Lookups ───────────────────────────────────────────────────────

    def get_floor_by_number(self, floor_number: int) -> Floor | None:
        """Find a floor by its number."""
        return next((f for f in self.floors if f.floor_number == floor_number), None)

    def _require_floor(self, floor_number: int) -> Floor:
        """Get a floor by number or raise InvalidArgumentError."""
        floor = self.get_floor_by_number(floor_number)
        if floor is None:
            available = [f.floor_number for f in self.floors]
            raise InvalidArgumentError(
                f"Floor {floor_number} not found. Available: {available}"
            )
        return floor

    def iter_rooms(self) -> Iterator[tuple[Floor, Room]]:
        """Every room in the building with the floor it is on."""
        for floor in self.floors:
            for room in floor.rooms:
                yield floor, room

    def room_count(self) -> int:
        return sum(len(f.rooms) for f in self.floors)

    # ── Structure ─────────────────────────────────────────────────────

    def add_floor(self, floor: Floor) -> Floor:
        """Add a floor on top of the stack. Returns the added floor.

        Raises:
            InvalidArgumentError: floor number below 1, or width/length not
                finite or below their minimums.
            DuplicateFloorError: a floor with this number exists.
            NoFloorBelowError: floor N >= 2 without floor N-1.
            FloorTooSmallError: the floor below is narrower or shorter.
            DuplicateRoomError, InsufficientSpaceError, InvalidArgumentError:
                rooms already on the floor break a ``Floor.add_room`` rule.
        """
        number = floor.floor_number
        if number < 1:
            raise InvalidArgumentError("Floor number must be 1 or higher")
        check_dimensions(floor.width, floor.length)
        if self.get_floor_by_number(number) is not None:
            raise DuplicateFloorError(f"Floor {number} already exists in '{self.name}'")

        if number >= 2:
            below = self.get_floor_by_number(number - 1)
            if below is None:
                raise NoFloorBelowError(
                    f"There is no floor {number - 1} to support floor {number}"
                )
            if floor.width > below.width or floor.length > below.length:
                raise FloorTooSmallError(
                    f"Floor {number - 1} ({below.width:.2f}x{below.length:.2f}) "
                    f"cannot support floor {number} ({floor.width:.2f}x{floor.length:.2f})"
                )
        floor.check_rooms()

        self.floors.append(floor)
        return floor

    def add_room(self, floor_number: int, room: Room) -> Room:
        """Add a room to a floor (by floor number). Returns the added room."""
        return self._require_floor(floor_number).add_room(room)

    def renovate_floor(self, floor_number: int, new_width: float, new_length: float) -> Floor:
        """Resize a floor, keeping the stack and its rooms consistent.

        A shrinking floor must still hold its rooms and the floor above it; a
        growing floor must still fit on the floor below. A change that grows
        one dimension and shrinks the other is checked both ways.

        Raises:
            InvalidArgumentError: no such floor, or a dimension not finite or
                below its minimum.
            FloorTooSmallError: any of the rules above would be broken.
        """
        floor = self._require_floor(floor_number)
        check_dimensions(new_width, new_length)

        shrinking = new_width < floor.width or new_length < floor.length
        growing = new_width > floor.width or new_length > floor.length

        if shrinking:
            if floor.occupied_area() > new_width * new_length:
                raise FloorTooSmallError(
                    f"Floor {floor_number} rooms occupy {floor.occupied_area():.2f}m^2, "
                    f"more than {new_width * new_length:.2f}m^2"
                )
            above = self.get_floor_by_number(floor_number + 1)
            if above is not None and (above.width > new_width or above.length > new_length):
                raise FloorTooSmallError(
                    f"Floor {floor_number} would be too small to support floor {floor_number + 1}"
                )
        if growing:
            below = self.get_floor_by_number(floor_number - 1)
            if below is not None and (new_width > below.width or new_length > below.length):
                raise FloorTooSmallError(
                    f"Floor {floor_number - 1} is too small to support a larger floor {floor_number}"
                )

        floor.change_dimensions(new_width, new_length)
        return floor

    # ── Fire drills ───────────────────────────────────────────────────

    def fire_drill(self, room_type: RoomType | None = None) -> None:
        """Start a fire drill in every room of ``room_type`` (all rooms if None).

        Raises:
            NoRoomsAvailableError: the building has no floors, or floors
                without any rooms.
        """
        if not self.floors:
            raise NoRoomsAvailableError(
                "Cannot conduct fire drill because there are no floors in the building yet"
            )
        if self.room_count() == 0:
            raise NoRoomsAvailableError(
                "Cannot conduct fire drill because there are no rooms in the building yet"
            )
        for floor in self.floors:
            floor.fire_drill(room_type)

    def cancel_fire_drill(self) -> None:
        """End any fire drill in every room of the building."""
        for floor in self.floors:
            floor.cancel_fire_drill()

    # ── Export shortcuts ──────────────────────────────────────────────

    def encode(self) -> str:
        """Text save-format encoding of the building."""
        from building_manager.persistence.encoding import encode_building

        return encode_building(self)

    def render_overview(self, path: str | Path, **kwargs) -> Path:
        """Render the floor occupancy chart. Returns the output path."""
        from building_manager.export.overview import render_overview

        return render_overview(self, path, **kwargs)

    def validate(self) -> list:
        """Audit every hierarchy invariant. Returns list of errors."""
        from building_manager.validators.hierarchy import validate_building

        return validate_building(self)

    # ── Query helpers ─────────────────────────────────────────────────

    def rooms_in_state(self, state: RoomState) -> list[Room]:
        """All rooms currently in the given state."""
        return [room for _, room in self.iter_rooms() if room.evaluate_state() == state]

    def summary(self) -> str:
        """Human-readable summary of the building."""
        lines = [str(self)]
        for floor in self.floors:
            lines.append(
                f"   {floor} (occupied {floor.occupied_area():.1f} / "
                f"{floor.footprint_area():.1f} m²)"
            )
            schedule = floor.maintenance_schedule
            if schedule is not None:
                lines.append(f"      {schedule}")
            for room in floor.rooms:
                lines.append(f"      {room} [{room.evaluate_state().value}]")
        return "\n".join(lines)

    # ── Value semantics ───────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Building):
            return NotImplemented
        return (
            self.name == other.name
            and len(self.floors) == len(other.floors)
            and all(f in other.floors for f in self.floors)
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f'Building: name="{self.name}", floors={len(self.floors)}'
