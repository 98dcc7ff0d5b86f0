"""Error kinds raised by the building hierarchy.

All of them are local validation failures: the operation that raised did not
change anything, and the caller may retry with corrected input.
"""

from __future__ import annotations


class BuildingError(ValueError):
    """Base class for every core validation failure."""


class InvalidArgumentError(BuildingError):
    """Malformed or out-of-range input to a constructor or mutator."""


class DuplicateFloorError(BuildingError):
    """A floor with the same number already exists in the building."""


class DuplicateRoomError(BuildingError):
    """A room with the same number already exists on the floor."""


class DuplicateSensorError(BuildingError):
    """The room already carries a sensor of the same kind."""


class NoFloorBelowError(BuildingError):
    """Floor N >= 2 was added without floor N-1 in place."""


class FloorTooSmallError(BuildingError):
    """A floor cannot support what is above it or on it."""


class InsufficientSpaceError(BuildingError):
    """Not enough unoccupied floor area for a new room."""


class NoRoomsAvailableError(BuildingError):
    """A fire drill was requested in a building without rooms."""
