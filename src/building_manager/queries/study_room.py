"""Study room recommendation.

Only rooms that are OPEN and meant for study are candidates. Among them the
room with the highest average comfort wins; on a tie the first one found
is kept.
"""

from __future__ import annotations

from building_manager.models.building import Building
from building_manager.models.floor import Floor
from building_manager.models.room import Room, RoomState, RoomType
from building_manager.models.sensors import comfort_level


def average_comfort(room: Room | None) -> int:
    """Mean comfort level over a room's comfort sensors (0 if none)."""
    if room is None:
        return 0
    levels = [c for s in room.sensors if (c := comfort_level(s)) is not None]
    if not levels:
        return 0
    return sum(levels) // len(levels)


def best_room_on_floor(floor: Floor) -> Room | None:
    """Most comfortable open study room on a floor, or None."""
    candidates = [
        r for r in floor.rooms
        if r.room_type == RoomType.STUDY and r.evaluate_state() == RoomState.OPEN
    ]
    best: Room | None = None
    for room in candidates:
        if best is None or average_comfort(room) > average_comfort(best):
            best = room
    return best


def recommend_study_room(building: Building) -> Room | None:
    """Most comfortable open study room in the building, or None."""
    best: Room | None = None
    for floor in building.floors:
        candidate = best_room_on_floor(floor)
        if candidate is None:
            continue
        if best is None or average_comfort(candidate) > average_comfort(best):
            best = candidate
    return best
