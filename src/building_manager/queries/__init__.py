"""Room query tools.

- study_room: recommend the most comfortable open study room
"""

from building_manager.queries.study_room import (
    average_comfort,
    best_room_on_floor,
    recommend_study_room,
)

__all__ = [
    "average_comfort",
    "best_room_on_floor",
    "recommend_study_room",
]
