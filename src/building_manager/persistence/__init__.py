"""Line-oriented text format for saving and loading buildings.

A save file holds any number of buildings back to back::

    <building name>
    <floor count>
    <number>:<width>:<length>:<room count>[:<maintenance room order>]
    <number>:<TYPE>:<area>:<sensor count>[:RuleBased|WeightingBased]
    <SensorType>:<readings>[:<fields>...][@<weighting>]
    ...
"""

from building_manager.persistence.encoding import (
    encode_building,
    encode_buildings,
    encode_floor,
    encode_room,
    encode_sensor,
)
from building_manager.persistence.loader import (
    FileFormatError,
    load_buildings,
    parse_buildings,
    save_buildings,
)

__all__ = [
    "encode_building",
    "encode_buildings",
    "encode_floor",
    "encode_room",
    "encode_sensor",
    "FileFormatError",
    "load_buildings",
    "parse_buildings",
    "save_buildings",
]
