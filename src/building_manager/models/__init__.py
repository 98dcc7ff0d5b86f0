"""Building data models."""

from building_manager.models.errors import (
    BuildingError,
    InvalidArgumentError,
    DuplicateFloorError,
    DuplicateRoomError,
    DuplicateSensorError,
    NoFloorBelowError,
    FloorTooSmallError,
    InsufficientSpaceError,
    NoRoomsAvailableError,
)
from building_manager.models.sensors import (
    SensorKind,
    Sensor,
    HazardSensor,
    CarbonDioxideSensor,
    NoiseSensor,
    OccupancySensor,
    TemperatureSensor,
    comfort_level,
)
from building_manager.models.evaluators import (
    HazardEvaluator,
    RuleBasedEvaluator,
    WeightingBasedEvaluator,
)
from building_manager.models.room import MIN_ROOM_AREA, Room, RoomState, RoomType
from building_manager.models.maintenance import MaintenanceSchedule, required_minutes
from building_manager.models.floor import MIN_FLOOR_LENGTH, MIN_FLOOR_WIDTH, Floor
from building_manager.models.building import Building

__all__ = [
    "BuildingError",
    "InvalidArgumentError",
    "DuplicateFloorError",
    "DuplicateRoomError",
    "DuplicateSensorError",
    "NoFloorBelowError",
    "FloorTooSmallError",
    "InsufficientSpaceError",
    "NoRoomsAvailableError",
    "SensorKind",
    "Sensor",
    "HazardSensor",
    "CarbonDioxideSensor",
    "NoiseSensor",
    "OccupancySensor",
    "TemperatureSensor",
    "comfort_level",
    "HazardEvaluator",
    "RuleBasedEvaluator",
    "WeightingBasedEvaluator",
    "MIN_ROOM_AREA",
    "Room",
    "RoomState",
    "RoomType",
    "MaintenanceSchedule",
    "required_minutes",
    "MIN_FLOOR_LENGTH",
    "MIN_FLOOR_WIDTH",
    "Floor",
    "Building",
]
