"""Tests for the hierarchy validators."""

from building_manager.models import (
    Building,
    Floor,
    NoiseSensor,
    Room,
    RoomType,
    SensorKind,
    WeightingBasedEvaluator,
)
from building_manager.validators import validate_building
from building_manager.validators.hierarchy import (
    validate_maintenance_order,
    validate_occupied_area,
    validate_rooms,
)


def _messages(errors):
    return [e.message for e in errors]


def make_valid_building() -> Building:
    b = Building(name="Valid")
    ground = b.add_floor(Floor(floor_number=1, width=10, length=10))
    b.add_floor(Floor(floor_number=2, width=8, length=8))
    ground.add_room(Room(room_number=101, room_type=RoomType.STUDY, area=20))
    ground.add_room(Room(room_number=102, room_type=RoomType.OFFICE, area=20))
    ground.create_maintenance_schedule([101, 102])
    return b


class TestValidBuilding:
    def test_no_errors(self):
        assert validate_building(make_valid_building()) == []

    def test_building_shortcut(self):
        assert make_valid_building().validate() == []


class TestFloorStack:
    def test_missing_floor_below(self):
        b = Building(name="Hand-built", floors=[Floor(floor_number=2, width=10, length=10)])
        errors = validate_building(b)
        assert any("no floor below" in m for m in _messages(errors))

    def test_overhang(self):
        b = Building(name="Hand-built", floors=[
            Floor(floor_number=1, width=10, length=10),
            Floor(floor_number=2, width=12, length=10),
        ])
        errors = validate_building(b)
        assert len(errors) == 1
        assert "overhangs floor 1" in errors[0].message
        assert errors[0].element_id == "floor-2"

    def test_duplicate_and_non_positive_numbers(self):
        b = Building(name="Hand-built", floors=[
            Floor(floor_number=0, width=10, length=10),
            Floor(floor_number=1, width=10, length=10),
            Floor(floor_number=1, width=10, length=10),
        ])
        messages = _messages(validate_building(b))
        assert any("must be 1 or higher" in m for m in messages)
        assert any("appears 2 times" in m for m in messages)

    def test_dimensions_below_minimum(self):
        b = Building(name="Hand-built", floors=[Floor(floor_number=1, width=3, length=10)])
        assert any("minimum is 5x5" in m for m in _messages(validate_building(b)))


class TestRooms:
    def test_overfull_floor(self):
        floor = Floor(floor_number=1, width=5, length=5, rooms=[
            Room(room_number=1, room_type=RoomType.STUDY, area=20),
            Room(room_number=2, room_type=RoomType.STUDY, area=20),
        ])
        errors = validate_occupied_area(floor)
        assert len(errors) == 1
        assert errors[0].severity == "error"

    def test_duplicate_room_and_small_area(self):
        floor = Floor(floor_number=1, width=10, length=10, rooms=[
            Room(room_number=1, room_type=RoomType.STUDY, area=20),
            Room(room_number=1, room_type=RoomType.OFFICE, area=3),
        ])
        messages = _messages(validate_rooms(floor))
        assert any("appears 2 times" in m for m in messages)
        assert any("minimum is 5" in m for m in messages)

    def test_duplicate_sensor_kind(self):
        room = Room(room_number=1, room_type=RoomType.STUDY, area=20, sensors=[
            NoiseSensor(readings=[50]),
            NoiseSensor(readings=[60]),
        ])
        floor = Floor(floor_number=1, width=10, length=10, rooms=[room])
        errors = validate_rooms(floor)
        assert errors[0].element_type == "Sensor"

    def test_evaluator_lost_its_sensor(self):
        room = Room(room_number=1, room_type=RoomType.STUDY, area=20)
        room.add_sensor(NoiseSensor(readings=[50]))
        room.set_hazard_evaluator(WeightingBasedEvaluator(weights={SensorKind.NOISE: 100}))
        room.sensors.clear()
        floor = Floor(floor_number=1, width=10, length=10, rooms=[room])
        errors = validate_rooms(floor)
        assert errors[0].element_type == "HazardEvaluator"
        assert "NoiseSensor" in errors[0].message


class TestMaintenanceOrder:
    def test_no_schedule(self):
        assert validate_maintenance_order(Floor(floor_number=1, width=10, length=10)) == []

    def test_room_removed_after_scheduling(self):
        b = make_valid_building()
        floor = b.floors[0]
        floor.rooms.pop(1)
        messages = _messages(validate_maintenance_order(floor))
        assert messages == ["Maintenance order names room 102, which is not on the floor"]

    def test_wrong_room_flagged(self):
        b = make_valid_building()
        floor = b.floors[0]
        floor.get_room_by_number(102).maintenance = True
        errors = validate_maintenance_order(floor)
        assert len(errors) == 1
        assert errors[0].severity == "warning"
