"""Small campus building — proof of concept.

Two floors:
- Floor 1: 12m x 10m, a study room (with occupancy sensor) and an office
- Floor 2: 10m x 10m, a laboratory with noise and temperature sensors

Floor 1 rotates maintenance between its two rooms. The script runs an hour
of simulated time with a fire drill in the middle, then saves the result.

   Floor 2   +----------+
             |   201    |
   Floor 1   +------------+
             | 101 | 102  |
             +------------+
"""

from pathlib import Path

from building_manager.models import (
    Building,
    Floor,
    NoiseSensor,
    OccupancySensor,
    Room,
    RoomType,
    RuleBasedEvaluator,
    SensorKind,
    TemperatureSensor,
    WeightingBasedEvaluator,
)
from building_manager.persistence import save_buildings
from building_manager.queries import recommend_study_room
from building_manager.simulation import Simulation


def build_campus() -> Building:
    building = Building(name="Small Campus")
    ground = building.add_floor(Floor(floor_number=1, width=12, length=10))
    upper = building.add_floor(Floor(floor_number=2, width=10, length=10))

    study = ground.add_room(Room(room_number=101, room_type=RoomType.STUDY, area=30))
    study.add_sensor(OccupancySensor(readings=[4, 12, 20, 8], update_frequency=5, capacity=25))
    study.set_hazard_evaluator(RuleBasedEvaluator(sensor_kinds=(SensorKind.OCCUPANCY,)))
    ground.add_room(Room(room_number=102, room_type=RoomType.OFFICE, area=40))

    lab = upper.add_room(Room(room_number=201, room_type=RoomType.LABORATORY, area=45))
    lab.add_sensor(NoiseSensor(readings=[55, 62, 69, 63], update_frequency=3))
    lab.add_sensor(TemperatureSensor(readings=[21, 22, 24, 23]))
    lab.set_hazard_evaluator(
        WeightingBasedEvaluator(weights={SensorKind.NOISE: 40, SensorKind.TEMPERATURE: 60})
    )
    return building


def main() -> None:
    building = build_campus()
    simulation = Simulation()
    building.floors[0].create_maintenance_schedule([101, 102], clock=simulation.clock)
    simulation.attach(building)

    simulation.run(20)
    building.fire_drill(RoomType.STUDY)
    simulation.run(10)
    building.cancel_fire_drill()
    simulation.run(30)

    print(building.summary())
    room = recommend_study_room(building)
    print(f"Recommended study room: {room.room_number if room else 'none'}")

    errors = building.validate()
    print(f"Validation: {len(errors)} issue(s)")

    out = Path(__file__).parent / "output"
    save_buildings([building], out / "small_campus.txt")
    building.render_overview(out / "small_campus.png")
    print(f"Saved to {out}")


if __name__ == "__main__":
    main()
