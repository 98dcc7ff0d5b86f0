"""Tests for sensors, hazard evaluators and rooms."""

from dataclasses import dataclass

import pytest
from pydantic import ValidationError

from building_manager.models import (
    CarbonDioxideSensor,
    DuplicateSensorError,
    InvalidArgumentError,
    NoiseSensor,
    OccupancySensor,
    Room,
    RoomState,
    RoomType,
    RuleBasedEvaluator,
    SensorKind,
    TemperatureSensor,
    WeightingBasedEvaluator,
    comfort_level,
)
from building_manager.models.evaluators import round_half_up


@dataclass
class FixedSensor:
    """Sensor stand-in with a fixed hazard level."""

    kind: SensorKind
    level: int

    def hazard_level(self) -> int:
        return self.level


def fixed(*pairs: tuple[SensorKind, int]) -> dict[SensorKind, FixedSensor]:
    return {kind: FixedSensor(kind, level) for kind, level in pairs}


class TestSensorReadings:
    def test_first_reading_is_current(self):
        sensor = NoiseSensor(readings=[55, 62, 69, 63], update_frequency=3)
        assert sensor.current_reading == 55

    def test_reading_advances_every_update_frequency_minutes(self):
        sensor = NoiseSensor(readings=[55, 62, 69, 63], update_frequency=3)
        for _ in range(2):
            sensor.per_minute_tick()
        assert sensor.current_reading == 55
        sensor.per_minute_tick()
        assert sensor.current_reading == 62
        assert sensor.minutes_elapsed == 3

    def test_readings_wrap_around(self):
        sensor = NoiseSensor(readings=[55, 62, 69, 63], update_frequency=3)
        for _ in range(12):
            sensor.per_minute_tick()
        assert sensor.current_reading == 55

    def test_empty_readings_rejected(self):
        with pytest.raises(ValidationError):
            TemperatureSensor(readings=[])

    def test_negative_reading_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            TemperatureSensor(readings=[20, -1])

    def test_update_frequency_bounds(self):
        NoiseSensor(readings=[50], update_frequency=5)
        with pytest.raises(ValidationError):
            NoiseSensor(readings=[50], update_frequency=6)
        with pytest.raises(ValidationError):
            NoiseSensor(readings=[50], update_frequency=0)

    def test_temperature_frequency_is_fixed(self):
        with pytest.raises(ValidationError):
            TemperatureSensor(readings=[20], update_frequency=2)

    def test_equality_ignores_replay_position(self):
        a = OccupancySensor(readings=[1, 2], update_frequency=1, capacity=10)
        b = OccupancySensor(readings=[1, 2], update_frequency=1, capacity=10)
        a.per_minute_tick()
        assert a == b
        assert a != OccupancySensor(readings=[1, 2], update_frequency=1, capacity=11)


class TestSensorLevels:
    def test_temperature_hazard(self):
        assert TemperatureSensor(readings=[28]).hazard_level() == 41
        assert TemperatureSensor(readings=[68]).hazard_level() == 100
        assert TemperatureSensor(readings=[90]).hazard_level() == 100

    def test_noise_at_reference_is_full_hazard(self):
        sensor = NoiseSensor(readings=[70])
        assert sensor.relative_loudness() == 1.0
        assert sensor.hazard_level() == 100
        assert sensor.comfort_level() == 0

    def test_noise_ten_db_quieter_halves_loudness(self):
        sensor = NoiseSensor(readings=[60])
        assert sensor.hazard_level() == 50
        assert sensor.comfort_level() == 50

    def test_noise_levels_truncate(self):
        sensor = NoiseSensor(readings=[55])
        assert sensor.hazard_level() == 35
        assert sensor.comfort_level() == 64

    def test_occupancy(self):
        sensor = OccupancySensor(readings=[15], capacity=30)
        assert sensor.hazard_level() == 50
        assert sensor.comfort_level() == 50
        full = OccupancySensor(readings=[30], capacity=30)
        assert full.hazard_level() == 100
        assert full.comfort_level() == 0

    def test_co2_hazard_bands(self):
        def level(reading: int) -> int:
            return CarbonDioxideSensor(
                readings=[reading], ideal_value=700, variation_limit=300
            ).hazard_level()

        assert level(999) == 0
        assert level(1000) == 25
        assert level(2500) == 50
        assert level(5000) == 100

    def test_co2_comfort(self):
        near = CarbonDioxideSensor(readings=[690], ideal_value=700, variation_limit=300)
        assert near.comfort_level() == 96
        far = CarbonDioxideSensor(readings=[1120], ideal_value=700, variation_limit=300)
        assert far.comfort_level() == 0

    def test_co2_limit_cannot_exceed_ideal(self):
        with pytest.raises(ValidationError, match="Variation limit"):
            CarbonDioxideSensor(readings=[500], ideal_value=100, variation_limit=200)

    def test_temperature_has_no_comfort(self):
        assert comfort_level(TemperatureSensor(readings=[20])) is None
        assert comfort_level(NoiseSensor(readings=[60])) == 50


class TestRuleBasedEvaluator:
    def test_no_sensors(self):
        assert RuleBasedEvaluator().evaluate({}) == 0

    def test_single_sensor_passes_through(self):
        evaluator = RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE,))
        assert evaluator.evaluate(fixed((SensorKind.NOISE, 37))) == 37

    def test_any_sensor_at_100_short_circuits(self):
        evaluator = RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE, SensorKind.TEMPERATURE))
        sensors = fixed((SensorKind.NOISE, 10), (SensorKind.TEMPERATURE, 100))
        assert evaluator.evaluate(sensors) == 100

    def test_count_over_total_without_occupancy(self):
        evaluator = RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE, SensorKind.TEMPERATURE))
        sensors = fixed((SensorKind.NOISE, 10), (SensorKind.TEMPERATURE, 20))
        assert evaluator.evaluate(sensors) == 1

    def test_occupancy_truncates_to_zero(self):
        # integer arithmetic: (1 // 2) * (50 // 100)
        evaluator = RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE, SensorKind.OCCUPANCY))
        sensors = fixed((SensorKind.NOISE, 10), (SensorKind.OCCUPANCY, 50))
        assert evaluator.evaluate(sensors) == 0

    def test_full_occupancy_does_not_short_circuit(self):
        evaluator = RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE, SensorKind.OCCUPANCY))
        sensors = fixed((SensorKind.NOISE, 10), (SensorKind.OCCUPANCY, 100))
        assert evaluator.evaluate(sensors) == 0

    def test_duplicate_kind_rejected(self):
        with pytest.raises(InvalidArgumentError, match="twice"):
            RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE, SensorKind.NOISE))

    def test_missing_sensor(self):
        evaluator = RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE,))
        with pytest.raises(InvalidArgumentError, match="NoiseSensor"):
            evaluator.evaluate({})

    def test_str(self):
        assert str(RuleBasedEvaluator()) == "RuleBased"


class TestWeightingBasedEvaluator:
    def test_weighted_average(self):
        evaluator = WeightingBasedEvaluator(
            weights={SensorKind.OCCUPANCY: 25, SensorKind.NOISE: 75}
        )
        sensors = fixed((SensorKind.OCCUPANCY, 80), (SensorKind.NOISE, 40))
        assert evaluator.evaluate(sensors) == 50

    def test_halves_round_up(self):
        evaluator = WeightingBasedEvaluator(
            weights={SensorKind.OCCUPANCY: 50, SensorKind.NOISE: 50}
        )
        sensors = fixed((SensorKind.OCCUPANCY, 33), (SensorKind.NOISE, 34))
        assert evaluator.evaluate(sensors) == 34

    def test_weights_must_sum_to_100(self):
        with pytest.raises(InvalidArgumentError, match="sum to 100"):
            WeightingBasedEvaluator(weights={SensorKind.OCCUPANCY: 50, SensorKind.NOISE: 60})

    def test_weight_out_of_range(self):
        with pytest.raises(InvalidArgumentError, match="0-100"):
            WeightingBasedEvaluator(weights={SensorKind.OCCUPANCY: 105, SensorKind.NOISE: -5})

    def test_keeps_its_own_copy_of_weights(self):
        weights = {SensorKind.NOISE: 100}
        evaluator = WeightingBasedEvaluator(weights=weights)
        weights[SensorKind.NOISE] = 0
        assert evaluator.weighting_for(SensorKind.NOISE) == 100
        assert evaluator.sensor_kinds == (SensorKind.NOISE,)

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2


class TestRoom:
    def test_sensors_sorted_by_type_id(self):
        room = Room(room_number=1, room_type=RoomType.OFFICE, area=20)
        room.add_sensor(TemperatureSensor(readings=[20]))
        room.add_sensor(CarbonDioxideSensor(readings=[700], ideal_value=700, variation_limit=300))
        room.add_sensor(NoiseSensor(readings=[50]))
        assert [s.kind for s in room.sensors] == [
            SensorKind.CARBON_DIOXIDE,
            SensorKind.NOISE,
            SensorKind.TEMPERATURE,
        ]

    def test_duplicate_sensor_kind(self):
        room = Room(room_number=1, room_type=RoomType.OFFICE, area=20)
        room.add_sensor(NoiseSensor(readings=[50]))
        with pytest.raises(DuplicateSensorError):
            room.add_sensor(NoiseSensor(readings=[60]))
        assert len(room.sensors) == 1

    def test_adding_sensor_resets_evaluator(self):
        room = Room(room_number=1, room_type=RoomType.OFFICE, area=20)
        room.add_sensor(NoiseSensor(readings=[60]))
        room.set_hazard_evaluator(RuleBasedEvaluator(sensor_kinds=(SensorKind.NOISE,)))
        assert room.hazard_level() == 50
        room.add_sensor(TemperatureSensor(readings=[20]))
        assert room.hazard_evaluator is None
        assert room.hazard_level() is None

    def test_evaluator_needs_installed_sensors(self):
        room = Room(room_number=1, room_type=RoomType.OFFICE, area=20)
        with pytest.raises(InvalidArgumentError, match="NoiseSensor"):
            room.set_hazard_evaluator(WeightingBasedEvaluator(weights={SensorKind.NOISE: 100}))

    def test_weighted_room_hazard(self):
        room = Room(room_number=1, room_type=RoomType.LABORATORY, area=20)
        room.add_sensor(NoiseSensor(readings=[60]))
        room.add_sensor(OccupancySensor(readings=[15], capacity=30))
        room.set_hazard_evaluator(
            WeightingBasedEvaluator(weights={SensorKind.NOISE: 40, SensorKind.OCCUPANCY: 60})
        )
        assert room.hazard_level() == 50

    def test_state_open_by_default(self):
        room = Room(room_number=1, room_type=RoomType.STUDY, area=20)
        assert room.evaluate_state() == RoomState.OPEN

    def test_state_maintenance(self):
        room = Room(room_number=1, room_type=RoomType.STUDY, area=20, maintenance=True)
        assert room.evaluate_state() == RoomState.MAINTENANCE

    def test_fire_drill_overrides_maintenance(self):
        room = Room(room_number=1, room_type=RoomType.STUDY, area=20, maintenance=True)
        room.fire_drill = True
        assert room.evaluate_state() == RoomState.EVACUATE

    def test_fire_reading_evacuates(self):
        room = Room(room_number=1, room_type=RoomType.STUDY, area=20)
        room.add_sensor(TemperatureSensor(readings=[20, 68]))
        assert room.evaluate_state() == RoomState.OPEN
        room.sensors[0].per_minute_tick()
        assert room.evaluate_state() == RoomState.EVACUATE

    def test_equality(self):
        a = Room(room_number=1, room_type=RoomType.STUDY, area=20.0)
        b = Room(room_number=1, room_type=RoomType.STUDY, area=20.0004, fire_drill=True)
        assert a == b
        assert a != Room(room_number=1, room_type=RoomType.OFFICE, area=20.0)
        b.add_sensor(NoiseSensor(readings=[50]))
        assert a != b

    def test_str(self):
        room = Room(room_number=42, room_type=RoomType.STUDY, area=22.5)
        room.add_sensor(NoiseSensor(readings=[50]))
        room.add_sensor(TemperatureSensor(readings=[20]))
        assert str(room) == "Room #42: type=STUDY, area=22.50m^2, sensors=2"
