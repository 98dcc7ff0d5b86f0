"""Hazard evaluators: combine a room's sensor readings into one hazard level.

Evaluators are immutable and refer to sensors by kind, not by object, so the
room stays the only owner of its sensors. Scores are recomputed from the
current readings on every call.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field

from building_manager.models.errors import InvalidArgumentError
from building_manager.models.sensors import HazardSensor, SensorKind


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def _lookup(sensors: Mapping[SensorKind, HazardSensor], kind: SensorKind) -> HazardSensor:
    sensor = sensors.get(kind)
    if sensor is None:
        raise InvalidArgumentError(f"No {kind.value} available to evaluate")
    return sensor


@dataclass(frozen=True)
class RuleBasedEvaluator:
    """Rule-based evaluation over a fixed set of sensor kinds.

    - no sensors: 0
    - one sensor: its hazard level, unchanged
    - otherwise any non-occupancy sensor at 100 short-circuits to 100;
      every other non-occupancy sensor adds one to a count, and the result
      is ``count // total`` scaled by ``occupancy // 100`` when the occupancy
      sensor reads above zero.

    The integer divisions are deliberate and kept as-is.
    """

    sensor_kinds: tuple[SensorKind, ...] = ()

    kind = "RuleBased"

    def __post_init__(self) -> None:
        object.__setattr__(self, "sensor_kinds", tuple(self.sensor_kinds))
        if len(set(self.sensor_kinds)) != len(self.sensor_kinds):
            raise InvalidArgumentError("Rule-based evaluator lists a sensor kind twice")

    def evaluate(self, sensors: Mapping[SensorKind, HazardSensor]) -> int:
        total = len(self.sensor_kinds)
        if total == 0:
            return 0
        if total == 1:
            return _lookup(sensors, self.sensor_kinds[0]).hazard_level()

        count = 0
        occupancy_level = 0
        for sensor_kind in self.sensor_kinds:
            level = _lookup(sensors, sensor_kind).hazard_level()
            if sensor_kind == SensorKind.OCCUPANCY:
                occupancy_level = level
                continue
            if level == 100:
                return 100
            count += 1

        if occupancy_level != 0:
            return (count // total) * (occupancy_level // 100)
        return count // total

    def __str__(self) -> str:
        return self.kind


@dataclass(frozen=True)
class WeightingBasedEvaluator:
    """Weighted average of hazard levels.

    Weights are integers in [0, 100] and must sum to exactly 100.
    """

    weights: Mapping[SensorKind, int] = field(default_factory=dict)

    kind = "WeightingBased"

    def __post_init__(self) -> None:
        for sensor_kind, weight in self.weights.items():
            if weight < 0 or weight > 100:
                raise InvalidArgumentError(
                    f"Weighting for {sensor_kind.value} must be within 0-100, got {weight}"
                )
        total = sum(self.weights.values())
        if total != 100:
            raise InvalidArgumentError(f"Weightings must sum to 100, got {total}")
        # own copy of the mapping
        object.__setattr__(self, "weights", dict(self.weights))

    @property
    def sensor_kinds(self) -> tuple[SensorKind, ...]:
        return tuple(self.weights)

    def weighting_for(self, sensor_kind: SensorKind) -> int:
        return self.weights[sensor_kind]

    def evaluate(self, sensors: Mapping[SensorKind, HazardSensor]) -> int:
        total = 0
        weight_sum = 0
        for sensor_kind, weight in self.weights.items():
            total += _lookup(sensors, sensor_kind).hazard_level() * weight
            weight_sum += weight
        return round_half_up(total / weight_sum)

    def __str__(self) -> str:
        return self.kind


HazardEvaluator = RuleBasedEvaluator | WeightingBasedEvaluator

EVALUATOR_KINDS: tuple[str, ...] = (RuleBasedEvaluator.kind, WeightingBasedEvaluator.kind)
