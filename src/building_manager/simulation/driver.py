"""Top-level simulation driver."""

from __future__ import annotations

import logging

from building_manager.models.building import Building
from building_manager.simulation.clock import SimulationClock, TickFault

logger = logging.getLogger(__name__)


class Simulation:
    """Owns a clock and the buildings it drives.

    Attaching a building registers, floor by floor, every room's sensors and
    then the floor's maintenance schedule, so schedules see the readings of
    the minute they tick in.
    """

    def __init__(self, clock: SimulationClock | None = None) -> None:
        self.clock = clock if clock is not None else SimulationClock()
        self.buildings: list[Building] = []

    def attach(self, building: Building) -> None:
        """Register all of a building's tick-consumers with the clock."""
        for floor in building.floors:
            for room in floor.rooms:
                for sensor in room.sensors:
                    self.clock.register(sensor)
            if floor.maintenance_schedule is not None:
                self.clock.register(floor.maintenance_schedule)
        if not any(b is building for b in self.buildings):
            self.buildings.append(building)
        logger.debug(
            "Attached '%s': %d tick consumers registered",
            building.name, len(self.clock.consumers),
        )

    def run(self, minutes: int) -> list[TickFault]:
        """Advance the clock ``minutes`` times. Returns any isolated faults."""
        faults = self.clock.advance(minutes)
        if faults:
            logger.warning("%d tick fault(s) over %d minute(s)", len(faults), minutes)
        return faults
