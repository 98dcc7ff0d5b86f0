"""Simulated time: the clock and the driver that owns it."""

from building_manager.simulation.clock import SimulationClock, TickConsumer, TickFault
from building_manager.simulation.driver import Simulation

__all__ = [
    "SimulationClock",
    "TickConsumer",
    "TickFault",
    "Simulation",
]
