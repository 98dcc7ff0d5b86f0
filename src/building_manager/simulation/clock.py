"""Simulation clock: advances every registered tick-consumer one minute at a time.

The clock is an explicit object owned by whoever drives the simulation. It
does not own its consumers; they register themselves (maintenance schedules
do so when created with a clock) and stay registered for the clock's life.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class TickConsumer(Protocol):
    """Anything that can advance by one simulated minute."""

    def per_minute_tick(self) -> None: ...


@dataclass
class TickFault:
    """A consumer that raised while being ticked."""

    minute: int
    consumer: TickConsumer
    error: Exception


class SimulationClock:
    """Single logical stepper over all registered consumers."""

    def __init__(self) -> None:
        self._consumers: list[TickConsumer] = []
        self._minute = 0

    @property
    def minute(self) -> int:
        """Number of minutes advanced so far."""
        return self._minute

    @property
    def consumers(self) -> list[TickConsumer]:
        """Registered consumers in registration order (a copy)."""
        return list(self._consumers)

    def register(self, consumer: TickConsumer) -> None:
        """Register a consumer. Registering the same object twice is a no-op."""
        if any(c is consumer for c in self._consumers):
            return
        self._consumers.append(consumer)

    def advance_one_minute(self) -> list[TickFault]:
        """Tick every consumer once, in registration order.

        A consumer that raises is logged and skipped; the rest still tick.
        Returns the faults of this minute (empty when all went well).
        """
        self._minute += 1
        faults: list[TickFault] = []
        for consumer in list(self._consumers):
            try:
                consumer.per_minute_tick()
            except Exception as e:
                logger.exception(
                    "Minute %d: %s failed to tick", self._minute, type(consumer).__name__
                )
                faults.append(TickFault(minute=self._minute, consumer=consumer, error=e))
        return faults

    def advance(self, minutes: int) -> list[TickFault]:
        """Advance several minutes. Returns all faults in order."""
        if minutes < 0:
            raise ValueError("Cannot advance a negative number of minutes")
        faults: list[TickFault] = []
        for _ in range(minutes):
            faults.extend(self.advance_one_minute())
        return faults
