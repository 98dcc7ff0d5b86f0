"""Building management model: floors, rooms, hazard sensing and maintenance."""

__version__ = "0.1.0"
