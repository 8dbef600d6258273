"""Robot log reading, sensor layouts, particle filter helpers and occupancy statistics."""

__version__ = "0.1.0"

__all__ = [
    "commandline",
    "configuration",
    "particlefilter",
    "sensorlog",
    "sensors",
    "smmap",
    "stats",
    "tools",
    "weights",
]