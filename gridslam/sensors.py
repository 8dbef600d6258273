"""Sensors, beams and the readings they produce."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Optional

__all__ = [
    "OrientedPoint",
    "Sensor",
    "OdometrySensor",
    "Beam",
    "RangeSensor",
    "SensorReading",
    "OdometryReading",
    "RangeReading",
]


@dataclass(frozen=True)
class OrientedPoint:
    """A planar pose: position and heading in radians."""

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0

    def __add__(self, other: "OrientedPoint") -> "OrientedPoint":
        return OrientedPoint(self.x + other.x, self.y + other.y, self.theta + other.theta)

    def __sub__(self, other: "OrientedPoint") -> "OrientedPoint":
        return OrientedPoint(self.x - other.x, self.y - other.y, self.theta - other.theta)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.theta))


@dataclass
class Sensor:
    """A named sensor mounted on the robot."""

    name: str = ""


@dataclass
class OdometrySensor(Sensor):
    """An odometry source; ``ideal`` marks ground-truth poses."""

    ideal: bool = False


@dataclass
class Beam:
    """One beam of a range sensor, relative to the sensor centre."""

    pose: OrientedPoint = OrientedPoint()
    span: float = 0.0
    max_range: float = 0.0
    s: float = 0.0
    c: float = 1.0


@dataclass
class RangeSensor(Sensor):
    """A range sensor such as a laser scanner or a sonar ring."""

    pose: OrientedPoint = OrientedPoint()
    beams: list[Beam] = field(default_factory=list)
    new_format: bool = False

    def update_beams_lookup(self) -> None:
        """Refresh the cached sine and cosine of every beam heading."""
        for beam in self.beams:
            beam.s = math.sin(beam.pose.theta)
            beam.c = math.cos(beam.pose.theta)


@dataclass
class SensorReading:
    """A timestamped measurement taken by a sensor."""

    sensor: Optional[Sensor] = None
    time: float = 0.0


@dataclass
class OdometryReading(SensorReading):
    """Pose, speed and acceleration reported by odometry."""

    pose: OrientedPoint = OrientedPoint()
    speed: OrientedPoint = OrientedPoint()
    acceleration: OrientedPoint = OrientedPoint()


@dataclass
class RangeReading(SensorReading):
    """The ranges of one scan together with the robot pose it was taken at."""

    readings: list[float] = field(default_factory=list)
    pose: OrientedPoint = OrientedPoint()

    def __len__(self) -> int:
        return len(self.readings)

    def __getitem__(self, index: int) -> float:
        return self.readings[index]

    def __iter__(self) -> Iterator[float]:
        return iter(self.readings)