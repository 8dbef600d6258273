"""Robot configuration read from the parameter section of a log file."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .commandline import parse_c_double, parse_c_int
from .sensors import Beam, OdometrySensor, OrientedPoint, RangeSensor, Sensor

__all__ = ["Configuration", "CarmenConfiguration", "LINE_BUFFER_SIZE"]

log = logging.getLogger(__name__)

LINE_BUFFER_SIZE = 10000

_DEG = math.pi / 180.0
_FINE = 360.0 / 1024.0

# beam count -> (resolution in degrees, maximum range override)
_FRONT_LASER_TABLE = {
    180: (1.0, None), 181: (1.0, None),
    360: (0.5, None), 361: (0.5, None),
    540: (0.5, None), 541: (0.5, None),
    769: (_FINE, 4.1),
    682: (_FINE, 4.1),
    683: (_FINE, 5.5),
}
_ROBOT_LASER_TABLE = {
    180: (1.0, None), 181: (1.0, None),
    360: (0.5, None), 361: (0.5, None),
    540: (0.5, None), 541: (0.5, None),
    769: (_FINE, None),
    683: (_FINE, 5.5),
}
_REAR_LASER_TABLE = {
    180: (1.0, None), 181: (1.0, None),
    360: (0.5, None), 361: (0.5, None),
    540: (0.5, None), 541: (0.5, None),
    769: (_FINE, None),
}


def _fan(beam_no: int, resolution: float, max_range: float) -> list[Beam]:
    """Lay ``beam_no`` beams out symmetrically around the sensor heading."""
    beams: list[Optional[Beam]] = [None] * beam_no
    low = beam_no // 2
    up = (beam_no + 1) // 2
    step = resolution * _DEG
    odd = beam_no % 2 == 1
    angle = 0.0 if odd else step
    for i in range(0 if odd else 1, low + 1):
        beams[low - i] = Beam(OrientedPoint(0.0, 0.0, -angle), 0.0, max_range)
        beams[up + i - 1] = Beam(OrientedPoint(0.0, 0.0, angle), 0.0, max_range)
        angle += step
    return [beam for beam in beams if beam is not None]


class Configuration(ABC):
    """A source of the robot's sensor layout."""

    @abstractmethod
    def compute_sensor_map(self) -> dict[str, Sensor]:
        """Build the sensors described by this configuration, keyed by name."""


class CarmenConfiguration(dict, Configuration):
    """Parameter name to list of values, as found in a log's PARAM lines."""

    def load(self, stream: Iterable[str]) -> "CarmenConfiguration":
        """Read the parameters and laser headers from an iterable of lines."""
        self.clear()
        laser_on = rlaser_on = rlaser1 = rlaser2 = False
        beams = ""
        rbeams = ""

        for raw in stream:
            line = raw.rstrip("\r\n")
            truncated = len(line) > LINE_BUFFER_SIZE - 1
            if truncated:
                line = line[: LINE_BUFFER_SIZE - 1]
            tokens = line.split()
            qualifier = tokens[0] if tokens else ""

            if qualifier == "FLASER":
                laser_on = True
                if len(tokens) > 1:
                    beams = tokens[1]
            elif qualifier == "RLASER":
                rlaser_on = True
                if len(tokens) > 1:
                    rbeams = tokens[1]
            elif qualifier == "ROBOTLASER1":
                rlaser1 = True
                if len(tokens) > 8:
                    beams = tokens[8]
            elif qualifier == "ROBOTLASER2":
                rlaser2 = True
                if len(tokens) > 8:
                    rbeams = tokens[8]
            elif qualifier == "PARAM" and len(tokens) > 1:
                self.setdefault(tokens[1], tokens[2:])

            if truncated:
                break

        if laser_on or rlaser1:
            self.setdefault("laser_beams", [beams])
            log.debug("front laser beams from log: %s", beams)
            self.setdefault("robot_use_laser", ["on"])
        if rlaser_on or rlaser2:
            self.setdefault("rear_laser_beams", [rbeams])
            log.debug("rear laser beams from log: %s", rbeams)
            self.setdefault("robot_use_rear_laser", ["on"])
        return self

    def _first(self, key: str) -> Optional[str]:
        values = self.get(key)
        return values[0] if values else None

    def _is_on(self, key: str) -> bool:
        return self._first(key) == "on"

    def _unsigned(self, key: str, default: int) -> int:
        text = self._first(key)
        if text is None:
            return default
        value = parse_c_int(text)
        if value < 0:
            raise ValueError(f"parameter {key} must not be negative: {text!r}")
        return value

    def _double(self, key: str, default: float) -> float:
        text = self._first(key)
        return default if text is None else parse_c_double(text)

    def _laser(
        self,
        name: str,
        *,
        new_format: bool,
        beams_key: str,
        resolution_key: str,
        table: dict[int, tuple[float, Optional[float]]],
        max_range: float,
        pose: OrientedPoint,
    ) -> RangeSensor:
        beam_no = self._unsigned(beams_key, 180)
        resolution, special_range = table.get(beam_no, (None, None))
        if resolution is None:
            resolution = self._double(resolution_key, 1.0)
        if special_range is not None:
            max_range = special_range
        laser = RangeSensor(name, pose=pose, new_format=new_format)
        laser.beams = _fan(beam_no, resolution, max_range)
        laser.update_beams_lookup()
        log.debug("%s: %d beams, max range %g", name, beam_no, max_range)
        return laser

    def _sonar(self) -> RangeSensor:
        sonar = RangeSensor("SONAR")
        max_range = self._double("robot_max_sonar", 10.0)
        sonar_num = self._unsigned("robot_num_sonars", 0)
        offsets = self.get("robot_sonar_offsets")
        if offsets is not None:
            if len(offsets) // 3 < sonar_num:
                raise ValueError(
                    f"{len(offsets)} parameters for defining the sonar offsets while "
                    f"the specified number of sonars requires {sonar_num * 3} at least"
                )
            for i in range(0, sonar_num * 3, 3):
                pose = OrientedPoint(
                    parse_c_double(offsets[i]),
                    parse_c_double(offsets[i + 1]),
                    parse_c_double(offsets[i + 2]),
                )
                sonar.beams.append(Beam(pose, _DEG * 7.5, max_range))
        sonar.update_beams_lookup()
        return sonar

    def compute_sensor_map(self) -> dict[str, Sensor]:
        sensors: dict[str, Sensor] = {}

        def insert(sensor: Sensor) -> None:
            sensors.setdefault(sensor.name, sensor)

        insert(OdometrySensor("ODOM"))
        insert(OdometrySensor("TRUEPOS", ideal=True))

        if self._is_on("robot_use_sonar"):
            insert(self._sonar())

        if self._is_on("robot_use_laser"):
            front_pose = OrientedPoint(self._double("robot_frontlaser_offset", 0.0), 0.0, 0.0)
            insert(self._laser(
                "FLASER", new_format=False, beams_key="laser_beams",
                resolution_key="laser_front_laser_resolution",
                table=_FRONT_LASER_TABLE, max_range=50.0, pose=front_pose,
            ))
            insert(self._laser(
                "ROBOTLASER1", new_format=True, beams_key="laser_beams",
                resolution_key="laser_front_laser_resolution",
                table=_ROBOT_LASER_TABLE, max_range=50.0, pose=front_pose,
            ))

        if self._is_on("robot_use_rear_laser"):
            rear_pose = OrientedPoint(
                self._double("robot_rearlaser_offset", 0.0), 0.0, math.pi
            )
            insert(self._laser(
                "RLASER", new_format=False, beams_key="rear_laser_beams",
                resolution_key="laser_rear_laser_resolution",
                table=_REAR_LASER_TABLE, max_range=89.0, pose=rear_pose,
            ))
            insert(self._laser(
                "ROBOTLASER2", new_format=True, beams_key="rear_laser_beams",
                resolution_key="laser_rear_laser_resolution",
                table=_REAR_LASER_TABLE, max_range=50.0,
                pose=OrientedPoint(0.0, 0.0, math.pi),
            ))

        return dict(sorted(sensors.items()))