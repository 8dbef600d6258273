"""Parsing of sensor log lines into readings, as whole logs or as streams."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, Iterator, Mapping, Optional, Union

from .sensors import (
    OdometryReading,
    OdometrySensor,
    OrientedPoint,
    RangeReading,
    RangeSensor,
    Sensor,
    SensorReading,
)

__all__ = [
    "parse_reading",
    "parse_odometry",
    "parse_range",
    "SensorLog",
    "SensorStream",
    "InputSensorStream",
    "LogSensorStream",
    "LOG_LINE_BUFFER_SIZE",
    "STREAM_LINE_BUFFER_SIZE",
]

LOG_LINE_BUFFER_SIZE = 100000
STREAM_LINE_BUFFER_SIZE = 8192

_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")

Tokens = Union[str, Iterable[str]]


class _TokenReader:
    """Reads whitespace-separated fields the way a formatted input stream does.

    A number is taken from the longest numeric prefix of the next field and
    the rest of the field stays for the next read. Once a read fails, every
    later read fails too and leaves the caller's current value untouched; a
    field that is not a number at all yields zero on the read that fails.
    """

    def __init__(self, tokens: Tokens) -> None:
        if isinstance(tokens, str):
            tokens = tokens.split()
        self._tokens: deque[str] = deque(tokens)
        self.failed = False

    def _number(self, pattern: re.Pattern, convert, current):
        if self.failed:
            return current
        if not self._tokens:
            self.failed = True
            return current
        token = self._tokens[0]
        match = pattern.match(token)
        if match is None:
            self.failed = True
            return convert("0")
        rest = token[match.end():]
        if rest:
            self._tokens[0] = rest
        else:
            self._tokens.popleft()
        return convert(match.group())

    def double(self, current: float = 0.0) -> float:
        return self._number(_NUMBER, float, current)

    def integer(self, current: int = 0) -> int:
        return self._number(_INTEGER, int, current)

    def string(self, current: str = "") -> str:
        if self.failed or not self._tokens:
            self.failed = True
            return current
        return self._tokens.popleft()


def _lines(stream: Iterable[str], buffer_size: int) -> Iterator[str]:
    """Yield lines without their newline; stop after a line that overflows."""
    for raw in stream:
        line = raw[:-1] if raw.endswith("\n") else raw
        if len(line) > buffer_size - 1:
            yield line[: buffer_size - 1]
            return
        yield line


def _read_pose(reader: _TokenReader) -> OrientedPoint:
    x = reader.double()
    y = reader.double()
    theta = reader.double()
    return OrientedPoint(x, y, theta)


def _parse_odometry(reader: _TokenReader, sensor: OdometrySensor, timed: bool) -> OdometryReading:
    pose = _read_pose(reader)
    speed_x = reader.double()
    speed_theta = reader.double()
    accel_x = reader.double()
    reading = OdometryReading(
        sensor=sensor,
        time=0.0,
        pose=pose,
        speed=OrientedPoint(speed_x, 0.0, speed_theta),
        acceleration=OrientedPoint(accel_x, 0.0, 0.0),
    )
    if timed:
        timestamp = reader.double()
        reader.string()
        reader.double()
        reading.time = timestamp
    return reading


def _parse_range(reader: _TokenReader, sensor: RangeSensor, stream_format: bool) -> RangeReading:
    if sensor.new_format:
        for _ in range(7):
            reader.string()
    size = reader.integer()
    if size != len(sensor.beams):
        raise ValueError(
            f"{sensor.name}: reading has {size} beams, sensor has {len(sensor.beams)}"
        )
    readings = [reader.double() for _ in range(size)]
    if sensor.new_format:
        for _ in range(reader.integer()):
            reader.double()
    _read_pose(reader)  # laser pose, not kept
    pose = _read_pose(reader)
    reading = RangeReading(sensor=sensor, readings=readings, pose=pose)

    if stream_format:
        if sensor.new_format:
            for _ in range(5):
                reader.string()
        timestamp = reader.double()
        reader.string()
        reader.double()
        reading.time = timestamp
    else:
        stamp = 0.0
        if sensor.new_format:
            for _ in range(5):
                reader.string()
        else:
            stamp = reader.double(stamp)
            reader.double()
            reader.double()
        stamp = reader.double(stamp)
        reader.string()
        stamp = reader.double(stamp)
        reading.time = stamp
    return reading


def parse_odometry(tokens: Tokens, sensor: OdometrySensor) -> OdometryReading:
    """Parse the fields after the sensor name of an odometry line."""
    return _parse_odometry(_TokenReader(tokens), sensor, timed=True)


def parse_range(tokens: Tokens, sensor: RangeSensor) -> RangeReading:
    """Parse the fields after the sensor name of a laser or sonar line."""
    return _parse_range(_TokenReader(tokens), sensor, stream_format=True)


def _dispatch(
    reader: _TokenReader, sensor_map: Mapping[str, Sensor], stream_format: bool
) -> Optional[SensorReading]:
    name = reader.string()
    sensor = sensor_map.get(name)
    if sensor is None:
        return None
    if isinstance(sensor, OdometrySensor):
        return _parse_odometry(reader, sensor, timed=stream_format)
    if isinstance(sensor, RangeSensor):
        return _parse_range(reader, sensor, stream_format=stream_format)
    return None


def parse_reading(line: str, sensor_map: Mapping[str, Sensor]) -> Optional[SensorReading]:
    """Parse one log line; ``None`` when its sensor is not in the map."""
    return _dispatch(_TokenReader(line), sensor_map, stream_format=True)


class SensorLog(list):
    """All readings of a log file whose sensors are known."""

    def __init__(self, sensor_map: Mapping[str, Sensor]) -> None:
        super().__init__()
        self.sensor_map = sensor_map

    def load(self, stream: Iterable[str]) -> "SensorLog":
        """Replace the contents with the readings found in ``stream``."""
        self.clear()
        for line in _lines(stream, LOG_LINE_BUFFER_SIZE):
            reading = _dispatch(_TokenReader(line), self.sensor_map, stream_format=False)
            if reading is not None:
                self.append(reading)
        return self

    def bounding_box(self) -> tuple[OrientedPoint, tuple[float, float, float, float]]:
        """Return the first scan pose and ``(xmin, ymin, xmax, ymax)`` of the poses."""
        xmin = ymin = 1e6
        xmax = ymax = -1e6
        start = OrientedPoint()
        first = True
        for reading in self:
            lx = ly = 0.0
            if isinstance(reading, (OdometryReading, RangeReading)):
                lx, ly = reading.pose.x, reading.pose.y
            if isinstance(reading, RangeReading) and first:
                first = False
                start = reading.pose
            xmin = min(xmin, lx)
            xmax = max(xmax, lx)
            # the lower y bound follows the latest pose rather than the minimum
            ymin = ly
            ymax = max(ymax, ly)
        return start, (xmin, ymin, xmax, ymax)


class SensorStream(ABC):
    """A source of readings consumed one at a time."""

    def __init__(self, sensor_map: Mapping[str, Sensor]) -> None:
        self.sensor_map = sensor_map

    @abstractmethod
    def __bool__(self) -> bool:
        """True while the stream may still deliver readings."""

    @abstractmethod
    def rewind(self) -> bool:
        """Go back to the first reading; report whether that was possible."""

    @abstractmethod
    def read(self) -> Optional[SensorReading]:
        """Return the next reading, or ``None`` for a line that holds none."""


class InputSensorStream(SensorStream):
    """Readings parsed line by line from a text stream."""

    def __init__(self, sensor_map: Mapping[str, Sensor], stream: Iterable[str]) -> None:
        super().__init__(sensor_map)
        self._lines = iter(stream)
        self._good = True

    def __bool__(self) -> bool:
        return self._good

    def rewind(self) -> bool:
        return False

    def read(self) -> Optional[SensorReading]:
        if not self._good:
            return None
        raw = next(self._lines, None)
        if raw is None:
            self._good = False
            return None
        line = raw[:-1] if raw.endswith("\n") else raw
        if len(line) > STREAM_LINE_BUFFER_SIZE - 1:
            line = line[: STREAM_LINE_BUFFER_SIZE - 1]
            self._good = False
        return parse_reading(line, self.sensor_map)

    def __iter__(self) -> Iterator[SensorReading]:
        while self:
            reading = self.read()
            if reading is not None:
                yield reading


class LogSensorStream(SensorStream):
    """Readings replayed from an already loaded log."""

    def __init__(self, sensor_map: Mapping[str, Sensor], log: Optional[SensorLog]) -> None:
        super().__init__(sensor_map)
        if log is None:
            raise ValueError("a log is required")
        self._log = log
        self._cursor = 0

    def __bool__(self) -> bool:
        return self._cursor < len(self._log)

    def rewind(self) -> bool:
        self._cursor = 0
        return True

    def read(self) -> SensorReading:
        if not self:
            raise EOFError("no more readings in the log")
        reading = self._log[self._cursor]
        self._cursor += 1
        return reading

    def __iter__(self) -> Iterator[SensorReading]:
        while self:
            yield self.read()