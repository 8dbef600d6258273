"""Command-line tools for inspecting and converting log files."""

from __future__ import annotations

import re
import sys
from typing import Iterable, Iterator, Optional, Sequence

from .configuration import CarmenConfiguration
from .sensorlog import SensorLog, _TokenReader
from .sensors import RangeReading, RangeSensor

__all__ = [
    "load_log",
    "pose_lines",
    "plot_frames",
    "rdk_lines",
    "convert_scanstudio",
    "log_test_main",
    "log_plot_main",
    "rdk2carmen_main",
    "scanstudio2carmen_main",
]

MAX_LINE_LENGTH = 10240
MAX_READINGS = 10240

_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _fmt(value: float) -> str:
    return format(value, "g")


def load_log(path: str) -> SensorLog:
    """Read the configuration of a log file, then all of its readings."""
    with open(path) as handle:
        config = CarmenConfiguration().load(handle)
    sensor_map = config.compute_sensor_map()
    with open(path) as handle:
        return SensorLog(sensor_map).load(handle)


def _scans(log: Iterable) -> Iterator[RangeReading]:
    return (reading for reading in log if isinstance(reading, RangeReading))


def pose_lines(log: Iterable) -> Iterator[str]:
    """Yield ``x y theta time`` for every range reading."""
    for scan in _scans(log):
        pose = scan.pose
        yield f"{_fmt(pose.x)} {_fmt(pose.y)} {_fmt(pose.theta)} {_fmt(scan.time)}"


def plot_frames(log: Iterable, maxrange: float = 2.0) -> list[str]:
    """Gnuplot commands drawing every third scan's close points as a gif frame."""
    out: list[str] = []
    count = 0
    frame = 0
    for scan in _scans(log):
        count += 1
        if count % 3:
            continue
        sensor = scan.sensor
        beams = sensor.beams if isinstance(sensor, RangeSensor) else []
        points = [
            (r * beam.c, r * beam.s)
            for r, beam in zip(scan.readings, beams)
            if not r > maxrange
        ]
        if not points:
            continue
        out.append("set terminal gif")
        out.append(f'set output "frame-{frame:05d}.gif"')
        frame += 1
        out.append("set size ratio -1")
        out.append("plot [-3:3][0:3] '-' w p ps 1")
        out.extend(f"{_fmt(y)} {_fmt(x)}" for x, y in points)
        out.append("e")
    return out


def rdk_lines(log: Iterable) -> Iterator[str]:
    """Yield each scan with ranges and position scaled from millimetres to metres."""
    for scan in _scans(log):
        name = scan.sensor.name if scan.sensor is not None else ""
        ranges = "".join(f"{_fmt(r * 0.001)} " for r in scan.readings)
        pose = scan.pose
        yield (
            f"{name} {len(scan)} {ranges}"
            f"{_fmt(pose.x * 0.001)} {_fmt(pose.y * 0.001)} {_fmt(pose.theta)}"
        )


class _TextScanner:
    """Mixes whole-line reads and number reads over one text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.good = True

    def getline(self, limit: int) -> str:
        if not self.good:
            return ""
        end = self.text.find("\n", self.pos)
        if end < 0:
            line = self.text[self.pos:]
            following = len(self.text)
        else:
            line = self.text[self.pos:end]
            following = end + 1
        if len(line) > limit - 1:
            self.pos += limit - 1
            self.good = False
            return line[: limit - 1]
        self.pos = following
        if end < 0 and not line:
            self.good = False
        return line

    def number(self, current: float) -> float:
        if not self.good:
            return current
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1
        if self.pos >= len(self.text):
            self.good = False
            return current
        match = _NUMBER.match(self.text, self.pos)
        if match is None:
            self.good = False
            return 0.0
        self.pos = match.end()
        return float(match.group())


def convert_scanstudio(lines: Iterable[str]) -> list[str]:
    """Convert scan-studio records (lines with their newlines) to FLASER lines."""
    text = lines if isinstance(lines, str) else "".join(lines)
    scanner = _TextScanner(text)
    out: list[str] = []
    readings = [0.0] * MAX_READINGS
    x = y = theta = 0.0
    nbeams = 0
    while scanner.good:
        reader = _TokenReader(scanner.getline(MAX_LINE_LENGTH))
        token = reader.string()
        if token == "RobotPos:":
            x = reader.double(x)
            y = reader.double(y)
            theta = reader.double(theta)
            x /= 1000
            y /= 1000
        elif token == "NumPoints:":
            nbeams = reader.integer(nbeams)
            if nbeams >= MAX_READINGS:
                raise ValueError(f"too many points in a scan: {nbeams}")
        elif token == "DATA":
            c = 0
            while c < nbeams and scanner.good:
                scanner.number(0.0)  # beam angle, not kept
                readings[c] = scanner.number(readings[c]) / 1000
                c += 1
            parts = []
            if c == nbeams:
                parts.append(f"FLASER {nbeams} ")
            parts.extend(f"{_fmt(readings[i])} " for i in range(max(nbeams, 0)))
            parts.append(f"{_fmt(x)} {_fmt(y)} {_fmt(theta)}0 0 0 0 pippo 0")
            out.append("".join(parts))
    return out


def _args(argv: Optional[Sequence[str]]) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


def log_test_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the pose and time of every scan in a log."""
    args = _args(argv)
    if not args:
        print("usage log_test <filename>")
        return -1
    try:
        log = load_log(args[0])
    except OSError:
        print(f"no file {args[0]} found")
        return -1
    print(f"log size{len(log)}", file=sys.stderr)
    for line in pose_lines(log):
        print(line)
    return 0


def log_plot_main(argv: Optional[Sequence[str]] = None) -> int:
    """Print gnuplot commands for the scans of a log."""
    args = _args(argv)
    if not args:
        print("usage log_plot <filename> | gnuplot")
        return -1
    try:
        log = load_log(args[0])
    except OSError:
        print(f"no file {args[0]} found")
        return -1
    print(f"log size{len(log)}", file=sys.stderr)
    for line in plot_frames(log, 2.0):
        print(line)
    return 0


def rdk2carmen_main(argv: Optional[Sequence[str]] = None) -> int:
    """Rescale a millimetre log to metres, to a file or standard output."""
    args = _args(argv)
    if not args:
        print("usage rdk2carmen <filename> <outfilename>", file=sys.stderr)
        print("or rdk2carmen <filename> for standard output", file=sys.stderr)
        return -1
    try:
        log = load_log(args[0])
    except OSError:
        print(f"no file {args[0]} found", file=sys.stderr)
        return -1
    print(f"log size{len(log)}", file=sys.stderr)
    if len(args) < 2:
        for line in rdk_lines(log):
            print(line)
        return 0
    try:
        with open(args[1], "w") as out:
            for line in rdk_lines(log):
                out.write(line + "\n")
    except OSError:
        print(f"cannot write {args[1]}", file=sys.stderr)
        return -1
    return 0


def scanstudio2carmen_main(argv: Optional[Sequence[str]] = None) -> int:
    """Convert a scan-studio file into a log file."""
    args = _args(argv)
    if len(args) < 2:
        print("usage scanstudio2carmen scanfilename carmenfilename")
        return 1
    try:
        with open(args[0]) as handle:
            text = handle.read()
    except OSError:
        print(f"cannot open file {args[0]}")
        return 1
    with open(args[1], "w") as out:
        for line in convert_scanstudio(text):
            out.write(line + "\n")
    return 0