"""Command-line option scanning in the style of the mapping tools."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

__all__ = ["CommandLineParser", "OptionKind", "parse_c_double", "parse_c_int"]

_DOUBLE_PREFIX = re.compile(
    r"\s*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


def parse_c_double(text: str) -> float:
    """Read the longest numeric prefix of ``text``; 0.0 when there is none."""
    match = _DOUBLE_PREFIX.match(text)
    if not match:
        return 0.0
    return float(match.group().strip())


def parse_c_int(text: str) -> int:
    """Read the leading integer of ``text``; 0 when there is none."""
    match = _INT_PREFIX.match(text)
    if not match:
        return 0
    return int(match.group().strip())


class OptionKind(Enum):
    FLAG = "flag"
    STRING = "string"
    DOUBLE = "double"
    INT = "int"


@dataclass(frozen=True)
class _Option:
    name: str
    kind: OptionKind

    @property
    def dest(self) -> str:
        return self.name.lstrip("-")

    def convert(self, text: str) -> Any:
        if self.kind is OptionKind.DOUBLE:
            return parse_c_double(text)
        if self.kind is OptionKind.INT:
            return parse_c_int(text)
        return text


def _show(value: Any) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


class CommandLineParser:
    """Scans ``-name value`` style arguments.

    Options are tried in the order they were added against the current
    argument; an option that takes a value consumes the next argument, and
    the remaining options are then tried against that one. Values are stored
    under the option name without its leading dashes.
    """

    def __init__(self, silent: bool = False) -> None:
        self.silent = silent
        self._options: list[_Option] = []

    def _add(self, name: str, kind: OptionKind) -> "CommandLineParser":
        self._options.append(_Option(name, kind))
        return self

    def add_flag(self, name: str) -> "CommandLineParser":
        return self._add(name, OptionKind.FLAG)

    def add_string(self, name: str) -> "CommandLineParser":
        return self._add(name, OptionKind.STRING)

    def add_double(self, name: str) -> "CommandLineParser":
        return self._add(name, OptionKind.DOUBLE)

    def add_int(self, name: str) -> "CommandLineParser":
        return self._add(name, OptionKind.INT)

    def _echo(self, message: str) -> None:
        if not self.silent:
            print(message)

    def parse(
        self, argv: Iterable[str], defaults: Optional[Mapping[str, Any]] = None
    ) -> dict[str, Any]:
        """Parse ``argv`` (program name excluded) and return the option values."""
        args = list(argv)
        values: dict[str, Any] = {
            opt.dest: (False if opt.kind is OptionKind.FLAG else None)
            for opt in self._options
        }
        if defaults:
            values.update(defaults)

        c = 0
        while c < len(args):
            recognized = False
            for opt in self._options:
                if args[c] != opt.name:
                    continue
                if opt.kind is OptionKind.FLAG:
                    values[opt.dest] = True
                    self._echo(f"{opt.name} on")
                elif c < len(args) - 1:
                    c += 1
                    value = opt.convert(args[c])
                    values[opt.dest] = value
                    self._echo(f"{opt.name}={_show(value)}")
                else:
                    continue
                recognized = True
            if not recognized:
                self._echo(f"COMMAND LINE: parameter {args[c]} not recognized")
            c += 1
        return values