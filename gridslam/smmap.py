"""Occupancy cells used by the scan matcher's grid map."""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = ["PointAccumulator", "SIGHT_INC"]

SIGHT_INC = 1


@dataclass
class PointAccumulator:
    """Counts hits and visits of a cell and sums the points that hit it."""

    acc: tuple[float, float] = (0.0, 0.0)
    n: int = 0
    visits: int = 0

    @classmethod
    def unknown(cls) -> "PointAccumulator":
        """A cell that was never observed."""
        return cls()

    def update(self, value: bool, point: tuple[float, float] = (0.0, 0.0)) -> None:
        """Record a beam ending in the cell (``value`` true) or passing through it."""
        if value:
            self.acc = (self.acc[0] + float(point[0]), self.acc[1] + float(point[1]))
            self.n += 1
            self.visits += SIGHT_INC
        else:
            self.visits += 1

    def mean(self) -> tuple[float, float]:
        """Mean of the points that hit the cell."""
        factor = 1.0 / self.n
        return (factor * self.acc[0], factor * self.acc[1])

    def __float__(self) -> float:
        """Occupancy probability, or -1 for a never visited cell."""
        if not self.visits:
            return -1.0
        return self.n * SIGHT_INC / self.visits

    def add(self, other: "PointAccumulator") -> None:
        """Merge the counts and sums of another cell into this one."""
        self.acc = (self.acc[0] + other.acc[0], self.acc[1] + other.acc[1])
        self.n += other.n
        self.visits += other.visits

    def entropy(self) -> float:
        """Binary entropy of the occupancy of the cell."""
        if not self.visits:
            return -math.log(0.5)
        if self.n == self.visits or self.n == 0:
            return 0.0
        x = self.n * SIGHT_INC / self.visits
        return -(x * math.log(x) + (1 - x) * math.log(1 - x))