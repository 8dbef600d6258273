"""Pose covariances and Gaussians estimated from pose samples."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .sensors import OrientedPoint

__all__ = ["Covariance3", "Gaussian3", "compute_gaussian_from_samples"]


@dataclass(frozen=True)
class Covariance3:
    """Covariance of an ``(x, y, theta)`` pose."""

    xx: float = 0.0
    yy: float = 0.0
    tt: float = 0.0
    xy: float = 0.0
    xt: float = 0.0
    yt: float = 0.0

    @classmethod
    def zero(cls) -> "Covariance3":
        return cls()

    def __add__(self, other: "Covariance3") -> "Covariance3":
        return Covariance3(
            self.xx + other.xx,
            self.yy + other.yy,
            self.tt + other.tt,
            self.xy + other.xy,
            self.xt + other.xt,
            self.yt + other.yt,
        )


@dataclass(frozen=True)
class Gaussian3:
    """A pose Gaussian: mean pose and covariance."""

    mean: OrientedPoint = OrientedPoint()
    cov: Covariance3 = field(default_factory=Covariance3)


def _normalize_angle(angle: float) -> float:
    return math.atan2(math.sin(angle), math.cos(angle))


def compute_gaussian_from_samples(
    points: Iterable[OrientedPoint], weights: Optional[Iterable[float]] = None
) -> Gaussian3:
    """Estimate a Gaussian from pose samples, optionally weighted.

    The heading mean is the circular mean. Without weights the normaliser
    starts at one and grows by one per sample, so it is the count plus one.
    """
    poses = list(points)
    if weights is None:
        ws = [1.0] * len(poses)
        wcum = 1.0 + len(poses)
    else:
        ws = [float(w) for w in weights]
        if len(ws) != len(poses):
            raise ValueError(f"{len(poses)} points but {len(ws)} weights")
        wcum = sum(ws)

    s = sum(w * math.sin(p.theta) for p, w in zip(poses, ws)) / wcum
    c = sum(w * math.cos(p.theta) for p, w in zip(poses, ws)) / wcum
    mean = OrientedPoint(
        sum(w * p.x for p, w in zip(poses, ws)) / wcum,
        sum(w * p.y for p, w in zip(poses, ws)) / wcum,
        math.atan2(s, c),
    )

    xx = yy = tt = xy = xt = yt = 0.0
    for p, w in zip(poses, ws):
        dx = p.x - mean.x
        dy = p.y - mean.y
        dt = _normalize_angle(p.theta - mean.theta)
        xx += w * dx * dx
        yy += w * dy * dy
        tt += w * dt * dt
        xy += w * dx * dy
        yt += w * dy * dt
        xt += w * dx * dt
    cov = Covariance3(xx / wcum, yy / wcum, tt / wcum, xy / wcum, xt / wcum, yt / wcum)
    return Gaussian3(mean, cov)