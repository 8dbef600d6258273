"""Particle weight normalisation and the resampling decision of the grid filter."""

from __future__ import annotations

import math
from typing import Iterable

__all__ = ["normalize_log_weights", "needs_resampling"]


def normalize_log_weights(
    log_weights: Iterable[float], obs_sigma_gain: float
) -> tuple[list[float], float]:
    """Turn accumulated log weights into normalised weights.

    Each log weight is shifted by the maximum and scaled by
    ``1 / (obs_sigma_gain * n)`` before exponentiation. Returns the weights,
    which sum to one, and the effective sample size ``1 / sum(w^2)``.
    """
    logs = [float(w) for w in log_weights]
    if not logs:
        return [], math.inf
    gain = 1.0 / (obs_sigma_gain * len(logs))
    lmax = max(logs)
    raw = [math.exp(gain * (w - lmax)) for w in logs]
    total = sum(raw)
    weights = [w / total for w in raw]
    neff = 1.0 / sum(w * w for w in weights)
    return weights, neff


def needs_resampling(neff: float, resample_threshold: float, particle_count: int) -> bool:
    """True when the effective sample size fell below the threshold share of particles."""
    return neff < resample_threshold * particle_count