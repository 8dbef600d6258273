"""Generic particle filter helpers: weight handling, resampling and evolution."""

from __future__ import annotations

import copy
import math
import random
from typing import Any, Iterable, MutableSequence, Optional, Protocol, Sequence, TypeVar

__all__ = [
    "to_normal_form",
    "to_log_form",
    "resample",
    "normalize_weights",
    "repeat_indexes",
    "repeat_indexes_into",
    "neff",
    "normalize",
    "rle",
    "UniformResampler",
    "Evolver",
    "AuxiliaryEvolver",
]

T = TypeVar("T")


class _Random(Protocol):
    def random(self) -> float: ...


class _EvolutionModel(Protocol):
    def evolve(self, particle: Any) -> Any: ...


class _LikelihoodModel(Protocol):
    def likelihood(self, particle: Any) -> float: ...


def _weight_of(item: Any) -> float:
    """The weight of a particle (its ``weight`` attribute) or of a plain number."""
    weight = getattr(item, "weight", None)
    return float(item) if weight is None else float(weight)


def _systematic_indexes(
    weights: Sequence[float], nparticles: int, rng: _Random
) -> list[int]:
    """Systematic resampling of ``weights`` into ``nparticles`` indexes."""
    total = sum(weights)
    n = nparticles if nparticles > 0 else len(weights)
    if n == 0:
        return []
    interval = total / n
    target = interval * rng.random()
    indexes: list[int] = []
    cweight = 0.0
    for i, weight in enumerate(weights):
        cweight += weight
        while cweight > target and len(indexes) < n:
            indexes.append(i)
            target += interval
    # slots that were never reached keep index 0
    indexes.extend([0] * (n - len(indexes)))
    return indexes


def to_normal_form(values: Iterable[Any]) -> tuple[list[float], float]:
    """Turn log weights into ``exp(w - max)``; return them with the maximum."""
    logs = [_weight_of(v) for v in values]
    lmax = max(logs, default=-math.inf)
    if not logs:
        lmax = -1.7976931348623157e308
    return [math.exp(w - lmax) for w in logs], lmax


def to_log_form(values: Iterable[Any], lmax: float) -> list[float]:
    """Turn weights into ``log(w) - lmax``."""
    return [math.log(_weight_of(v)) - lmax for v in values]


def resample(
    weights: Iterable[Any], nparticles: int = 0, rng: Optional[_Random] = None
) -> list[int]:
    """Indexes drawn by systematic resampling; ``nparticles`` 0 keeps the count."""
    rng = rng if rng is not None else random.Random()
    return _systematic_indexes([_weight_of(w) for w in weights], nparticles, rng)


def normalize_weights(weights: Iterable[float], min_weight: float) -> list[float]:
    """Rescale log weights so the largest becomes 1 and the smallest ``min_weight``."""
    values = [float(w) for w in weights]
    if not values:
        return []
    wmin, wmax = min(values), max(values)
    dn = math.log(1.0) - math.log(min_weight)
    dw = wmax - wmin
    if dw == 0:
        dw = 1.0
    scale = dn / dw
    offset = -wmax * scale
    return [math.exp(scale * w + offset) for w in values]


def repeat_indexes(indexes: Iterable[int], particles: Sequence[T]) -> list[T]:
    """The particles picked by ``indexes``, in that order."""
    return [particles[i] for i in indexes]


def repeat_indexes_into(
    indexes2: Iterable[int], particles: Sequence[T], indexes: Sequence[int]
) -> list[T]:
    """A copy of ``particles`` where slot ``indexes[i]`` takes ``particles[indexes2[i]]``."""
    dest = list(particles)
    for slot, source in zip(indexes, indexes2):
        dest[slot] = particles[source]
    return dest


def neff(weights: Iterable[Any]) -> float:
    """Effective sample size of a set of weights."""
    values = [_weight_of(w) for w in weights]
    total = sum(values)
    return 1.0 / sum((w / total) ** 2 for w in values)


def normalize(weights: Iterable[Any]) -> list[float]:
    """Weights divided by their sum."""
    values = [_weight_of(w) for w in weights]
    total = sum(values)
    return [w / total for w in values]


def rle(values: Iterable[Any]) -> list[tuple[int, int]]:
    """Run-length encoding as ``(value, count)`` pairs."""
    runs: list[tuple[int, int]] = []
    current = 0
    count = 0
    for value in values:
        value = int(value)
        if count and value == current:
            count += 1
            continue
        if count:
            runs.append((current, count))
        current = value
        count = 1
    if count > 0:
        runs.append((current, count))
    return runs


class UniformResampler:
    """Systematic resampler over particles or plain weights."""

    def __init__(self, rng: Optional[_Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def resample_indexes(self, weights: Iterable[Any], nparticles: int = 0) -> list[int]:
        """Indexes of the surviving particles."""
        return _systematic_indexes([_weight_of(w) for w in weights], nparticles, self.rng)

    def resample(self, particles: Sequence[T], nparticles: int = 0) -> list[T]:
        """Copies of the surviving particles, each with weight ``1/n``."""
        weights = [_weight_of(p) for p in particles]
        n = nparticles if nparticles > 0 else len(weights)
        if n == 0:
            return []
        uniform = 1.0 / n
        interval = sum(weights) / n
        target = interval * self.rng.random()
        resampled: list[T] = []
        cweight = 0.0
        for particle, weight in zip(particles, weights):
            cweight += weight
            while cweight > target:
                clone = copy.copy(particle)
                clone.weight = uniform
                resampled.append(clone)
                target += interval
        return resampled

    def neff(self, particles: Iterable[Any]) -> float:
        """Effective sample size ``(sum w)^2 / sum w^2``."""
        values = [_weight_of(p) for p in particles]
        return sum(values) ** 2 / sum(w * w for w in values)


class Evolver:
    """Moves every particle through an evolution model."""

    def __init__(self, evolution_model: _EvolutionModel) -> None:
        self.evolution_model = evolution_model

    def evolve(self, particles: MutableSequence[T]) -> MutableSequence[T]:
        """Replace each particle by its evolved state, in place."""
        particles[:] = [self.evolution_model.evolve(p) for p in particles]
        return particles


class AuxiliaryEvolver:
    """Auxiliary particle filter step guided by a look-ahead likelihood."""

    def __init__(
        self,
        qualification_model: _EvolutionModel,
        evolution_model: _EvolutionModel,
        likelihood_model: _LikelihoodModel,
        rng: Optional[_Random] = None,
    ) -> None:
        self.qualification_model = qualification_model
        self.evolution_model = evolution_model
        self.likelihood_model = likelihood_model
        self.resampler = UniformResampler(rng)

    def evolve(self, particles: MutableSequence[Any]) -> MutableSequence[Any]:
        """Evolve the particles chosen by their look-ahead weight, in place."""
        observation_weights = [
            self.likelihood_model.likelihood(self.qualification_model.evolve(p))
            for p in particles
        ]
        for index in self.resampler.resample_indexes(observation_weights):
            particle = self.evolution_model.evolve(particles[index])
            particle.weight = (
                self.likelihood_model.likelihood(particle) / observation_weights[index]
            )
            particles[index] = particle
        return particles