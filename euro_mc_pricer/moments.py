"""
Streaming sample statistics and normal-approximation confidence intervals.

RunningMoments keeps (count, mean, M2) where M2 is the sum of squared
deviations from the running mean. Batches are folded in with the pairwise
update of Chan, Golub & LeVeque, which reduces to Welford's update for a
batch of one. The same update merges accumulators built by separate
workers, and it is associative up to floating-point rounding.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from euro_mc_pricer.errors import PricingError

# Two-sided z-scores for the supported confidence levels. Anything else
# falls back to the 95% value.
Z_SCORES = {
    0.90: 1.645,
    0.95: 1.96,
    0.99: 2.576,
}
DEFAULT_CONFIDENCE_LEVEL = 0.95
_LEVEL_TOLERANCE = 1e-9


def applied_confidence_level(confidence_level: float = DEFAULT_CONFIDENCE_LEVEL) -> float:
    """
    Confidence level whose z-score is actually used for ``confidence_level``.

    Levels within 1e-9 of a tabulated level map to it; anything else falls
    back to 0.95. The selector must be a real number.
    """
    try:
        level = float(confidence_level)
    except (TypeError, ValueError) as e:
        raise PricingError(f"confidence level must be a real number, got {confidence_level!r}") from e
    for known in Z_SCORES:
        if math.isclose(level, known, rel_tol=0.0, abs_tol=_LEVEL_TOLERANCE):
            return known
    return DEFAULT_CONFIDENCE_LEVEL


def z_score(confidence_level: float = DEFAULT_CONFIDENCE_LEVEL) -> float:
    """
    Two-sided z-score for ``confidence_level``.

    This is a fixed lookup of three values, not an inverse normal CDF, and
    it ignores the Student-t correction for small samples. Levels within
    1e-9 of 0.90 or 0.99 get their own value; every other level, including
    0.95 and unrecognised ones, gets 1.96.
    """
    return Z_SCORES[applied_confidence_level(confidence_level)]


def confidence_interval(mean: float, standard_error: float,
                        confidence_level: float = DEFAULT_CONFIDENCE_LEVEL) -> tuple[float, float]:
    margin = z_score(confidence_level) * standard_error
    return mean - margin, mean + margin


@dataclass
class RunningMoments:
    count: int = 0
    mean: float = 0.0
    m2: float = 0.0

    def update(self, values) -> "RunningMoments":
        """Fold a batch of observations (scalar or 1-d array) into the accumulator."""
        values = np.asarray(values, dtype=np.float64).reshape(-1)
        n = values.size
        if n == 0:
            return self
        batch_mean = float(values.mean())
        batch_m2 = float(np.square(values - batch_mean).sum())
        self._combine(n, batch_mean, batch_m2)
        return self

    def merge(self, other: "RunningMoments") -> "RunningMoments":
        """Fold another accumulator into this one."""
        if other.count:
            self._combine(other.count, other.mean, other.m2)
        return self

    def _combine(self, n_b: int, mean_b: float, m2_b: float) -> None:
        n_a = self.count
        if n_a == 0:
            self.count, self.mean, self.m2 = n_b, mean_b, m2_b
            return
        n = n_a + n_b
        delta = mean_b - self.mean
        self.mean += delta * n_b / n
        self.m2 += m2_b + delta * delta * n_a * n_b / n
        self.count = n

    @property
    def variance(self) -> float:
        """Unbiased sample variance; 0 for fewer than two observations."""
        if self.count <= 1:
            return 0.0
        return self.m2 / (self.count - 1)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def standard_error(self) -> float:
        if self.count == 0:
            return 0.0
        return self.std / math.sqrt(self.count)
