"""
Standard-normal random source.

A RandomSource owns one numpy Generator. Pass an explicit instance (seeded)
wherever reproducibility matters; otherwise the process-wide default is
created lazily on first use and seeded from the clock.
"""

from __future__ import annotations

import time

import numpy as np


class RandomSource:
    """
    Supplier of independent N(0, 1) draws.

    Parameters
    ----------
    seed : int | None
        Seed for the underlying generator. ``None`` derives one from
        ``time.time_ns()`` so successive processes diverge.
    """

    def __init__(self, seed: int | None = None):
        if seed is None:
            seed = time.time_ns()
        self._seed_seq = np.random.SeedSequence(seed)
        self._rng = np.random.default_rng(self._seed_seq)

    @classmethod
    def _from_seed_sequence(cls, seed_seq: np.random.SeedSequence) -> "RandomSource":
        source = cls.__new__(cls)
        source._seed_seq = seed_seq
        source._rng = np.random.default_rng(seed_seq)
        return source

    def next_standard_normal(self) -> float:
        """Return one standard-normal draw."""
        return float(self._rng.standard_normal())

    def standard_normal(self, n: int) -> np.ndarray:
        """
        Return ``n`` standard-normal draws as a float64 array.

        Draws taken in one call are the same values, in the same order, as
        ``n`` consecutive calls taking smaller blocks from an identically
        seeded source.
        """
        return self._rng.standard_normal(n)

    def spawn(self, n: int) -> list[RandomSource]:
        """
        Return ``n`` independent child sources.

        Children come from ``SeedSequence.spawn`` and do not overlap with
        each other or with the parent stream.
        """
        return [RandomSource._from_seed_sequence(child) for child in self._seed_seq.spawn(n)]


_default_source: RandomSource | None = None


def default_source() -> RandomSource:
    """Process-wide source, created on first call."""
    global _default_source
    if _default_source is None:
        _default_source = RandomSource()
    return _default_source


def reset_default_source(seed: int | None = None) -> RandomSource:
    """Replace the process-wide source (mainly for tests)."""
    global _default_source
    _default_source = RandomSource(seed)
    return _default_source
